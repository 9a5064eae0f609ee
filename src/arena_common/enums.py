"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class MarketKind(str, Enum):
    """Battle format: two-sided team battle or N-sided battle royale."""
    TEAM_BATTLE = "TEAM_BATTLE"
    BATTLE_ROYALE = "BATTLE_ROYALE"


class BettingMode(str, Enum):
    AMM = "AMM"
    PARIMUTUEL = "PARIMUTUEL"


class BattleStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"


OPEN_BATTLE_STATUSES: frozenset[BattleStatus] = frozenset(
    {BattleStatus.PENDING, BattleStatus.ACTIVE}
)


class BetStatus(str, Enum):
    PENDING = "PENDING"                      # active, awaiting settlement
    PENDING_LIQUIDITY = "PENDING_LIQUIDITY"  # parimutuel: opposing side not funded yet
    WON = "WON"
    LOST = "LOST"
    CANCELLED = "CANCELLED"


TERMINAL_BET_STATUSES: frozenset[BetStatus] = frozenset(
    {BetStatus.WON, BetStatus.LOST, BetStatus.CANCELLED}
)


class LedgerEntryType(str, Enum):
    BET_STAKE = "BET_STAKE"
    BET_PAYOUT = "BET_PAYOUT"
    BET_REFUND = "BET_REFUND"
