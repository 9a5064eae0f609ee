"""Settlement planning: pure functions from open bets to per-bet outcomes.

Parimutuel (pro-rata):
  PENDING_LIQUIDITY  -> CANCELLED, refund amount - amount * F_IMMEDIATE,
                        pool reduced by the bet's net contribution
  PENDING on winner  -> WON, payout = net + net * sum(net_losers) / sum(net_winners)
                        (payout = net when nobody backed a loser)
  PENDING on loser   -> LOST, nothing credited

Fixed odds (AMM):
  PENDING on winner  -> WON, payout = amount * recorded odds
  PENDING on loser   -> LOST

Every credit is truncated, so the sum of parimutuel payouts never exceeds the
net pool; the leftover is sub-unit dust that stays with the house.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from src.arena_betting.domain.models import Bet
from src.arena_common.decimal_math import ZERO, apply_rate, money_context, mul, truncate
from src.arena_common.enums import BetStatus, LedgerEntryType
from src.arena_common.errors import InternalError


@dataclass(frozen=True)
class BetOutcome:
    bet: Bet
    status: BetStatus
    credit: Decimal = ZERO
    entry_type: LedgerEntryType | None = None
    pool_reversal: Decimal = ZERO


@dataclass
class SettlementPlan:
    battle_id: str
    winner_id: str
    outcomes: list[BetOutcome] = field(default_factory=list)

    def _total(self, status: BetStatus) -> Decimal:
        return sum((o.credit for o in self.outcomes if o.status == status), ZERO)

    @property
    def total_paid_out(self) -> Decimal:
        return self._total(BetStatus.WON)

    @property
    def total_refunded(self) -> Decimal:
        return self._total(BetStatus.CANCELLED)

    def count(self, status: BetStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)


def refund_for_cancelled(amount: Decimal, immediate_fee_rate: Decimal) -> Decimal:
    return amount - apply_rate(amount, immediate_fee_rate)


def pro_rata_payout(
    net: Decimal, winners_net: Decimal, losers_net: Decimal
) -> Decimal:
    """net + net / winners_net * losers_net, truncated."""
    if winners_net <= ZERO:
        raise ValueError("winners_net must be positive")
    if losers_net == ZERO:
        return net
    with money_context():
        return net + truncate(net * losers_net / winners_net)


def _refund_outcome(bet: Bet, immediate_fee_rate: Decimal) -> BetOutcome:
    return BetOutcome(
        bet=bet,
        status=BetStatus.CANCELLED,
        credit=refund_for_cancelled(bet.amount, immediate_fee_rate),
        entry_type=LedgerEntryType.BET_REFUND,
        pool_reversal=bet.net_amount,
    )


def plan_parimutuel(
    battle_id: str,
    winner_id: str,
    bets: Iterable[Bet],
    immediate_fee_rate: Decimal,
) -> SettlementPlan:
    plan = SettlementPlan(battle_id=battle_id, winner_id=winner_id)
    winners: list[Bet] = []
    losers: list[Bet] = []
    for bet in bets:
        if bet.status == BetStatus.PENDING_LIQUIDITY:
            plan.outcomes.append(_refund_outcome(bet, immediate_fee_rate))
        elif bet.status == BetStatus.PENDING:
            (winners if bet.character_id == winner_id else losers).append(bet)

    winners_net = sum((b.net_amount for b in winners), ZERO)
    losers_net = sum((b.net_amount for b in losers), ZERO)
    for bet in winners:
        plan.outcomes.append(
            BetOutcome(
                bet=bet,
                status=BetStatus.WON,
                credit=pro_rata_payout(bet.net_amount, winners_net, losers_net),
                entry_type=LedgerEntryType.BET_PAYOUT,
            )
        )
    plan.outcomes.extend(BetOutcome(bet=b, status=BetStatus.LOST) for b in losers)
    return plan


def plan_fixed_odds(
    battle_id: str,
    winner_id: str,
    bets: Iterable[Bet],
    immediate_fee_rate: Decimal,
) -> SettlementPlan:
    plan = SettlementPlan(battle_id=battle_id, winner_id=winner_id)
    for bet in bets:
        if bet.status == BetStatus.PENDING_LIQUIDITY:
            plan.outcomes.append(_refund_outcome(bet, immediate_fee_rate))
        elif bet.status != BetStatus.PENDING:
            continue
        elif bet.character_id == winner_id:
            if bet.odds is None:
                raise InternalError(f"Fixed-odds bet {bet.id} has no recorded odds")
            plan.outcomes.append(
                BetOutcome(
                    bet=bet,
                    status=BetStatus.WON,
                    credit=mul(bet.amount, bet.odds),
                    entry_type=LedgerEntryType.BET_PAYOUT,
                )
            )
        else:
            plan.outcomes.append(BetOutcome(bet=bet, status=BetStatus.LOST))
    return plan
