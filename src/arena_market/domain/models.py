"""Domain models for arena_market: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from src.arena_common.datetime_utils import as_utc
from src.arena_common.decimal_math import ZERO
from src.arena_common.enums import (
    OPEN_BATTLE_STATUSES,
    BattleStatus,
    BettingMode,
    MarketKind,
)


@dataclass
class Participant:
    id: str        # character id
    name: str
    owner_id: str
    seat: int      # 0 = side A, 1 = side B, ... (stable ordering)


@dataclass
class Battle:
    id: str
    title: str
    kind: MarketKind
    betting_mode: BettingMode
    start_time: datetime
    status: BattleStatus
    winner_id: str | None
    participants: list[Participant] = field(default_factory=list)
    pools: dict[str, Decimal] = field(default_factory=dict)  # character id -> volume
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_participant(self, character_id: str) -> bool:
        return any(p.id == character_id for p in self.participants)

    def pool_volumes(self) -> dict[str, Decimal]:
        """Volume for every participant in seat order; missing pools count as 0."""
        ordered = sorted(self.participants, key=lambda p: p.seat)
        return {p.id: self.pools.get(p.id, ZERO) for p in ordered}

    def betting_deadline(self, lock_window: timedelta) -> datetime:
        return as_utc(self.start_time) - lock_window

    def is_open(self, now: datetime, lock_window: timedelta) -> bool:
        """Bets allowed: status open AND strictly before start_time - lock_window."""
        return (
            self.status in OPEN_BATTLE_STATUSES
            and as_utc(now) < self.betting_deadline(lock_window)
        )


@dataclass
class OddsSnapshot:
    id: str
    battle_id: str
    odds: dict[str, Decimal]
    created_at: datetime
