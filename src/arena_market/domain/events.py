"""Domain events pushed to subscribers after a committed mutation.

Payload values are decimal strings, never floats.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.arena_common.datetime_utils import utc_now


@dataclass
class OddsUpdatedEvent:
    battle_id: str
    odds: dict[str, Decimal]
    pools: dict[str, Decimal]
    reason: str                       # "BET_PLACED" | "BATTLE_SETTLED"
    occurred_at: datetime = field(default_factory=utc_now)

    event_type = "ODDS_UPDATED"

    def to_payload(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "battle_id": self.battle_id,
            "odds": {k: str(v) for k, v in self.odds.items()},
            "pools": {k: str(v) for k, v in self.pools.items()},
            "reason": self.reason,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass
class BattleSettledEvent:
    battle_id: str
    winner_id: str
    total_paid_out: Decimal
    total_refunded: Decimal
    occurred_at: datetime = field(default_factory=utc_now)

    event_type = "BATTLE_SETTLED"

    def to_payload(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "battle_id": self.battle_id,
            "winner_id": self.winner_id,
            "total_paid_out": str(self.total_paid_out),
            "total_refunded": str(self.total_refunded),
            "occurred_at": self.occurred_at.isoformat(),
        }
