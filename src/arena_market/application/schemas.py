"""Pydantic schemas for arena_market read views.

Decimal fields serialise as strings in JSON mode; `*_display` fields are
4-digit truncated renderings for humans.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from src.arena_common.decimal_math import to_display


class ParticipantOdds(BaseModel):
    character_id: str
    name: str
    seat: int
    pool: Decimal
    odds: Decimal
    odds_display: str


class OddsResponse(BaseModel):
    battle_id: str
    kind: str
    betting_mode: str
    status: str
    total_volume: Decimal
    participants: list[ParticipantOdds]


class PoolItem(BaseModel):
    character_id: str
    total_volume: Decimal


class PoolsResponse(BaseModel):
    battle_id: str
    total_volume: Decimal
    pools: list[PoolItem]


class OddsSnapshotItem(BaseModel):
    id: str
    odds: dict[str, Decimal]
    odds_display: dict[str, str]
    created_at: datetime

    @classmethod
    def from_odds(
        cls, snapshot_id: str, odds: dict[str, Decimal], created_at: datetime
    ) -> "OddsSnapshotItem":
        return cls(
            id=snapshot_id,
            odds=odds,
            odds_display={k: to_display(v) for k, v in odds.items()},
            created_at=created_at,
        )


class OddsHistoryResponse(BaseModel):
    battle_id: str
    items: list[OddsSnapshotItem]
