"""Pydantic schemas for arena_betting."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.arena_betting.domain.models import Bet
from src.arena_common.decimal_math import to_display

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PlaceBetRequest(BaseModel):
    battle_id: str
    character_id: str
    amount: Decimal = Field(..., gt=0, description="Gross stake")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BetResponse(BaseModel):
    id: str
    user_id: str
    battle_id: str
    character_id: str
    amount: Decimal
    net_amount: Decimal
    odds: Decimal | None = None
    odds_display: str | None = None
    status: str
    created_at: datetime | None = None
    settled_at: datetime | None = None

    @classmethod
    def from_domain(cls, bet: Bet) -> "BetResponse":
        return cls(
            id=bet.id,
            user_id=bet.user_id,
            battle_id=bet.battle_id,
            character_id=bet.character_id,
            amount=bet.amount,
            net_amount=bet.net_amount,
            odds=bet.odds,
            odds_display=to_display(bet.odds) if bet.odds is not None else None,
            status=bet.status.value,
            created_at=bet.created_at,
            settled_at=bet.settled_at,
        )


class BetListResponse(BaseModel):
    items: list[BetResponse]
