from decimal import Decimal

from pydantic import BaseModel

from src.arena_common.enums import BetStatus
from src.arena_settlement.domain.payout import SettlementPlan


class SettlementResponse(BaseModel):
    battle_id: str
    winner_id: str
    status: str
    bets_won: int
    bets_lost: int
    bets_cancelled: int
    total_paid_out: Decimal
    total_refunded: Decimal

    @classmethod
    def from_plan(cls, plan: SettlementPlan, status: str) -> "SettlementResponse":
        return cls(
            battle_id=plan.battle_id,
            winner_id=plan.winner_id,
            status=status,
            bets_won=plan.count(BetStatus.WON),
            bets_lost=plan.count(BetStatus.LOST),
            bets_cancelled=plan.count(BetStatus.CANCELLED),
            total_paid_out=plan.total_paid_out,
            total_refunded=plan.total_refunded,
        )
