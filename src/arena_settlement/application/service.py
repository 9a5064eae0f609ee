"""SettlementService: settles an ACTIVE battle exactly once.

One transaction: battle row FOR UPDATE -> guard ACTIVE -> ACTIVE->FINISHED
compare-and-set -> per-bet outcomes (status, credit, pool reversal) -> odds
snapshot -> commit. Events are published after commit.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_account.domain.repository import AccountRepositoryProtocol
from src.arena_account.infrastructure.persistence import AccountRepository
from src.arena_betting.domain.policy import BettingPolicy
from src.arena_betting.domain.repository import BetRepositoryProtocol
from src.arena_betting.infrastructure.locks import BattleLockRegistry, get_battle_locks
from src.arena_betting.infrastructure.persistence import BetRepository
from src.arena_common.enums import BattleStatus, BetStatus, BettingMode
from src.arena_common.errors import (
    InvalidMarketStateError,
    MarketNotFoundError,
    ParticipantNotFoundError,
)
from src.arena_market.domain.events import BattleSettledEvent, OddsUpdatedEvent
from src.arena_market.domain.repository import BattleRepositoryProtocol
from src.arena_market.infrastructure.persistence import BattleRepository
from src.arena_market.infrastructure.publisher import (
    EventPublisherProtocol,
    RedisEventPublisher,
)
from src.arena_pricing.domain.pricing import model_for
from src.arena_settlement.application.schemas import SettlementResponse
from src.arena_settlement.domain.payout import plan_fixed_odds, plan_parimutuel
from src.arena_settlement.domain.settlement import apply_settlement_plan

logger = logging.getLogger(__name__)

_PLANNERS = {
    BettingMode.PARIMUTUEL: plan_parimutuel,
    BettingMode.AMM: plan_fixed_odds,
}

_OPEN_BET_STATUSES = [BetStatus.PENDING, BetStatus.PENDING_LIQUIDITY]


class SettlementService:
    def __init__(
        self,
        battle_repo: BattleRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
        bet_repo: BetRepositoryProtocol | None = None,
        publisher: EventPublisherProtocol | None = None,
        policy: BettingPolicy | None = None,
        locks: BattleLockRegistry | None = None,
    ) -> None:
        self._battles: BattleRepositoryProtocol = battle_repo or BattleRepository()
        self._accounts: AccountRepositoryProtocol = account_repo or AccountRepository()
        self._bets: BetRepositoryProtocol = bet_repo or BetRepository()
        self._publisher: EventPublisherProtocol = publisher or RedisEventPublisher()
        self._policy = policy or BettingPolicy.from_settings()
        self._locks = locks or get_battle_locks()

    async def settle_battle(
        self, db: AsyncSession, battle_id: str, winner_id: str
    ) -> SettlementResponse:
        async with self._locks.lock_for(battle_id):
            try:
                battle = await self._battles.get_battle(db, battle_id, for_update=True)
                if battle is None:
                    raise MarketNotFoundError(battle_id)
                if battle.status != BattleStatus.ACTIVE:
                    raise InvalidMarketStateError(
                        battle_id, f"cannot settle from {battle.status.value}"
                    )
                if not battle.has_participant(winner_id):
                    raise ParticipantNotFoundError(battle_id, winner_id)

                finished = await self._battles.transition_status(
                    db, battle_id, BattleStatus.ACTIVE, BattleStatus.FINISHED, winner_id
                )
                if not finished:
                    raise InvalidMarketStateError(battle_id, "already settled")

                bets = await self._bets.list_bets_for_battle(db, battle_id, _OPEN_BET_STATUSES)
                plan = _PLANNERS[battle.betting_mode](
                    battle_id, winner_id, bets, self._policy.immediate_fee_rate
                )
                pools = await apply_settlement_plan(
                    plan, battle.pool_volumes(), self._battles, self._bets, self._accounts, db
                )
                odds = model_for(battle.kind).odds(pools)
                await self._battles.insert_snapshot(db, battle_id, odds)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        self._locks.discard(battle_id)

        logger.info(
            "Battle %s settled: winner=%s won=%s lost=%s cancelled=%s paid=%s refunded=%s",
            battle_id,
            winner_id,
            plan.count(BetStatus.WON),
            plan.count(BetStatus.LOST),
            plan.count(BetStatus.CANCELLED),
            plan.total_paid_out,
            plan.total_refunded,
        )
        await self._publisher.publish_settlement(
            BattleSettledEvent(
                battle_id=battle_id,
                winner_id=winner_id,
                total_paid_out=plan.total_paid_out,
                total_refunded=plan.total_refunded,
            )
        )
        await self._publisher.publish_odds(
            OddsUpdatedEvent(battle_id=battle_id, odds=odds, pools=pools, reason="BATTLE_SETTLED")
        )
        return SettlementResponse.from_plan(plan, BattleStatus.FINISHED.value)
