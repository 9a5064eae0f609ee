"""Apply a SettlementPlan inside the caller's transaction."""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_account.domain.repository import AccountRepositoryProtocol
from src.arena_betting.domain.repository import BetRepositoryProtocol
from src.arena_common.decimal_math import ZERO
from src.arena_common.errors import InvalidMarketStateError
from src.arena_market.domain.repository import BattleRepositoryProtocol
from src.arena_settlement.domain.payout import SettlementPlan


async def apply_settlement_plan(
    plan: SettlementPlan,
    pools: dict[str, Decimal],
    battle_repo: BattleRepositoryProtocol,
    bet_repo: BetRepositoryProtocol,
    account_repo: AccountRepositoryProtocol,
    db: AsyncSession,
) -> dict[str, Decimal]:
    """Write every outcome; returns the pools after refund reversals."""
    pools = dict(pools)
    for outcome in plan.outcomes:
        bet = outcome.bet
        moved = await bet_repo.transition_status(db, bet.id, bet.status, outcome.status)
        if not moved:
            raise InvalidMarketStateError(
                plan.battle_id, f"bet {bet.id} changed status during settlement"
            )
        if outcome.credit > ZERO and outcome.entry_type is not None:
            await account_repo.credit(
                db, bet.user_id, outcome.credit, outcome.entry_type, "BET", bet.id
            )
        if outcome.pool_reversal > ZERO:
            pools[bet.character_id] = await battle_repo.decrement_pool(
                db, plan.battle_id, bet.character_id, outcome.pool_reversal
            )
    return pools
