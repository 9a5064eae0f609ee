"""ParimutuelBettingService: pool bets settled pro-rata at battle end.

Split-fee model: the pool receives amount * (1 - F_HOUSE). A bet placed while
no other participant's pool is funded waits as PENDING_LIQUIDITY (capped at
FIRST_BET_CAP); the first bet that creates opposing liquidity activates every
waiting bet on the battle.
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_betting.application.base import BaseBettingService
from src.arena_betting.application.schemas import BetResponse
from src.arena_betting.domain.models import Bet
from src.arena_common.datetime_utils import utc_now
from src.arena_common.decimal_math import ZERO, net_of_rate
from src.arena_common.enums import BetStatus, BettingMode, LedgerEntryType
from src.arena_common.errors import BetCapExceededError
from src.arena_common.ids import new_id
from src.arena_pricing.domain.pricing import model_for
from src.arena_risk.rules.bet_amount import check_bet_amount

logger = logging.getLogger(__name__)


def has_opposing_liquidity(pools: dict[str, Decimal], character_id: str) -> bool:
    return any(v > ZERO for pid, v in pools.items() if pid != character_id)


class ParimutuelBettingService(BaseBettingService):
    mode = BettingMode.PARIMUTUEL

    async def place_bet(
        self,
        db: AsyncSession,
        user_id: str,
        battle_id: str,
        character_id: str,
        amount: Decimal,
    ) -> BetResponse:
        check_bet_amount(amount)
        async with self._locks.lock_for(battle_id):
            try:
                battle, _ = await self._load_for_bet(
                    db, user_id, battle_id, character_id, amount
                )
                pools = battle.pool_volumes()

                activated = 0
                if has_opposing_liquidity(pools, character_id):
                    status = BetStatus.PENDING
                    activated = await self._bets.activate_pending_liquidity(db, battle_id)
                else:
                    if amount > self._policy.first_bet_cap:
                        raise BetCapExceededError(amount, self._policy.first_bet_cap)
                    status = BetStatus.PENDING_LIQUIDITY

                contribution = net_of_rate(amount, self._policy.house_fee_rate)
                bet_id = new_id("bet")
                await self._accounts.debit(
                    db, user_id, amount, LedgerEntryType.BET_STAKE, "BET", bet_id
                )
                bet = await self._bets.insert_bet(
                    db,
                    Bet(
                        id=bet_id,
                        user_id=user_id,
                        battle_id=battle_id,
                        character_id=character_id,
                        amount=amount,
                        net_amount=contribution,
                        odds=None,
                        status=status,
                        created_at=utc_now(),
                    ),
                )
                pools[character_id] = await self._battles.increment_pool(
                    db, battle_id, character_id, contribution
                )
                new_odds = model_for(battle.kind).odds(pools)
                await self._battles.insert_snapshot(db, battle_id, new_odds)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        if activated:
            logger.info("Battle %s: %s bets activated by opposing liquidity", battle_id, activated)
        logger.info(
            "Parimutuel bet accepted: bet=%s battle=%s character=%s amount=%s net=%s status=%s",
            bet.id, battle_id, character_id, amount, contribution, status.value,
        )
        await self._publish_odds(battle_id, new_odds, pools)
        return BetResponse.from_domain(bet)
