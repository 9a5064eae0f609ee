"""AmmBettingService: fixed-odds bets priced by the market maker.

The odds quoted to the bettor are computed from the locked pool snapshot and
recorded on the bet; the pool then grows by the gross stake.
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_betting.application.base import BaseBettingService
from src.arena_betting.application.schemas import BetResponse
from src.arena_betting.domain.models import Bet
from src.arena_common.datetime_utils import utc_now
from src.arena_common.enums import BetStatus, BettingMode, LedgerEntryType
from src.arena_common.ids import new_id
from src.arena_pricing.domain.pricing import model_for
from src.arena_risk.rules.bet_amount import check_bet_amount
from src.arena_risk.rules.liquidity_check import check_liquidity

logger = logging.getLogger(__name__)


class AmmBettingService(BaseBettingService):
    mode = BettingMode.AMM

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
                model = model_for(battle.kind)
                pools = battle.pool_volumes()
                odds = model.odds(pools)[character_id]
                check_liquidity(
                    model,
                    pools,
                    character_id,
                    amount,
                    odds,
                    bootstrap=self._policy.bootstrap_liquidity,
                    safety_buffer=self._policy.safety_buffer,
                )

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
                        net_amount=amount,
                        odds=odds,
                        status=BetStatus.PENDING,
                        created_at=utc_now(),
                    ),
                )
                pools[character_id] = await self._battles.increment_pool(
                    db, battle_id, character_id, amount
                )
                new_odds = model.odds(pools)
                await self._battles.insert_snapshot(db, battle_id, new_odds)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "AMM bet accepted: bet=%s battle=%s character=%s amount=%s odds=%s",
            bet.id, battle_id, character_id, amount, odds,
        )
        await self._publish_odds(battle_id, new_odds, pools)
        return BetResponse.from_domain(bet)
