"""Shared plumbing for the AMM and parimutuel betting services.

Both services run the same prologue inside one transaction:
  battle row FOR UPDATE (+ participants, pools) -> mode check -> account FOR UPDATE
  -> betting window -> participant -> balance
and the same epilogue after commit: publish the new odds.
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_account.domain.models import Account
from src.arena_account.domain.repository import AccountRepositoryProtocol
from src.arena_account.infrastructure.persistence import AccountRepository
from src.arena_betting.domain.policy import BettingPolicy
from src.arena_betting.domain.repository import BetRepositoryProtocol
from src.arena_betting.infrastructure.locks import BattleLockRegistry, get_battle_locks
from src.arena_betting.infrastructure.persistence import BetRepository
from src.arena_common.enums import BettingMode
from src.arena_common.errors import (
    AccountNotFoundError,
    InvalidMarketStateError,
    MarketNotFoundError,
    ParticipantNotFoundError,
)
from src.arena_market.domain.events import OddsUpdatedEvent
from src.arena_market.domain.models import Battle
from src.arena_market.domain.repository import BattleRepositoryProtocol
from src.arena_market.infrastructure.persistence import BattleRepository
from src.arena_market.infrastructure.publisher import (
    EventPublisherProtocol,
    RedisEventPublisher,
)
from src.arena_risk.rules.balance_check import check_balance
from src.arena_risk.rules.betting_window import check_battle_open

logger = logging.getLogger(__name__)


class BaseBettingService:
    mode: BettingMode

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

    async def _load_for_bet(
        self,
        db: AsyncSession,
        user_id: str,
        battle_id: str,
        character_id: str,
        amount: Decimal,
    ) -> tuple[Battle, Account]:
        battle = await self._battles.get_battle(db, battle_id, for_update=True)
        if battle is None:
            raise MarketNotFoundError(battle_id)
        if battle.betting_mode != self.mode:
            raise InvalidMarketStateError(
                battle_id, f"battle uses {battle.betting_mode.value} betting"
            )
        account = await self._accounts.get_account(db, user_id, for_update=True)
        if account is None:
            raise AccountNotFoundError(user_id)

        check_battle_open(battle, self._policy.lock_window)
        if not battle.has_participant(character_id):
            raise ParticipantNotFoundError(battle_id, character_id)
        check_balance(account, amount)
        return battle, account

    async def _publish_odds(
        self, battle_id: str, odds: dict[str, Decimal], pools: dict[str, Decimal]
    ) -> None:
        await self._publisher.publish_odds(
            OddsUpdatedEvent(battle_id=battle_id, odds=odds, pools=pools, reason="BET_PLACED")
        )
