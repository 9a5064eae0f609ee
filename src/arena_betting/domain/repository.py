"""Repository Protocol: dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_betting.domain.models import Bet
from src.arena_common.enums import BetStatus


class BetRepositoryProtocol(Protocol):
    async def insert_bet(self, db: AsyncSession, bet: Bet) -> Bet: ...

    async def list_bets_for_battle(
        self, db: AsyncSession, battle_id: str, statuses: list[BetStatus] | None = None
    ) -> list[Bet]: ...

    async def list_bets_for_user(
        self, db: AsyncSession, user_id: str, battle_id: str | None, limit: int
    ) -> list[Bet]: ...

    async def transition_status(
        self, db: AsyncSession, bet_id: str, from_status: BetStatus, to_status: BetStatus
    ) -> bool: ...

    async def activate_pending_liquidity(self, db: AsyncSession, battle_id: str) -> int: ...
