"""BetQueryService: read-only views over a user's bets."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_betting.application.schemas import BetListResponse, BetResponse
from src.arena_betting.domain.repository import BetRepositoryProtocol
from src.arena_betting.infrastructure.persistence import BetRepository


class BetQueryService:
    def __init__(self, repo: BetRepositoryProtocol | None = None) -> None:
        self._repo: BetRepositoryProtocol = repo or BetRepository()

    async def list_bets(
        self,
        db: AsyncSession,
        user_id: str,
        battle_id: str | None = None,
        limit: int = 100,
    ) -> BetListResponse:
        bets = await self._repo.list_bets_for_user(db, user_id, battle_id, limit)
        return BetListResponse(items=[BetResponse.from_domain(b) for b in bets])
