"""MarketApplicationService: read-only odds and pool views.

Reads never take row locks; the figures are a point-in-time view and may be
stale by the time a bet is placed (bets re-price on the locked snapshot).
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_common.decimal_math import ZERO, to_display
from src.arena_common.errors import MarketNotFoundError
from src.arena_market.application.schemas import (
    OddsHistoryResponse,
    OddsResponse,
    OddsSnapshotItem,
    ParticipantOdds,
    PoolItem,
    PoolsResponse,
)
from src.arena_market.domain.models import Battle
from src.arena_market.domain.repository import BattleRepositoryProtocol
from src.arena_market.infrastructure.persistence import BattleRepository
from src.arena_pricing.domain.pricing import model_for


class MarketApplicationService:
    def __init__(self, repo: BattleRepositoryProtocol | None = None) -> None:
        self._repo: BattleRepositoryProtocol = repo or BattleRepository()

    async def _get_battle(self, db: AsyncSession, battle_id: str) -> Battle:
        battle = await self._repo.get_battle(db, battle_id)
        if battle is None:
            raise MarketNotFoundError(battle_id)
        return battle

    async def compute_odds(self, db: AsyncSession, battle_id: str) -> OddsResponse:
        battle = await self._get_battle(db, battle_id)
        pools = battle.pool_volumes()
        odds = model_for(battle.kind).odds(pools)
        participants = [
            ParticipantOdds(
                character_id=p.id,
                name=p.name,
                seat=p.seat,
                pool=pools[p.id],
                odds=odds[p.id],
                odds_display=to_display(odds[p.id]),
            )
            for p in sorted(battle.participants, key=lambda p: p.seat)
        ]
        return OddsResponse(
            battle_id=battle.id,
            kind=battle.kind.value,
            betting_mode=battle.betting_mode.value,
            status=battle.status.value,
            total_volume=sum(pools.values(), ZERO),
            participants=participants,
        )

    async def get_pools(self, db: AsyncSession, battle_id: str) -> PoolsResponse:
        battle = await self._get_battle(db, battle_id)
        pools = battle.pool_volumes()
        return PoolsResponse(
            battle_id=battle.id,
            total_volume=sum(pools.values(), ZERO),
            pools=[PoolItem(character_id=k, total_volume=v) for k, v in pools.items()],
        )

    async def get_odds_history(
        self, db: AsyncSession, battle_id: str, limit: int = 50
    ) -> OddsHistoryResponse:
        await self._get_battle(db, battle_id)
        snapshots = await self._repo.list_snapshots(db, battle_id, limit)
        return OddsHistoryResponse(
            battle_id=battle_id,
            items=[
                OddsSnapshotItem.from_odds(s.id, s.odds, s.created_at) for s in snapshots
            ],
        )
