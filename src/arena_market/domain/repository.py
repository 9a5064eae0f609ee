# src/arena_market/domain/repository.py
"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_common.enums import BattleStatus
from src.arena_market.domain.models import Battle, OddsSnapshot, Participant


class BattleRepositoryProtocol(Protocol):
    async def get_battle(
        self, db: AsyncSession, battle_id: str, for_update: bool = False
    ) -> Battle | None: ...

    async def get_characters(
        self, db: AsyncSession, character_ids: list[str]
    ) -> dict[str, Participant]: ...

    async def create_battle(self, db: AsyncSession, battle: Battle) -> Battle: ...

    async def transition_status(
        self,
        db: AsyncSession,
        battle_id: str,
        from_status: BattleStatus,
        to_status: BattleStatus,
        winner_id: str | None = None,
    ) -> bool: ...

    async def increment_pool(
        self, db: AsyncSession, battle_id: str, character_id: str, amount: Decimal
    ) -> Decimal: ...

    async def decrement_pool(
        self, db: AsyncSession, battle_id: str, character_id: str, amount: Decimal
    ) -> Decimal: ...

    async def insert_snapshot(
        self, db: AsyncSession, battle_id: str, odds: dict[str, Decimal]
    ) -> OddsSnapshot: ...

    async def list_snapshots(
        self, db: AsyncSession, battle_id: str, limit: int
    ) -> list[OddsSnapshot]: ...
