# src/arena_admin/application/service.py
"""Admin application service: battle lifecycle for operators."""
import logging
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_common.datetime_utils import as_utc
from src.arena_common.enums import BattleStatus, BettingMode, MarketKind
from src.arena_common.errors import (
    InvalidBattleDefinitionError,
    InvalidMarketStateError,
    MarketNotFoundError,
)
from src.arena_common.ids import new_id
from src.arena_market.domain.models import Battle
from src.arena_market.domain.repository import BattleRepositoryProtocol
from src.arena_market.infrastructure.persistence import BattleRepository
from src.arena_settlement.application.schemas import SettlementResponse
from src.arena_settlement.application.service import SettlementService

logger = logging.getLogger(__name__)

_MIN_PARTICIPANTS = {MarketKind.TEAM_BATTLE: 2, MarketKind.BATTLE_ROYALE: 2}
_MAX_PARTICIPANTS = {MarketKind.TEAM_BATTLE: 2}


def validate_participant_count(kind: MarketKind, count: int) -> None:
    minimum = _MIN_PARTICIPANTS[kind]
    maximum = _MAX_PARTICIPANTS.get(kind)
    if count < minimum or (maximum is not None and count > maximum):
        expected = f"exactly {minimum}" if maximum == minimum else f"at least {minimum}"
        raise InvalidBattleDefinitionError(
            f"{kind.value} needs {expected} participants, got {count}"
        )


class AdminService:
    def __init__(
        self,
        repo: BattleRepositoryProtocol | None = None,
        settlement: SettlementService | None = None,
    ) -> None:
        self._repo: BattleRepositoryProtocol = repo or BattleRepository()
        self._settlement = settlement or SettlementService(battle_repo=self._repo)

    async def create_battle(
        self,
        db: AsyncSession,
        title: str,
        kind: MarketKind,
        betting_mode: BettingMode,
        start_time: datetime,
        character_ids: list[str],
    ) -> dict[str, Any]:
        validate_participant_count(kind, len(character_ids))
        if len(set(character_ids)) != len(character_ids):
            raise InvalidBattleDefinitionError("a character cannot fight itself")

        try:
            characters = await self._repo.get_characters(db, character_ids)
            missing = [cid for cid in character_ids if cid not in characters]
            if missing:
                raise InvalidBattleDefinitionError(f"unknown characters: {', '.join(missing)}")

            participants = []
            for seat, cid in enumerate(character_ids):
                participant = characters[cid]
                participant.seat = seat
                participants.append(participant)

            battle = Battle(
                id=new_id("battle"),
                title=title,
                kind=kind,
                betting_mode=betting_mode,
                start_time=as_utc(start_time),
                status=BattleStatus.PENDING,
                winner_id=None,
                participants=participants,
            )
            battle = await self._repo.create_battle(db, battle)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Battle %s created: kind=%s mode=%s participants=%s",
            battle.id, kind.value, betting_mode.value, character_ids,
        )
        return {
            "battle_id": battle.id,
            "kind": kind.value,
            "betting_mode": betting_mode.value,
            "status": battle.status.value,
            "participants": character_ids,
        }

    async def activate_battle(self, db: AsyncSession, battle_id: str) -> dict[str, Any]:
        try:
            battle = await self._repo.get_battle(db, battle_id, for_update=True)
            if battle is None:
                raise MarketNotFoundError(battle_id)
            moved = await self._repo.transition_status(
                db, battle_id, BattleStatus.PENDING, BattleStatus.ACTIVE
            )
            if not moved:
                raise InvalidMarketStateError(
                    battle_id, f"cannot activate from {battle.status.value}"
                )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Battle %s activated", battle_id)
        return {"battle_id": battle_id, "status": BattleStatus.ACTIVE.value}

    async def settle_battle(
        self, db: AsyncSession, battle_id: str, winner_id: str
    ) -> SettlementResponse:
        """Delegate to SettlementService. On failure the battle stays ACTIVE for a re-run."""
        try:
            return await self._settlement.settle_battle(db, battle_id, winner_id)
        except Exception:
            logger.exception("Settlement of battle %s (winner %s) failed", battle_id, winner_id)
            raise
