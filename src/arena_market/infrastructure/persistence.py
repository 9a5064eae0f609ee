"""BattleRepository: concrete implementation of BattleRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Pool mutations are atomic UPDATE/UPSERT ... RETURNING statements; a guarded
statement that returns 0 rows means a business constraint was violated.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

import json
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_common.enums import BattleStatus, BettingMode, MarketKind
from src.arena_common.errors import InternalError
from src.arena_common.ids import new_id
from src.arena_market.domain.models import Battle, OddsSnapshot, Participant

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_BATTLE_COLUMNS = """
    id, title, kind, betting_mode, start_time, status, winner_id,
    created_at, updated_at
"""

_GET_BATTLE_SQL = text(f"""
    SELECT {_BATTLE_COLUMNS}
    FROM battles
    WHERE id = :battle_id
""")

# Row lock: serialises bets and settlement on the same battle across processes
_GET_BATTLE_FOR_UPDATE_SQL = text(f"""
    SELECT {_BATTLE_COLUMNS}
    FROM battles
    WHERE id = :battle_id
    FOR UPDATE
""")

_GET_PARTICIPANTS_SQL = text("""
    SELECT c.id, c.name, c.owner_id, bp.seat
    FROM battle_participants bp
    JOIN characters c ON c.id = bp.character_id
    WHERE bp.battle_id = :battle_id
    ORDER BY bp.seat
""")

_GET_POOLS_SQL = text("""
    SELECT character_id, total_volume
    FROM betting_pools
    WHERE battle_id = :battle_id
""")

_GET_CHARACTERS_SQL = text("""
    SELECT id, name, owner_id
    FROM characters
    WHERE id = ANY(string_to_array(CAST(:ids_csv AS TEXT), ','))
""")

_INSERT_BATTLE_SQL = text("""
    INSERT INTO battles (id, title, kind, betting_mode, start_time, status)
    VALUES (:id, :title, :kind, :betting_mode, :start_time, :status)
    RETURNING created_at, updated_at
""")

_INSERT_PARTICIPANT_SQL = text("""
    INSERT INTO battle_participants (battle_id, character_id, seat)
    VALUES (:battle_id, :character_id, :seat)
""")

_INIT_POOL_SQL = text("""
    INSERT INTO betting_pools (battle_id, character_id, total_volume)
    VALUES (:battle_id, :character_id, 0)
    ON CONFLICT (battle_id, character_id) DO NOTHING
""")

_TRANSITION_STATUS_SQL = text("""
    UPDATE battles
    SET status = :to_status,
        winner_id = COALESCE(CAST(:winner_id AS TEXT), winner_id),
        updated_at = NOW()
    WHERE id = :battle_id AND status = :from_status
    RETURNING id
""")

_INCREMENT_POOL_SQL = text("""
    INSERT INTO betting_pools (battle_id, character_id, total_volume)
    VALUES (:battle_id, :character_id, :amount)
    ON CONFLICT (battle_id, character_id) DO UPDATE
        SET total_volume = betting_pools.total_volume + EXCLUDED.total_volume,
            updated_at = NOW()
    RETURNING total_volume
""")

_DECREMENT_POOL_SQL = text("""
    UPDATE betting_pools
    SET total_volume = total_volume - :amount,
        updated_at = NOW()
    WHERE battle_id = :battle_id
      AND character_id = :character_id
      AND total_volume >= :amount
    RETURNING total_volume
""")

_INSERT_SNAPSHOT_SQL = text("""
    INSERT INTO market_snapshots (id, battle_id, odds)
    VALUES (:id, :battle_id, CAST(:odds AS JSONB))
    RETURNING id, battle_id, odds, created_at
""")

_LIST_SNAPSHOTS_SQL = text("""
    SELECT id, battle_id, odds, created_at
    FROM market_snapshots
    WHERE battle_id = :battle_id
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_battle(row: Any) -> Battle:
    return Battle(
        id=row.id,
        title=row.title,
        kind=MarketKind(row.kind),
        betting_mode=BettingMode(row.betting_mode),
        start_time=row.start_time,
        status=BattleStatus(row.status),
        winner_id=row.winner_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_participant(row: Any) -> Participant:
    return Participant(id=row.id, name=row.name, owner_id=row.owner_id, seat=row.seat)


def _row_to_snapshot(row: Any) -> OddsSnapshot:
    raw = row.odds
    data: dict[str, Any] = json.loads(raw) if isinstance(raw, str) else raw
    return OddsSnapshot(
        id=row.id,
        battle_id=row.battle_id,
        odds={k: Decimal(v) for k, v in data.items()},
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class BattleRepository:
    """Concrete repository: battle, participant, pool and snapshot tables."""

    async def get_battle(
        self, db: AsyncSession, battle_id: str, for_update: bool = False
    ) -> Battle | None:
        sql = _GET_BATTLE_FOR_UPDATE_SQL if for_update else _GET_BATTLE_SQL
        row = (await db.execute(sql, {"battle_id": battle_id})).fetchone()
        if row is None:
            return None
        battle = _row_to_battle(row)

        p_rows = (
            await db.execute(_GET_PARTICIPANTS_SQL, {"battle_id": battle_id})
        ).fetchall()
        battle.participants = [_row_to_participant(r) for r in p_rows]

        pool_rows = (await db.execute(_GET_POOLS_SQL, {"battle_id": battle_id})).fetchall()
        battle.pools = {r.character_id: Decimal(r.total_volume) for r in pool_rows}
        return battle

    async def get_characters(
        self, db: AsyncSession, character_ids: list[str]
    ) -> dict[str, Participant]:
        """Characters by id; seat is assigned later by the caller (-1 here)."""
        rows = (
            await db.execute(_GET_CHARACTERS_SQL, {"ids_csv": ",".join(character_ids)})
        ).fetchall()
        return {
            r.id: Participant(id=r.id, name=r.name, owner_id=r.owner_id, seat=-1)
            for r in rows
        }

    async def create_battle(self, db: AsyncSession, battle: Battle) -> Battle:
        row = (
            await db.execute(
                _INSERT_BATTLE_SQL,
                {
                    "id": battle.id,
                    "title": battle.title,
                    "kind": battle.kind.value,
                    "betting_mode": battle.betting_mode.value,
                    "start_time": battle.start_time,
                    "status": battle.status.value,
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError(f"Battle insert returned no row for {battle.id}")
        battle.created_at = row.created_at
        battle.updated_at = row.updated_at

        for p in battle.participants:
            params = {"battle_id": battle.id, "character_id": p.id}
            await db.execute(_INSERT_PARTICIPANT_SQL, {**params, "seat": p.seat})
            await db.execute(_INIT_POOL_SQL, params)
        return battle

    async def transition_status(
        self,
        db: AsyncSession,
        battle_id: str,
        from_status: BattleStatus,
        to_status: BattleStatus,
        winner_id: str | None = None,
    ) -> bool:
        """Compare-and-set on status. False when the battle was not in from_status."""
        row = (
            await db.execute(
                _TRANSITION_STATUS_SQL,
                {
                    "battle_id": battle_id,
                    "from_status": from_status.value,
                    "to_status": to_status.value,
                    "winner_id": winner_id,
                },
            )
        ).fetchone()
        return row is not None

    async def increment_pool(
        self, db: AsyncSession, battle_id: str, character_id: str, amount: Decimal
    ) -> Decimal:
        row = (
            await db.execute(
                _INCREMENT_POOL_SQL,
                {"battle_id": battle_id, "character_id": character_id, "amount": amount},
            )
        ).fetchone()
        if row is None:
            raise InternalError(f"Pool upsert returned no row for {battle_id}/{character_id}")
        return Decimal(row.total_volume)

    async def decrement_pool(
        self, db: AsyncSession, battle_id: str, character_id: str, amount: Decimal
    ) -> Decimal:
        row = (
            await db.execute(
                _DECREMENT_POOL_SQL,
                {"battle_id": battle_id, "character_id": character_id, "amount": amount},
            )
        ).fetchone()
        if row is None:
            # Pools only shrink by reversing a contribution they already hold
            raise InternalError(
                f"Pool {battle_id}/{character_id} cannot be reduced by {amount}"
            )
        return Decimal(row.total_volume)

    async def insert_snapshot(
        self, db: AsyncSession, battle_id: str, odds: dict[str, Decimal]
    ) -> OddsSnapshot:
        payload = json.dumps({k: str(v) for k, v in odds.items()})
        row = (
            await db.execute(
                _INSERT_SNAPSHOT_SQL,
                {"id": new_id("snap"), "battle_id": battle_id, "odds": payload},
            )
        ).fetchone()
        if row is None:
            raise InternalError(f"Snapshot insert returned no row for {battle_id}")
        return _row_to_snapshot(row)

    async def list_snapshots(
        self, db: AsyncSession, battle_id: str, limit: int
    ) -> list[OddsSnapshot]:
        rows = (
            await db.execute(_LIST_SNAPSHOTS_SQL, {"battle_id": battle_id, "limit": limit})
        ).fetchall()
        return [_row_to_snapshot(r) for r in rows]
