# src/arena_betting/infrastructure/persistence.py
"""BetRepository: raw SQL persistence implementation.

Every status update is guarded on the expected prior status, so a terminal
bet (WON / LOST / CANCELLED) can never be rewritten.
"""
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_betting.domain.models import Bet
from src.arena_common.enums import TERMINAL_BET_STATUSES, BetStatus

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, user_id, battle_id, character_id, amount, net_amount, odds,
    status, created_at, settled_at
"""

_INSERT_BET_SQL = text(f"""
    INSERT INTO bets (id, user_id, battle_id, character_id,
        amount, net_amount, odds, status)
    VALUES (:id, :user_id, :battle_id, :character_id,
        :amount, :net_amount, :odds, :status)
    RETURNING {_SELECT_COLUMNS}
""")

_LIST_BY_BATTLE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bets
    WHERE battle_id = :battle_id
      AND (CAST(:statuses_csv AS TEXT) IS NULL
           OR status = ANY(string_to_array(CAST(:statuses_csv AS TEXT), ',')))
    ORDER BY created_at, id
""")

_LIST_BY_USER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bets
    WHERE user_id = :user_id
      AND (CAST(:battle_id AS TEXT) IS NULL OR battle_id = :battle_id)
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_TRANSITION_STATUS_SQL = text("""
    UPDATE bets
    SET status = :to_status,
        settled_at = CASE WHEN CAST(:terminal AS BOOLEAN) THEN NOW() ELSE settled_at END
    WHERE id = :id AND status = :from_status
    RETURNING id
""")

_ACTIVATE_PENDING_LIQUIDITY_SQL = text("""
    UPDATE bets
    SET status = 'PENDING'
    WHERE battle_id = :battle_id AND status = 'PENDING_LIQUIDITY'
    RETURNING id
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_bet(row: Any) -> Bet:
    """Convert a DB result row to a Bet domain object."""
    return Bet(
        id=row.id,
        user_id=row.user_id,
        battle_id=row.battle_id,
        character_id=row.character_id,
        amount=Decimal(row.amount),
        net_amount=Decimal(row.net_amount),
        odds=Decimal(row.odds) if row.odds is not None else None,
        status=BetStatus(row.status),
        created_at=row.created_at,
        settled_at=row.settled_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class BetRepository:
    """Concrete implementation of BetRepositoryProtocol using raw SQL."""

    async def insert_bet(self, db: AsyncSession, bet: Bet) -> Bet:
        result = await db.execute(
            _INSERT_BET_SQL,
            {
                "id": bet.id,
                "user_id": bet.user_id,
                "battle_id": bet.battle_id,
                "character_id": bet.character_id,
                "amount": bet.amount,
                "net_amount": bet.net_amount,
                "odds": bet.odds,
                "status": bet.status.value,
            },
        )
        row = result.fetchone()
        return _row_to_bet(row) if row else bet

    async def list_bets_for_battle(
        self, db: AsyncSession, battle_id: str, statuses: list[BetStatus] | None = None
    ) -> list[Bet]:
        statuses_csv = ",".join(s.value for s in statuses) if statuses else None
        result = await db.execute(
            _LIST_BY_BATTLE_SQL, {"battle_id": battle_id, "statuses_csv": statuses_csv}
        )
        return [_row_to_bet(row) for row in result.fetchall()]

    async def list_bets_for_user(
        self, db: AsyncSession, user_id: str, battle_id: str | None, limit: int
    ) -> list[Bet]:
        result = await db.execute(
            _LIST_BY_USER_SQL,
            {"user_id": user_id, "battle_id": battle_id, "limit": limit},
        )
        return [_row_to_bet(row) for row in result.fetchall()]

    async def transition_status(
        self, db: AsyncSession, bet_id: str, from_status: BetStatus, to_status: BetStatus
    ) -> bool:
        """Compare-and-set. False when the bet was not in from_status."""
        result = await db.execute(
            _TRANSITION_STATUS_SQL,
            {
                "id": bet_id,
                "from_status": from_status.value,
                "to_status": to_status.value,
                "terminal": to_status in TERMINAL_BET_STATUSES,
            },
        )
        return result.fetchone() is not None

    async def activate_pending_liquidity(self, db: AsyncSession, battle_id: str) -> int:
        """Flip every PENDING_LIQUIDITY bet of the battle to PENDING; returns the count."""
        result = await db.execute(_ACTIVATE_PENDING_LIQUIDITY_SQL, {"battle_id": battle_id})
        return len(result.fetchall())
