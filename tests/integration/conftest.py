"""Integration-test fixtures.

Requires a migrated PostgreSQL reachable at settings.DATABASE_URL
(alembic upgrade head). Skipped unless ARENA_INTEGRATION_DB is set.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool stays valid across the entire test session.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_common.database import async_session_factory

_INSERT_USER_SQL = text("""
    INSERT INTO users (id, wallet_address, balance)
    VALUES (:id, :wallet, :balance)
""")

_INSERT_CHARACTER_SQL = text("""
    INSERT INTO characters (id, name, owner_id)
    VALUES (:id, :name, :owner_id)
""")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.environ.get("ARENA_INTEGRATION_DB"):
        return
    skip = pytest.mark.skip(reason="set ARENA_INTEGRATION_DB with a migrated database")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session")
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        yield session


@pytest.fixture
def publisher() -> AsyncMock:
    """Publisher stand-in: integration tests assert on the store, not on Redis."""
    return AsyncMock()


@pytest.fixture
def make_user(db: AsyncSession):
    async def _make(balance: Decimal) -> str:
        uid = f"user_{uuid.uuid4().hex[:12]}"
        await db.execute(
            _INSERT_USER_SQL,
            {"id": uid, "wallet": f"0x{uuid.uuid4().hex}", "balance": balance},
        )
        await db.commit()
        return uid

    return _make


@pytest.fixture
def make_characters(db: AsyncSession):
    async def _make(owner_id: str, *names: str) -> list[str]:
        ids = []
        for name in names:
            cid = f"char_{uuid.uuid4().hex[:12]}"
            await db.execute(
                _INSERT_CHARACTER_SQL, {"id": cid, "name": name, "owner_id": owner_id}
            )
            ids.append(cid)
        await db.commit()
        return ids

    return _make
