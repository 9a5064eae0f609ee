# tests/unit/test_market_service.py
"""Unit tests for MarketApplicationService using mock repository."""
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.arena_common.enums import BattleStatus, BettingMode, MarketKind
from src.arena_common.errors import MarketNotFoundError
from src.arena_market.application.service import MarketApplicationService
from src.arena_market.domain.models import Battle, OddsSnapshot, Participant
from src.arena_pricing.domain.market_making import two_sided_cold_start_odds


def _make_battle(**kwargs) -> Battle:
    defaults = dict(
        id="battle-1",
        title="Red vs Blue",
        kind=MarketKind.TEAM_BATTLE,
        betting_mode=BettingMode.AMM,
        start_time=datetime(2026, 6, 1, tzinfo=UTC),
        status=BattleStatus.ACTIVE,
        winner_id=None,
        participants=[
            Participant("blue", "Blue", "o2", 1),
            Participant("red", "Red", "o1", 0),
        ],
        pools={},
    )
    defaults.update(kwargs)
    return Battle(**defaults)


@pytest.fixture
def db():
    return MagicMock()


@pytest.fixture
def mock_repo():
    return MagicMock()


class TestComputeOdds:
    @pytest.mark.asyncio
    async def test_cold_start(self, db, mock_repo):
        mock_repo.get_battle = AsyncMock(return_value=_make_battle())
        svc = MarketApplicationService(repo=mock_repo)

        resp = await svc.compute_odds(db, "battle-1")

        assert [p.character_id for p in resp.participants] == ["red", "blue"]
        assert all(p.odds == two_sided_cold_start_odds() for p in resp.participants)
        assert resp.participants[0].odds_display == "2.1152"
        assert resp.total_volume == Decimal(0)
        assert resp.kind == "TEAM_BATTLE"

    @pytest.mark.asyncio
    async def test_not_found(self, db, mock_repo):
        mock_repo.get_battle = AsyncMock(return_value=None)
        svc = MarketApplicationService(repo=mock_repo)
        with pytest.raises(MarketNotFoundError):
            await svc.compute_odds(db, "missing")

    @pytest.mark.asyncio
    async def test_read_does_not_lock(self, db, mock_repo):
        mock_repo.get_battle = AsyncMock(return_value=_make_battle())
        await MarketApplicationService(repo=mock_repo).compute_odds(db, "battle-1")
        mock_repo.get_battle.assert_awaited_once_with(db, "battle-1")


class TestGetPools:
    @pytest.mark.asyncio
    async def test_pools_and_total(self, db, mock_repo):
        mock_repo.get_battle = AsyncMock(
            return_value=_make_battle(pools={"red": Decimal(30), "blue": Decimal("12.5")})
        )
        resp = await MarketApplicationService(repo=mock_repo).get_pools(db, "battle-1")
        assert resp.total_volume == Decimal("42.5")
        assert [(p.character_id, p.total_volume) for p in resp.pools] == [
            ("red", Decimal(30)),
            ("blue", Decimal("12.5")),
        ]


class TestOddsHistory:
    @pytest.mark.asyncio
    async def test_history_items(self, db, mock_repo):
        mock_repo.get_battle = AsyncMock(return_value=_make_battle())
        snap = OddsSnapshot("snap-1", "battle-1", {"red": Decimal("1.0576")}, datetime.now(UTC))
        mock_repo.list_snapshots = AsyncMock(return_value=[snap])

        resp = await MarketApplicationService(repo=mock_repo).get_odds_history(db, "battle-1", 5)

        mock_repo.list_snapshots.assert_awaited_once_with(db, "battle-1", 5)
        assert resp.items[0].odds_display == {"red": "1.0576"}

    @pytest.mark.asyncio
    async def test_history_unknown_battle(self, db, mock_repo):
        mock_repo.get_battle = AsyncMock(return_value=None)
        with pytest.raises(MarketNotFoundError):
            await MarketApplicationService(repo=mock_repo).get_odds_history(db, "missing")
