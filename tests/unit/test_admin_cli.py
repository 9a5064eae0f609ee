from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.arena_admin import cli
from src.arena_market.application.schemas import PoolItem, PoolsResponse


class TestParser:
    def test_settle_args(self) -> None:
        args = cli.build_parser().parse_args(["settle", "battle-1", "red"])
        assert args.command == "settle"
        assert args.battle_id == "battle-1"
        assert args.winner_id == "red"

    def test_create_battle_args(self) -> None:
        args = cli.build_parser().parse_args(
            ["create-battle", "Royale", "BATTLE_ROYALE", "AMM", "2026-06-01T20:00:00", "a", "b", "c"]
        )
        assert args.character_ids == ["a", "b", "c"]

    def test_no_command_prints_help(self, capsys) -> None:
        assert cli.main([]) == 1
        assert "usage" in capsys.readouterr().out


class TestMain:
    @pytest.fixture(autouse=True)
    def _no_logging_setup(self):
        with patch("src.arena_admin.cli.configure_logging"):
            yield

    def test_json_reply(self, capsys) -> None:
        resp = PoolsResponse(
            battle_id="battle-1",
            total_volume=Decimal("12.5"),
            pools=[PoolItem(character_id="red", total_volume=Decimal("12.5"))],
        )
        with patch("src.arena_admin.cli.run", AsyncMock(return_value={"ok": True, **resp.model_dump(mode="json")})):
            assert cli.main(["pools", "battle-1"]) == 0
        out = capsys.readouterr().out
        assert '"ok": true' in out
        assert '"total_volume": "12.5"' in out

    def test_app_error_reply(self, capsys) -> None:
        from src.arena_common.errors import MarketNotFoundError

        with patch("src.arena_admin.cli.run", AsyncMock(side_effect=MarketNotFoundError("nope"))):
            assert cli.main(["odds", "nope"]) == 1
        out = capsys.readouterr().out
        assert '"ok": false' in out
        assert '"code": 3001' in out

    def test_malformed_start_time_is_json_error(self, capsys) -> None:
        session_factory = MagicMock()
        session_factory.return_value.__aenter__.return_value = AsyncMock()
        engine = MagicMock()
        engine.dispose = AsyncMock()
        argv = ["create-battle", "Bad date", "TEAM_BATTLE", "AMM", "next tuesday", "a", "b"]

        with (
            patch("src.arena_admin.cli.async_session_factory", session_factory),
            patch("src.arena_admin.cli.close_redis", AsyncMock()),
            patch("src.arena_admin.cli.engine", engine),
        ):
            assert cli.main(argv) == 1

        out = capsys.readouterr().out
        assert '"ok": false' in out
        assert '"code": 3005' in out
        assert "next tuesday" in out
        engine.dispose.assert_awaited_once()
