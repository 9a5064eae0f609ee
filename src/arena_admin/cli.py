"""
Battle arena admin CLI. Every invocation opens one DB session and runs one command.

Usage:
    python -m src.arena_admin.cli odds BATTLE_ID
    python -m src.arena_admin.cli pools BATTLE_ID
    python -m src.arena_admin.cli history BATTLE_ID [--limit N]
    python -m src.arena_admin.cli bets USER_ID [--battle BATTLE_ID]
    python -m src.arena_admin.cli create-battle TITLE KIND MODE START_TIME CHARACTER_ID...
    python -m src.arena_admin.cli activate BATTLE_ID
    python -m src.arena_admin.cli settle BATTLE_ID WINNER_ID

Output: JSON, one line. {"ok": true, ...} or {"ok": false, "code": ..., "error": "..."}
Connection settings come from config.settings (env / .env).
"""

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.arena_admin.application.service import AdminService
from src.arena_betting.application.query_service import BetQueryService
from src.arena_common.database import async_session_factory, engine
from src.arena_common.enums import BettingMode, MarketKind
from src.arena_common.errors import AppError, InvalidBattleDefinitionError
from src.arena_common.logging_config import configure_logging
from src.arena_common.redis_client import close_redis
from src.arena_market.application.service import MarketApplicationService

Command = Callable[[AsyncSession, argparse.Namespace], Awaitable[Any]]


def reply(data: dict[str, Any]) -> None:
    print(json.dumps(data, default=str))


def _dump(result: Any) -> dict[str, Any]:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    return dict(result)


async def cmd_odds(db: AsyncSession, args: argparse.Namespace) -> Any:
    return await MarketApplicationService().compute_odds(db, args.battle_id)


async def cmd_pools(db: AsyncSession, args: argparse.Namespace) -> Any:
    return await MarketApplicationService().get_pools(db, args.battle_id)


async def cmd_history(db: AsyncSession, args: argparse.Namespace) -> Any:
    return await MarketApplicationService().get_odds_history(db, args.battle_id, args.limit)


async def cmd_bets(db: AsyncSession, args: argparse.Namespace) -> Any:
    return await BetQueryService().list_bets(db, args.user_id, args.battle)


async def cmd_create_battle(db: AsyncSession, args: argparse.Namespace) -> Any:
    try:
        start_time = datetime.fromisoformat(args.start_time)
    except ValueError as e:
        raise InvalidBattleDefinitionError(
            f"start_time is not ISO-8601: {args.start_time!r}"
        ) from e
    return await AdminService().create_battle(
        db,
        title=args.title,
        kind=MarketKind(args.kind),
        betting_mode=BettingMode(args.mode),
        start_time=start_time,
        character_ids=args.character_ids,
    )


async def cmd_activate(db: AsyncSession, args: argparse.Namespace) -> Any:
    return await AdminService().activate_battle(db, args.battle_id)


async def cmd_settle(db: AsyncSession, args: argparse.Namespace) -> Any:
    return await AdminService().settle_battle(db, args.battle_id, args.winner_id)


COMMANDS: dict[str, Command] = {
    "odds": cmd_odds,
    "pools": cmd_pools,
    "history": cmd_history,
    "bets": cmd_bets,
    "create-battle": cmd_create_battle,
    "activate": cmd_activate,
    "settle": cmd_settle,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{settings.APP_NAME} admin CLI")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    sub = parser.add_subparsers(dest="command")

    for name in ("odds", "pools", "activate"):
        p = sub.add_parser(name)
        p.add_argument("battle_id")

    p = sub.add_parser("history")
    p.add_argument("battle_id")
    p.add_argument("--limit", type=int, default=50)

    p = sub.add_parser("bets")
    p.add_argument("user_id")
    p.add_argument("--battle", default=None)

    p = sub.add_parser("create-battle")
    p.add_argument("title")
    p.add_argument("kind", choices=[k.value for k in MarketKind])
    p.add_argument("mode", choices=[m.value for m in BettingMode])
    p.add_argument("start_time", help="ISO-8601; naive values are UTC")
    p.add_argument("character_ids", nargs="+")

    p = sub.add_parser("settle")
    p.add_argument("battle_id")
    p.add_argument("winner_id")
    return parser


async def run(args: argparse.Namespace) -> dict[str, Any]:
    try:
        async with async_session_factory() as db:
            result = await COMMANDS[args.command](db, args)
        return {"ok": True, **_dump(result)}
    finally:
        await close_redis()
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.log_level)
    try:
        reply(asyncio.run(run(args)))
    except AppError as e:
        reply({"ok": False, "code": e.code, "error": e.message})
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
