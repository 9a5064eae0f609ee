from datetime import datetime, timedelta

from src.arena_common.datetime_utils import utc_now
from src.arena_common.enums import OPEN_BATTLE_STATUSES
from src.arena_common.errors import MarketClosedError
from src.arena_market.domain.models import Battle


def check_battle_open(
    battle: Battle, lock_window: timedelta, now: datetime | None = None
) -> None:
    """Raise MarketClosedError if the battle no longer accepts bets at `now`."""
    if battle.status not in OPEN_BATTLE_STATUSES:
        raise MarketClosedError(battle.id, f"status is {battle.status.value}")
    current = now if now is not None else utc_now()
    if not battle.is_open(current, lock_window):
        raise MarketClosedError(
            battle.id,
            f"betting locked since {battle.betting_deadline(lock_window).isoformat()}",
        )
