"""Event publisher: pushes committed odds / settlement events to Redis pub/sub.

Channels:
  {ODDS_CHANNEL_PREFIX}:{battle_id}:odds
  {ODDS_CHANNEL_PREFIX}:{battle_id}:settlement

Publishing happens AFTER commit. The market_snapshots row is the durable
record, so a failed publish is logged and not raised.
"""

import json
import logging
from typing import Any, Protocol

from config.settings import settings
from src.arena_common.redis_client import get_redis
from src.arena_market.domain.events import BattleSettledEvent, OddsUpdatedEvent

logger = logging.getLogger(__name__)


class EventPublisherProtocol(Protocol):
    async def publish_odds(self, event: OddsUpdatedEvent) -> None: ...

    async def publish_settlement(self, event: BattleSettledEvent) -> None: ...


def odds_channel(battle_id: str, prefix: str = settings.ODDS_CHANNEL_PREFIX) -> str:
    return f"{prefix}:{battle_id}:odds"


def settlement_channel(battle_id: str, prefix: str = settings.ODDS_CHANNEL_PREFIX) -> str:
    return f"{prefix}:{battle_id}:settlement"


class RedisEventPublisher:
    def __init__(self, prefix: str = settings.ODDS_CHANNEL_PREFIX) -> None:
        self._prefix = prefix

    async def publish_odds(self, event: OddsUpdatedEvent) -> None:
        await self._publish(odds_channel(event.battle_id, self._prefix), event.to_payload())

    async def publish_settlement(self, event: BattleSettledEvent) -> None:
        await self._publish(
            settlement_channel(event.battle_id, self._prefix), event.to_payload()
        )

    async def _publish(self, channel: str, payload: dict[str, Any]) -> None:
        try:
            redis = await get_redis()
            receivers = await redis.publish(channel, json.dumps(payload))
        except Exception:
            logger.warning("Publish to %s failed", channel, exc_info=True)
            return
        logger.debug("Published %s to %s (%s receivers)", payload["event_type"], channel, receivers)
