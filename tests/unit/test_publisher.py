import json
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.arena_market.domain.events import BattleSettledEvent, OddsUpdatedEvent
from src.arena_market.infrastructure.publisher import (
    RedisEventPublisher,
    odds_channel,
    settlement_channel,
)


def _odds_event() -> OddsUpdatedEvent:
    return OddsUpdatedEvent(
        battle_id="battle-1",
        odds={"red": Decimal("1.05")},
        pools={"red": Decimal("80")},
        reason="BET_PLACED",
    )


class TestChannels:
    def test_names(self) -> None:
        assert odds_channel("b1", "battle") == "battle:b1:odds"
        assert settlement_channel("b1", "arena") == "arena:b1:settlement"


class TestRedisEventPublisher:
    @pytest.mark.asyncio
    async def test_publish_odds(self) -> None:
        redis = MagicMock()
        redis.publish = AsyncMock(return_value=1)
        with patch(
            "src.arena_market.infrastructure.publisher.get_redis",
            AsyncMock(return_value=redis),
        ):
            await RedisEventPublisher(prefix="battle").publish_odds(_odds_event())

        channel, message = redis.publish.await_args.args
        assert channel == "battle:battle-1:odds"
        payload = json.loads(message)
        assert payload["odds"] == {"red": "1.05"}
        assert payload["reason"] == "BET_PLACED"

    @pytest.mark.asyncio
    async def test_publish_settlement(self) -> None:
        redis = MagicMock()
        redis.publish = AsyncMock(return_value=0)
        with patch(
            "src.arena_market.infrastructure.publisher.get_redis",
            AsyncMock(return_value=redis),
        ):
            await RedisEventPublisher(prefix="battle").publish_settlement(
                BattleSettledEvent("battle-1", "red", Decimal(150), Decimal(0))
            )

        channel, message = redis.publish.await_args.args
        assert channel == "battle:battle-1:settlement"
        assert json.loads(message)["total_paid_out"] == "150"

    @pytest.mark.asyncio
    async def test_publish_failure_is_logged_not_raised(self, caplog) -> None:
        redis = MagicMock()
        redis.publish = AsyncMock(side_effect=ConnectionError("redis down"))
        with patch(
            "src.arena_market.infrastructure.publisher.get_redis",
            AsyncMock(return_value=redis),
        ):
            await RedisEventPublisher(prefix="battle").publish_odds(_odds_event())

        assert "Publish to battle:battle-1:odds failed" in caplog.text
