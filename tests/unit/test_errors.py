"""Tests for arena_common.errors."""
from decimal import Decimal

from src.arena_common.errors import (
    AccountNotFoundError,
    AppError,
    BetCapExceededError,
    InsufficientBalanceError,
    InternalError,
    InvalidBattleDefinitionError,
    InvalidBetAmountError,
    InvalidMarketStateError,
    LiquidityConstraintError,
    MarketClosedError,
    MarketNotFoundError,
    NotFoundError,
    ParticipantNotFoundError,
)


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert isinstance(err, Exception)


class TestSpecificErrors:
    def test_not_found_family(self) -> None:
        for err, code in [
            (AccountNotFoundError("u1"), 2002),
            (MarketNotFoundError("b1"), 3001),
            (ParticipantNotFoundError("b1", "c1"), 3003),
        ]:
            assert isinstance(err, NotFoundError)
            assert err.code == code
            assert err.http_status == 404

    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=Decimal("65"), available=Decimal("30"))
        assert err.code == 2001
        assert "65" in err.message
        assert "30" in err.message

    def test_market_closed(self) -> None:
        err = MarketClosedError("b1", "status is FINISHED")
        assert err.code == 3002
        assert "FINISHED" in err.message

    def test_invalid_state(self) -> None:
        err = InvalidMarketStateError("b1", "already settled")
        assert err.code == 3004
        assert err.http_status == 409

    def test_invalid_battle_definition(self) -> None:
        assert InvalidBattleDefinitionError("x").code == 3005

    def test_bet_errors(self) -> None:
        assert LiquidityConstraintError(Decimal(2), Decimal(1)).code == 4001
        assert BetCapExceededError(Decimal(1001), Decimal(1000)).code == 4002
        assert InvalidBetAmountError(Decimal(0)).code == 4003

    def test_internal(self) -> None:
        err = InternalError()
        assert err.code == 9002
        assert err.http_status == 500
