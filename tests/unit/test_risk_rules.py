from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from src.arena_account.domain.models import Account
from src.arena_common.enums import BattleStatus, BettingMode, MarketKind
from src.arena_common.errors import (
    InsufficientBalanceError,
    InvalidBetAmountError,
    LiquidityConstraintError,
    MarketClosedError,
)
from src.arena_market.domain.models import Battle, Participant
from src.arena_pricing.domain.market_making import two_sided_cold_start_odds
from src.arena_pricing.domain.pricing import MultiSidedModel, TwoSidedModel
from src.arena_risk.rules.balance_check import check_balance
from src.arena_risk.rules.bet_amount import check_bet_amount
from src.arena_risk.rules.betting_window import check_battle_open
from src.arena_risk.rules.liquidity_check import (
    check_liquidity,
    opposing_liquidity,
    required_liquidity,
)

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)
LOCK = timedelta(minutes=2)


def _battle(
    status: BattleStatus = BattleStatus.ACTIVE, starts_in: timedelta = timedelta(hours=1)
) -> Battle:
    return Battle(
        id="battle-1",
        title="Red vs Blue",
        kind=MarketKind.TEAM_BATTLE,
        betting_mode=BettingMode.AMM,
        start_time=NOW + starts_in,
        status=status,
        winner_id=None,
        participants=[Participant("red", "Red", "o1", 0), Participant("blue", "Blue", "o2", 1)],
    )


class TestRequiredLiquidity:
    def test_amount_times_odds_minus_amount(self) -> None:
        assert required_liquidity(Decimal(10), Decimal("2.5")) == Decimal(15)


class TestOpposingLiquidity:
    def test_bootstrap_when_market_empty(self) -> None:
        pools = {"red": Decimal(0), "blue": Decimal(0)}
        assert opposing_liquidity(TwoSidedModel(), pools, "red") == Decimal(100)

    def test_custom_bootstrap(self) -> None:
        pools = {"red": Decimal(0), "blue": Decimal(0)}
        assert opposing_liquidity(TwoSidedModel(), pools, "red", Decimal(500)) == Decimal(500)

    def test_two_sided_uses_other_side(self) -> None:
        pools = {"red": Decimal(40), "blue": Decimal(0)}
        assert opposing_liquidity(TwoSidedModel(), pools, "blue") == Decimal(40)
        assert opposing_liquidity(TwoSidedModel(), pools, "red") == Decimal(0)

    def test_multi_sided_uses_rest_of_market(self) -> None:
        pools = {"a": Decimal(10), "b": Decimal(20), "c": Decimal(5)}
        assert opposing_liquidity(MultiSidedModel(), pools, "a") == Decimal(25)


class TestCheckLiquidity:
    def test_boundary_accepted(self) -> None:
        # required = 90 * 2 - 90 = 90; available = 100 * 0.9 = 90
        pools = {"red": Decimal(0), "blue": Decimal(100)}
        check_liquidity(TwoSidedModel(), pools, "red", Decimal(90), Decimal(2))

    def test_just_over_boundary_rejected(self) -> None:
        pools = {"red": Decimal(0), "blue": Decimal(100)}
        with pytest.raises(LiquidityConstraintError) as exc_info:
            check_liquidity(
                TwoSidedModel(), pools, "red", Decimal("90.000000000000000001"), Decimal(2)
            )
        assert exc_info.value.code == 4001

    def test_cold_start_stake_80_accepted(self) -> None:
        pools = {"red": Decimal(0), "blue": Decimal(0)}
        check_liquidity(TwoSidedModel(), pools, "red", Decimal(80), two_sided_cold_start_odds())

    def test_cold_start_stake_100_rejected(self) -> None:
        # 100 * 2.1152 - 100 = 111.5 > 100 * 0.9
        pools = {"red": Decimal(0), "blue": Decimal(0)}
        with pytest.raises(LiquidityConstraintError):
            check_liquidity(
                TwoSidedModel(), pools, "red", Decimal(100), two_sided_cold_start_odds()
            )

    def test_no_counter_liquidity_rejected(self) -> None:
        pools = {"red": Decimal(50), "blue": Decimal(0)}
        with pytest.raises(LiquidityConstraintError):
            check_liquidity(TwoSidedModel(), pools, "red", Decimal(1), Decimal("1.05"))


class TestBettingWindow:
    def test_open(self) -> None:
        check_battle_open(_battle(), LOCK, now=NOW)

    def test_pending_is_open(self) -> None:
        check_battle_open(_battle(BattleStatus.PENDING), LOCK, now=NOW)

    def test_inside_lock_window(self) -> None:
        with pytest.raises(MarketClosedError) as exc_info:
            check_battle_open(_battle(starts_in=timedelta(seconds=90)), LOCK, now=NOW)
        assert exc_info.value.code == 3002

    def test_exactly_at_deadline_is_closed(self) -> None:
        with pytest.raises(MarketClosedError):
            check_battle_open(_battle(starts_in=LOCK), LOCK, now=NOW)

    @pytest.mark.parametrize("status", [BattleStatus.FINISHED, BattleStatus.CANCELLED])
    def test_terminal_status_closed(self, status: BattleStatus) -> None:
        with pytest.raises(MarketClosedError):
            check_battle_open(_battle(status), LOCK, now=NOW)

    def test_naive_start_time_treated_as_utc(self) -> None:
        battle = _battle()
        battle.start_time = (NOW + timedelta(hours=1)).replace(tzinfo=None)
        check_battle_open(battle, LOCK, now=NOW)


class TestBetAmount:
    def test_positive(self) -> None:
        check_bet_amount(Decimal("0.01"))

    @pytest.mark.parametrize(
        "amount", [Decimal(0), Decimal(-1), Decimal("NaN"), Decimal("Infinity")]
    )
    def test_invalid(self, amount: Decimal) -> None:
        with pytest.raises(InvalidBetAmountError):
            check_bet_amount(amount)

    def test_eighteen_places_accepted(self) -> None:
        check_bet_amount(Decimal("10.123456789012345678"))
        check_bet_amount(Decimal("1e-18"))

    @pytest.mark.parametrize(
        "amount",
        [Decimal("10.1234567890123456789"), Decimal("1e-19"), Decimal("1E+18")],
    )
    def test_unstorable_precision_or_size_rejected(self, amount: Decimal) -> None:
        with pytest.raises(InvalidBetAmountError) as exc_info:
            check_bet_amount(amount)
        assert exc_info.value.code == 4003


class TestBalance:
    def _account(self, balance: str) -> Account:
        return Account("u1", "0xabc", Decimal(balance), NOW, NOW)

    def test_exact_balance_ok(self) -> None:
        check_balance(self._account("50"), Decimal(50))

    def test_short_balance(self) -> None:
        with pytest.raises(InsufficientBalanceError) as exc_info:
            check_balance(self._account("49.99"), Decimal(50))
        assert exc_info.value.code == 2001
