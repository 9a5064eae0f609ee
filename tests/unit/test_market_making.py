"""Tests for arena_pricing market-making algorithms."""
from decimal import Decimal

import pytest

from src.arena_common.decimal_math import ONE, clamp
from src.arena_pricing.domain.constants import (
    F_HOUSE,
    MAX_ODDS_MULTI_SIDED,
    MAX_ODDS_TWO_SIDED,
    MIN_ODDS,
)
from src.arena_pricing.domain.market_making import (
    liquidity_cap,
    multi_sided_odds,
    probability_to_odds,
    smoothing_weight,
    two_sided_cold_start_odds,
    two_sided_odds,
)

_VOLUMES = [Decimal(v) for v in ("0", "0.5", "1", "7", "50", "100", "333.33", "10000")]


class TestSmoothing:
    def test_starts_at_030(self) -> None:
        assert smoothing_weight(Decimal(0)) == Decimal("0.3")

    def test_decays_linearly(self) -> None:
        assert smoothing_weight(Decimal(5)) == Decimal("0.2")

    def test_floor(self) -> None:
        assert smoothing_weight(Decimal(1000)) == Decimal("0.05")


class TestTwoSidedOdds:
    def test_cold_start_both_sides_equal(self) -> None:
        odds_a, odds_b = two_sided_odds(Decimal(0), Decimal(0))
        assert odds_a == odds_b == two_sided_cold_start_odds()
        assert Decimal("2.1152") < odds_a < Decimal("2.1153")

    @pytest.mark.parametrize("v_a", _VOLUMES)
    @pytest.mark.parametrize("v_b", _VOLUMES)
    def test_bounds(self, v_a: Decimal, v_b: Decimal) -> None:
        for odds in two_sided_odds(v_a, v_b):
            assert MIN_ODDS <= odds <= MAX_ODDS_TWO_SIDED

    def test_larger_side_pinned_to_min_odds(self) -> None:
        # Backing the side that already holds at least as much volume is capped by
        # the opposing pool: cap = 0.9 * v_b / (v_a * 0.9455) < 1 whenever v_a >= v_b.
        cases = [(Decimal(100), Decimal(50)), (Decimal(50), Decimal(50)), (Decimal(10), Decimal(0))]
        for v_a, v_b in cases:
            odds_a, odds_b = two_sided_odds(v_a, v_b)
            assert odds_a == MIN_ODDS
            assert odds_b >= odds_a

    def test_more_stake_can_raise_own_odds_before_cap_binds(self) -> None:
        # Inverse-volume pricing: while the cap is slack, adding to side A lowers
        # p_a and lengthens A's odds.
        before, _ = two_sided_odds(Decimal(0), Decimal(1))
        after, _ = two_sided_odds(Decimal("0.25"), Decimal(1))
        assert before < Decimal("1.25")
        assert after > Decimal("1.45")

    def test_non_increasing_once_cap_binds(self) -> None:
        v_b = Decimal(100)
        previous = MAX_ODDS_TWO_SIDED
        for v_a in range(60, 201, 10):
            odds_a, _ = two_sided_odds(Decimal(v_a), v_b)
            assert odds_a == clamp(liquidity_cap(Decimal(v_a), v_b), MIN_ODDS, MAX_ODDS_TWO_SIDED)
            assert odds_a <= previous
            previous = odds_a
        assert previous == MIN_ODDS

    def test_symmetric(self) -> None:
        odds_a, odds_b = two_sided_odds(Decimal(30), Decimal(70))
        swapped_b, swapped_a = two_sided_odds(Decimal(70), Decimal(30))
        assert odds_a == swapped_a
        assert odds_b == swapped_b

    def test_negative_volume_rejected(self) -> None:
        with pytest.raises(ValueError):
            two_sided_odds(Decimal(-1), Decimal(5))


class TestLiquidityCap:
    def test_empty_own_side_uses_max(self) -> None:
        assert liquidity_cap(Decimal(0), Decimal(100)) == MAX_ODDS_TWO_SIDED

    def test_formula(self) -> None:
        # 0.9 * 100 / (10 * 0.9455)
        expected = Decimal(90) / (Decimal(10) * (ONE - F_HOUSE))
        assert abs(liquidity_cap(Decimal(10), Decimal(100)) - expected) < Decimal("1e-17")


class TestMultiSidedOdds:
    def test_cold_start(self) -> None:
        odds = multi_sided_odds({"a": Decimal(0), "b": Decimal(0), "c": Decimal(0)})
        assert set(odds.values()) == {Decimal("2.8365")}

    def test_cold_start_clamped_to_max(self) -> None:
        volumes = {str(i): Decimal(0) for i in range(200)}
        assert set(multi_sided_odds(volumes).values()) == {MAX_ODDS_MULTI_SIDED}

    def test_probabilities_normalise(self) -> None:
        odds = multi_sided_odds({"a": Decimal(10), "b": Decimal(20), "c": Decimal(30)})
        implied = sum(ONE / (o * (ONE - F_HOUSE)) for o in odds.values())
        assert abs(implied - ONE) < Decimal("1e-12")

    @pytest.mark.parametrize("n", [2, 3, 5, 8])
    def test_bounds(self, n: int) -> None:
        for volumes in (
            {str(i): Decimal(i) for i in range(n)},
            {str(i): Decimal(10) ** i for i in range(n)},
            {str(i): (Decimal(5000) if i == 0 else Decimal(0)) for i in range(n)},
        ):
            for o in multi_sided_odds(volumes).values():
                assert MIN_ODDS <= o <= MAX_ODDS_MULTI_SIDED

    def test_keys_preserved(self) -> None:
        volumes = {"x": Decimal(1), "y": Decimal(2)}
        assert list(multi_sided_odds(volumes)) == ["x", "y"]

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            multi_sided_odds({})

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            multi_sided_odds({"a": Decimal(-5), "b": Decimal(1)})


class TestProbabilityToOdds:
    def test_house_edge_applied(self) -> None:
        # 1 / 0.9455
        assert Decimal("1.0576414") < probability_to_odds(ONE) < Decimal("1.0576415")
