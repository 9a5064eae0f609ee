"""Market-making algorithms: pool volumes -> decimal odds.

Pure functions, no I/O. Volumes are NET stake per side.

Two-sided (team battle):
  p_a = v_b / total           (inverse-volume weighting)
  s   = max(0.05, 0.3 - total / 50)
  p'  = p * (1 - s) + 0.5 * s (blend toward a coin flip; fades as volume grows)
  cap = SAFETY_BUFFER * v_opp / (v_own * (1 - F_HOUSE)), or MAX when v_own == 0
  odds = clamp(min(1 / (p' * (1 - F_HOUSE)), cap), MIN_ODDS, MAX_ODDS_TWO_SIDED)

Multi-sided (battle royale):
  w_i  = max(0.1, total - v_i + 1), p_market_i = w_i / sum(w)
  p_i  = s / N + (1 - s) * p_market_i
  odds = clamp(1 / (p_i * (1 - F_HOUSE)), MIN_ODDS, MAX_ODDS_MULTI_SIDED)

Both algorithms have an explicit cold-start branch for total == 0, so no
division by zero is reachable.
"""

from collections.abc import Mapping
from decimal import Decimal

from src.arena_common.decimal_math import ONE, ZERO, clamp, div, dmax, dmin, money_context
from src.arena_pricing.domain.constants import (
    F_HOUSE,
    MAX_ODDS_MULTI_SIDED,
    MAX_ODDS_TWO_SIDED,
    MIN_INVERSE_WEIGHT,
    MIN_ODDS,
    SAFETY_BUFFER,
    SMOOTHING_DECAY,
    SMOOTHING_FLOOR,
    SMOOTHING_START,
)

_HALF = Decimal("0.5")
_KEEP = ONE - F_HOUSE


def _check_volume(volume: Decimal) -> None:
    if volume < ZERO:
        raise ValueError(f"Pool volume must be non-negative, got {volume}")


def smoothing_weight(total: Decimal) -> Decimal:
    """s = max(0.05, 0.3 - total / 50)."""
    return dmax(SMOOTHING_FLOOR, SMOOTHING_START - div(total, SMOOTHING_DECAY))


def probability_to_odds(probability: Decimal) -> Decimal:
    """Decimal odds after the house edge: 1 / (p * (1 - F_HOUSE))."""
    with money_context():
        return div(ONE, probability * _KEEP)


def liquidity_cap(own_volume: Decimal, opposing_volume: Decimal) -> Decimal:
    """Highest odds a side may offer without over-promising the opposing pool."""
    if own_volume == ZERO:
        return MAX_ODDS_TWO_SIDED
    with money_context():
        return div(SAFETY_BUFFER * opposing_volume, own_volume * _KEEP)


def two_sided_cold_start_odds() -> Decimal:
    return clamp(probability_to_odds(_HALF), MIN_ODDS, MAX_ODDS_TWO_SIDED)


def two_sided_odds(v_a: Decimal, v_b: Decimal) -> tuple[Decimal, Decimal]:
    """Odds for side A and side B of a team battle."""
    _check_volume(v_a)
    _check_volume(v_b)
    total = v_a + v_b
    if total == ZERO:
        cold = two_sided_cold_start_odds()
        return cold, cold

    p_a = div(v_b, total)
    p_b = div(v_a, total)

    s = smoothing_weight(total)
    with money_context():
        p_a_adj = p_a * (ONE - s) + _HALF * s
        p_b_adj = p_b * (ONE - s) + _HALF * s

    odds_a = dmin(probability_to_odds(p_a_adj), liquidity_cap(v_a, v_b))
    odds_b = dmin(probability_to_odds(p_b_adj), liquidity_cap(v_b, v_a))

    return (
        clamp(odds_a, MIN_ODDS, MAX_ODDS_TWO_SIDED),
        clamp(odds_b, MIN_ODDS, MAX_ODDS_TWO_SIDED),
    )


def multi_sided_odds(volumes: Mapping[str, Decimal]) -> dict[str, Decimal]:
    """Odds for every participant of a battle royale, keyed like `volumes`."""
    if not volumes:
        raise ValueError("Battle royale needs at least one participant")
    for v in volumes.values():
        _check_volume(v)

    n = Decimal(len(volumes))
    total = sum(volumes.values(), ZERO)

    if total == ZERO:
        initial = clamp(n * _KEEP, MIN_ODDS, MAX_ODDS_MULTI_SIDED)
        return {pid: initial for pid in volumes}

    p_base = div(ONE, n)

    weights = {
        pid: dmax(MIN_INVERSE_WEIGHT, total - v + ONE) for pid, v in volumes.items()
    }
    total_weight = sum(weights.values(), ZERO)

    s = smoothing_weight(total)
    odds: dict[str, Decimal] = {}
    for pid, weight in weights.items():
        p_market = div(weight, total_weight)
        with money_context():
            p_combined = p_base * s + p_market * (ONE - s)
        odds[pid] = clamp(probability_to_odds(p_combined), MIN_ODDS, MAX_ODDS_MULTI_SIDED)
    return odds
