"""Decimal arithmetic utilities for money and odds.

All stakes, balances, pools, payouts and odds are Decimal. No float anywhere
in the odds or settlement path: floats are rejected at the boundary.

Rounding model:
  - Intermediate results are computed in a 60-digit context with ROUND_DOWN.
  - Every derived quantity (odds, payouts, refunds, fee splits) is truncated
    to MONEY_PLACES fractional digits, so rounding never inflates a credit.
"""

from contextlib import AbstractContextManager
from decimal import ROUND_DOWN, Context, Decimal, localcontext

MONEY_PLACES = 18

ZERO = Decimal("0")
ONE = Decimal("1")

_QUANTUM = Decimal(10) ** -MONEY_PLACES
_CONTEXT = Context(prec=60, rounding=ROUND_DOWN)


def money_context() -> AbstractContextManager[Context]:
    """Context manager for multi-step money math: `with money_context(): ...`."""
    return localcontext(_CONTEXT)


def to_decimal(value: Decimal | int | str) -> Decimal:
    """Convert an int, str or Decimal to Decimal. Floats are refused."""
    if isinstance(value, float):
        raise TypeError(f"Refusing binary float for money/odds value: {value!r}")
    if isinstance(value, Decimal):
        return value
    return Decimal(value)


def truncate(value: Decimal) -> Decimal:
    """Round toward zero at MONEY_PLACES fractional digits."""
    return value.quantize(_QUANTUM, rounding=ROUND_DOWN, context=_CONTEXT)


def div(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Truncating division: numerator / denominator at MONEY_PLACES."""
    with localcontext(_CONTEXT):
        return truncate(numerator / denominator)


def mul(a: Decimal, b: Decimal) -> Decimal:
    with localcontext(_CONTEXT):
        return truncate(a * b)


def dmin(*values: Decimal) -> Decimal:
    return min(values)


def dmax(*values: Decimal) -> Decimal:
    return max(values)


def clamp(value: Decimal, lower: Decimal, upper: Decimal) -> Decimal:
    """Clamp value into [lower, upper]."""
    if lower > upper:
        raise ValueError(f"Empty clamp range [{lower}, {upper}]")
    return dmin(upper, dmax(lower, value))


def apply_rate(amount: Decimal, rate: Decimal) -> Decimal:
    """Portion of amount taken by rate, truncated (e.g. the fee on a stake)."""
    return mul(amount, rate)


def net_of_rate(amount: Decimal, rate: Decimal) -> Decimal:
    """amount minus its rate portion: amount - truncate(amount * rate)."""
    return amount - apply_rate(amount, rate)


def to_display(value: Decimal, places: int = 4) -> str:
    """Human-readable rendering truncated to `places` digits: 2.115281... -> '2.1152'."""
    quantum = Decimal(10) ** -places
    return str(value.quantize(quantum, rounding=ROUND_DOWN, context=_CONTEXT))
