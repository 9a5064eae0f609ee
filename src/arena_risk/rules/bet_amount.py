from decimal import Decimal

from src.arena_common.decimal_math import MONEY_PLACES, ZERO, truncate
from src.arena_common.errors import InvalidBetAmountError

# NUMERIC(36, 18) money columns hold 18 integer digits
_MAX_STAKE = Decimal(10) ** (36 - MONEY_PLACES)


def check_bet_amount(amount: Decimal) -> None:
    """Raise InvalidBetAmountError unless amount is a finite, positive Decimal.

    Stakes finer than MONEY_PLACES are refused rather than rounded: the store
    would round them half-up, and a sub-quantum stake would become zero.
    """
    if not isinstance(amount, Decimal) or not amount.is_finite():
        raise InvalidBetAmountError(amount)
    if amount <= ZERO or amount >= _MAX_STAKE or truncate(amount) != amount:
        raise InvalidBetAmountError(amount)
