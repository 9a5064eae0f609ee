"""Liquidity rule: a bet is accepted only if the opposing pool can cover it.

required  = amount * odds - amount        (what the house owes on a win)
available = opposing pool volume * SAFETY_BUFFER
            (or BOOTSTRAP_LIQUIDITY * SAFETY_BUFFER while the whole market is empty)

Must be evaluated on the same locked pool snapshot used to price the bet.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal

from src.arena_common.decimal_math import ZERO, money_context, mul, truncate
from src.arena_common.errors import LiquidityConstraintError
from src.arena_pricing.domain.constants import BOOTSTRAP_LIQUIDITY, SAFETY_BUFFER
from src.arena_pricing.domain.pricing import PricingModel

logger = logging.getLogger(__name__)


def required_liquidity(amount: Decimal, odds: Decimal) -> Decimal:
    with money_context():
        return truncate(amount * odds - amount)


def opposing_liquidity(
    model: PricingModel,
    pools: Mapping[str, Decimal],
    participant_id: str,
    bootstrap: Decimal = BOOTSTRAP_LIQUIDITY,
) -> Decimal:
    """Counter-liquidity backing a bet on participant_id, before the safety buffer."""
    if sum(pools.values(), ZERO) == ZERO:
        return bootstrap
    return model.opposing_volume(pools, participant_id)


def check_liquidity(
    model: PricingModel,
    pools: Mapping[str, Decimal],
    participant_id: str,
    amount: Decimal,
    odds: Decimal,
    bootstrap: Decimal = BOOTSTRAP_LIQUIDITY,
    safety_buffer: Decimal = SAFETY_BUFFER,
) -> None:
    """Raise LiquidityConstraintError unless required <= opposing * safety_buffer."""
    required = required_liquidity(amount, odds)
    available = mul(opposing_liquidity(model, pools, participant_id, bootstrap), safety_buffer)
    if required > available:
        logger.warning(
            "Liquidity rejected: participant=%s amount=%s odds=%s required=%s available=%s",
            participant_id, amount, odds, required, available,
        )
        raise LiquidityConstraintError(required, available)
