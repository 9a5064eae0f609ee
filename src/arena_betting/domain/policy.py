"""Betting policy: fee split, lock window and liquidity knobs.

Engine constants live in arena_pricing; these are the operator-tunable values.
"""

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from config.settings import Settings, settings
from src.arena_pricing.domain.constants import BOOTSTRAP_LIQUIDITY, F_HOUSE, SAFETY_BUFFER


@dataclass(frozen=True)
class BettingPolicy:
    lock_window: timedelta = timedelta(minutes=2)
    house_fee_rate: Decimal = F_HOUSE
    # Non-refundable part of the stake when a PENDING_LIQUIDITY bet is cancelled
    immediate_fee_rate: Decimal = Decimal("0.01")
    first_bet_cap: Decimal = Decimal("1000")
    bootstrap_liquidity: Decimal = BOOTSTRAP_LIQUIDITY
    safety_buffer: Decimal = SAFETY_BUFFER

    def __post_init__(self) -> None:
        if not (Decimal("0") <= self.immediate_fee_rate <= self.house_fee_rate):
            raise ValueError(
                f"immediate_fee_rate {self.immediate_fee_rate} must be within "
                f"[0, house_fee_rate={self.house_fee_rate}]"
            )

    @classmethod
    def from_settings(cls, cfg: Settings = settings) -> "BettingPolicy":
        return cls(
            lock_window=timedelta(seconds=cfg.BETTING_LOCK_WINDOW_SECONDS),
            immediate_fee_rate=cfg.PLATFORM_IMMEDIATE_FEE_RATE,
            first_bet_cap=cfg.FIRST_BET_CAP,
            bootstrap_liquidity=cfg.BOOTSTRAP_LIQUIDITY,
        )
