"""Shared test fixtures."""

from datetime import timedelta
from decimal import Decimal

import pytest

from src.arena_betting.domain.policy import BettingPolicy
from src.arena_betting.infrastructure.locks import BattleLockRegistry


@pytest.fixture
def policy() -> BettingPolicy:
    """Reference betting policy, independent of the local .env."""
    return BettingPolicy(
        lock_window=timedelta(minutes=2),
        immediate_fee_rate=Decimal("0.01"),
        first_bet_cap=Decimal("1000"),
        bootstrap_liquidity=Decimal("100"),
    )


@pytest.fixture
def locks() -> BattleLockRegistry:
    """Fresh lock registry per test so no lock outlives its event loop."""
    return BattleLockRegistry()
