"""Pricing models: one variant per battle kind, selected once per battle.

Each model answers two questions about a pool snapshot (participant id ->
volume, ordered by seat):
  - odds(pools): current decimal odds for every participant
  - opposing_volume(pools, participant_id): counter-liquidity backing a bet
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from src.arena_common.decimal_math import ZERO
from src.arena_common.enums import MarketKind
from src.arena_pricing.domain.constants import MAX_ODDS_MULTI_SIDED, MAX_ODDS_TWO_SIDED
from src.arena_pricing.domain.market_making import multi_sided_odds, two_sided_odds


class PricingModel(Protocol):
    kind: MarketKind
    max_odds: Decimal

    def odds(self, pools: Mapping[str, Decimal]) -> dict[str, Decimal]: ...

    def opposing_volume(
        self, pools: Mapping[str, Decimal], participant_id: str
    ) -> Decimal: ...


@dataclass(frozen=True)
class TwoSidedModel:
    kind: MarketKind = MarketKind.TEAM_BATTLE
    max_odds: Decimal = MAX_ODDS_TWO_SIDED

    def odds(self, pools: Mapping[str, Decimal]) -> dict[str, Decimal]:
        side_a, side_b = self._sides(pools)
        odds_a, odds_b = two_sided_odds(pools[side_a], pools[side_b])
        return {side_a: odds_a, side_b: odds_b}

    def opposing_volume(
        self, pools: Mapping[str, Decimal], participant_id: str
    ) -> Decimal:
        side_a, side_b = self._sides(pools)
        return pools[side_b] if participant_id == side_a else pools[side_a]

    @staticmethod
    def _sides(pools: Mapping[str, Decimal]) -> tuple[str, str]:
        if len(pools) != 2:
            raise ValueError(f"Team battle needs exactly 2 sides, got {len(pools)}")
        side_a, side_b = pools
        return side_a, side_b


@dataclass(frozen=True)
class MultiSidedModel:
    kind: MarketKind = MarketKind.BATTLE_ROYALE
    max_odds: Decimal = MAX_ODDS_MULTI_SIDED

    def odds(self, pools: Mapping[str, Decimal]) -> dict[str, Decimal]:
        return multi_sided_odds(pools)

    def opposing_volume(
        self, pools: Mapping[str, Decimal], participant_id: str
    ) -> Decimal:
        total = sum(pools.values(), ZERO)
        return total - pools.get(participant_id, ZERO)


_MODELS: dict[MarketKind, PricingModel] = {
    MarketKind.TEAM_BATTLE: TwoSidedModel(),
    MarketKind.BATTLE_ROYALE: MultiSidedModel(),
}


def model_for(kind: MarketKind | str) -> PricingModel:
    """The pricing model for a battle kind. The only dispatch on kind."""
    return _MODELS[MarketKind(kind)]
