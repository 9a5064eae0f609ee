"""Market-making constants (reference values).

Fee split: the platform keeps F_PLATFORM, the player incentive pool gets
F_PLAYER; together they are the house edge F_HOUSE applied to every price.
"""

from decimal import Decimal

F_PLATFORM = Decimal("0.0345")  # 3.45%
F_PLAYER = Decimal("0.02")      # 2.00%
F_HOUSE = F_PLATFORM + F_PLAYER  # 5.45%

MIN_ODDS = Decimal("1.05")
MAX_ODDS_TWO_SIDED = Decimal("20.0")
MAX_ODDS_MULTI_SIDED = Decimal("100.0")

SAFETY_BUFFER = Decimal("0.9")

# Counter-liquidity assumed for the very first bet on an empty market
BOOTSTRAP_LIQUIDITY = Decimal("100")

# Smoothing weight s = max(SMOOTHING_FLOOR, SMOOTHING_START - total / SMOOTHING_DECAY)
SMOOTHING_FLOOR = Decimal("0.05")
SMOOTHING_START = Decimal("0.3")
SMOOTHING_DECAY = Decimal("50")

# Floor on the inverse-volume weight of a battle-royale participant
MIN_INVERSE_WEIGHT = Decimal("0.1")
