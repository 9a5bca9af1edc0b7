"""Tick/price conversions and range-liquidity sizing."""

from swapquote.math.liquidity import (
    PositionAmounts,
    PriceRange,
    RangePosition,
    RequiredTokens,
    amount0_from_amount1,
    amount1_from_amount0,
    optimal_amounts,
    required_tokens,
)
from swapquote.math.ranges import PEGGED_RANGE_PRESETS, RangePreset, pegged_range_ticks
from swapquote.math.tick_math import (
    nearest_usable_tick,
    price_to_tick,
    sqrt_price_x96_to_price,
    sqrt_price_x96_to_tick,
    tick_to_price,
    tick_to_sqrt_price_x96,
)

__all__ = [
    # Tick/price codec
    "tick_to_sqrt_price_x96",
    "sqrt_price_x96_to_tick",
    "sqrt_price_x96_to_price",
    "price_to_tick",
    "tick_to_price",
    "nearest_usable_tick",
    # Range liquidity
    "PriceRange",
    "RangePosition",
    "RequiredTokens",
    "PositionAmounts",
    "required_tokens",
    "amount1_from_amount0",
    "amount0_from_amount1",
    "optimal_amounts",
    # Presets
    "RangePreset",
    "PEGGED_RANGE_PRESETS",
    "pegged_range_ticks",
]
