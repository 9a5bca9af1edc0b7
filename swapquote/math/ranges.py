"""Preset tick ranges for pegged pairs.

Pegged pairs (USDC/USDT and the like) sit at tick 0 give or take a few ticks,
so positions are opened over a symmetric band around it. Bands are aligned
outward to the pool's tick spacing so the aligned range always contains the
nominal one.
"""

from __future__ import annotations

from dataclasses import dataclass

from swapquote.constants import PEGGED_TOKENS
from swapquote.math.liquidity import PriceRange
from swapquote.math.tick_math import tick_to_price


@dataclass(frozen=True)
class RangePreset:
    name: str
    label: str
    tick_lower: int
    tick_upper: int

    def aligned(self, tick_spacing: int) -> tuple[int, int]:
        """Return (tick_lower, tick_upper) widened to multiples of tick_spacing."""
        if tick_spacing <= 0:
            raise ValueError(f"Tick spacing must be positive: {tick_spacing}")
        lower = (self.tick_lower // tick_spacing) * tick_spacing
        upper = -((-self.tick_upper) // tick_spacing) * tick_spacing
        return lower, upper

    def price_range(
        self, tick_spacing: int, token0_decimals: int, token1_decimals: int
    ) -> PriceRange:
        """Human price range covered by the aligned ticks."""
        lower, upper = self.aligned(tick_spacing)
        return PriceRange(
            tick_to_price(lower, token0_decimals, token1_decimals),
            tick_to_price(upper, token0_decimals, token1_decimals),
        )


PEGGED_RANGE_PRESETS: dict[str, RangePreset] = {
    "ultra_tight": RangePreset("ultra_tight", "Ultra Tight (±0.05%)", -50, 50),
    "tight": RangePreset("tight", "Tight (±0.1%)", -100, 100),
    "medium": RangePreset("medium", "Medium (±0.5%)", -500, 500),
    "wide": RangePreset("wide", "Wide (±1%)", -1000, 1000),
}

DEFAULT_PEGGED_PRESET = "tight"


def pegged_range_ticks(
    preset: str = DEFAULT_PEGGED_PRESET, tick_spacing: int = 50
) -> tuple[int, int]:
    """Aligned (tick_lower, tick_upper) for a named pegged-pair preset.

    Raises:
        KeyError: If the preset name is unknown
    """
    try:
        config = PEGGED_RANGE_PRESETS[preset]
    except KeyError:
        raise KeyError(
            f"Unknown range preset {preset!r}; expected one of {sorted(PEGGED_RANGE_PRESETS)}"
        ) from None
    return config.aligned(tick_spacing)


def is_pegged_token(address: str) -> bool:
    return address.lower() in PEGGED_TOKENS


def is_pegged_pair(token_a: str, token_b: str) -> bool:
    """True when both tokens are known stablecoins, so the pegged presets apply."""
    return is_pegged_token(token_a) and is_pegged_token(token_b)


__all__ = [
    "RangePreset",
    "PEGGED_RANGE_PRESETS",
    "DEFAULT_PEGGED_PRESET",
    "pegged_range_ticks",
    "is_pegged_token",
    "is_pegged_pair",
]
