"""Concentrated-liquidity constants: fee tiers keyed by tick spacing and quoter signatures."""

from swapquote.constants import (
    MIXED_ROUTE_QUOTER_ADDRESS,
    QUOTER_V2_ADDRESS,
    V3_DEFAULT_FEE_PIPS,
    V3_TICK_SPACING_FEE_PIPS,
    V3_TICK_SPACINGS,
)

# Pools are identified by tick spacing, not fee; the quoter takes an int24
QUOTE_EXACT_INPUT_SINGLE_SIGNATURE = (
    "quoteExactInputSingle((address,address,uint256,int24,uint160))"
)
QUOTE_EXACT_INPUT_SIGNATURE = "quoteExactInput(bytes,uint256)"

# Path encoding widths
PATH_ADDRESS_SIZE = 20
PATH_TICK_SPACING_SIZE = 3

# int24 bounds for tick spacings in paths and calldata
INT24_MIN = -(2**23)
INT24_MAX = 2**23 - 1


def fee_pips_for_tick_spacing(tick_spacing: int) -> int:
    """Swap fee in pips for a tick spacing, falling back to the default tier."""
    return V3_TICK_SPACING_FEE_PIPS.get(tick_spacing, V3_DEFAULT_FEE_PIPS)


__all__ = [
    "V3_TICK_SPACINGS",
    "QUOTER_V2_ADDRESS",
    "MIXED_ROUTE_QUOTER_ADDRESS",
    "QUOTE_EXACT_INPUT_SINGLE_SIGNATURE",
    "QUOTE_EXACT_INPUT_SIGNATURE",
    "PATH_ADDRESS_SIZE",
    "PATH_TICK_SPACING_SIZE",
    "INT24_MIN",
    "INT24_MAX",
    "fee_pips_for_tick_spacing",
]
