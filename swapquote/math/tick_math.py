"""Conversions between ticks, sqrt prices and human-readable prices.

Two numeric regimes live here on purpose:

- ``tick_to_sqrt_price_x96`` and ``sqrt_price_x96_to_tick`` work on exact
  Python ints and agree bit-for-bit with TickMath.getSqrtRatioAtTick, since
  their results are handed to contracts.
- ``price_to_tick`` and ``tick_to_price`` work on floats. They feed range
  inputs and display values, where a one-tick error is tolerable.

Prices are always token1 per token0 in raw units on-chain. The human price
helpers take ``is_token0_base`` to say which way round the caller quotes it.
"""

from __future__ import annotations

import math

from swapquote.constants import MAX_SQRT_RATIO, MAX_TICK, MIN_SQRT_RATIO, MIN_TICK, Q96
from swapquote.errors import InvalidPrice, TickOutOfBounds

# ln(1.0001), the log base of the tick grid
LOG_TICK_BASE = math.log(1.0001)

_MAX_UINT256 = 2**256 - 1

# sqrt(1.0001^-(2^i)) in Q128.128 for bit i of |tick|, i >= 1
_RATIO_MULTIPLIERS = (
    (0x2, 0xFFF97272373D413259A46990580E213A),
    (0x4, 0xFFF2E50F5F656932EF12357CF3C7FDCC),
    (0x8, 0xFFE5CACA7E10E4E61C3624EAA0941CD0),
    (0x10, 0xFFCB9843D60F6159C9DB58835C926644),
    (0x20, 0xFF973B41FA98C081472E6896DFB254C0),
    (0x40, 0xFF2EA16466C96A3843EC78B326B52861),
    (0x80, 0xFE5DEE046A99A2A811C461F1969C3053),
    (0x100, 0xFCBE86C7900A88AEDCFFC83B479AA3A4),
    (0x200, 0xF987A7253AC413176F2B074CF7815E54),
    (0x400, 0xF3392B0822B70005940C7A398E4B70F3),
    (0x800, 0xE7159475A2C29B7443B29C7FA6E889D9),
    (0x1000, 0xD097F3BDFD2022B8845AD8F792AA5825),
    (0x2000, 0xA9F746462D870FDF8A65DC1F90E061E5),
    (0x4000, 0x70D869A156D2A1B890BB3DF62BAF32F7),
    (0x8000, 0x31BE135F97D08FD981231505542FCFA6),
    (0x10000, 0x9AA508B5B7A84E1C677DE54F3E99BC9),
    (0x20000, 0x5D6AF8DEDB81196699C329225EE604),
    (0x40000, 0x2216E584F5FA1EA926041BEDFE98),
    (0x80000, 0x48A170391F7DC42444E8FA2),
)


def tick_to_sqrt_price_x96(tick: int) -> int:
    """Calculate sqrt(1.0001^tick) * 2^96 exactly as the pool contract does.

    Args:
        tick: Tick index in [MIN_TICK, MAX_TICK]

    Returns:
        sqrtPriceX96 as an unsigned Q64.96 integer

    Raises:
        TickOutOfBounds: If |tick| > MAX_TICK
    """
    abs_tick = abs(tick)
    if abs_tick > MAX_TICK:
        raise TickOutOfBounds(f"Tick {tick} out of bounds [{MIN_TICK}, {MAX_TICK}]")

    if abs_tick & 0x1:
        ratio = 0xFFFCB933BD6FAD37AA2D162D1A594001
    else:
        ratio = 0x100000000000000000000000000000000

    for bit, multiplier in _RATIO_MULTIPLIERS:
        if abs_tick & bit:
            ratio = (ratio * multiplier) >> 128

    if tick > 0:
        ratio = _MAX_UINT256 // ratio

    # Q128.128 -> Q64.96, rounding up so the result never undershoots the tick
    return (ratio >> 32) + (0 if ratio % (1 << 32) == 0 else 1)


def sqrt_price_x96_to_tick(sqrt_price_x96: int) -> int:
    """Return the greatest tick whose sqrt ratio is <= sqrt_price_x96.

    Bisects over ``tick_to_sqrt_price_x96``, so the answer is consistent with
    the exact forward conversion by construction.

    Raises:
        InvalidPrice: If sqrt_price_x96 is outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO)
    """
    if not MIN_SQRT_RATIO <= sqrt_price_x96 < MAX_SQRT_RATIO:
        raise InvalidPrice(
            f"sqrtPriceX96 {sqrt_price_x96} outside [{MIN_SQRT_RATIO}, {MAX_SQRT_RATIO})"
        )

    lo, hi = MIN_TICK, MAX_TICK
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if tick_to_sqrt_price_x96(mid) <= sqrt_price_x96:
            lo = mid
        else:
            hi = mid - 1
    return lo


def nearest_usable_tick(tick: int, tick_spacing: int) -> int:
    """Round a tick half-up to a multiple of tick_spacing, staying in bounds.

    Raises:
        TickOutOfBounds: If tick is outside [MIN_TICK, MAX_TICK]
        ValueError: If tick_spacing is not positive
    """
    if tick_spacing <= 0:
        raise ValueError(f"Tick spacing must be positive: {tick_spacing}")
    if not MIN_TICK <= tick <= MAX_TICK:
        raise TickOutOfBounds(f"Tick {tick} out of bounds [{MIN_TICK}, {MAX_TICK}]")

    rounded = ((2 * tick + tick_spacing) // (2 * tick_spacing)) * tick_spacing
    if rounded < MIN_TICK:
        return rounded + tick_spacing
    if rounded > MAX_TICK:
        return rounded - tick_spacing
    return rounded


def price_to_tick(
    price: float,
    token0_decimals: int,
    token1_decimals: int,
    tick_spacing: int,
    is_token0_base: bool = True,
) -> int:
    """Convert a human-readable price to the nearest usable tick.

    Args:
        price: Human price. token1 per token0 when is_token0_base, else
            token0 per token1
        token0_decimals: Decimals of token0 (lower address)
        token1_decimals: Decimals of token1 (higher address)
        tick_spacing: The pool's tick spacing
        is_token0_base: Whether token0 is the base token of ``price``

    Returns:
        Tick aligned to tick_spacing

    Raises:
        InvalidPrice: If price is not a positive finite number
    """
    if not math.isfinite(price) or price <= 0:
        raise InvalidPrice(f"Price must be positive and finite: {price}")

    pool_price = price if is_token0_base else 1 / price
    raw_price = pool_price * 10 ** (token1_decimals - token0_decimals)
    if not math.isfinite(raw_price) or raw_price <= 0:
        raise InvalidPrice(f"Price {price} is not representable for these decimals")

    raw_tick = math.floor(math.log(raw_price) / LOG_TICK_BASE)
    raw_tick = max(MIN_TICK, min(MAX_TICK, raw_tick))
    return nearest_usable_tick(raw_tick, tick_spacing)


def tick_to_price(
    tick: int,
    token0_decimals: int,
    token1_decimals: int,
    is_token0_base: bool = True,
) -> float:
    """Convert a tick to a human-readable price.

    Raises:
        TickOutOfBounds: If tick is outside [MIN_TICK, MAX_TICK]
    """
    if not MIN_TICK <= tick <= MAX_TICK:
        raise TickOutOfBounds(f"Tick {tick} out of bounds [{MIN_TICK}, {MAX_TICK}]")

    raw_price = 1.0001**tick
    price = raw_price * 10 ** (token0_decimals - token1_decimals)
    return price if is_token0_base else 1 / price


def sqrt_price_x96_to_price(
    sqrt_price_x96: int,
    token0_decimals: int,
    token1_decimals: int,
    is_token0_base: bool = True,
) -> float:
    """Convert a pool's sqrtPriceX96 to a human-readable price.

    Raises:
        InvalidPrice: If sqrt_price_x96 is not positive
    """
    if sqrt_price_x96 <= 0:
        raise InvalidPrice(f"sqrtPriceX96 must be positive: {sqrt_price_x96}")

    raw_price = (sqrt_price_x96 / Q96) ** 2
    price = raw_price * 10 ** (token0_decimals - token1_decimals)
    return price if is_token0_base else 1 / price


__all__ = [
    "LOG_TICK_BASE",
    "tick_to_sqrt_price_x96",
    "sqrt_price_x96_to_tick",
    "nearest_usable_tick",
    "price_to_tick",
    "tick_to_price",
    "sqrt_price_x96_to_price",
]
