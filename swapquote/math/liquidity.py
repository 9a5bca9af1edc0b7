"""Token amounts for a concentrated-liquidity position over a price range.

Float math, intended for sizing deposits from one user-entered amount.
Prices are token1 per token0 in human units. The pool contract does the
exact accounting when the position is minted; see
``swapquote.slippage.position_min_amounts`` for the integer minimums.

Within a range [Pa, Pb] at current price P:

    L  = a0 * sqrt(P) * sqrt(Pb) / (sqrt(Pb) - sqrt(P))
    a1 = L * (sqrt(P) - sqrt(Pa))

and the reverse direction

    L  = a1 / (sqrt(P) - sqrt(Pa))
    a0 = L * (sqrt(Pb) - sqrt(P)) / (sqrt(P) * sqrt(Pb))

An infinite upper bound is a full-range position; the formulas above are
replaced by their limits as Pb -> inf.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from swapquote.errors import DegenerateRange, DivisionByZero, InvalidPrice


def _check_price(name: str, value: float, *, allow_inf: bool = True) -> None:
    if math.isnan(value) or value < 0:
        raise InvalidPrice(f"{name} price must be a non-negative number: {value}")
    if not allow_inf and math.isinf(value):
        raise InvalidPrice(f"{name} price must be finite: {value}")


@dataclass(frozen=True)
class PriceRange:
    """A price interval, normalized so that lower < upper.

    Bounds given in either order are swapped. ``upper`` may be ``math.inf``.

    Raises:
        InvalidPrice: If a bound is negative or NaN
        DegenerateRange: If both bounds are equal
    """

    lower: float
    upper: float

    def __post_init__(self) -> None:
        _check_price("Lower", self.lower)
        _check_price("Upper", self.upper)
        if self.lower == self.upper:
            raise DegenerateRange(f"Price range is empty: [{self.lower}, {self.upper}]")
        if self.lower > self.upper:
            lower, upper = self.upper, self.lower
            object.__setattr__(self, "lower", lower)
            object.__setattr__(self, "upper", upper)

    @property
    def is_full_range(self) -> bool:
        return self.lower == 0 and math.isinf(self.upper)


@dataclass(frozen=True)
class RangePosition:
    """Current price plus the range a position is opened over."""

    current_price: float
    price_range: PriceRange

    def __post_init__(self) -> None:
        _check_price("Current", self.current_price, allow_inf=False)

    @classmethod
    def of(cls, current_price: float, lower: float, upper: float) -> RangePosition:
        return cls(current_price, PriceRange(lower, upper))


@dataclass(frozen=True)
class RequiredTokens:
    """Which tokens a position needs at the current price."""

    needs_token0: bool
    needs_token1: bool
    single_sided: bool


@dataclass(frozen=True)
class PositionAmounts:
    """Human-unit token amounts for a position."""

    amount0: float
    amount1: float


def required_tokens(current: float, lower: float, upper: float) -> RequiredTokens:
    """Determine which tokens a position needs.

    Below the range a position holds only token0; above it only token1.
    """
    position = RangePosition.of(current, lower, upper)
    return _required(position)


def _required(position: RangePosition) -> RequiredTokens:
    price_range = position.price_range
    if position.current_price <= price_range.lower:
        return RequiredTokens(needs_token0=True, needs_token1=False, single_sided=True)
    if position.current_price >= price_range.upper:
        return RequiredTokens(needs_token0=False, needs_token1=True, single_sided=True)
    return RequiredTokens(needs_token0=True, needs_token1=True, single_sided=False)


def amount1_from_amount0(amount0: float, current: float, lower: float, upper: float) -> float:
    """Calculate the token1 amount matching amount0 of token0.

    Returns 0 for a non-positive amount or when the current price is outside
    the range.

    Raises:
        InvalidPrice: If a price is negative or NaN
        DegenerateRange: If lower == upper
        DivisionByZero: If sqrt(upper) and sqrt(current) coincide
    """
    return _amount1_from_amount0(amount0, RangePosition.of(current, lower, upper))


def _amount1_from_amount0(amount0: float, position: RangePosition) -> float:
    if amount0 <= 0:
        return 0.0
    current = position.current_price
    price_range = position.price_range
    if current <= price_range.lower or current >= price_range.upper:
        return 0.0

    sqrt_p = math.sqrt(current)
    sqrt_pa = math.sqrt(price_range.lower)

    if math.isinf(price_range.upper):
        liquidity = amount0 * sqrt_p
    else:
        sqrt_pb = math.sqrt(price_range.upper)
        if sqrt_pb == sqrt_p:
            raise DivisionByZero("sqrt(upper) - sqrt(current) is zero")
        liquidity = amount0 * (sqrt_p * sqrt_pb) / (sqrt_pb - sqrt_p)

    return liquidity * (sqrt_p - sqrt_pa)


def amount0_from_amount1(amount1: float, current: float, lower: float, upper: float) -> float:
    """Calculate the token0 amount matching amount1 of token1.

    Returns 0 for a non-positive amount or when the current price is outside
    the range.

    Raises:
        InvalidPrice: If a price is negative or NaN
        DegenerateRange: If lower == upper
        DivisionByZero: If sqrt(current) and sqrt(lower) coincide
    """
    return _amount0_from_amount1(amount1, RangePosition.of(current, lower, upper))


def _amount0_from_amount1(amount1: float, position: RangePosition) -> float:
    if amount1 <= 0:
        return 0.0
    current = position.current_price
    price_range = position.price_range
    if current <= price_range.lower or current >= price_range.upper:
        return 0.0

    sqrt_p = math.sqrt(current)
    sqrt_pa = math.sqrt(price_range.lower)
    if sqrt_p == sqrt_pa:
        raise DivisionByZero("sqrt(current) - sqrt(lower) is zero")

    liquidity = amount1 / (sqrt_p - sqrt_pa)
    if math.isinf(price_range.upper):
        return liquidity / sqrt_p

    sqrt_pb = math.sqrt(price_range.upper)
    return liquidity * (sqrt_pb - sqrt_p) / (sqrt_p * sqrt_pb)


def optimal_amounts(
    input_amount: float,
    input_is_token0: bool,
    position: RangePosition | tuple[float, float, float],
) -> PositionAmounts:
    """Complete a deposit from the amount the user entered on one side.

    Args:
        input_amount: Amount entered, in human units
        input_is_token0: Whether the entered amount is token0
        position: RangePosition, or a (current, lower, upper) tuple

    Returns:
        Amounts of both tokens. Entering the token a single-sided range does
        not need gives (0, 0).
    """
    if not isinstance(position, RangePosition):
        position = RangePosition.of(*position)
    required = _required(position)

    if input_is_token0:
        if not required.needs_token0:
            return PositionAmounts(0.0, 0.0)
        if required.single_sided:
            return PositionAmounts(input_amount, 0.0)
        return PositionAmounts(input_amount, _amount1_from_amount0(input_amount, position))

    if not required.needs_token1:
        return PositionAmounts(0.0, 0.0)
    if required.single_sided:
        return PositionAmounts(0.0, input_amount)
    return PositionAmounts(_amount0_from_amount1(input_amount, position), input_amount)


__all__ = [
    "PriceRange",
    "RangePosition",
    "RequiredTokens",
    "PositionAmounts",
    "required_tokens",
    "amount1_from_amount0",
    "amount0_from_amount1",
    "optimal_amounts",
]
