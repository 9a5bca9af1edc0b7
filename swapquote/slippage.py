"""Slippage protection: minimum acceptable outputs.

All tolerances are integer basis points in [0, 10000). Minimums round up,
so the guarded amount is never looser than the tolerance asked for.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from swapquote.constants import BPS_DENOMINATOR
from swapquote.errors import InvalidSlippage
from swapquote.safe_int import S

if TYPE_CHECKING:
    from swapquote.routing.types import Route


@dataclass(frozen=True)
class MinimumOutput:
    """Quoted output together with the least output the caller will accept."""

    amount_out: int
    slippage_bps: int
    amount_out_min: int


def check_slippage_bps(slippage_bps: int) -> None:
    """Raise InvalidSlippage unless slippage_bps is an int in [0, 10000)."""
    if isinstance(slippage_bps, bool) or not isinstance(slippage_bps, int):
        raise InvalidSlippage(f"Slippage must be integer basis points: {slippage_bps!r}")
    if not 0 <= slippage_bps < BPS_DENOMINATOR:
        raise InvalidSlippage(
            f"Slippage must be in [0, {BPS_DENOMINATOR}) basis points: {slippage_bps}"
        )


def min_output(amount_out: int, slippage_bps: int) -> int:
    """Least acceptable output: amount_out * (10000 - bps) / 10000, rounded up.

    Raises:
        InvalidSlippage: If slippage_bps is outside [0, 10000)
        ValueError: If amount_out is negative
    """
    check_slippage_bps(slippage_bps)
    if amount_out < 0:
        raise ValueError(f"Output amount cannot be negative: {amount_out}")
    kept = S(amount_out) * S(BPS_DENOMINATOR - slippage_bps)
    return kept.ceiling_div(BPS_DENOMINATOR).value


def guard_route(route: Route, slippage_bps: int) -> MinimumOutput:
    """Attach a minimum output to a selected route."""
    amount_out = route.amount_out
    return MinimumOutput(
        amount_out=amount_out,
        slippage_bps=slippage_bps,
        amount_out_min=min_output(amount_out, slippage_bps),
    )


def position_min_amounts(amount0: int, amount1: int, slippage_bps: int) -> tuple[int, int]:
    """Minimum (amount0Min, amount1Min) for minting a position.

    Raises:
        InvalidSlippage: If slippage_bps is outside [0, 10000)
    """
    return min_output(amount0, slippage_bps), min_output(amount1, slippage_bps)


__all__ = [
    "MinimumOutput",
    "check_slippage_bps",
    "min_output",
    "guard_route",
    "position_min_amounts",
]
