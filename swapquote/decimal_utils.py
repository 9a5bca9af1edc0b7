"""Shared high-precision Decimal utilities for amount comparisons.

Raw token amounts go up to 10^77, so every Decimal operation on them runs
under a context wide enough to stay exact.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

# 78 digits covers every uint256 value (up to ~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)


def to_human(amount: int, decimals: int) -> Decimal:
    """Scale a raw integer amount to whole-token units."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return Decimal(amount) / (Decimal(10) ** decimals)


__all__ = ["DECIMAL_HIGH_PREC_CONTEXT", "to_human"]
