"""Conversions between raw integer token amounts and decimal strings."""

from __future__ import annotations

import decimal
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from swapquote.decimal_utils import DECIMAL_HIGH_PREC_CONTEXT


def parse_units(value: str | int | Decimal, decimals: int) -> int:
    """Parse a human amount like "1.5" into raw units.

    Fraction digits beyond ``decimals`` are rounded half up.

    Raises:
        ValueError: If value is not a non-negative finite number
    """
    if isinstance(value, float):
        raise ValueError("Pass amounts as strings or Decimals to avoid float rounding")
    try:
        amount = Decimal(value.strip()) if isinstance(value, str) else Decimal(value)
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Amount must be a non-negative number: {value!r}")

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        raw = (amount * (Decimal(10) ** decimals)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(raw)


def format_units(value: int, decimals: int) -> str:
    """Render raw units exactly, without trailing zeros ("1500000", 6 -> "1.5")."""
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)
    if decimals == 0 or fraction == 0:
        return f"{sign}{whole}"
    fraction_text = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{fraction_text}"


def format_amount(value: float | Decimal, display_decimals: int = 6) -> str:
    """Round for display and trim trailing zeros; non-finite values show as "0"."""
    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except InvalidOperation:
        return "0"
    if not amount.is_finite():
        return "0"

    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        fixed = amount.quantize(Decimal(1).scaleb(-display_decimals), rounding=ROUND_HALF_UP)
    text = f"{fixed:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("", "-0"):
        return "0"
    return text


__all__ = ["parse_units", "format_units", "format_amount"]
