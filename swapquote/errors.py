"""Error classes for quoting and concentrated-liquidity math.

All errors are local, recoverable conditions. Each one also derives from the
closest builtin so callers can catch either the specific class or e.g.
``ValueError``.
"""


class QuoteError(Exception):
    """Base error for every quoting operation."""

    pass


class TickOutOfBounds(QuoteError, ValueError):
    """Tick lies outside [MIN_TICK, MAX_TICK]."""

    pass


class InvalidPrice(QuoteError, ValueError):
    """Price is zero, negative, NaN, or outside the representable sqrt range."""

    pass


class DegenerateRange(QuoteError, ValueError):
    """Price range has equal lower and upper bounds."""

    pass


class DivisionByZero(QuoteError, ArithmeticError):
    """A denominator in liquidity or integer math collapsed to zero."""

    pass


class NoPoolForTickSpacing(QuoteError, LookupError):
    """The factory has no concentrated-liquidity pool at the given tick spacing."""

    def __init__(self, token_a: str, token_b: str, tick_spacing: int) -> None:
        super().__init__(f"No pool for {token_a}/{token_b} at tick spacing {tick_spacing}")
        self.token_a = token_a
        self.token_b = token_b
        self.tick_spacing = tick_spacing


class NoRouteFound(QuoteError, LookupError):
    """No liquidity source returned a quote for the pair."""

    def __init__(self, token_in: str, token_out: str) -> None:
        super().__init__(f"No route found for {token_in} -> {token_out}")
        self.token_in = token_in
        self.token_out = token_out


class InvalidSlippage(QuoteError, ValueError):
    """Slippage tolerance must be in [0, 10000) basis points."""

    pass


class CurveDidNotConverge(QuoteError, ArithmeticError):
    """Newton iteration on the stable curve did not converge."""

    pass


class MalformedReply(QuoteError, ValueError):
    """An on-chain quoter reply could not be decoded."""

    pass


class StaleRequest(QuoteError):
    """The aggregation was superseded by a newer request."""

    pass


__all__ = [
    "QuoteError",
    "TickOutOfBounds",
    "InvalidPrice",
    "DegenerateRange",
    "DivisionByZero",
    "NoPoolForTickSpacing",
    "NoRouteFound",
    "InvalidSlippage",
    "CurveDidNotConverge",
    "MalformedReply",
    "StaleRequest",
]
