"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass

from swapquote.amm.base import Quote, SourceKind
from swapquote.models.token import Token
from swapquote.slippage import MinimumOutput


@dataclass(frozen=True)
class RouteRequest:
    """An exact-input swap to route.

    slippage_bps of None uses the aggregator's configured default.
    """

    token_in: Token
    token_out: Token
    amount_in: int
    slippage_bps: int | None = None


@dataclass(frozen=True)
class Hop:
    """One pool traversal of a route.

    Intermediate amounts of multi-hop routes are not reported by the quoter,
    so the inner sides are None.
    """

    pool: str
    token_in: str
    token_out: str
    amount_in: int | None
    amount_out: int | None
    tick_spacing: int | None = None


@dataclass(frozen=True)
class Route:
    """The selected quote and the hops that realize it."""

    quote: Quote
    hops: tuple[Hop, ...]

    @property
    def kind(self) -> SourceKind:
        return self.quote.kind

    @property
    def amount_in(self) -> int:
        return self.quote.amount_in

    @property
    def amount_out(self) -> int:
        return self.quote.amount_out

    @property
    def is_multihop(self) -> bool:
        """Check if this is a multi-hop route."""
        return len(self.hops) > 1

    @classmethod
    def from_quote(cls, quote: Quote) -> Route:
        if quote.intermediate is not None and len(quote.pool_addresses) == 2:
            spacings = quote.tick_spacings or (None, None)
            return cls(
                quote=quote,
                hops=(
                    Hop(
                        pool=quote.pool_addresses[0],
                        token_in=quote.token_in,
                        token_out=quote.intermediate,
                        amount_in=quote.amount_in,
                        amount_out=None,
                        tick_spacing=spacings[0],
                    ),
                    Hop(
                        pool=quote.pool_addresses[1],
                        token_in=quote.intermediate,
                        token_out=quote.token_out,
                        amount_in=None,
                        amount_out=quote.amount_out,
                        tick_spacing=spacings[1],
                    ),
                ),
            )

        pool = quote.pool_addresses[0] if quote.pool_addresses else ""
        return cls(
            quote=quote,
            hops=(
                Hop(
                    pool=pool,
                    token_in=quote.token_in,
                    token_out=quote.token_out,
                    amount_in=quote.amount_in,
                    amount_out=quote.amount_out,
                    tick_spacing=quote.tick_spacing,
                ),
            ),
        )


@dataclass(frozen=True)
class RouteDecision:
    """Outcome of one aggregation: the winner, its guard, and every quote seen."""

    route: Route
    minimum: MinimumOutput
    quotes: tuple[Quote, ...]

    @property
    def amount_out_min(self) -> int:
        return self.minimum.amount_out_min


__all__ = ["RouteRequest", "Hop", "Route", "RouteDecision"]
