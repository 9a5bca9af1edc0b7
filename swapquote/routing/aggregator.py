"""Best-route selection across every configured liquidity source.

RouteAggregator fans a request out to its source quoters on a thread pool,
drops sources that cannot quote, and picks the largest output. Outputs are
compared in whole-token units as high-precision Decimals. Equal outputs are
broken by source kind (V3 direct, V2 volatile, V2 stable, V3 multi-hop) and
then by registration order, so the choice is deterministic regardless of
which thread finishes first.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING

import structlog

from swapquote.amm.base import Quote, QuoteRequest, SourceKind, SourceQuoter
from swapquote.amm.concentrated import V3DirectQuoter, V3MultiHopQuoter, V3Quoter
from swapquote.amm.v2 import V2StableQuoter, V2VolatileQuoter
from swapquote.amm.wrap import WrapQuoter, is_native_token
from swapquote.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from swapquote.constants import NATIVE_TOKEN
from swapquote.decimal_utils import to_human
from swapquote.errors import NoRouteFound, QuoteError, StaleRequest
from swapquote.models.token import Token
from swapquote.pools.registry import SnapshotRegistry
from swapquote.routing.types import Route, RouteDecision, RouteRequest
from swapquote.slippage import check_slippage_bps, guard_route

if TYPE_CHECKING:
    from swapquote.routing.session import RequestTicket

logger = structlog.get_logger()

# Lower wins on equal output
SOURCE_PRIORITY: dict[SourceKind, int] = {
    SourceKind.WRAP: 0,
    SourceKind.V3_DIRECT: 1,
    SourceKind.V2_VOLATILE: 2,
    SourceKind.V2_STABLE: 3,
    SourceKind.V3_MULTI_HOP: 4,
}


def build_source_quoters(
    config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
    v3_quoter: V3Quoter | None = None,
) -> list[SourceQuoter]:
    """Create the default quoter set: one V3 direct quoter per tick spacing,
    both V2 curves, and V3 multi-hop."""
    quoters: list[SourceQuoter] = [
        V3DirectQuoter(tick_spacing, v3_quoter) for tick_spacing in config.tick_spacings
    ]
    quoters.append(V2VolatileQuoter())
    quoters.append(V2StableQuoter())
    quoters.append(V3MultiHopQuoter(config.tick_spacings, config.intermediates, v3_quoter))
    return quoters


class RouteAggregator:
    """Selects the best route for exact-input swaps over one snapshot."""

    def __init__(
        self,
        registry: SnapshotRegistry,
        config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
        quoters: Sequence[SourceQuoter] | None = None,
        v3_quoter: V3Quoter | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            registry: Tokens and pools to quote against
            config: Routing configuration
            quoters: Source quoters in registration order. Defaults to
                build_source_quoters(config, v3_quoter).
            v3_quoter: On-chain quoter for the default V3 sources
        """
        self.registry = registry
        self.config = config
        self.quoters = (
            list(quoters) if quoters is not None else build_source_quoters(config, v3_quoter)
        )
        self.wrap_quoter = WrapQuoter(config.wrapped_native)

    def resolve_token(self, token: Token | str) -> Token:
        """Look up a token by address, or pass a Token through.

        Raises:
            ValueError: If the address is not in the registry
        """
        if isinstance(token, Token):
            return token
        if token.lower() == NATIVE_TOKEN:
            return Token(address=NATIVE_TOKEN, decimals=18, symbol="SEI", is_native=True)
        found = self.registry.get_token(token)
        if found is None:
            raise ValueError(f"Unknown token: {token}")
        return found

    def _erc20(self, token: Token) -> Token:
        """Map the native currency to the wrapped native token."""
        if not is_native_token(token):
            return token
        wrapped = self.registry.get_token(self.config.wrapped_native)
        if wrapped is not None:
            return wrapped
        return Token(address=self.config.wrapped_native, decimals=token.decimals)

    def best_route(
        self,
        token_in: Token | str,
        token_out: Token | str,
        amount_in: int,
        ticket: RequestTicket | None = None,
    ) -> Route:
        """Find the route with the largest output.

        Raises:
            ValueError: If amount_in is not positive or both sides are the same token
            NoRouteFound: If no source returns a quote
            StaleRequest: If ticket is superseded before aggregation finishes
        """
        route, _ = self._aggregate(
            self.resolve_token(token_in), self.resolve_token(token_out), amount_in, ticket
        )
        return route

    def quote(self, request: RouteRequest, ticket: RequestTicket | None = None) -> RouteDecision:
        """Select the best route and guard it with the slippage tolerance.

        Raises:
            InvalidSlippage: If the tolerance is outside [0, 10000)
            NoRouteFound: If no source returns a quote
            StaleRequest: If ticket is superseded before aggregation finishes
        """
        slippage_bps = (
            request.slippage_bps
            if request.slippage_bps is not None
            else self.config.default_slippage_bps
        )
        check_slippage_bps(slippage_bps)
        route, quotes = self._aggregate(
            request.token_in, request.token_out, request.amount_in, ticket
        )
        return RouteDecision(
            route=route,
            minimum=guard_route(route, slippage_bps),
            quotes=quotes,
        )

    def _aggregate(
        self,
        token_in: Token,
        token_out: Token,
        amount_in: int,
        ticket: RequestTicket | None,
    ) -> tuple[Route, tuple[Quote, ...]]:
        if amount_in <= 0:
            raise ValueError(f"Amount in must be positive: {amount_in}")

        wrap_request = QuoteRequest(token_in, token_out, amount_in, self.registry)
        if self.wrap_quoter.applies(wrap_request):
            wrap_quote = self.wrap_quoter.quote(wrap_request)
            if wrap_quote is not None:
                logger.debug("route_wrap", token_in=token_in.address, token_out=token_out.address)
                return Route.from_quote(wrap_quote), (wrap_quote,)

        erc20_in = self._erc20(token_in)
        erc20_out = self._erc20(token_out)
        if erc20_in.address == erc20_out.address:
            raise ValueError(f"Cannot route a token to itself: {erc20_in.address}")

        request = QuoteRequest(erc20_in, erc20_out, amount_in, self.registry)
        results = self._collect(request, ticket)
        if not results:
            logger.info(
                "no_route_found",
                token_in=erc20_in.address,
                token_out=erc20_out.address,
                amount_in=amount_in,
            )
            raise NoRouteFound(erc20_in.address, erc20_out.address)

        decimals_out = erc20_out.decimals
        _, best = max(
            results,
            key=lambda item: (
                to_human(item[1].amount_out, decimals_out),
                -SOURCE_PRIORITY[item[1].kind],
                -item[0],
            ),
        )
        logger.info(
            "route_selected",
            source=best.kind.value,
            tick_spacings=best.tick_spacings,
            intermediate=best.intermediate,
            amount_in=amount_in,
            amount_out=best.amount_out,
            candidates=len(results),
        )
        quotes = tuple(quote for _, quote in sorted(results, key=lambda item: item[0]))
        return Route.from_quote(best), quotes

    def _collect(
        self, request: QuoteRequest, ticket: RequestTicket | None
    ) -> list[tuple[int, Quote]]:
        """Run every quoter concurrently; return (registration index, quote) pairs."""
        if ticket is not None and ticket.is_stale:
            raise StaleRequest("Request superseded before quoting started")

        executor = ThreadPoolExecutor(max_workers=max(1, self.config.max_workers))
        results: list[tuple[int, Quote]] = []
        try:
            pending: dict[Future[Quote | None], tuple[int, SourceQuoter]] = {
                executor.submit(quoter.quote, request): (index, quoter)
                for index, quoter in enumerate(self.quoters)
            }
            while pending:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    index, quoter = pending.pop(future)
                    try:
                        quote = future.result()
                    except QuoteError as e:
                        logger.debug("source_quote_skipped", source=quoter.name, error=str(e))
                        continue
                    if quote is not None:
                        results.append((index, quote))

                if ticket is not None and ticket.is_stale:
                    for future in pending:
                        future.cancel()
                    logger.debug("aggregation_superseded", pending=len(pending))
                    raise StaleRequest("Request superseded during aggregation")
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return results


__all__ = ["SOURCE_PRIORITY", "build_source_quoters", "RouteAggregator"]
