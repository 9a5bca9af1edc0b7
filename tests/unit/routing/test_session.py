"""Tests for debounced quote sessions."""

import asyncio

from swapquote.amm.base import SourceKind
from swapquote.routing import QuoteSession, RouteAggregator, RouteRequest
from tests.helpers import USDC, WSEI, make_token


def request(amount):
    return RouteRequest(make_token(WSEI), make_token(USDC), amount)


class TestQuoteSession:
    """Tests for QuoteSession."""

    def test_request_publishes(self, market_registry):
        """A lone request returns its decision and becomes latest."""
        session = QuoteSession(RouteAggregator(market_registry), debounce_seconds=0)
        decision = asyncio.run(session.request(request(10**18)))
        assert decision is not None
        assert decision.route.kind == SourceKind.V3_DIRECT
        assert session.latest is decision

    def test_newer_request_supersedes(self, market_registry):
        """A request overtaken during its debounce returns None."""
        session = QuoteSession(RouteAggregator(market_registry), debounce_seconds=0.05)

        async def scenario():
            first = asyncio.create_task(session.request(request(10**18)))
            await asyncio.sleep(0)
            second = await session.request(request(2 * 10**18))
            return await first, second

        first, second = asyncio.run(scenario())
        assert first is None
        assert second is not None
        assert second.route.amount_in == 2 * 10**18
        assert session.latest is second

    def test_tickets_go_stale(self, market_registry):
        """Each new ticket supersedes the previous one."""
        session = QuoteSession(RouteAggregator(market_registry))
        first = session.new_ticket()
        assert not first.is_stale
        second = session.new_ticket()
        assert first.is_stale
        assert not second.is_stale
        session.cancel()
        assert second.is_stale

    def test_default_debounce_from_config(self, market_registry):
        """Without an override the aggregator's config sets the debounce."""
        session = QuoteSession(RouteAggregator(market_registry))
        assert session.debounce_seconds == 0.3
