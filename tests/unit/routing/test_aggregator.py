"""Tests for best-route selection."""

import pytest

from swapquote.amm.base import Quote, SourceKind, SourceQuoter
from swapquote.config import QuoteConfig
from swapquote.errors import InvalidSlippage, NoPoolForTickSpacing, NoRouteFound, StaleRequest
from swapquote.models.token import Token
from swapquote.routing import QuoteSession, RouteAggregator, RouteRequest
from swapquote.routing.aggregator import build_source_quoters
from swapquote.slippage import min_output
from tests.helpers import (
    NATIVE,
    USDC,
    WIND,
    WSEI,
    make_registry,
    make_token,
    make_v2_pool,
    make_v3_pool,
)

STUB_CONFIG = QuoteConfig(max_workers=2)


class StubQuoter(SourceQuoter):
    """Returns a fixed output, None, or raises, and tags quotes with a label."""

    def __init__(self, kind, amount_out=None, label="stub", error=None, on_quote=None):
        self.kind = kind
        self.amount_out = amount_out
        self.label = label
        self.error = error
        self.on_quote = on_quote

    def quote(self, request):
        if self.on_quote is not None:
            self.on_quote()
        if self.error is not None:
            raise self.error
        if self.amount_out is None:
            return None
        return Quote(
            kind=self.kind,
            token_in=request.token_in.address,
            token_out=request.token_out.address,
            amount_in=request.amount_in,
            amount_out=self.amount_out,
            pool_addresses=(self.label,),
        )


def stub_aggregator(*quoters):
    return RouteAggregator(make_registry(), config=STUB_CONFIG, quoters=quoters)


class TestSelection:
    """Tests for choosing among quotes."""

    def test_largest_output_wins(self):
        """The source with the most output is chosen."""
        aggregator = stub_aggregator(
            StubQuoter(SourceKind.V3_DIRECT, 100, "a"),
            StubQuoter(SourceKind.V2_STABLE, 101, "b"),
        )
        route = aggregator.best_route(WSEI, USDC, 10**18)
        assert route.kind == SourceKind.V2_STABLE
        assert route.amount_out == 101

    def test_ties_prefer_v3_direct(self):
        """Equal outputs go to the higher-priority source kind."""
        aggregator = stub_aggregator(
            StubQuoter(SourceKind.V2_VOLATILE, 100, "volatile"),
            StubQuoter(SourceKind.V3_DIRECT, 100, "direct"),
            StubQuoter(SourceKind.V2_STABLE, 99, "stable"),
        )
        assert aggregator.best_route(WSEI, USDC, 10**18).kind == SourceKind.V3_DIRECT

    def test_tie_order_between_v2_and_multi_hop(self):
        """Volatile beats stable beats multi-hop on equal output."""
        aggregator = stub_aggregator(
            StubQuoter(SourceKind.V3_MULTI_HOP, 100, "multi"),
            StubQuoter(SourceKind.V2_STABLE, 100, "stable"),
        )
        assert aggregator.best_route(WSEI, USDC, 10**18).kind == SourceKind.V2_STABLE

    def test_same_kind_ties_use_registration_order(self):
        """Among identical kinds and outputs the first registered wins."""
        aggregator = stub_aggregator(
            StubQuoter(SourceKind.V3_DIRECT, 100, "first"),
            StubQuoter(SourceKind.V3_DIRECT, 100, "second"),
        )
        for _ in range(5):
            route = aggregator.best_route(WSEI, USDC, 10**18)
            assert route.quote.pool_addresses == ("first",)

    def test_failing_sources_are_skipped(self):
        """Sources raising QuoteError or returning None do not block others."""
        aggregator = stub_aggregator(
            StubQuoter(SourceKind.V3_DIRECT, error=NoPoolForTickSpacing(WSEI, USDC, 1)),
            StubQuoter(SourceKind.V2_STABLE),
            StubQuoter(SourceKind.V2_VOLATILE, 7, "volatile"),
        )
        route = aggregator.best_route(WSEI, USDC, 10**18)
        assert route.quote.pool_addresses == ("volatile",)

    def test_no_route(self):
        """No quotes at all raises NoRouteFound."""
        aggregator = stub_aggregator(
            StubQuoter(SourceKind.V3_DIRECT, error=NoPoolForTickSpacing(WSEI, USDC, 1)),
            StubQuoter(SourceKind.V2_VOLATILE),
        )
        with pytest.raises(NoRouteFound) as exc_info:
            aggregator.best_route(WSEI, USDC, 10**18)
        assert exc_info.value.token_in == WSEI

    def test_unexpected_errors_propagate(self):
        """Errors outside QuoteError are not swallowed."""
        aggregator = stub_aggregator(StubQuoter(SourceKind.V2_VOLATILE, error=RuntimeError("bug")))
        with pytest.raises(RuntimeError):
            aggregator.best_route(WSEI, USDC, 10**18)


class TestInputs:
    """Tests for request validation and token handling."""

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_amount(self, amount):
        """Amounts must be positive."""
        with pytest.raises(ValueError):
            stub_aggregator().best_route(WSEI, USDC, amount)

    def test_same_token(self):
        """A token cannot be routed to itself."""
        with pytest.raises(ValueError):
            stub_aggregator().best_route(USDC, USDC, 1)

    def test_unknown_token(self):
        """Addresses missing from the registry are rejected."""
        with pytest.raises(ValueError):
            stub_aggregator().best_route("0x" + "12" * 20, USDC, 1)

    def test_wrap_short_circuit(self):
        """Native -> wrapped native is a 1:1 wrap without asking any source."""
        calls = []
        aggregator = stub_aggregator(
            StubQuoter(SourceKind.V3_DIRECT, 10**30, on_quote=lambda: calls.append(1))
        )
        route = aggregator.best_route(NATIVE, WSEI, 5 * 10**18)
        assert route.kind == SourceKind.WRAP
        assert route.amount_out == 5 * 10**18
        assert calls == []

    def test_native_mapped_to_wrapped(self, market_registry):
        """Native input is quoted as the wrapped native token."""
        route = RouteAggregator(market_registry).best_route(NATIVE, USDC, 10**18)
        assert route.quote.token_in == WSEI

    def test_native_to_wrapped_via_token_objects(self):
        """Token objects are accepted as well as addresses."""
        route = stub_aggregator().best_route(make_token(WSEI), make_token(NATIVE), 3)
        assert route.kind == SourceKind.WRAP

    def test_placeholder_address_counts_as_native(self):
        """The native placeholder address wraps even without the native flag."""
        native = Token(address=NATIVE, decimals=18)
        assert not native.is_native
        route = stub_aggregator().best_route(native, make_token(WSEI), 7)
        assert route.kind == SourceKind.WRAP
        assert route.amount_out == 7

    @pytest.mark.parametrize("slippage_bps", [-1, 10_000, True])
    def test_invalid_slippage_rejected_before_quoting(self, slippage_bps):
        """A bad tolerance fails before any source is asked for a quote."""
        calls = []
        aggregator = stub_aggregator(
            StubQuoter(SourceKind.V2_VOLATILE, 100, on_quote=lambda: calls.append(1))
        )
        request = RouteRequest(
            make_token(WSEI), make_token(USDC), 10**18, slippage_bps=slippage_bps
        )
        with pytest.raises(InvalidSlippage):
            aggregator.quote(request)
        assert calls == []


class TestStaleness:
    """Tests for superseded aggregations."""

    def test_stale_before_start(self):
        """A ticket superseded before quoting raises StaleRequest."""
        aggregator = stub_aggregator(StubQuoter(SourceKind.V2_VOLATILE, 1))
        session = QuoteSession(aggregator, debounce_seconds=0)
        ticket = session.new_ticket()
        session.cancel()
        with pytest.raises(StaleRequest):
            aggregator.best_route(WSEI, USDC, 10**18, ticket=ticket)

    def test_stale_during_aggregation(self):
        """A ticket superseded while sources run raises StaleRequest."""
        aggregator = stub_aggregator()
        session = QuoteSession(aggregator, debounce_seconds=0)
        aggregator.quoters = [StubQuoter(SourceKind.V2_VOLATILE, 1, on_quote=session.cancel)]
        ticket = session.new_ticket()
        with pytest.raises(StaleRequest):
            aggregator.best_route(WSEI, USDC, 10**18, ticket=ticket)

    def test_current_ticket_completes(self):
        """A ticket that stays current gets its route."""
        aggregator = stub_aggregator(StubQuoter(SourceKind.V2_VOLATILE, 1))
        ticket = QuoteSession(aggregator, debounce_seconds=0).new_ticket()
        assert aggregator.best_route(WSEI, USDC, 10**18, ticket=ticket).amount_out == 1


class TestMarket:
    """End-to-end selection over the sample market with the default sources."""

    def test_default_quoter_set(self):
        """One direct quoter per spacing, then both V2 curves, then multi-hop."""
        kinds = [q.kind for q in build_source_quoters(QuoteConfig(tick_spacings=(1, 100)))]
        assert kinds == [
            SourceKind.V3_DIRECT,
            SourceKind.V3_DIRECT,
            SourceKind.V2_VOLATILE,
            SourceKind.V2_STABLE,
            SourceKind.V3_MULTI_HOP,
        ]

    def test_v3_direct_beats_v2(self, market_registry):
        """The 4.5 bps pool beats the 30 bps V2 pool at a similar price."""
        route = RouteAggregator(market_registry).best_route(WSEI, USDC, 10**18)
        assert route.kind == SourceKind.V3_DIRECT
        assert route.quote.tick_spacing == 100
        assert route.amount_out > 1_992_013

    def test_empty_v3_pool_loses_to_v2(self):
        """A zero-liquidity pool priced above V2 does not win the route."""
        registry = make_registry(
            v2_pools=[make_v2_pool(WSEI, 1000 * 10**18, USDC, 2000 * 10**6)],
            v3_pools=[make_v3_pool(WSEI, USDC, 100, tick=269400, liquidity=0)],
        )
        route = RouteAggregator(registry).best_route(WSEI, USDC, 10**18)
        assert route.kind == SourceKind.V2_VOLATILE
        assert route.amount_out < 1_997_542

    def test_multi_hop_only_path(self, market_registry):
        """WIND reaches USDC only through WSEI."""
        route = RouteAggregator(market_registry).best_route(WIND, USDC, 10**18)
        assert route.kind == SourceKind.V3_MULTI_HOP
        assert route.is_multihop
        assert [hop.token_out for hop in route.hops] == [WSEI, USDC]

    def test_quote_decision(self, market_registry):
        """quote() guards the winner with the default tolerance and lists every quote."""
        aggregator = RouteAggregator(market_registry)
        decision = aggregator.quote(RouteRequest(make_token(WSEI), make_token(USDC), 10**18))
        assert decision.minimum.slippage_bps == 50
        assert decision.amount_out_min == min_output(decision.route.amount_out, 50)
        assert [q.kind for q in decision.quotes] == [SourceKind.V3_DIRECT, SourceKind.V2_VOLATILE]

    def test_quote_explicit_slippage(self, market_registry):
        """A request's own tolerance overrides the default."""
        aggregator = RouteAggregator(market_registry)
        request = RouteRequest(make_token(USDC), make_token(WSEI), 10**6, slippage_bps=0)
        decision = aggregator.quote(request)
        assert decision.amount_out_min == decision.route.amount_out
