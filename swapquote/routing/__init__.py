"""Route aggregation and request sessions."""

from swapquote.routing.aggregator import (
    SOURCE_PRIORITY,
    RouteAggregator,
    build_source_quoters,
)
from swapquote.routing.session import QuoteSession, RequestTicket
from swapquote.routing.types import Hop, Route, RouteDecision, RouteRequest

__all__ = [
    "RouteAggregator",
    "build_source_quoters",
    "SOURCE_PRIORITY",
    "QuoteSession",
    "RequestTicket",
    "RouteRequest",
    "Hop",
    "Route",
    "RouteDecision",
]
