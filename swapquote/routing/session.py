"""Request sessions: debouncing and superseding in-flight quotes.

Interactive callers fire a new request on every keystroke. A QuoteSession
numbers requests with a generation counter; starting a request supersedes all
earlier ones, and a superseded request never publishes its result.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field

import structlog

from swapquote.errors import StaleRequest
from swapquote.routing.aggregator import RouteAggregator
from swapquote.routing.types import RouteDecision, RouteRequest

logger = structlog.get_logger()


@dataclass(frozen=True)
class RequestTicket:
    """Handle for one request; stale once a newer request has started."""

    generation: int
    session: QuoteSession = field(repr=False, compare=False)

    @property
    def is_stale(self) -> bool:
        return self.session.generation != self.generation


class QuoteSession:
    """Serializes requests from one caller against one aggregator."""

    def __init__(self, aggregator: RouteAggregator, debounce_seconds: float | None = None) -> None:
        self.aggregator = aggregator
        self.debounce_seconds = (
            aggregator.config.debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.latest: RouteDecision | None = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    def new_ticket(self) -> RequestTicket:
        """Start a new request, superseding every earlier ticket."""
        with self._lock:
            self._generation += 1
            return RequestTicket(self._generation, self)

    def cancel(self) -> None:
        """Supersede whatever is in flight without starting a new request."""
        self.new_ticket()

    async def request(self, route_request: RouteRequest) -> RouteDecision | None:
        """Debounce, aggregate off the event loop, and publish if still current.

        Returns:
            The decision, or None if a newer request superseded this one

        Raises:
            NoRouteFound: If no source quotes the pair
            InvalidSlippage: If the tolerance is outside [0, 10000)
        """
        ticket = self.new_ticket()
        if self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
        if ticket.is_stale:
            logger.debug("quote_request_superseded", generation=ticket.generation, stage="debounce")
            return None

        try:
            decision = await asyncio.to_thread(self.aggregator.quote, route_request, ticket)
        except StaleRequest:
            logger.debug(
                "quote_request_superseded", generation=ticket.generation, stage="aggregate"
            )
            return None

        if ticket.is_stale:
            logger.debug("quote_request_superseded", generation=ticket.generation, stage="publish")
            return None
        self.latest = decision
        return decision


__all__ = ["RequestTicket", "QuoteSession"]
