"""DEX swap quoting and concentrated-liquidity math."""

from swapquote.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from swapquote.models import MarketSnapshot, Token
from swapquote.pools import SnapshotRegistry, build_registry_from_snapshot
from swapquote.routing import QuoteSession, RouteAggregator, RouteRequest
from swapquote.slippage import min_output

__version__ = "0.1.0"

__all__ = [
    "QuoteConfig",
    "DEFAULT_QUOTE_CONFIG",
    "Token",
    "MarketSnapshot",
    "SnapshotRegistry",
    "build_registry_from_snapshot",
    "RouteAggregator",
    "RouteRequest",
    "QuoteSession",
    "min_output",
]
