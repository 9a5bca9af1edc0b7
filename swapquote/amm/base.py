"""Base classes for liquidity-source quoters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from swapquote.models.token import Token

if TYPE_CHECKING:
    from swapquote.pools.registry import SnapshotRegistry


class SourceKind(str, Enum):
    """Kind of liquidity source a quote came from."""

    V3_DIRECT = "v3_direct"
    V2_VOLATILE = "v2_volatile"
    V2_STABLE = "v2_stable"
    V3_MULTI_HOP = "v3_multi_hop"
    WRAP = "wrap"


@dataclass(frozen=True)
class QuoteRequest:
    """Exact-input quote request against one market snapshot.

    Tokens are expected to be ERC20s; the aggregator maps the native
    currency to its wrapped token before building requests.
    """

    token_in: Token
    token_out: Token
    amount_in: int
    registry: SnapshotRegistry


@dataclass(frozen=True)
class Quote:
    """Output of one source for one request."""

    kind: SourceKind
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int
    pool_addresses: tuple[str, ...] = ()
    stable: bool | None = None
    tick_spacings: tuple[int, ...] = ()
    intermediate: str | None = None
    sqrt_price_x96_after: int | None = None
    gas_estimate: int | None = None
    # True when amount_out came from an on-chain simulation rather than
    # a spot-price approximation
    simulated: bool = False

    @property
    def tick_spacing(self) -> int | None:
        """Tick spacing of a direct concentrated-liquidity quote."""
        return self.tick_spacings[0] if len(self.tick_spacings) == 1 else None


class SourceQuoter(ABC):
    """A liquidity source that can price an exact-input swap.

    Quoters hold configuration only. Pool state comes in with each request,
    so one quoter instance may serve concurrent requests against different
    snapshots.
    """

    kind: SourceKind

    @property
    def name(self) -> str:
        """Label used in logs."""
        return self.kind.value

    @abstractmethod
    def quote(self, request: QuoteRequest) -> Quote | None:
        """Price request.amount_in of token_in in token_out.

        Returns:
            Quote, or None when this source has no usable liquidity

        Raises:
            QuoteError: For source-specific failures the caller should log
                and skip (e.g. NoPoolForTickSpacing)
        """
        ...


__all__ = ["SourceKind", "QuoteRequest", "Quote", "SourceQuoter"]
