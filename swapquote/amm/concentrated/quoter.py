"""Concentrated-liquidity quoter implementations for swap simulation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import structlog

from swapquote.errors import MalformedReply
from swapquote.models.types import normalize_address

from .codec import (
    PathQuoteCall,
    QuoteExactInputCodec,
    QuoteExactInputSingleCodec,
    QuoterReply,
    SingleQuoteCall,
)
from .constants import MIXED_ROUTE_QUOTER_ADDRESS, QUOTER_V2_ADDRESS

logger = structlog.get_logger()


class V3Quoter(Protocol):
    """Protocol for on-chain quoter implementations.

    This allows swapping between the RPC-based quoter and a mock for testing.
    """

    def quote_exact_input_single(
        self,
        token_in: str,
        token_out: str,
        tick_spacing: int,
        amount_in: int,
    ) -> QuoterReply | None:
        """Simulate an exact-input swap through one pool.

        Returns:
            Decoded reply, or None if the quote fails
        """
        ...

    def quote_exact_input(
        self,
        tokens: Sequence[str],
        tick_spacings: Sequence[int],
        amount_in: int,
    ) -> QuoterReply | None:
        """Simulate an exact-input swap along a path.

        Returns:
            Decoded reply, or None if the quote fails
        """
        ...


@dataclass(frozen=True)
class QuoteKey:
    """Key for looking up quotes in MockV3Quoter.

    A single-pool quote is a path of two tokens and one spacing.
    """

    tokens: tuple[str, ...]
    tick_spacings: tuple[int, ...]
    amount_in: int

    @classmethod
    def of(cls, tokens: Sequence[str], tick_spacings: Sequence[int], amount_in: int) -> QuoteKey:
        return cls(
            tuple(normalize_address(t) for t in tokens),
            tuple(tick_spacings),
            amount_in,
        )


class MockV3Quoter:
    """Mock quoter for testing without RPC calls.

    Configure with expected quotes, and track calls for assertions.
    """

    def __init__(
        self,
        quotes: dict[QuoteKey, int] | None = None,
        default_rate: tuple[int, int] | None = None,
        gas_estimate: int = 0,
    ):
        """Initialize mock quoter.

        Args:
            quotes: Mapping of QuoteKey -> amount_out for specific quotes
            default_rate: If set, (numerator, denominator) applied per hop for
                any unconfigured quote: amount_out = amount_in * num // denom
            gas_estimate: Gas estimate reported in every reply
        """
        self.quotes = quotes or {}
        self.default_rate = default_rate
        self.gas_estimate = gas_estimate
        self.calls: list[tuple[tuple[str, ...], tuple[int, ...], int]] = []

    def _reply(self, key: QuoteKey) -> QuoterReply | None:
        self.calls.append((key.tokens, key.tick_spacings, key.amount_in))

        if key in self.quotes:
            amount_out = self.quotes[key]
        elif self.default_rate is not None:
            num, denom = self.default_rate
            amount_out = key.amount_in
            for _ in key.tick_spacings:
                amount_out = amount_out * num // denom
        else:
            return None

        hops = len(key.tick_spacings)
        return QuoterReply(
            amount_out=amount_out,
            sqrt_prices_x96_after=(0,) * hops,
            initialized_ticks_crossed=(0,) * hops,
            gas_estimate=self.gas_estimate,
        )

    def quote_exact_input_single(
        self,
        token_in: str,
        token_out: str,
        tick_spacing: int,
        amount_in: int,
    ) -> QuoterReply | None:
        """Get output amount for exact input through one pool."""
        return self._reply(QuoteKey.of((token_in, token_out), (tick_spacing,), amount_in))

    def quote_exact_input(
        self,
        tokens: Sequence[str],
        tick_spacings: Sequence[int],
        amount_in: int,
    ) -> QuoterReply | None:
        """Get output amount for exact input along a path."""
        return self._reply(QuoteKey.of(tokens, tick_spacings, amount_in))


class Web3V3Quoter:
    """Quoter that simulates swaps with eth_call against the quoter contracts.

    Calldata and replies go through the typed codecs; web3 only carries the
    bytes. Single-pool quotes use QuoterV2, path quotes use the mixed-route
    quoter.
    """

    def __init__(
        self,
        web3_provider: str,
        quoter_address: str = QUOTER_V2_ADDRESS,
        path_quoter_address: str = MIXED_ROUTE_QUOTER_ADDRESS,
    ):
        """Initialize quoter with web3 provider.

        Args:
            web3_provider: HTTP RPC URL
            quoter_address: QuoterV2 contract address
            path_quoter_address: Contract answering quoteExactInput(bytes,uint256)
        """
        try:
            from web3 import Web3
        except ImportError as e:
            raise ImportError(
                "web3 package required for Web3V3Quoter. Install with: pip install web3"
            ) from e

        self.w3 = Web3(Web3.HTTPProvider(web3_provider))
        self.quoter_address = Web3.to_checksum_address(quoter_address)
        self.path_quoter_address = Web3.to_checksum_address(path_quoter_address)
        self.single_codec = QuoteExactInputSingleCodec()
        self.path_codec = QuoteExactInputCodec()

    def _call(self, to: str, data: bytes) -> bytes:
        return bytes(self.w3.eth.call({"to": to, "data": data}))

    def quote_exact_input_single(
        self,
        token_in: str,
        token_out: str,
        tick_spacing: int,
        amount_in: int,
    ) -> QuoterReply | None:
        """Get output amount for exact input via RPC call."""
        calldata = self.single_codec.encode(
            SingleQuoteCall(token_in, token_out, amount_in, tick_spacing)
        )
        try:
            return self.single_codec.decode(self._call(self.quoter_address, calldata))
        except MalformedReply as e:
            logger.warning(
                "v3_quote_malformed_reply",
                token_in=token_in,
                token_out=token_out,
                tick_spacing=tick_spacing,
                error=str(e),
            )
            return None
        except Exception as e:
            logger.warning(
                "v3_quote_exact_input_single_failed",
                token_in=token_in,
                token_out=token_out,
                tick_spacing=tick_spacing,
                amount_in=amount_in,
                error=str(e),
            )
            return None

    def quote_exact_input(
        self,
        tokens: Sequence[str],
        tick_spacings: Sequence[int],
        amount_in: int,
    ) -> QuoterReply | None:
        """Get output amount for exact input along a path via RPC call."""
        calldata = self.path_codec.encode(
            PathQuoteCall(tuple(tokens), tuple(tick_spacings), amount_in)
        )
        try:
            return self.path_codec.decode(self._call(self.path_quoter_address, calldata))
        except MalformedReply as e:
            logger.warning(
                "v3_path_quote_malformed_reply",
                tokens=list(tokens),
                tick_spacings=list(tick_spacings),
                error=str(e),
            )
            return None
        except Exception as e:
            logger.warning(
                "v3_quote_exact_input_failed",
                tokens=list(tokens),
                tick_spacings=list(tick_spacings),
                amount_in=amount_in,
                error=str(e),
            )
            return None


__all__ = ["V3Quoter", "QuoteKey", "MockV3Quoter", "Web3V3Quoter"]
