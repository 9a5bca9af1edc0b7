"""Configuration for the quoting engine."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from swapquote.constants import (
    MIXED_ROUTE_QUOTER_ADDRESS,
    QUOTER_V2_ADDRESS,
    USDC,
    V3_TICK_SPACINGS,
    WSEI,
)
from swapquote.models.types import normalize_address


@dataclass(frozen=True)
class QuoteConfig:
    """Centralized configuration for route aggregation.

    Attributes:
        tick_spacings: Concentrated-liquidity tick spacings to quote directly
            and to combine for multi-hop legs
        intermediates: Tokens tried as the middle hop of multi-hop routes.
            Empty means auto-discover from the snapshot registry.
        wrapped_native: Token substituted for the native currency
        quoter_address: QuoterV2 contract for single-hop simulations
        mixed_route_quoter_address: Quoter contract for path simulations
        rpc_url: JSON-RPC endpoint for on-chain simulation (None = offline)
        debounce_seconds: Delay before a session request starts aggregating
        max_workers: Thread pool size for concurrent source quoting
        default_slippage_bps: Tolerance used when a request omits one
    """

    tick_spacings: tuple[int, ...] = V3_TICK_SPACINGS
    intermediates: tuple[str, ...] = (WSEI, USDC)
    wrapped_native: str = WSEI
    quoter_address: str = QUOTER_V2_ADDRESS
    mixed_route_quoter_address: str = MIXED_ROUTE_QUOTER_ADDRESS
    rpc_url: str | None = None
    debounce_seconds: float = 0.3
    max_workers: int = 8
    default_slippage_bps: int = 50

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> QuoteConfig:
        """Build a config from SWAPQUOTE_* environment variables.

        Recognized variables (all optional):
        - SWAPQUOTE_TICK_SPACINGS: comma-separated ints
        - SWAPQUOTE_INTERMEDIATES: comma-separated addresses ("" = auto-discover)
        - SWAPQUOTE_WRAPPED_NATIVE: address
        - SWAPQUOTE_RPC_URL: JSON-RPC endpoint
        - SWAPQUOTE_DEBOUNCE_MS: debounce delay in milliseconds
        - SWAPQUOTE_MAX_WORKERS: thread pool size
        - SWAPQUOTE_SLIPPAGE_BPS: default slippage tolerance

        Raises:
            ValueError: If a variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        tick_spacings = defaults.tick_spacings
        if "SWAPQUOTE_TICK_SPACINGS" in env:
            tick_spacings = tuple(
                int(part) for part in env["SWAPQUOTE_TICK_SPACINGS"].split(",") if part.strip()
            )

        intermediates = defaults.intermediates
        if "SWAPQUOTE_INTERMEDIATES" in env:
            intermediates = tuple(
                normalize_address(part.strip(), validate=True)
                for part in env["SWAPQUOTE_INTERMEDIATES"].split(",")
                if part.strip()
            )

        wrapped_native = defaults.wrapped_native
        if "SWAPQUOTE_WRAPPED_NATIVE" in env:
            wrapped_native = normalize_address(env["SWAPQUOTE_WRAPPED_NATIVE"], validate=True)

        debounce_seconds = defaults.debounce_seconds
        if "SWAPQUOTE_DEBOUNCE_MS" in env:
            debounce_seconds = int(env["SWAPQUOTE_DEBOUNCE_MS"]) / 1000

        return cls(
            tick_spacings=tick_spacings,
            intermediates=intermediates,
            wrapped_native=wrapped_native,
            quoter_address=defaults.quoter_address,
            mixed_route_quoter_address=defaults.mixed_route_quoter_address,
            rpc_url=env.get("SWAPQUOTE_RPC_URL") or None,
            debounce_seconds=debounce_seconds,
            max_workers=int(env.get("SWAPQUOTE_MAX_WORKERS", defaults.max_workers)),
            default_slippage_bps=int(
                env.get("SWAPQUOTE_SLIPPAGE_BPS", defaults.default_slippage_bps)
            ),
        )


# Default configuration instance
DEFAULT_QUOTE_CONFIG = QuoteConfig()

__all__ = ["QuoteConfig", "DEFAULT_QUOTE_CONFIG"]
