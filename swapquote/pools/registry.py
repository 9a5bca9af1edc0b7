"""Snapshot registry: tokens and pools visible to one aggregation.

This module provides SnapshotRegistry for looking up:
- Tokens by address
- V2 pools by (pair, stable flag)
- Concentrated-liquidity pools by (pair, tick spacing)

The registry is filled once from a market snapshot and then only read, so it
can be shared by quoters running in parallel threads.
"""

from __future__ import annotations

import structlog

from swapquote.amm.concentrated.pool import V3PoolSnapshot
from swapquote.amm.v2 import V2PoolSnapshot
from swapquote.models.snapshot import MarketSnapshot
from swapquote.models.token import Token
from swapquote.models.types import normalize_address, sort_tokens

logger = structlog.get_logger()


class SnapshotRegistry:
    """Registry of tokens and pools for routing."""

    def __init__(self) -> None:
        self._tokens: dict[str, Token] = {}
        # V2 pools keyed by (token0, token1, stable); a pair has at most one of each curve
        self._v2_pools: dict[tuple[str, str, bool], V2PoolSnapshot] = {}
        # V3 pools keyed by (token0, token1, tick_spacing)
        self._v3_pools: dict[tuple[str, str, int], V3PoolSnapshot] = {}
        # Secondary index: token -> tokens it shares a V3 pool with
        self._v3_neighbors: dict[str, set[str]] = {}

    def add_token(self, token: Token) -> None:
        self._tokens[token.address] = token

    def get_token(self, address: str) -> Token | None:
        """Get a token by address (any case)."""
        return self._tokens.get(normalize_address(address))

    @property
    def tokens(self) -> list[Token]:
        return list(self._tokens.values())

    def add_v2_pool(self, pool: V2PoolSnapshot) -> None:
        """Add a V2 pool, replacing any pool of the same curve for the pair."""
        token0, token1 = sort_tokens(pool.token0, pool.token1)
        key = (token0, token1, pool.stable)
        if key in self._v2_pools:
            logger.debug(
                "v2_pool_replaced",
                pool=pool.address[-8:],
                token0=token0[-8:],
                token1=token1[-8:],
                stable=pool.stable,
            )
        self._v2_pools[key] = pool

    def get_v2_pool(self, token_a: str, token_b: str, stable: bool) -> V2PoolSnapshot | None:
        """Get the stable or volatile V2 pool for a pair (order independent)."""
        try:
            token0, token1 = sort_tokens(token_a, token_b)
        except ValueError:
            return None
        return self._v2_pools.get((token0, token1, stable))

    # Short alias used by the quoters
    get_v2 = get_v2_pool

    def add_v3_pool(self, pool: V3PoolSnapshot) -> None:
        """Add a concentrated-liquidity pool.

        Multiple pools can exist for the same pair with different tick spacings.
        """
        token0, token1 = sort_tokens(pool.token0, pool.token1)
        key = (token0, token1, pool.tick_spacing)
        if key in self._v3_pools:
            logger.debug(
                "v3_pool_replaced",
                pool=pool.address[-8:],
                tick_spacing=pool.tick_spacing,
            )
        self._v3_pools[key] = pool
        if pool.exists:
            self._v3_neighbors.setdefault(token0, set()).add(token1)
            self._v3_neighbors.setdefault(token1, set()).add(token0)

    def get_v3_pool(self, token_a: str, token_b: str, tick_spacing: int) -> V3PoolSnapshot | None:
        """Get the pool for a pair at one tick spacing (order independent)."""
        try:
            token0, token1 = sort_tokens(token_a, token_b)
        except ValueError:
            return None
        return self._v3_pools.get((token0, token1, tick_spacing))

    get_v3 = get_v3_pool

    def get_v3_pools(self, token_a: str, token_b: str) -> list[V3PoolSnapshot]:
        """Get all pools for a pair, ordered by tick spacing."""
        try:
            token0, token1 = sort_tokens(token_a, token_b)
        except ValueError:
            return []
        pools = [
            pool
            for (t0, t1, _), pool in self._v3_pools.items()
            if t0 == token0 and t1 == token1
        ]
        return sorted(pools, key=lambda p: p.tick_spacing)

    def v3_neighbors(self, token: str) -> set[str]:
        """Tokens sharing at least one existing concentrated-liquidity pool with token."""
        return set(self._v3_neighbors.get(normalize_address(token), ()))

    def common_v3_neighbors(self, token_a: str, token_b: str) -> list[str]:
        """Candidate intermediates between two tokens, in address order."""
        common = self.v3_neighbors(token_a) & self.v3_neighbors(token_b)
        common.discard(normalize_address(token_a))
        common.discard(normalize_address(token_b))
        return sorted(common)

    @property
    def v2_pool_count(self) -> int:
        return len(self._v2_pools)

    @property
    def v3_pool_count(self) -> int:
        return len(self._v3_pools)


def build_registry_from_snapshot(snapshot: MarketSnapshot) -> SnapshotRegistry:
    """Build a registry from a parsed market snapshot.

    V2 pools take their decimals from the snapshot's token list; pools whose
    tokens are missing from it are skipped with a warning, since the stable
    curve cannot be evaluated without decimals.
    """
    registry = SnapshotRegistry()
    for token in snapshot.tokens:
        registry.add_token(token)

    skipped = 0
    for data in snapshot.v2_pools:
        token0 = registry.get_token(data.token0)
        token1 = registry.get_token(data.token1)
        if token0 is None or token1 is None:
            logger.warning(
                "v2_pool_unknown_token",
                pool=data.address,
                token0=data.token0,
                token1=data.token1,
            )
            skipped += 1
            continue
        registry.add_v2_pool(
            V2PoolSnapshot(
                address=normalize_address(data.address),
                token0=token0.address,
                token1=token1.address,
                reserve0=data.reserve0,
                reserve1=data.reserve1,
                stable=data.stable,
                decimals0=token0.decimals,
                decimals1=token1.decimals,
                fee_bps=data.fee_bps,
            )
        )

    for v3_data in snapshot.v3_pools:
        registry.add_v3_pool(
            V3PoolSnapshot(
                address=normalize_address(v3_data.address),
                token0=normalize_address(v3_data.token0),
                token1=normalize_address(v3_data.token1),
                tick_spacing=v3_data.tick_spacing,
                sqrt_price_x96=v3_data.sqrt_price_x96,
                tick=v3_data.tick,
                liquidity=v3_data.liquidity,
                exists=v3_data.exists,
                fee_pips=v3_data.fee_pips,
            )
        )

    logger.debug(
        "registry_built",
        tokens=len(snapshot.tokens),
        v2_pools=registry.v2_pool_count,
        v3_pools=registry.v3_pool_count,
        skipped=skipped,
    )
    return registry


__all__ = ["SnapshotRegistry", "build_registry_from_snapshot"]
