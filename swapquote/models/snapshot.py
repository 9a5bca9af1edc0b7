"""Pydantic models for market snapshots supplied by the transport layer.

A snapshot is a point-in-time view of every pool the caller wants quoted.
The JSON shape uses camelCase keys, matching what RPC helpers emit:

    {
      "tokens": [{"address": "0x...", "decimals": 18, "symbol": "WSEI"}],
      "v2Pools": [{"address": "0x...", "token0": "0x...", "token1": "0x...",
                   "reserve0": "1000", "reserve1": "2000", "stable": false}],
      "v3Pools": [{"address": "0x...", "token0": "0x...", "token1": "0x...",
                   "tickSpacing": 100, "sqrtPriceX96": "792...", "tick": 0}]
    }
"""

from pydantic import BaseModel, Field

from swapquote.models.token import Token
from swapquote.models.types import Address, Uint256


class V2PoolData(BaseModel):
    """Reserves of one stable or volatile V2 pool."""

    address: Address
    token0: Address
    token1: Address
    reserve0: Uint256
    reserve1: Uint256
    stable: bool = False
    fee_bps: int | None = Field(default=None, alias="feeBps", ge=0, lt=10_000)

    model_config = {"populate_by_name": True}


class V3PoolData(BaseModel):
    """Slot0 view of one concentrated-liquidity pool."""

    address: Address
    token0: Address
    token1: Address
    tick_spacing: int = Field(alias="tickSpacing")
    sqrt_price_x96: Uint256 = Field(alias="sqrtPriceX96")
    tick: int
    liquidity: Uint256 | None = None
    exists: bool = True
    fee_pips: int | None = Field(default=None, alias="feePips", ge=0, lt=1_000_000)

    model_config = {"populate_by_name": True}


class MarketSnapshot(BaseModel):
    """All tokens and pools visible at quote time."""

    tokens: list[Token] = Field(default_factory=list)
    v2_pools: list[V2PoolData] = Field(default_factory=list, alias="v2Pools")
    v3_pools: list[V3PoolData] = Field(default_factory=list, alias="v3Pools")

    model_config = {"populate_by_name": True}


__all__ = ["V2PoolData", "V3PoolData", "MarketSnapshot"]
