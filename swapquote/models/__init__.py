"""Input models: tokens, market snapshots, and shared field types."""

from swapquote.models.snapshot import MarketSnapshot, V2PoolData, V3PoolData
from swapquote.models.token import Token
from swapquote.models.types import (
    Address,
    Uint256,
    is_valid_address,
    normalize_address,
    sort_tokens,
)

__all__ = [
    "Token",
    "MarketSnapshot",
    "V2PoolData",
    "V3PoolData",
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    "sort_tokens",
]
