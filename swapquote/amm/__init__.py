"""Liquidity-source quoters."""

from swapquote.amm.base import Quote, QuoteRequest, SourceKind, SourceQuoter
from swapquote.amm.concentrated import (
    MockV3Quoter,
    V3DirectQuoter,
    V3MultiHopQuoter,
    V3PoolSnapshot,
    Web3V3Quoter,
)
from swapquote.amm.v2 import V2PoolSnapshot, V2StableQuoter, V2VolatileQuoter
from swapquote.amm.wrap import WrapQuoter

__all__ = [
    "SourceKind",
    "Quote",
    "QuoteRequest",
    "SourceQuoter",
    "V2PoolSnapshot",
    "V2VolatileQuoter",
    "V2StableQuoter",
    "V3PoolSnapshot",
    "V3DirectQuoter",
    "V3MultiHopQuoter",
    "MockV3Quoter",
    "Web3V3Quoter",
    "WrapQuoter",
]
