"""Concentrated-liquidity (tick-spacing keyed) pool support.

This package provides:
- Pool dataclass (V3PoolSnapshot)
- Typed quoter codecs (quoteExactInputSingle, quoteExactInput)
- Quoter implementations (Mock and Web3-based)
- Direct and multi-hop source quoters
"""

from .amm import V3DirectQuoter, V3MultiHopQuoter, spot_amount_out
from .codec import (
    QUOTE_EXACT_INPUT_SELECTOR,
    QUOTE_EXACT_INPUT_SINGLE_SELECTOR,
    PathQuoteCall,
    QuoteExactInputCodec,
    QuoteExactInputSingleCodec,
    QuoterCodec,
    QuoterReply,
    SingleQuoteCall,
    decode_path,
    encode_path,
)
from .constants import fee_pips_for_tick_spacing
from .pool import V3PoolSnapshot
from .quoter import MockV3Quoter, QuoteKey, V3Quoter, Web3V3Quoter

__all__ = [
    # Pool
    "V3PoolSnapshot",
    "fee_pips_for_tick_spacing",
    # Codec
    "QUOTE_EXACT_INPUT_SINGLE_SELECTOR",
    "QUOTE_EXACT_INPUT_SELECTOR",
    "SingleQuoteCall",
    "PathQuoteCall",
    "QuoterReply",
    "QuoterCodec",
    "QuoteExactInputSingleCodec",
    "QuoteExactInputCodec",
    "encode_path",
    "decode_path",
    # Quoter
    "V3Quoter",
    "QuoteKey",
    "MockV3Quoter",
    "Web3V3Quoter",
    # Source quoters
    "spot_amount_out",
    "V3DirectQuoter",
    "V3MultiHopQuoter",
]
