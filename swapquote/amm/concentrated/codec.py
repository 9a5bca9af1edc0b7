"""Typed calldata encoding and reply decoding for the concentrated-liquidity quoters.

Each call shape gets one codec class with ``encode(call) -> bytes`` and
``decode(reply) -> QuoterReply``. Encoding goes through eth_abi, so addresses
and amounts are left-padded to 32 bytes and negative int24 tick spacings are
written in 256-bit two's complement.

quoteExactInputSingle replies are four 32-byte words:

    bytes   0..32   amountOut
    bytes  32..64   sqrtPriceX96After
    bytes  64..96   initializedTicksCrossed
    bytes  96..128  gasEstimate

quoteExactInput returns the same fields with per-hop arrays for the middle two.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, TypeVar

from eth_abi import decode, encode  # type: ignore[attr-defined]
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector

from swapquote.errors import MalformedReply
from swapquote.models.types import is_valid_address, normalize_address

from .constants import (
    INT24_MAX,
    INT24_MIN,
    PATH_ADDRESS_SIZE,
    PATH_TICK_SPACING_SIZE,
    QUOTE_EXACT_INPUT_SIGNATURE,
    QUOTE_EXACT_INPUT_SINGLE_SIGNATURE,
)

QUOTE_EXACT_INPUT_SINGLE_SELECTOR = function_signature_to_4byte_selector(
    QUOTE_EXACT_INPUT_SINGLE_SIGNATURE
)
QUOTE_EXACT_INPUT_SELECTOR = function_signature_to_4byte_selector(QUOTE_EXACT_INPUT_SIGNATURE)

# Four static words
_SINGLE_REPLY_SIZE = 4 * 32

CallT = TypeVar("CallT", contravariant=True)


@dataclass(frozen=True)
class SingleQuoteCall:
    """Arguments of quoteExactInputSingle."""

    token_in: str
    token_out: str
    amount_in: int
    tick_spacing: int
    sqrt_price_limit_x96: int = 0  # 0 means no limit


@dataclass(frozen=True)
class PathQuoteCall:
    """Arguments of quoteExactInput: token path, spacing per hop, amount."""

    tokens: tuple[str, ...]
    tick_spacings: tuple[int, ...]
    amount_in: int


@dataclass(frozen=True)
class QuoterReply:
    """Decoded quoter result.

    For path quotes the per-hop fields hold one entry per hop; single quotes
    hold exactly one.
    """

    amount_out: int
    sqrt_prices_x96_after: tuple[int, ...]
    initialized_ticks_crossed: tuple[int, ...]
    gas_estimate: int

    @property
    def sqrt_price_x96_after(self) -> int:
        """Price after the final hop."""
        return self.sqrt_prices_x96_after[-1]


class QuoterCodec(Protocol[CallT]):
    """Encodes one quoter call shape and decodes its reply."""

    selector: bytes

    def encode(self, call: CallT) -> bytes: ...

    def decode(self, reply: bytes | str) -> QuoterReply: ...


def _check_tick_spacing(tick_spacing: int) -> None:
    if not INT24_MIN <= tick_spacing <= INT24_MAX:
        raise ValueError(f"Tick spacing {tick_spacing} does not fit in int24")


def _check_address(address: str) -> str:
    addr = normalize_address(address)
    if not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")
    return addr


def _reply_bytes(reply: bytes | str) -> bytes:
    if isinstance(reply, str):
        text = reply[2:] if reply.startswith("0x") else reply
        try:
            return bytes.fromhex(text)
        except ValueError as err:
            raise MalformedReply(f"Quoter reply is not hex: {reply[:20]}...") from err
    return bytes(reply)


def encode_path(
    tokens: tuple[str, ...] | list[str], tick_spacings: tuple[int, ...] | list[int]
) -> bytes:
    """Pack a swap path as token(20) | tick spacing(3) | token(20) | ...

    Tick spacings are 3-byte big-endian two's complement.

    Raises:
        ValueError: If the path is shorter than one hop, the lengths do not
            line up, or a spacing does not fit in int24
    """
    if len(tokens) < 2 or len(tick_spacings) != len(tokens) - 1:
        raise ValueError(
            f"Path needs n tokens and n-1 tick spacings, got {len(tokens)} and {len(tick_spacings)}"
        )

    parts = [bytes.fromhex(_check_address(tokens[0])[2:])]
    for tick_spacing, token in zip(tick_spacings, tokens[1:]):
        _check_tick_spacing(tick_spacing)
        parts.append((tick_spacing & 0xFFFFFF).to_bytes(PATH_TICK_SPACING_SIZE, "big"))
        parts.append(bytes.fromhex(_check_address(token)[2:]))
    return b"".join(parts)


def decode_path(path: bytes) -> tuple[tuple[str, ...], tuple[int, ...]]:
    """Inverse of encode_path.

    Raises:
        ValueError: If the byte length is not a valid path length
    """
    hop_size = PATH_ADDRESS_SIZE + PATH_TICK_SPACING_SIZE
    if len(path) < PATH_ADDRESS_SIZE + hop_size or (len(path) - PATH_ADDRESS_SIZE) % hop_size:
        raise ValueError(f"Invalid path length: {len(path)}")

    tokens = ["0x" + path[:PATH_ADDRESS_SIZE].hex()]
    tick_spacings = []
    offset = PATH_ADDRESS_SIZE
    while offset < len(path):
        raw = int.from_bytes(path[offset : offset + PATH_TICK_SPACING_SIZE], "big")
        tick_spacings.append(raw - (1 << 24) if raw & 0x800000 else raw)
        offset += PATH_TICK_SPACING_SIZE
        tokens.append("0x" + path[offset : offset + PATH_ADDRESS_SIZE].hex())
        offset += PATH_ADDRESS_SIZE
    return tuple(tokens), tuple(tick_spacings)


class QuoteExactInputSingleCodec:
    """quoteExactInputSingle((address,address,uint256,int24,uint160))."""

    selector = QUOTE_EXACT_INPUT_SINGLE_SELECTOR

    def encode(self, call: SingleQuoteCall) -> bytes:
        _check_tick_spacing(call.tick_spacing)
        params = (
            _check_address(call.token_in),
            _check_address(call.token_out),
            call.amount_in,
            call.tick_spacing,
            call.sqrt_price_limit_x96,
        )
        return self.selector + encode(["(address,address,uint256,int24,uint160)"], [params])

    def decode(self, reply: bytes | str) -> QuoterReply:
        """Decode the four-word reply.

        Raises:
            MalformedReply: If the reply is short or not valid ABI data
        """
        data = _reply_bytes(reply)
        if len(data) < _SINGLE_REPLY_SIZE:
            raise MalformedReply(
                f"quoteExactInputSingle reply has {len(data)} bytes, expected {_SINGLE_REPLY_SIZE}"
            )
        try:
            amount_out, sqrt_price_after, ticks_crossed, gas_estimate = decode(
                ["uint256", "uint160", "uint32", "uint256"], data
            )
        except DecodingError as err:
            raise MalformedReply(f"Cannot decode quoteExactInputSingle reply: {err}") from err
        return QuoterReply(
            amount_out=amount_out,
            sqrt_prices_x96_after=(sqrt_price_after,),
            initialized_ticks_crossed=(ticks_crossed,),
            gas_estimate=gas_estimate,
        )


class QuoteExactInputCodec:
    """quoteExactInput(bytes path, uint256 amountIn)."""

    selector = QUOTE_EXACT_INPUT_SELECTOR

    def encode(self, call: PathQuoteCall) -> bytes:
        path = encode_path(call.tokens, call.tick_spacings)
        return self.selector + encode(["bytes", "uint256"], [path, call.amount_in])

    def decode(self, reply: bytes | str) -> QuoterReply:
        """Decode (uint256, uint160[], uint32[], uint256).

        Raises:
            MalformedReply: If the reply is short, not valid ABI data, or has
                no per-hop prices
        """
        data = _reply_bytes(reply)
        if len(data) < _SINGLE_REPLY_SIZE:
            raise MalformedReply(
                f"quoteExactInput reply has {len(data)} bytes, "
                f"expected at least {_SINGLE_REPLY_SIZE}"
            )
        try:
            amount_out, sqrt_prices_after, ticks_crossed, gas_estimate = decode(
                ["uint256", "uint160[]", "uint32[]", "uint256"], data
            )
        except DecodingError as err:
            raise MalformedReply(f"Cannot decode quoteExactInput reply: {err}") from err
        if not sqrt_prices_after:
            raise MalformedReply("quoteExactInput reply has no hops")
        return QuoterReply(
            amount_out=amount_out,
            sqrt_prices_x96_after=tuple(sqrt_prices_after),
            initialized_ticks_crossed=tuple(ticks_crossed),
            gas_estimate=gas_estimate,
        )


__all__ = [
    "QUOTE_EXACT_INPUT_SINGLE_SELECTOR",
    "QUOTE_EXACT_INPUT_SELECTOR",
    "SingleQuoteCall",
    "PathQuoteCall",
    "QuoterReply",
    "QuoterCodec",
    "encode_path",
    "decode_path",
    "QuoteExactInputSingleCodec",
    "QuoteExactInputCodec",
]
