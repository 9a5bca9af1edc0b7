"""Native currency <-> wrapped native token, always 1:1."""

from __future__ import annotations

from swapquote.amm.base import Quote, QuoteRequest, SourceKind, SourceQuoter
from swapquote.constants import NATIVE_TOKEN
from swapquote.models.token import Token
from swapquote.models.types import normalize_address


def is_native_token(token: Token) -> bool:
    """Flagged native, or carrying the native placeholder address."""
    return token.is_native or token.address == NATIVE_TOKEN


class WrapQuoter(SourceQuoter):
    """Quotes deposit/withdraw on the wrapped-native contract.

    Only applies to a native/wrapped pair; every other request returns None.
    """

    kind = SourceKind.WRAP

    def __init__(self, wrapped_native: str) -> None:
        self.wrapped_native = normalize_address(wrapped_native)

    def applies(self, request: QuoteRequest) -> bool:
        token_in, token_out = request.token_in, request.token_out
        if is_native_token(token_in):
            return token_out.address == self.wrapped_native
        if is_native_token(token_out):
            return token_in.address == self.wrapped_native
        return False

    def quote(self, request: QuoteRequest) -> Quote | None:
        if not self.applies(request) or request.amount_in <= 0:
            return None
        return Quote(
            kind=self.kind,
            token_in=request.token_in.address,
            token_out=request.token_out.address,
            amount_in=request.amount_in,
            amount_out=request.amount_in,
            pool_addresses=(self.wrapped_native,),
        )


__all__ = ["WrapQuoter", "is_native_token"]
