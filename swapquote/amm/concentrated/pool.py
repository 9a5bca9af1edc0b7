"""V3PoolSnapshot dataclass for concentrated-liquidity pools."""

from __future__ import annotations

from dataclasses import dataclass

from swapquote.models.types import normalize_address

from .constants import fee_pips_for_tick_spacing


@dataclass(frozen=True)
class V3PoolSnapshot:
    """Slot0 view of a concentrated-liquidity pool.

    Pools are keyed by (token pair, tick spacing); each spacing maps to one
    fee tier. Only the current price is stored. Exact swap simulation is
    delegated to the on-chain quoter.
    """

    address: str
    token0: str
    token1: str
    tick_spacing: int
    sqrt_price_x96: int  # Current sqrt(price) * 2^96
    tick: int
    # In-range liquidity; None when the snapshot did not record it
    liquidity: int | None = None
    # False when the factory returned the zero address for this spacing
    exists: bool = True
    fee_pips: int | None = None

    @property
    def fee(self) -> int:
        """Swap fee in pips (hundredths of a basis point)."""
        if self.fee_pips is not None:
            return self.fee_pips
        return fee_pips_for_tick_spacing(self.tick_spacing)

    @property
    def is_live(self) -> bool:
        """Whether the pool exists and has been initialized with a price."""
        return self.exists and self.sqrt_price_x96 > 0

    def get_token_out(self, token_in: str) -> str:
        """Get the output token for a given input token."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == normalize_address(self.token0):
            return self.token1
        elif token_in_norm == normalize_address(self.token1):
            return self.token0
        else:
            raise ValueError(f"Token {token_in} not in pool")

    def is_token0(self, token: str) -> bool:
        """Check if token is token0 (determines swap direction)."""
        return normalize_address(token) == normalize_address(self.token0)


__all__ = ["V3PoolSnapshot"]
