"""Solidly-style V2 pools: volatile (x*y=k) and stable (x^3*y + y^3*x = k).

Both curves take the fee off the input first, in basis points:

    amount_in -= amount_in * fee_bps // 10000

Volatile pools then apply the constant-product formula. Stable pools scale
reserves to 18 decimals, solve the stable invariant for the new output
reserve by Newton iteration, and scale the result back to the output
token's decimals. All arithmetic is integer and rounds down, as on-chain.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from swapquote.amm.base import Quote, QuoteRequest, SourceKind, SourceQuoter
from swapquote.constants import BPS_DENOMINATOR, V2_STABLE_FEE_BPS, V2_VOLATILE_FEE_BPS
from swapquote.errors import CurveDidNotConverge
from swapquote.models.types import normalize_address
from swapquote.safe_int import S

logger = structlog.get_logger()

# Stable-curve fixed-point unit
ONE = 10**18

# Newton iterations before giving up on the stable curve
MAX_NEWTON_ROUNDS = 255


@dataclass(frozen=True)
class V2PoolSnapshot:
    """Reserves of a Solidly-style V2 pool at quote time."""

    address: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    stable: bool = False
    decimals0: int = 18
    decimals1: int = 18
    # Fee in basis points; None picks the factory default for the curve
    fee_bps: int | None = field(default=None)

    def __post_init__(self) -> None:
        if self.fee_bps is None:
            default = V2_STABLE_FEE_BPS if self.stable else V2_VOLATILE_FEE_BPS
            object.__setattr__(self, "fee_bps", default)

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == normalize_address(self.token0):
            return self.reserve0, self.reserve1
        elif token_in_norm == normalize_address(self.token1):
            return self.reserve1, self.reserve0
        else:
            raise ValueError(f"Token {token_in} not in pool")

    def get_decimals(self, token_in: str) -> tuple[int, int]:
        """Get token decimals ordered as (decimals_in, decimals_out)."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == normalize_address(self.token0):
            return self.decimals0, self.decimals1
        elif token_in_norm == normalize_address(self.token1):
            return self.decimals1, self.decimals0
        else:
            raise ValueError(f"Token {token_in} not in pool")

    def get_token_out(self, token_in: str) -> str:
        """Get the output token for a given input token."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == normalize_address(self.token0):
            return self.token1
        elif token_in_norm == normalize_address(self.token1):
            return self.token0
        else:
            raise ValueError(f"Token {token_in} not in pool")


def _apply_fee(amount_in: int, fee_bps: int) -> int:
    return (S(amount_in) - S(amount_in) * S(fee_bps) // S(BPS_DENOMINATOR)).value


def volatile_amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """Constant-product output after the input-side fee.

    Returns 0 for a non-positive input or an empty reserve.
    """
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        return 0

    amount_in_after_fee = S(_apply_fee(amount_in, fee_bps))
    numerator = amount_in_after_fee * S(reserve_out)
    denominator = S(reserve_in) + amount_in_after_fee
    return (numerator // denominator).value


def _f(x0: int, y: int) -> int:
    """The stable invariant x0^3*y + y^3*x0 in 1e18 fixed point."""
    return (x0 * y // ONE) * ((x0 * x0 // ONE) + (y * y // ONE)) // ONE


def _d(x0: int, y: int) -> int:
    """Derivative of the stable invariant with respect to y."""
    return 3 * x0 * (y * y // ONE) // ONE + (x0 * x0 // ONE * x0 // ONE)


def stable_k(x: int, y: int) -> int:
    """Stable invariant for reserves already scaled to 1e18."""
    return _f(x, y)


def _get_y(x0: int, xy: int, y: int) -> int:
    """Solve _f(x0, y) == xy for y by Newton iteration starting at y.

    Raises:
        CurveDidNotConverge: If no fixed point is reached in MAX_NEWTON_ROUNDS
    """
    for _ in range(MAX_NEWTON_ROUNDS):
        k = _f(x0, y)
        derivative = _d(x0, y)
        if derivative == 0:
            break
        if k < xy:
            dy = (xy - k) * ONE // derivative
            if dy == 0:
                if _f(x0, y + 1) > xy:
                    return y + 1
                dy = 1
            y = y + dy
        else:
            dy = (k - xy) * ONE // derivative
            if dy == 0:
                if k == xy or _f(x0, y - 1) < xy:
                    return y
                dy = 1
            y = y - dy
    raise CurveDidNotConverge(f"Stable curve did not converge (x0={x0}, xy={xy})")


def stable_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    decimals_in: int,
    decimals_out: int,
    fee_bps: int,
) -> int:
    """Stable-curve output after the input-side fee.

    Returns 0 for a non-positive input or an empty reserve.

    Raises:
        CurveDidNotConverge: If Newton iteration fails
        Underflow: If the solved reserve exceeds the current one
    """
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        return 0

    unit_in = 10**decimals_in
    unit_out = 10**decimals_out

    amount_in_after_fee = _apply_fee(amount_in, fee_bps)
    scaled_in = reserve_in * ONE // unit_in
    scaled_out = reserve_out * ONE // unit_out
    xy = _f(scaled_in, scaled_out)

    x0 = amount_in_after_fee * ONE // unit_in + scaled_in
    y = S(scaled_out) - S(_get_y(x0, xy, scaled_out))
    return (y * S(unit_out) // S(ONE)).value


def v2_amount_out(pool: V2PoolSnapshot, token_in: str, amount_in: int) -> int:
    """Output of swapping amount_in of token_in through pool."""
    reserve_in, reserve_out = pool.get_reserves(token_in)
    fee_bps = pool.fee_bps if pool.fee_bps is not None else V2_VOLATILE_FEE_BPS
    if pool.stable:
        decimals_in, decimals_out = pool.get_decimals(token_in)
        return stable_amount_out(
            amount_in, reserve_in, reserve_out, decimals_in, decimals_out, fee_bps
        )
    return volatile_amount_out(amount_in, reserve_in, reserve_out, fee_bps)


class _V2Quoter(SourceQuoter):
    stable: bool

    def quote(self, request: QuoteRequest) -> Quote | None:
        token_in = request.token_in.address
        token_out = request.token_out.address
        pool = request.registry.get_v2(token_in, token_out, stable=self.stable)
        if pool is None:
            return None

        reserve_in, reserve_out = pool.get_reserves(token_in)
        if reserve_in == 0 or reserve_out == 0:
            logger.debug("v2_pool_empty", source=self.name, pool=pool.address)
            return None

        amount_out = v2_amount_out(pool, token_in, request.amount_in)
        if amount_out <= 0:
            return None

        return Quote(
            kind=self.kind,
            token_in=token_in,
            token_out=token_out,
            amount_in=request.amount_in,
            amount_out=amount_out,
            pool_addresses=(pool.address,),
            stable=self.stable,
        )


class V2VolatileQuoter(_V2Quoter):
    """Quotes the volatile V2 pool of a pair."""

    kind = SourceKind.V2_VOLATILE
    stable = False


class V2StableQuoter(_V2Quoter):
    """Quotes the stable V2 pool of a pair."""

    kind = SourceKind.V2_STABLE
    stable = True


__all__ = [
    "V2PoolSnapshot",
    "volatile_amount_out",
    "stable_amount_out",
    "stable_k",
    "v2_amount_out",
    "V2VolatileQuoter",
    "V2StableQuoter",
]
