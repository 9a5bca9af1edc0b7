"""Source quoters for concentrated-liquidity pools.

One V3DirectQuoter runs per tick spacing; V3MultiHopQuoter routes through an
intermediate token over every pair of spacings. With an injected quoter the
amounts come from on-chain simulation. Without one they come from the spot
price, which ignores price impact and is only fit for comparing sources.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import product

import structlog

from swapquote.amm.base import Quote, QuoteRequest, SourceKind, SourceQuoter
from swapquote.constants import PIPS_DENOMINATOR
from swapquote.errors import NoPoolForTickSpacing
from swapquote.safe_int import S

from .pool import V3PoolSnapshot
from .quoter import V3Quoter

logger = structlog.get_logger()


def spot_amount_out(pool: V3PoolSnapshot, token_in: str, amount_in: int) -> int:
    """Approximate output at the pool's current price after the tier fee.

    token0 -> token1:  out = in' * sqrtP^2 / 2^192
    token1 -> token0:  out = in' * 2^192 / sqrtP^2

    Pools recorded with zero in-range liquidity cannot fill any amount and
    give 0. Pools whose liquidity was not recorded are priced as usual.
    """
    if amount_in <= 0 or not pool.is_live or pool.liquidity == 0:
        return 0

    after_fee = S(amount_in) * S(PIPS_DENOMINATOR - pool.fee) // S(PIPS_DENOMINATOR)
    price_x192 = S(pool.sqrt_price_x96) * S(pool.sqrt_price_x96)
    if pool.is_token0(token_in):
        return (after_fee * price_x192).value >> 192
    return ((after_fee * S(1 << 192)) // price_x192).value


class V3DirectQuoter(SourceQuoter):
    """Quotes the pool of one tick spacing for a pair."""

    kind = SourceKind.V3_DIRECT

    def __init__(self, tick_spacing: int, quoter: V3Quoter | None = None) -> None:
        self.tick_spacing = tick_spacing
        self.quoter = quoter

    @property
    def name(self) -> str:
        return f"{self.kind.value}_{self.tick_spacing}"

    def quote(self, request: QuoteRequest) -> Quote | None:
        """Quote the direct pool at this quoter's tick spacing.

        Raises:
            NoPoolForTickSpacing: If the snapshot has no live pool at this spacing
        """
        token_in = request.token_in.address
        token_out = request.token_out.address
        pool = request.registry.get_v3(token_in, token_out, self.tick_spacing)
        if pool is None or not pool.is_live:
            raise NoPoolForTickSpacing(token_in, token_out, self.tick_spacing)

        if self.quoter is not None:
            reply = self.quoter.quote_exact_input_single(
                token_in, token_out, self.tick_spacing, request.amount_in
            )
            if reply is None or reply.amount_out <= 0:
                return None
            return Quote(
                kind=self.kind,
                token_in=token_in,
                token_out=token_out,
                amount_in=request.amount_in,
                amount_out=reply.amount_out,
                pool_addresses=(pool.address,),
                tick_spacings=(self.tick_spacing,),
                sqrt_price_x96_after=reply.sqrt_price_x96_after,
                gas_estimate=reply.gas_estimate,
                simulated=True,
            )

        amount_out = spot_amount_out(pool, token_in, request.amount_in)
        if amount_out <= 0:
            return None
        return Quote(
            kind=self.kind,
            token_in=token_in,
            token_out=token_out,
            amount_in=request.amount_in,
            amount_out=amount_out,
            pool_addresses=(pool.address,),
            tick_spacings=(self.tick_spacing,),
        )


class V3MultiHopQuoter(SourceQuoter):
    """Quotes two-leg routes through an intermediate token.

    Every (first spacing, second spacing) combination with live pools on both
    legs is tried; the best output wins, earlier combinations on ties.
    """

    kind = SourceKind.V3_MULTI_HOP

    def __init__(
        self,
        tick_spacings: Sequence[int],
        intermediates: Sequence[str] = (),
        quoter: V3Quoter | None = None,
    ) -> None:
        """Initialize the multi-hop quoter.

        Args:
            tick_spacings: Spacings to combine on each leg
            intermediates: Middle tokens to try. Empty means every token that
                shares concentrated-liquidity pools with both ends.
            quoter: On-chain quoter; None uses spot prices per leg
        """
        self.tick_spacings = tuple(tick_spacings)
        self.intermediates = tuple(intermediates)
        self.quoter = quoter

    def _candidates(self, request: QuoteRequest) -> list[str]:
        token_in = request.token_in.address
        token_out = request.token_out.address
        if self.intermediates:
            candidates = [t.lower() for t in self.intermediates]
        else:
            candidates = request.registry.common_v3_neighbors(token_in, token_out)
        return [t for t in candidates if t not in (token_in, token_out)]

    def _leg_amounts(
        self,
        path: tuple[str, str, str],
        pools: tuple[V3PoolSnapshot, V3PoolSnapshot],
        amount_in: int,
    ) -> tuple[int, int | None, int | None] | None:
        """Return (amount_out, sqrt_price_after, gas_estimate) or None."""
        if self.quoter is not None:
            reply = self.quoter.quote_exact_input(
                path, (pools[0].tick_spacing, pools[1].tick_spacing), amount_in
            )
            if reply is None:
                return None
            return reply.amount_out, reply.sqrt_price_x96_after, reply.gas_estimate

        middle = spot_amount_out(pools[0], path[0], amount_in)
        return spot_amount_out(pools[1], path[1], middle), None, None

    def quote(self, request: QuoteRequest) -> Quote | None:
        token_in = request.token_in.address
        token_out = request.token_out.address
        registry = request.registry
        best: Quote | None = None

        for intermediate in self._candidates(request):
            for first, second in product(self.tick_spacings, repeat=2):
                pool_in = registry.get_v3(token_in, intermediate, first)
                pool_out = registry.get_v3(intermediate, token_out, second)
                if pool_in is None or pool_out is None:
                    continue
                if not (pool_in.is_live and pool_out.is_live):
                    continue

                result = self._leg_amounts(
                    (token_in, intermediate, token_out), (pool_in, pool_out), request.amount_in
                )
                if result is None:
                    continue
                amount_out, sqrt_price_after, gas_estimate = result
                if amount_out <= 0:
                    continue

                if best is None or amount_out > best.amount_out:
                    best = Quote(
                        kind=self.kind,
                        token_in=token_in,
                        token_out=token_out,
                        amount_in=request.amount_in,
                        amount_out=amount_out,
                        pool_addresses=(pool_in.address, pool_out.address),
                        tick_spacings=(first, second),
                        intermediate=intermediate,
                        sqrt_price_x96_after=sqrt_price_after,
                        gas_estimate=gas_estimate,
                        simulated=self.quoter is not None,
                    )

        if best is not None:
            logger.debug(
                "v3_multi_hop_best",
                intermediate=best.intermediate,
                tick_spacings=best.tick_spacings,
                amount_out=best.amount_out,
            )
        return best


__all__ = ["spot_amount_out", "V3DirectQuoter", "V3MultiHopQuoter"]
