"""Command-line entry point.

Examples:
  swapquote route --snapshot market.json --token-in 0xe30f... --token-out 0xe15f... --amount 1.5
  swapquote tick --price 2000 --decimals0 18 --decimals1 6 --tick-spacing 100
  swapquote tick --tick -197300 --decimals0 18 --decimals1 6
  swapquote position --current 1.0 --lower 0.99 --upper 1.01 --amount 100

Results are printed as JSON. Configuration comes from SWAPQUOTE_* variables.
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any

import structlog

from swapquote.amm.concentrated import Web3V3Quoter
from swapquote.config import QuoteConfig
from swapquote.errors import QuoteError
from swapquote.math.liquidity import RangePosition, optimal_amounts, required_tokens
from swapquote.math.tick_math import price_to_tick, tick_to_price, tick_to_sqrt_price_x96
from swapquote.models.snapshot import MarketSnapshot
from swapquote.pools.registry import build_registry_from_snapshot
from swapquote.routing.aggregator import RouteAggregator
from swapquote.routing.types import RouteDecision, RouteRequest
from swapquote.units import format_units, parse_units

logger = structlog.get_logger()


def _decision_to_dict(decision: RouteDecision, decimals_out: int) -> dict[str, Any]:
    route = decision.route
    quote = route.quote
    return {
        "source": quote.kind.value,
        "amountIn": str(quote.amount_in),
        "amountOut": str(quote.amount_out),
        "amountOutFormatted": format_units(quote.amount_out, decimals_out),
        "amountOutMin": str(decision.amount_out_min),
        "slippageBps": decision.minimum.slippage_bps,
        "tickSpacings": list(quote.tick_spacings),
        "intermediate": quote.intermediate,
        "simulated": quote.simulated,
        "hops": [
            {
                "pool": hop.pool,
                "tokenIn": hop.token_in,
                "tokenOut": hop.token_out,
                "tickSpacing": hop.tick_spacing,
            }
            for hop in route.hops
        ],
        "candidates": [
            {
                "source": q.kind.value,
                "amountOut": str(q.amount_out),
                "tickSpacings": list(q.tick_spacings),
            }
            for q in decision.quotes
        ],
    }


def _cmd_route(args: argparse.Namespace, config: QuoteConfig) -> dict[str, Any]:
    snapshot = MarketSnapshot.model_validate_json(Path(args.snapshot).read_text())
    registry = build_registry_from_snapshot(snapshot)

    rpc_url = args.rpc_url or config.rpc_url
    v3_quoter = None
    if rpc_url:
        v3_quoter = Web3V3Quoter(
            rpc_url, config.quoter_address, config.mixed_route_quoter_address
        )

    aggregator = RouteAggregator(registry, config, v3_quoter=v3_quoter)
    token_in = aggregator.resolve_token(args.token_in)
    token_out = aggregator.resolve_token(args.token_out)
    amount_in = parse_units(args.amount, token_in.decimals)

    decision = aggregator.quote(
        RouteRequest(token_in, token_out, amount_in, slippage_bps=args.slippage_bps)
    )
    return _decision_to_dict(decision, token_out.decimals)


def _cmd_tick(args: argparse.Namespace, config: QuoteConfig) -> dict[str, Any]:
    is_token0_base = not args.token1_base
    if args.tick is not None:
        tick = args.tick
    elif args.price is not None:
        tick = price_to_tick(
            args.price, args.decimals0, args.decimals1, args.tick_spacing, is_token0_base
        )
    else:
        raise ValueError("Either --price or --tick is required")
    return {
        "tick": tick,
        "price": tick_to_price(tick, args.decimals0, args.decimals1, is_token0_base),
        "sqrtPriceX96": str(tick_to_sqrt_price_x96(tick)),
    }


def _cmd_position(args: argparse.Namespace, config: QuoteConfig) -> dict[str, Any]:
    position = RangePosition.of(args.current, args.lower, args.upper)
    required = required_tokens(args.current, args.lower, args.upper)
    amounts = optimal_amounts(args.amount, not args.token1, position)
    return {
        "amount0": amounts.amount0,
        "amount1": amounts.amount1,
        "needsToken0": required.needs_token0,
        "needsToken1": required.needs_token1,
        "singleSided": required.single_sided,
    }


def _float_or_inf(value: str) -> float:
    return math.inf if value.lower() in ("inf", "infinity") else float(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swapquote",
        description="Quote swaps and size concentrated-liquidity positions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    route = subparsers.add_parser("route", help="Select the best route for a swap")
    route.add_argument("--snapshot", type=Path, required=True, help="Market snapshot JSON file")
    route.add_argument("--token-in", required=True, help="Input token address")
    route.add_argument("--token-out", required=True, help="Output token address")
    route.add_argument("--amount", required=True, help="Input amount in whole tokens (e.g. 1.5)")
    route.add_argument(
        "--slippage-bps",
        type=int,
        default=None,
        help="Slippage tolerance in basis points (default: SWAPQUOTE_SLIPPAGE_BPS or 50)",
    )
    route.add_argument("--rpc-url", default=None, help="Simulate V3 quotes against this RPC")
    route.set_defaults(handler=_cmd_route)

    tick = subparsers.add_parser("tick", help="Convert between prices and ticks")
    tick.add_argument("--price", type=float, default=None, help="Human price")
    tick.add_argument("--tick", type=int, default=None, help="Tick to convert instead of a price")
    tick.add_argument("--decimals0", type=int, required=True, help="Decimals of token0")
    tick.add_argument("--decimals1", type=int, required=True, help="Decimals of token1")
    tick.add_argument("--tick-spacing", type=int, default=1, help="Pool tick spacing")
    tick.add_argument(
        "--token1-base", action="store_true", help="Price is quoted as token0 per token1"
    )
    tick.set_defaults(handler=_cmd_tick)

    position = subparsers.add_parser("position", help="Size a range position from one amount")
    position.add_argument("--current", type=float, required=True, help="Current price")
    position.add_argument("--lower", type=_float_or_inf, required=True, help="Lower price bound")
    position.add_argument(
        "--upper",
        type=_float_or_inf,
        required=True,
        help="Upper price bound ('inf' for full range)",
    )
    position.add_argument("--amount", type=float, required=True, help="Amount entered")
    position.add_argument("--token1", action="store_true", help="The amount is token1")
    position.set_defaults(handler=_cmd_position)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Logs go to stderr; stdout carries only the JSON result
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

    try:
        config = QuoteConfig.from_env()
    except ValueError as e:
        print(json.dumps({"error": "InvalidConfig", "message": str(e)}), file=sys.stderr)
        return 1

    try:
        result = args.handler(args, config)
    except (QuoteError, ValueError) as e:
        logger.debug("cli_command_failed", command=args.command, error=str(e))
        print(json.dumps({"error": type(e).__name__, "message": str(e)}), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
