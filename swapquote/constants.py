"""Protocol constants for the quoting engine.

Centralizes well-known addresses, tick bounds and fee parameters.
"""

from swapquote.models.types import is_valid_address


def _validate_address(name: str, address: str) -> str:
    """Validate a hard-coded address at import time and return it lowercased."""
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address.lower()


# Tick bounds from TickMath
MIN_TICK = -887272
MAX_TICK = 887272

# sqrtPriceX96 at MIN_TICK and MAX_TICK
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

Q96 = 2**96

# Basis-point denominator shared by V2 fees and slippage tolerances
BPS_DENOMINATOR = 10_000

# V3 fees are expressed in pips (hundredths of a basis point)
PIPS_DENOMINATOR = 1_000_000

# V2 pool fees in basis points (factory defaults)
V2_STABLE_FEE_BPS = 5
V2_VOLATILE_FEE_BPS = 30

# Tick spacings enabled on the concentrated-liquidity factory
V3_TICK_SPACINGS = (1, 50, 100, 200, 2000)

# Swap fee per tick spacing, in pips
V3_TICK_SPACING_FEE_PIPS = {
    1: 50,  # 0.005%
    10: 500,  # 0.05%
    50: 200,  # 0.02%
    80: 3000,  # 0.30%
    100: 450,  # 0.045%
    200: 2500,  # 0.25%
    2000: 10_000,  # 1%
}

# Default fee when a pool's tick spacing is not in the table above
V3_DEFAULT_FEE_PIPS = 3000

# Placeholder address used for the native currency
NATIVE_TOKEN = _validate_address("native", "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE")

# Wrapped native currency and the default routing intermediates
WSEI = _validate_address("WSEI", "0xE30feDd158A2e3b13e9badaeABaFc5516e95e8C7")
USDC = _validate_address("USDC", "0xe15fC38F6D8c56aF07bbCBe3BAf5708A2Bf42392")

# Dollar stablecoins expected to trade 1:1 with each other
USDT0 = _validate_address("USDT0", "0x9151434b16b9763660705744891fA906F660EcC5")
USDC_NOBLE = _validate_address("USDC.n", "0x3894085Ef7Ff0f0aeDf52E2A2704928d1Ec074F1")
PEGGED_TOKENS = frozenset({USDC, USDT0, USDC_NOBLE})

# Concentrated-liquidity quoter contracts
QUOTER_V2_ADDRESS = _validate_address("QuoterV2", "0xEC98E8bFaA9375E2D588042F045aD028BaDC43CB")
MIXED_ROUTE_QUOTER_ADDRESS = _validate_address(
    "MixedRouteQuoterV1", "0x476faE73abA86E6e300234235BD56Bd94913ce07"
)
