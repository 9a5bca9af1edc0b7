"""Test helpers module for shared test utilities.

- constants: Token and pool addresses
- factories: Token, pool and registry factory functions
"""

from tests.helpers.constants import (
    NATIVE,
    POOL_A,
    POOL_B,
    POOL_C,
    TOKEN_DECIMALS,
    USDC,
    USDT0,
    WIND,
    WSEI,
)
from tests.helpers.factories import (
    make_registry,
    make_request,
    make_token,
    make_v2_pool,
    make_v3_pool,
)

__all__ = [
    # Constants
    "WSEI",
    "USDC",
    "USDT0",
    "WIND",
    "NATIVE",
    "POOL_A",
    "POOL_B",
    "POOL_C",
    "TOKEN_DECIMALS",
    # Factories
    "make_token",
    "make_v2_pool",
    "make_v3_pool",
    "make_registry",
    "make_request",
]
