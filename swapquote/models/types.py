"""Shared type definitions and address helpers."""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

# Maximum uint256 value
UINT256_MAX = 2**256 - 1


def validate_uint256(value: Any) -> int:
    """Validate a uint256 given as int or decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        The value as a Python int

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")

    if isinstance(value, str):
        try:
            value = int(value, 0) if value.lower().startswith("0x") else int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be an integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")

    return value


# Ethereum address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# 256-bit unsigned integer, accepted as int, decimal string or hex string
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase with 0x prefix.

    Args:
        address: An Ethereum address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid Ethereum address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Return (token0, token1) in canonical pool order.

    Pools order their tokens by address value. Lowercase hex strings of equal
    length compare the same way as the underlying 20-byte values.

    Raises:
        ValueError: If both addresses are the same token
    """
    a = normalize_address(token_a)
    b = normalize_address(token_b)
    if a == b:
        raise ValueError(f"Identical tokens: {token_a}")
    return (a, b) if a < b else (b, a)


__all__ = [
    "UINT256_MAX",
    "Address",
    "Uint256",
    "validate_uint256",
    "normalize_address",
    "is_valid_address",
    "sort_tokens",
]
