"""Token identity model."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from swapquote.models.types import Address, normalize_address


class Token(BaseModel):
    """An ERC20 token, or the chain's native currency.

    Tokens are immutable and hashable so they can key dictionaries and be
    shared freely between concurrently running quoters. Addresses are stored
    lowercase.
    """

    address: Address
    # Some exotic tokens use more than 18 decimals; 77 is the uint256 ceiling
    decimals: int = Field(ge=0, le=77)
    symbol: str | None = None
    is_native: bool = Field(default=False, alias="isNative")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("address")
    @classmethod
    def _lowercase_address(cls, value: str) -> str:
        return normalize_address(value)

    @property
    def unit(self) -> int:
        """Raw units per whole token (10**decimals)."""
        return 10**self.decimals

    def __str__(self) -> str:
        return self.symbol or self.address


__all__ = ["Token"]
