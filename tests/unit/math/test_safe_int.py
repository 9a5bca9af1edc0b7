"""Tests for SafeInt safe arithmetic wrapper."""

import pytest

from swapquote.errors import DivisionByZero, QuoteError
from swapquote.safe_int import UINT256_MAX, S, SafeInt, Uint256Overflow, Underflow


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_invalid_type_raises(self):
        """SafeInt rejects strings, floats and bools."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add_and_multiply_with_ints(self):
        """Operators accept plain ints on either side."""
        assert (S(2) + 3).value == 5
        assert (3 + S(2)).value == 5
        assert (S(4) * 5).value == 20
        assert (5 * S(4)).value == 20

    def test_subtract_underflow(self):
        """Going negative raises Underflow."""
        assert (S(5) - 3).value == 2
        with pytest.raises(Underflow):
            S(3) - 5

    def test_floor_division(self):
        """Division rounds down."""
        assert (S(7) // 2).value == 3

    def test_division_by_zero(self):
        """Dividing by zero raises DivisionByZero, a QuoteError."""
        with pytest.raises(DivisionByZero):
            S(7) // 0
        with pytest.raises(QuoteError):
            S(7).ceiling_div(0)

    def test_ceiling_division(self):
        """ceiling_div rounds up only when there is a remainder."""
        assert S(7).ceiling_div(2).value == 4
        assert S(8).ceiling_div(2).value == 4

    def test_comparisons(self):
        """Comparisons work against SafeInt and int."""
        assert S(3) < 4
        assert S(3) <= S(3)
        assert S(5) > S(4)
        assert S(5) >= 5
        assert S(5) == 5
        assert bool(S(0)) is False


class TestUint256Bounds:
    """Tests for to_uint256."""

    def test_max_value(self):
        """UINT256_MAX fits."""
        assert S(UINT256_MAX).to_uint256() == UINT256_MAX

    def test_overflow(self):
        """Values above 2^256-1 raise Uint256Overflow."""
        with pytest.raises(Uint256Overflow):
            (S(UINT256_MAX) + 1).to_uint256()
