"""Tests for tick <-> price and tick <-> sqrtPriceX96 conversions."""

import math
from decimal import Decimal, localcontext

import pytest

from swapquote.constants import MAX_SQRT_RATIO, MAX_TICK, MIN_SQRT_RATIO, MIN_TICK
from swapquote.errors import InvalidPrice, QuoteError, TickOutOfBounds
from swapquote.math.ranges import (
    PEGGED_RANGE_PRESETS,
    is_pegged_pair,
    is_pegged_token,
    pegged_range_ticks,
)
from swapquote.math.tick_math import (
    nearest_usable_tick,
    price_to_tick,
    sqrt_price_x96_to_price,
    sqrt_price_x96_to_tick,
    tick_to_price,
    tick_to_sqrt_price_x96,
)
from tests.helpers import USDC, USDT0, WSEI


def exact_sqrt_price_x96(tick: int) -> Decimal:
    """sqrt(1.0001^tick) * 2^96 at high precision."""
    with localcontext() as ctx:
        ctx.prec = 80
        return (Decimal("1.0001") ** tick).sqrt() * (Decimal(2) ** 96)


class TestTickToSqrtPrice:
    """Tests for the exact integer conversion."""

    def test_tick_zero_is_q96(self):
        """Tick 0 is a price of exactly 1."""
        assert tick_to_sqrt_price_x96(0) == 2**96

    def test_min_tick(self):
        """MIN_TICK maps to MIN_SQRT_RATIO."""
        assert tick_to_sqrt_price_x96(MIN_TICK) == MIN_SQRT_RATIO

    def test_max_tick(self):
        """MAX_TICK maps to MAX_SQRT_RATIO."""
        assert tick_to_sqrt_price_x96(MAX_TICK) == MAX_SQRT_RATIO

    @pytest.mark.parametrize(
        ("tick", "expected"),
        [
            (1, 79232123823359799118286999568),
            (-1, 79224201403219477170569942574),
            (2, 79236085330515764027303304732),
            (-2, 79220240490215316061937756561),
            (4, 79244008939048815603706035062),
            (-4, 79212319258289487113226433917),
            (16, 79291567232598584799939703905),
            (-16, 79164808496886665658930780292),
            (50, 79426470787362580746886972461),
            (512, 81282483887344747381513967012),
            (-512, 77225761753129597550065289037),
            (1024, 83390072131320151908154831282),
            (-1024, 75273969370139069689486932538),
            (8192, 119332217159966728226237229891),
            (-8192, 52601903197458624361810746400),
            (131072, 55581415166113811149459800483534),
            (-131072, 112935262922445818024280874),
        ],
    )
    def test_exact_values(self, tick, expected):
        """Each bit of the tick applies its multiplier exactly as the on-chain TickMath does."""
        assert tick_to_sqrt_price_x96(tick) == expected

    @pytest.mark.parametrize("tick", [1, -1, 60, -60, 5000, -5000, 123456, -400000])
    def test_matches_real_value(self, tick):
        """Result agrees with sqrt(1.0001^tick) * 2^96 to well under one part per billion."""
        expected = exact_sqrt_price_x96(tick)
        actual = Decimal(tick_to_sqrt_price_x96(tick))
        assert abs(actual - expected) / expected < Decimal("1e-9")

    def test_strictly_increasing_near_zero(self):
        """Adjacent ticks give strictly increasing sqrt prices."""
        values = [tick_to_sqrt_price_x96(t) for t in range(-300, 301)]
        assert all(a < b for a, b in zip(values, values[1:]))

    def test_strictly_increasing_near_bounds(self):
        """Monotonicity holds at both ends of the tick range."""
        low = [tick_to_sqrt_price_x96(t) for t in range(MIN_TICK, MIN_TICK + 50)]
        high = [tick_to_sqrt_price_x96(t) for t in range(MAX_TICK - 50, MAX_TICK + 1)]
        assert all(a < b for a, b in zip(low, low[1:]))
        assert all(a < b for a, b in zip(high, high[1:]))

    @pytest.mark.parametrize("tick", [MAX_TICK + 1, MIN_TICK - 1, 10**7])
    def test_out_of_bounds_raises(self, tick):
        """Ticks beyond the bounds are rejected."""
        with pytest.raises(TickOutOfBounds):
            tick_to_sqrt_price_x96(tick)

    def test_out_of_bounds_is_value_error(self):
        """TickOutOfBounds can be caught as ValueError and QuoteError."""
        with pytest.raises(ValueError):
            tick_to_sqrt_price_x96(MAX_TICK + 1)
        with pytest.raises(QuoteError):
            tick_to_sqrt_price_x96(MAX_TICK + 1)


class TestSqrtPriceToTick:
    """Tests for the inverse conversion."""

    @pytest.mark.parametrize("tick", [MIN_TICK, -200311, -1, 0, 1, 42, 269400, MAX_TICK - 1])
    def test_exact_ratio_round_trip(self, tick):
        """The sqrt ratio of a tick converts back to that tick."""
        assert sqrt_price_x96_to_tick(tick_to_sqrt_price_x96(tick)) == tick

    @pytest.mark.parametrize("tick", [-5000, 0, 777])
    def test_between_ticks_rounds_down(self, tick):
        """Prices between two ticks give the lower one."""
        ratio = tick_to_sqrt_price_x96(tick)
        assert sqrt_price_x96_to_tick(ratio + 1) == tick
        assert sqrt_price_x96_to_tick(ratio - 1) == tick - 1

    def test_min_sqrt_ratio(self):
        """MIN_SQRT_RATIO is the lowest accepted value."""
        assert sqrt_price_x96_to_tick(MIN_SQRT_RATIO) == MIN_TICK

    @pytest.mark.parametrize("value", [0, MIN_SQRT_RATIO - 1, MAX_SQRT_RATIO])
    def test_out_of_range_raises(self, value):
        """Values outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO) are rejected."""
        with pytest.raises(InvalidPrice):
            sqrt_price_x96_to_tick(value)


class TestPriceToTick:
    """Tests for human price -> tick."""

    def test_unit_price_same_decimals(self):
        """A price of 1 between equal-decimal tokens is tick 0."""
        assert price_to_tick(1.0, 18, 18, 1) == 0

    def test_decimal_adjustment(self):
        """2000 token1 per token0 with 18/6 decimals lands near tick -200311."""
        assert price_to_tick(2000.0, 18, 6, 10) == -200310

    def test_token1_base_inverts(self):
        """Quoting the inverse price with token1 as base gives the same tick."""
        assert price_to_tick(1 / 2000, 18, 6, 10, is_token0_base=False) == price_to_tick(
            2000.0, 18, 6, 10
        )

    def test_result_aligned_to_spacing(self):
        """Ticks are multiples of the spacing."""
        for price in (0.5, 0.999, 1.0, 1.37, 42.0):
            assert price_to_tick(price, 18, 18, 60) % 60 == 0

    @pytest.mark.parametrize("tick_spacing", [1, 50, 60, 200])
    @pytest.mark.parametrize("tick", [-276300, -1200, 0, 600, 92400])
    def test_round_trip_within_one_spacing(self, tick, tick_spacing):
        """tick -> price -> tick lands within one spacing of the start."""
        aligned = (tick // tick_spacing) * tick_spacing
        price = tick_to_price(aligned, 18, 6)
        assert abs(price_to_tick(price, 18, 6, tick_spacing) - aligned) <= tick_spacing

    def test_extreme_price_clamped_to_usable_tick(self):
        """Prices beyond the tick range clamp to the nearest usable bound."""
        assert price_to_tick(1e300, 0, 0, 60) == 887220
        assert price_to_tick(1e-300, 0, 0, 60) == -887220

    @pytest.mark.parametrize("price", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_price_raises(self, price):
        """Zero, negative and non-finite prices are rejected."""
        with pytest.raises(InvalidPrice):
            price_to_tick(price, 18, 18, 1)


class TestTickToPrice:
    """Tests for tick -> human price."""

    def test_tick_zero_with_decimals(self):
        """Tick 0 shifts only by the decimal difference."""
        assert tick_to_price(0, 18, 6) == pytest.approx(1e12)
        assert tick_to_price(0, 6, 6) == 1.0

    def test_token1_base_is_reciprocal(self):
        """Flipping the base token inverts the price."""
        price = tick_to_price(1000, 18, 18)
        assert tick_to_price(1000, 18, 18, is_token0_base=False) == pytest.approx(1 / price)

    def test_one_tick_is_one_basis_point(self):
        """Each tick moves the price by 0.01%."""
        assert tick_to_price(1, 18, 18) == pytest.approx(1.0001)

    def test_out_of_bounds_raises(self):
        """Ticks outside the range are rejected."""
        with pytest.raises(TickOutOfBounds):
            tick_to_price(MAX_TICK + 1, 18, 18)

    def test_sqrt_price_to_price(self):
        """2^96 is a raw price of 1."""
        assert sqrt_price_x96_to_price(2**96, 6, 6) == 1.0
        assert sqrt_price_x96_to_price(2**96, 6, 18) == pytest.approx(1e-12)

    def test_sqrt_price_to_price_rejects_zero(self):
        """A zero sqrt price has no price."""
        with pytest.raises(InvalidPrice):
            sqrt_price_x96_to_price(0, 18, 18)


class TestNearestUsableTick:
    """Tests for spacing alignment."""

    @pytest.mark.parametrize(
        "tick,spacing,expected",
        [
            (25, 50, 50),
            (24, 50, 0),
            (-25, 50, 0),
            (-26, 50, -50),
            (7, 1, 7),
            (119, 60, 120),
        ],
    )
    def test_rounds_half_up(self, tick, spacing, expected):
        """Ticks round to the nearest multiple, halves upward."""
        assert nearest_usable_tick(tick, spacing) == expected

    def test_clamps_inside_bounds(self):
        """Rounding past a bound steps back one spacing."""
        assert nearest_usable_tick(MAX_TICK, 60) == 887220
        assert nearest_usable_tick(MIN_TICK, 60) == -887220

    def test_rejects_bad_input(self):
        """Non-positive spacing and out-of-range ticks are rejected."""
        with pytest.raises(ValueError):
            nearest_usable_tick(0, 0)
        with pytest.raises(TickOutOfBounds):
            nearest_usable_tick(MAX_TICK + 1, 1)


class TestPeggedPresets:
    """Tests for pegged-pair range presets."""

    def test_tight_at_default_spacing(self):
        """The default preset is +-100 ticks at spacing 50."""
        assert pegged_range_ticks() == (-100, 100)

    def test_aligned_outward(self):
        """Presets widen to the spacing rather than narrowing."""
        assert pegged_range_ticks("ultra_tight", 60) == (-60, 60)
        assert pegged_range_ticks("medium", 200) == (-600, 600)

    def test_price_range_brackets_peg(self):
        """A preset's price range contains 1.0 for equal-decimal tokens."""
        price_range = PEGGED_RANGE_PRESETS["wide"].price_range(50, 6, 6)
        assert price_range.lower < 1.0 < price_range.upper

    def test_unknown_preset(self):
        """Unknown preset names raise KeyError."""
        with pytest.raises(KeyError):
            pegged_range_ticks("extreme")

    def test_stablecoin_pair_is_pegged(self):
        """USDC, USDT0 and USDC.n pair with each other regardless of address case."""
        assert is_pegged_pair(USDC, USDT0)
        assert is_pegged_pair(USDT0.upper().replace("0X", "0x"), USDC)
        assert is_pegged_pair(USDC, "0x3894085Ef7Ff0f0aeDf52E2A2704928d1Ec074F1")

    def test_volatile_pair_is_not_pegged(self):
        """A pair with one non-stablecoin side does not use the pegged presets."""
        assert is_pegged_token(USDC)
        assert not is_pegged_token(WSEI)
        assert not is_pegged_pair(WSEI, USDC)
        assert not is_pegged_pair(USDC, WSEI)
