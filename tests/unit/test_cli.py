"""Tests for the command-line interface."""

import json

import pytest

from swapquote.cli import main
from tests.helpers import USDT0, WSEI


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every CLI test with the default configuration."""
    for name in (
        "SWAPQUOTE_TICK_SPACINGS",
        "SWAPQUOTE_INTERMEDIATES",
        "SWAPQUOTE_WRAPPED_NATIVE",
        "SWAPQUOTE_RPC_URL",
        "SWAPQUOTE_DEBOUNCE_MS",
        "SWAPQUOTE_MAX_WORKERS",
        "SWAPQUOTE_SLIPPAGE_BPS",
    ):
        monkeypatch.delenv(name, raising=False)


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestRouteCommand:
    """Tests for `swapquote route`."""

    def test_volatile_route(self, capsys, fixtures_dir):
        """One WSEI routes through the volatile pool."""
        code, out, _ = run(
            capsys,
            "route",
            "--snapshot",
            str(fixtures_dir / "snapshot.json"),
            "--token-in",
            WSEI,
            "--token-out",
            "0xe15fC38F6D8c56aF07bbCBe3BAf5708A2Bf42392",
            "--amount",
            "1",
        )
        assert code == 0
        result = json.loads(out)
        assert result["source"] == "v2_volatile"
        assert result["amountIn"] == str(10**18)
        assert result["amountOut"] == "1992013"
        assert result["amountOutFormatted"] == "1.992013"
        assert result["amountOutMin"] == "1982053"
        assert result["slippageBps"] == 50
        assert len(result["hops"]) == 1

    def test_no_route(self, capsys, fixtures_dir):
        """A pair without liquidity exits 1 with an error object."""
        code, out, err = run(
            capsys,
            "route",
            "--snapshot",
            str(fixtures_dir / "snapshot.json"),
            "--token-in",
            USDT0,
            "--token-out",
            WSEI,
            "--amount",
            "5",
        )
        assert code == 1
        assert out == ""
        assert json.loads(err)["error"] == "NoRouteFound"


class TestTickCommand:
    """Tests for `swapquote tick`."""

    def test_price_to_tick(self, capsys):
        """Prices are converted and aligned to the spacing."""
        code, out, _ = run(
            capsys,
            "tick",
            "--price",
            "2000",
            "--decimals0",
            "18",
            "--decimals1",
            "6",
            "--tick-spacing",
            "10",
        )
        assert code == 0
        assert json.loads(out)["tick"] == -200310

    def test_tick_to_price(self, capsys):
        """Tick 0 between equal-decimal tokens is price 1."""
        code, out, _ = run(capsys, "tick", "--tick", "0", "--decimals0", "6", "--decimals1", "6")
        result = json.loads(out)
        assert code == 0
        assert result["price"] == 1.0
        assert result["sqrtPriceX96"] == str(2**96)

    def test_missing_input(self, capsys):
        """Neither --price nor --tick is an error."""
        code, _, err = run(capsys, "tick", "--decimals0", "6", "--decimals1", "6")
        assert code == 1
        assert json.loads(err)["error"] == "ValueError"


class TestPositionCommand:
    """Tests for `swapquote position`."""

    def test_full_range(self, capsys):
        """Full range at 2500 pairs 3 token0 with 7500 token1."""
        code, out, _ = run(
            capsys,
            "position",
            "--current",
            "2500",
            "--lower",
            "0",
            "--upper",
            "inf",
            "--amount",
            "3",
        )
        result = json.loads(out)
        assert code == 0
        assert result["amount0"] == 3.0
        assert result["amount1"] == pytest.approx(7500.0)
        assert result["needsToken0"] and result["needsToken1"]

    def test_degenerate_range(self, capsys):
        """Equal bounds exit 1."""
        code, _, err = run(
            capsys, "position", "--current", "1", "--lower", "2", "--upper", "2", "--amount", "1"
        )
        assert code == 1
        assert json.loads(err)["error"] == "DegenerateRange"
