"""Pytest configuration and fixtures."""

import json
from pathlib import Path

import pytest
import structlog

from swapquote.pools.registry import SnapshotRegistry
from tests.helpers import USDC, USDT0, WIND, WSEI, make_registry, make_v2_pool, make_v3_pool

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


@pytest.fixture
def snapshot_data() -> dict:
    """Load the sample market snapshot as raw JSON."""
    with open(FIXTURES_DIR / "snapshot.json") as f:
        return json.load(f)


@pytest.fixture
def market_registry() -> SnapshotRegistry:
    """A small market: WSEI/USDC on every source, WIND reachable only via WSEI."""
    return make_registry(
        v2_pools=[
            make_v2_pool(WSEI, 1000 * 10**18, USDC, 2000 * 10**6),
            make_v2_pool(USDC, 1_000_000 * 10**6, USDT0, 1_000_000 * 10**6, stable=True),
        ],
        v3_pools=[
            make_v3_pool(WSEI, USDC, 100, tick=269400),
            make_v3_pool(WIND, WSEI, 200, tick=0),
        ],
    )


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()
