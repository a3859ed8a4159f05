"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

import pytest

from tests.mocks import make_snapshot
from triarb.config.settings import Settings
from triarb.core.types import QuoteSnapshot
from triarb.market.quote_cache import QuoteCache
from triarb.market.symbols import TriangleSymbols
from triarb.strategy.engine import ArbitrageEngine
from triarb.strategy.ledger import Ledger


FEE_RATE = 0.001
SLIPPAGE_RATE = 0.0001


# =============================================================================
# Symbol Fixtures
# =============================================================================


@pytest.fixture
def symbols() -> TriangleSymbols:
    """FIL / ETH / BSV triangle."""
    return TriangleSymbols("FIL", "ETH", "BSV")


# =============================================================================
# Snapshot Fixtures
# =============================================================================


@pytest.fixture
def forward_snapshot() -> QuoteSnapshot:
    """
    Forward opportunity only.

    0.1 * 0.5 = 0.05 < 0.06 * 0.999 * 0.9999
    """
    return make_snapshot(ab=(0.099, 0.1), bc=(0.49, 0.5), ac=(0.06, 0.061))


@pytest.fixture
def reverse_snapshot() -> QuoteSnapshot:
    """
    Reverse opportunity only.

    0.1 * 0.5 = 0.05 > 0.04 * 1.001 * 1.0001
    """
    return make_snapshot(ab=(0.1, 0.101), bc=(0.5, 0.51), ac=(0.039, 0.04))


@pytest.fixture
def flat_snapshot() -> QuoteSnapshot:
    """Consistent prices with no opportunity in either direction."""
    return make_snapshot(ab=(0.099, 0.1), bc=(0.49, 0.5), ac=(0.049, 0.05))


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def ledger() -> Ledger:
    """Ledger with the default starting balances and costs."""
    return Ledger(
        balance_a=700.0,
        balance_b=0.0,
        balance_c=0.0,
        fee_rate=FEE_RATE,
        slippage_rate=SLIPPAGE_RATE,
    )


@pytest.fixture
def engine(ledger: Ledger, symbols: TriangleSymbols) -> ArbitrageEngine:
    """Engine trading 100 units of A per cycle."""
    return ArbitrageEngine(ledger=ledger, notional=100.0, symbols=symbols)


@pytest.fixture
def quote_cache() -> QuoteCache:
    """Empty quote cache."""
    return QuoteCache()


@pytest.fixture
def settings() -> Settings:
    """Default settings, isolated from any local .env file."""
    return Settings(_env_file=None, report_interval=60.0)  # type: ignore[call-arg]
