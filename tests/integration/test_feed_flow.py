"""
Integration tests for the WebSocket feed feeding the runner.

Uses a mock WebSocket connection, so no network is touched.
"""

import asyncio
import io

import pytest

from tests.mocks import MockSession, MockWebSocket, quote_frame, text_frame
from triarb.config.settings import Settings
from triarb.core.runner import ArbitrageRunner
from triarb.core.types import Asset, Direction, SymbolID
from triarb.market.feed import QuoteFeed
from triarb.market.quote_cache import QuoteCache
from triarb.market.symbols import TriangleSymbols


def make_feed(frames: list, symbols: TriangleSymbols) -> QuoteFeed:
    return QuoteFeed("wss://test", symbols, session=MockSession(MockWebSocket(frames)))


class TestFeedToCache:
    """Tests for feed frames landing in the cache."""

    @pytest.mark.asyncio
    async def test_latest_quote_per_symbol(self, symbols: TriangleSymbols) -> None:
        """Test repeated frames leave only the newest quote cached."""
        feed = make_feed(
            [
                quote_frame("FIL-ETH", 0.099, 0.1),
                quote_frame("FIL-ETH", 0.098, 0.0995),
                quote_frame("ETH-BSV", 0.49, 0.5),
            ],
            symbols,
        )
        cache = QuoteCache()

        async for quote in feed:
            cache.update(quote)

        assert cache.size == 2
        assert cache.get(SymbolID.AB).ask == 0.0995  # type: ignore[union-attr]
        assert cache.update_count == 3


class TestFeedToRunner:
    """Tests for the full pipeline over a mock connection."""

    @pytest.mark.asyncio
    async def test_reverse_opportunity_end_to_end(self, settings: Settings) -> None:
        """Test a reverse opportunity on the wire moves the ledger."""
        symbols = TriangleSymbols.from_settings(settings)
        feed = make_feed(
            [
                quote_frame("FIL-ETH", 0.1, 0.101),
                text_frame({"symbol": "FIL-ETH", "bid": "oops"}),
                quote_frame("BTC-USDT", 60000.0, 60001.0),
                quote_frame("ETH-BSV", 0.5, 0.51),
                quote_frame("FIL-BSV", 0.039, 0.04),
            ],
            symbols,
        )
        runner = ArbitrageRunner(settings, feed=feed, output=io.StringIO())
        cycles = []
        runner.engine.register_callback(cycles.append)

        await asyncio.wait_for(runner.run(), timeout=5.0)

        assert [c.direction for c in cycles] == [Direction.REVERSE]
        assert runner.metrics.get_counter("quotes_received") == 3
        assert feed.malformed_count == 1
        assert feed.discarded_count == 1
        legs = cycles[0].legs
        assert runner.ledger.balance(Asset.A) == pytest.approx(
            700.0 - legs[0].spent + legs[2].received
        )
        assert runner.feed_error is not None
        assert runner.feed_error.reason == "feed closed"
