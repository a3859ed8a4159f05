"""
Integration tests for ArbitrageRunner.

Drives the ingestion and decision tasks end to end with a scripted
quote feed.
"""

import asyncio
import io

import pytest

from tests.mocks import MockQuoteFeed, make_quote
from triarb.__main__ import main
from triarb.config.settings import Settings, get_settings
from triarb.core.errors import FeedError
from triarb.core.runner import ArbitrageRunner, create_runner
from triarb.core.types import Asset, Quote, SymbolID


FORWARD_QUOTES = [
    make_quote(SymbolID.AB, 0.099, 0.1),
    make_quote(SymbolID.BC, 0.49, 0.5),
    make_quote(SymbolID.AC, 0.06, 0.061),
]


def make_settings(**kwargs: object) -> Settings:
    kwargs.setdefault("report_interval", 60.0)
    return Settings(_env_file=None, **kwargs)  # type: ignore[arg-type]


class TestRunnerLifecycle:
    """Tests for starting and stopping the runner."""

    @pytest.mark.asyncio
    async def test_feed_end_is_reported(self) -> None:
        """Test a closed feed ends the run with a recorded error."""
        feed = MockQuoteFeed(FORWARD_QUOTES)
        output = io.StringIO()
        runner = ArbitrageRunner(make_settings(), feed=feed, output=output)

        await asyncio.wait_for(runner.run(), timeout=5.0)

        assert runner.feed_error is not None
        assert runner.feed_error.reason == "feed closed"
        assert not runner.is_running
        assert feed.closed
        assert "SESSION SUMMARY" in output.getvalue()

    @pytest.mark.asyncio
    async def test_feed_failure_is_reported(self) -> None:
        """Test a broken feed surfaces its cause."""
        feed = MockQuoteFeed(FORWARD_QUOTES[:1], error=FeedError("connection reset"))
        runner = ArbitrageRunner(make_settings(), feed=feed, output=io.StringIO())

        await asyncio.wait_for(runner.run(), timeout=5.0)

        assert runner.feed_error is not None
        assert "connection reset" in runner.feed_error.reason
        assert runner.metrics.get_counter("evaluations") == 1

    @pytest.mark.asyncio
    async def test_stop_is_clean(self) -> None:
        """Test a requested stop exits without a feed error."""
        feed = MockQuoteFeed(hold_open=True)
        runner = ArbitrageRunner(make_settings(), feed=feed, output=io.StringIO())

        task = asyncio.create_task(runner.run())
        feed.push(FORWARD_QUOTES[0])
        await asyncio.sleep(0.05)
        await runner.stop()
        await asyncio.wait_for(task, timeout=5.0)

        assert runner.feed_error is None
        assert not runner.is_running
        assert runner.metrics.get_counter("evaluations") == 1

    @pytest.mark.asyncio
    async def test_shutdown_is_idempotent(self) -> None:
        """Test shutting down twice is harmless."""
        output = io.StringIO()
        runner = ArbitrageRunner(make_settings(), feed=MockQuoteFeed(), output=output)

        await asyncio.wait_for(runner.run(), timeout=5.0)
        await runner.shutdown()

        assert output.getvalue().count("SESSION SUMMARY") == 1

    @pytest.mark.asyncio
    async def test_create_runner(self) -> None:
        """Test the context manager runs and cleans up."""
        async with create_runner(make_settings(), feed=MockQuoteFeed()) as runner:
            await asyncio.wait_for(runner.run(), timeout=5.0)

        assert not runner.is_running


class TestDecisionFlow:
    """Tests for quote ordering and evaluation."""

    @pytest.mark.asyncio
    async def test_every_quote_evaluated_in_order(self) -> None:
        """Test the decision task sees every quote exactly once, in feed order."""
        quotes = [
            make_quote(SymbolID.AB, 0.099 + i * 1e-6, 0.1 + i * 1e-6) for i in range(50)
        ]
        feed = MockQuoteFeed(quotes)
        runner = ArbitrageRunner(make_settings(), feed=feed, output=io.StringIO())
        seen: list[Quote] = []
        runner.cache.register_callback(seen.append)

        await asyncio.wait_for(runner.run(), timeout=5.0)

        assert seen == quotes
        assert runner.metrics.get_counter("quotes_received") == 50
        assert runner.metrics.get_counter("evaluations") == 50
        assert runner.metrics.get_latency_stats("quote_to_decision").count == 50

    @pytest.mark.asyncio
    async def test_forward_cycle_executed(self) -> None:
        """Test the third quote completes the triangle and trades once."""
        runner = ArbitrageRunner(
            make_settings(), feed=MockQuoteFeed(FORWARD_QUOTES), output=io.StringIO()
        )

        await asyncio.wait_for(runner.run(), timeout=5.0)

        assert runner.metrics.get_counter("forward_cycles") == 1
        assert runner.metrics.get_counter("reverse_cycles") == 0
        assert runner.metrics.cycle_stats.forward_cycles == 1
        assert runner.metrics.get_counter("overdrafts") == 2
        assert runner.ledger.balance(Asset.A) != 700.0

    @pytest.mark.asyncio
    async def test_incomplete_triangle_never_trades(self) -> None:
        """Test quotes for two symbols alone never move balances."""
        feed = MockQuoteFeed(FORWARD_QUOTES[:2] * 5)
        runner = ArbitrageRunner(make_settings(), feed=feed, output=io.StringIO())

        await asyncio.wait_for(runner.run(), timeout=5.0)

        assert runner.metrics.get_counter("evaluations") == 10
        assert runner.ledger.balances() == {Asset.A: 700.0, Asset.B: 0.0, Asset.C: 0.0}

    @pytest.mark.asyncio
    async def test_extreme_prices_do_not_stop_decisions(self) -> None:
        """Test quotes whose products underflow are evaluated without ending the run."""
        quotes = [
            make_quote(SymbolID.AB, 1e-200, 1e-200),
            make_quote(SymbolID.BC, 1e-200, 1e-200),
            make_quote(SymbolID.AC, 0.06, 0.061),
        ]
        runner = ArbitrageRunner(make_settings(), feed=MockQuoteFeed(quotes), output=io.StringIO())

        await asyncio.wait_for(runner.run(), timeout=5.0)

        assert runner.feed_error is not None
        assert runner.feed_error.reason == "feed closed"
        assert runner.metrics.get_counter("evaluations") == 3
        assert runner.metrics.get_counter("forward_cycles") == 0
        assert runner.ledger.balances() == {Asset.A: 700.0, Asset.B: 0.0, Asset.C: 0.0}

    @pytest.mark.asyncio
    async def test_backpressure_holds_feed(self) -> None:
        """Test the feed is not drained ahead of the decision task."""
        feed = MockQuoteFeed(hold_open=True)
        runner = ArbitrageRunner(make_settings(), feed=feed, output=io.StringIO())

        task = asyncio.create_task(runner.run())
        for quote in FORWARD_QUOTES:
            feed.push(quote)
        await asyncio.sleep(0.05)

        assert runner.metrics.get_counter("evaluations") == len(FORWARD_QUOTES)

        feed.finish()
        await asyncio.wait_for(task, timeout=5.0)

        assert runner.feed_error is not None


class TestReporting:
    """Tests for the periodic balance report."""

    @pytest.mark.asyncio
    async def test_reporter_runs_while_feed_is_quiet(self) -> None:
        """Test reports keep coming when no quotes arrive."""
        feed = MockQuoteFeed(hold_open=True)
        output = io.StringIO()
        runner = ArbitrageRunner(make_settings(report_interval=0.01), feed=feed, output=output)

        task = asyncio.create_task(runner.run())
        await asyncio.sleep(0.1)
        await runner.stop()
        await asyncio.wait_for(task, timeout=5.0)

        assert runner.reporter.report_count >= 2
        assert "Balances: FIL=700.00, ETH=0.00, BSV=0.00" in output.getvalue()


class TestEntryPoint:
    """Tests for the command-line entry point."""

    def test_configuration_error_exit_code(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test invalid configuration exits with status 1."""
        monkeypatch.setenv("FEE_RATE", "2.0")
        get_settings.cache_clear()
        try:
            assert main() == 1
        finally:
            get_settings.cache_clear()
