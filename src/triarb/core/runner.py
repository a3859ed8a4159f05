"""
Main orchestrator.

Wires the quote feed, the decision loop and the balance reporter
together and manages their lifecycle:

- Ingestion task: pulls quotes from the feed and hands each one off
- Decision task: takes one quote, updates the cache, evaluates
- Reporter task: reads balances on its own timer
"""

import asyncio
import logging
import signal
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TextIO

from triarb.config.settings import Settings
from triarb.core.errors import FeedUnavailableError, HandoffClosedError
from triarb.core.handoff import Handoff
from triarb.core.types import CycleResult, OverdraftEvent, Quote, QuoteSource
from triarb.market.feed import QuoteFeed
from triarb.market.quote_cache import QuoteCache
from triarb.market.symbols import TriangleSymbols
from triarb.strategy.engine import ArbitrageEngine
from triarb.strategy.ledger import Ledger
from triarb.telemetry.metrics import MetricsCollector
from triarb.telemetry.reporter import BalanceReporter
from triarb.utils.time import LatencyTimer, get_timestamp_us


logger = logging.getLogger(__name__)


class ArbitrageRunner:
    """
    Runs one ingestion task and one decision task over a shared handoff.

    The handoff is the decision task's only suspension point. Cache
    updates, evaluation and ledger mutation all run to completion
    before the next quote is taken, so at most one evaluation is ever
    in flight and evaluations follow handoff order exactly.
    """

    def __init__(
        self,
        settings: Settings,
        feed: QuoteSource | None = None,
        output: TextIO | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            settings: Application settings.
            feed: Quote source; a QuoteFeed on ``settings.feed_url`` if omitted.
            output: Reporter output stream (default: stdout).
        """
        self._settings = settings
        self._symbols = TriangleSymbols.from_settings(settings)
        self._feed: QuoteSource = (
            feed if feed is not None else QuoteFeed(settings.feed_url, self._symbols)
        )

        self._ledger = Ledger(
            balance_a=settings.initial_balance_a,
            balance_b=settings.initial_balance_b,
            balance_c=settings.initial_balance_c,
            fee_rate=settings.fee_rate,
            slippage_rate=settings.slippage_rate,
        )
        self._cache = QuoteCache()
        self._engine = ArbitrageEngine(
            ledger=self._ledger,
            notional=settings.notional,
            symbols=self._symbols,
        )
        self._handoff: Handoff[Quote] = Handoff()
        self._metrics = MetricsCollector()
        self._reporter = BalanceReporter(
            ledger=self._ledger,
            metrics=self._metrics,
            symbols=self._symbols,
            output=output,
        )

        self._engine.register_callback(self._on_cycle)
        self._ledger.register_overdraft_callback(self._on_overdraft)

        self._ingest_task: asyncio.Task[None] | None = None
        self._stop_task: asyncio.Future[None] | None = None
        self._running = False
        self._stopping = False
        self._feed_error: FeedUnavailableError | None = None

    # =========================================================================
    # Callbacks
    # =========================================================================

    def _on_cycle(self, result: CycleResult) -> None:
        self._metrics.record_cycle(result)
        self._metrics.increment_counter(f"{result.direction.value.lower()}_cycles")

    def _on_overdraft(self, event: OverdraftEvent) -> None:
        self._metrics.increment_counter("overdrafts")

    # =========================================================================
    # Tasks
    # =========================================================================

    async def _ingest(self) -> None:
        """Hand every quote from the feed to the decision task."""
        try:
            async for quote in self._feed:
                self._metrics.increment_counter("quotes_received")
                await self._handoff.put(quote)

        except HandoffClosedError:
            # Decision side is shutting down
            return

        except Exception as e:
            logger.error(f"Quote feed failed: {e}")
            await self._handoff.close(f"feed error: {e}")
            return

        await self._handoff.close("feed closed")

    def _decide(self, quote: Quote) -> tuple[CycleResult, ...]:
        """Apply one quote and evaluate. Never suspends."""
        self._cache.update(quote)

        with LatencyTimer() as timer:
            results = self._engine.evaluate(self._cache.snapshot())

        self._metrics.record_latency("evaluation", timer.latency_us)

        self._metrics.increment_counter("evaluations")
        if quote.timestamp_us:
            latency = get_timestamp_us() - quote.timestamp_us
            self._metrics.record_latency("quote_to_decision", latency)

        return results

    async def _decision_loop(self) -> None:
        """Take quotes one at a time until the handoff closes."""
        while True:
            quote = await self._handoff.get()
            self._decide(quote)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def run(self, install_signal_handlers: bool = False) -> None:
        """
        Run until the feed goes away or ``stop()`` is called.

        A lost feed is logged and recorded in ``feed_error``; reconnect
        policy is left to the caller.

        Args:
            install_signal_handlers: Route SIGINT/SIGTERM to ``stop()``.
        """
        self._running = True

        if install_signal_handlers:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self._handle_shutdown)

        logger.info(
            f"Starting decision loop: {self._symbols!r}, notional={self._settings.notional}, "
            f"fee_rate={self._settings.fee_rate}, slippage_rate={self._settings.slippage_rate}"
        )

        self._ingest_task = asyncio.create_task(self._ingest())
        self._reporter.start(interval=self._settings.report_interval)

        try:
            await self._decision_loop()

        except FeedUnavailableError as e:
            if self._stopping:
                logger.info("Decision loop stopped")
            else:
                logger.error(str(e))
                self._feed_error = e

        finally:
            await self.shutdown()

    def _handle_shutdown(self) -> None:
        """Handle shutdown signal."""
        logger.info("Shutdown signal received")
        self._stop_task = asyncio.ensure_future(self.stop())

    async def stop(self) -> None:
        """Ask the decision loop to exit after the quote in hand."""
        self._stopping = True
        await self._handoff.close("shutdown requested")

    async def shutdown(self) -> None:
        """Stop all tasks."""
        if not self._running:
            return

        self._running = False
        self._stopping = True
        await self._handoff.close("shutdown")

        await self._reporter.stop()

        if self._ingest_task and not self._ingest_task.done():
            self._ingest_task.cancel()
            try:
                await self._ingest_task
            except asyncio.CancelledError:
                pass

        feed_close = getattr(self._feed, "close", None)
        if feed_close is not None:
            await feed_close()

        self._reporter.print_summary()
        logger.info("Runner shutdown complete")

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def feed_error(self) -> FeedUnavailableError | None:
        """Why the feed went away, if it did."""
        return self._feed_error

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def cache(self) -> QuoteCache:
        return self._cache

    @property
    def engine(self) -> ArbitrageEngine:
        return self._engine

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def reporter(self) -> BalanceReporter:
        return self._reporter


@asynccontextmanager
async def create_runner(
    settings: Settings,
    feed: QuoteSource | None = None,
) -> AsyncIterator[ArbitrageRunner]:
    """
    Create and manage runner lifecycle.

    Usage:
        async with create_runner(settings) as runner:
            await runner.run()
    """
    runner = ArbitrageRunner(settings, feed=feed)

    try:
        yield runner
    finally:
        await runner.shutdown()
