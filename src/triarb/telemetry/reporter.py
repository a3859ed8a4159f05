"""
Periodic balance reporter.

Runs on its own timer task, independent of the decision loop, and
only ever reads the ledger.
"""

import asyncio
import sys
from datetime import timedelta
from typing import TextIO

from triarb.config.constants import DEFAULT_REPORT_INTERVAL
from triarb.core.types import Asset
from triarb.market.symbols import TriangleSymbols
from triarb.strategy.ledger import Ledger
from triarb.telemetry.metrics import MetricsCollector
from triarb.utils.time import format_duration_us


class BalanceReporter:
    """
    Prints a one-line balance status on a fixed interval.

    Reads go through ``Ledger.balances()``, which copies under the
    ledger lock, so a report never shows half of a leg.
    """

    # Box drawing characters
    BOX_TL = "\u2554"  # ╔
    BOX_TR = "\u2557"  # ╗
    BOX_BL = "\u255a"  # ╚
    BOX_BR = "\u255d"  # ╝
    BOX_H = "\u2550"  # ═
    BOX_V = "\u2551"  # ║

    def __init__(
        self,
        ledger: Ledger,
        metrics: MetricsCollector | None = None,
        symbols: TriangleSymbols | None = None,
        output: TextIO | None = None,
        width: int = 56,
    ) -> None:
        """
        Initialize reporter.

        Args:
            ledger: Ledger to read.
            metrics: Optional metrics for cycle counts.
            symbols: Symbol table for asset names.
            output: Output stream (default: stdout).
            width: Summary box width in characters.
        """
        self._ledger = ledger
        self._metrics = metrics
        self._symbols = symbols or TriangleSymbols()
        self._output = output or sys.stdout
        self._width = width
        self._running = False
        self._task: asyncio.Task[None] | None = None
        self._report_count = 0

    def _format_uptime(self, seconds: float) -> str:
        """Format uptime as HH:MM:SS."""
        td = timedelta(seconds=int(seconds))
        hours, remainder = divmod(int(td.total_seconds()), 3600)
        minutes, secs = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"

    def _format_balances(self) -> str:
        balances = self._ledger.balances()
        return ", ".join(
            f"{self._symbols.asset_name(asset)}={balances[asset]:.2f}" for asset in Asset
        )

    def render(self) -> str:
        """
        Render the status line.

        Returns:
            e.g. ``Balances: FIL=700.00, ETH=0.00, BSV=0.00 | cycles fwd=0 rev=0 | overdrafts=0``
        """
        line = f"Balances: {self._format_balances()}"

        if self._metrics is not None:
            stats = self._metrics.cycle_stats
            line += (
                f" | cycles fwd={stats.forward_cycles} rev={stats.reverse_cycles}"
                f" | overdrafts={len(self._ledger.overdrafts)}"
            )

        return line

    def display(self) -> None:
        """Write one status line."""
        self._output.write(self.render())
        self._output.write("\n")
        self._output.flush()
        self._report_count += 1

    async def run(self, interval: float = DEFAULT_REPORT_INTERVAL) -> None:
        """
        Report every ``interval`` seconds until stopped.

        Args:
            interval: Seconds between reports.
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")

        self._running = True

        while self._running:
            await asyncio.sleep(interval)
            self.display()

    def start(self, interval: float = DEFAULT_REPORT_INTERVAL) -> asyncio.Task[None]:
        """Start the reporter as a background task."""
        self._task = asyncio.create_task(self.run(interval))
        return self._task

    async def stop(self) -> None:
        """Stop the reporter and wait for its task to finish."""
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    @property
    def report_count(self) -> int:
        """Number of status lines written."""
        return self._report_count

    def print_summary(self) -> None:
        """Write a final summary box."""
        inner = self._width - 2
        lines = [f"{self.BOX_TL}{self.BOX_H * inner}{self.BOX_TR}"]

        def row(text: str) -> None:
            lines.append(f"{self.BOX_V}{text.ljust(inner)[:inner]}{self.BOX_V}")

        row("  SESSION SUMMARY")
        if self._metrics is not None:
            stats = self._metrics.cycle_stats
            row(f"  Uptime:          {self._format_uptime(self._metrics.uptime_seconds)}")
            row(f"  Quotes:          {self._metrics.get_counter('quotes_received'):,}")
            row(f"  Forward cycles:  {stats.forward_cycles:,}")
            row(f"  Reverse cycles:  {stats.reverse_cycles:,}")
            row(f"  Net change:      {stats.total_net_change:+.8f}")

            latency = self._metrics.get_latency_stats("quote_to_decision")
            if latency.count:
                row(
                    f"  Latency:         p50 {format_duration_us(latency.p50_us)}"
                    f" / p99 {format_duration_us(latency.p99_us)}"
                )
        row(f"  Overdrafts:      {len(self._ledger.overdrafts):,}")
        row(f"  {self._format_balances()}")
        lines.append(f"{self.BOX_BL}{self.BOX_H * inner}{self.BOX_BR}")

        self._output.write("\n".join(lines))
        self._output.write("\n")
        self._output.flush()
