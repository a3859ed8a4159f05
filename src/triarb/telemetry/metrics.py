"""
Metrics collection for performance monitoring.

Tracks latencies, counters, and cycle statistics
with efficient in-memory storage.
"""

import time
from collections import deque
from dataclasses import dataclass

from triarb.config.constants import LATENCY_WINDOW_SIZE
from triarb.core.types import CycleResult, Direction


@dataclass
class LatencyStats:
    """Aggregated latency statistics."""

    min_us: int = 0
    max_us: int = 0
    avg_us: float = 0.0
    p50_us: int = 0
    p99_us: int = 0
    count: int = 0


@dataclass
class CycleStats:
    """Simulated execution statistics."""

    forward_cycles: int = 0
    reverse_cycles: int = 0
    overdrawn_cycles: int = 0
    total_net_change: float = 0.0
    best_implied_gain: float = 0.0

    @property
    def total_cycles(self) -> int:
        return self.forward_cycles + self.reverse_cycles


class MetricsCollector:
    """
    Collects and aggregates performance metrics.

    Features:
    - Rolling window latency tracking
    - Counter-based event tracking
    - Cycle and net-change accumulation
    """

    def __init__(self, latency_window_size: int = LATENCY_WINDOW_SIZE) -> None:
        """
        Initialize metrics collector.

        Args:
            latency_window_size: Number of samples to keep for latency stats.
        """
        self._window_size = latency_window_size
        self._latencies: dict[str, deque[int]] = {}
        self._counters: dict[str, int] = {}
        self._cycle_stats = CycleStats()
        self._start_time = time.time()

    def record_latency(self, name: str, latency_us: int) -> None:
        """
        Record a latency measurement.

        Args:
            name: Metric name (e.g., "quote_to_decision").
            latency_us: Latency in microseconds.
        """
        if name not in self._latencies:
            self._latencies[name] = deque(maxlen=self._window_size)

        self._latencies[name].append(latency_us)

    def increment_counter(self, name: str, value: int = 1) -> None:
        """Increment a counter."""
        self._counters[name] = self._counters.get(name, 0) + value

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        return self._counters.get(name, 0)

    def record_cycle(self, result: CycleResult) -> None:
        """
        Record an executed cycle.

        Args:
            result: Cycle result from the engine.
        """
        stats = self._cycle_stats

        if result.direction == Direction.FORWARD:
            stats.forward_cycles += 1
        else:
            stats.reverse_cycles += 1

        if result.overdrawn:
            stats.overdrawn_cycles += 1

        stats.total_net_change += result.net_change
        stats.best_implied_gain = max(stats.best_implied_gain, result.opportunity.implied_gain)

    def get_latency_stats(self, name: str) -> LatencyStats:
        """
        Get latency statistics for a metric.

        Returns:
            LatencyStats with aggregated values.
        """
        samples = self._latencies.get(name)
        if not samples:
            return LatencyStats()

        sorted_samples = sorted(samples)
        n = len(sorted_samples)

        return LatencyStats(
            min_us=sorted_samples[0],
            max_us=sorted_samples[-1],
            avg_us=sum(sorted_samples) / n,
            p50_us=sorted_samples[n // 2],
            p99_us=sorted_samples[int(n * 0.99)] if n > 1 else sorted_samples[-1],
            count=n,
        )

    @property
    def cycle_stats(self) -> CycleStats:
        """Get cycle statistics."""
        return self._cycle_stats

    @property
    def uptime_seconds(self) -> float:
        """Get uptime in seconds."""
        return time.time() - self._start_time

    def to_dict(self) -> dict[str, object]:
        """Export all metrics as a dict."""
        stats = self._cycle_stats
        return {
            "uptime_seconds": self.uptime_seconds,
            "counters": dict(self._counters),
            "latencies": {
                name: {
                    "min": s.min_us,
                    "max": s.max_us,
                    "avg": s.avg_us,
                    "p50": s.p50_us,
                    "p99": s.p99_us,
                    "count": s.count,
                }
                for name, s in ((n, self.get_latency_stats(n)) for n in self._latencies)
            },
            "cycles": {
                "forward": stats.forward_cycles,
                "reverse": stats.reverse_cycles,
                "overdrawn": stats.overdrawn_cycles,
                "total_net_change": stats.total_net_change,
                "best_implied_gain": stats.best_implied_gain,
            },
        }

    def reset(self) -> None:
        """Reset all metrics."""
        self._latencies.clear()
        self._counters.clear()
        self._cycle_stats = CycleStats()
        self._start_time = time.time()
