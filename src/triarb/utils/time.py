"""
High-precision time utilities.

Microsecond timestamps for quote freshness and decision latency.
"""

import time


def get_timestamp_us() -> int:
    """Wall-clock time in microseconds; quotes are stamped with this on receipt."""
    return time.time_ns() // 1000


def format_duration_us(duration_us: int) -> str:
    """
    Render a latency for the session summary.

    Examples:
        >>> format_duration_us(85)
        '85μs'
        >>> format_duration_us(2340)
        '2.34ms'
        >>> format_duration_us(10_000_000)
        '10.00s'
    """
    if duration_us < 1000:
        return f"{duration_us}μs"
    if duration_us < 1_000_000:
        return f"{duration_us / 1000:.2f}ms"
    return f"{duration_us / 1_000_000:.2f}s"


class LatencyTimer:
    """
    Measures the time spent inside a ``with`` block.

    The runner wraps each engine evaluation in one:

        >>> with LatencyTimer() as timer:
        ...     results = engine.evaluate(snapshot)
        >>> metrics.record_latency("evaluation", timer.latency_us)
    """

    __slots__ = ("start_us", "end_us", "latency_us")

    def __init__(self) -> None:
        self.start_us = 0
        self.end_us = 0
        self.latency_us = 0

    def __enter__(self) -> "LatencyTimer":
        self.start_us = get_timestamp_us()
        return self

    def __exit__(self, *args: object) -> None:
        self.end_us = get_timestamp_us()
        self.latency_us = self.end_us - self.start_us
