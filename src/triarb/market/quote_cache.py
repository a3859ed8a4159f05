"""
Best bid/ask cache for the three triangle symbols.

Holds the latest Quote per SymbolID and hands out consistent,
read-only snapshots for evaluation.
"""

import threading
from collections.abc import Callable, Iterable
from types import MappingProxyType

from triarb.core.types import Quote, QuoteSnapshot, SymbolID
from triarb.utils.time import get_timestamp_us


# Type alias for update callbacks
UpdateCallback = Callable[[Quote], None]


class QuoteCache:
    """
    Latest-quote store with last-write-wins semantics.

    Features:
    - One entry per SymbolID, always replaced wholesale
    - Snapshots copied under a lock, so a reader sees the previous
      whole Quote or the new whole Quote and nothing in between
    - Freshness tracking via receive timestamps, with an optional
      maximum age that drops old entries from snapshots
    """

    __slots__ = ("_cache", "_received_us", "_callbacks", "_update_count", "_lock", "_max_age_us")

    def __init__(self, max_age_us: int | None = None) -> None:
        """
        Initialize empty cache.

        Args:
            max_age_us: Entries older than this are left out of snapshots.
                None keeps entries until replaced.
        """
        if max_age_us is not None and max_age_us <= 0:
            raise ValueError(f"max_age_us must be positive, got {max_age_us}")

        self._cache: dict[SymbolID, Quote] = {}
        self._received_us: dict[SymbolID, int] = {}
        self._callbacks: list[UpdateCallback] = []
        self._update_count: int = 0
        self._lock = threading.Lock()
        self._max_age_us = max_age_us

    def register_callback(self, callback: UpdateCallback) -> None:
        """Register a callback invoked after every update."""
        self._callbacks.append(callback)

    def unregister_callback(self, callback: UpdateCallback) -> None:
        """Unregister a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def update(self, quote: Quote) -> None:
        """
        Replace the stored quote for ``quote.symbol``.

        No ordering checks: the feed delivers each symbol's messages
        in send order, so the last write is the latest price.
        """
        now = get_timestamp_us()
        with self._lock:
            self._cache[quote.symbol] = quote
            self._received_us[quote.symbol] = now
            self._update_count += 1

        for callback in self._callbacks:
            callback(quote)

    def snapshot(self, now_us: int | None = None) -> QuoteSnapshot:
        """
        Take a consistent read-only view of the cache.

        Args:
            now_us: Reference time for the freshness check (default: now).

        Returns:
            Immutable mapping of SymbolID -> Quote for present entries.
        """
        with self._lock:
            entries = dict(self._cache)
            received = dict(self._received_us)

        if self._max_age_us is not None:
            now = get_timestamp_us() if now_us is None else now_us
            entries = {
                sid: quote
                for sid, quote in entries.items()
                if now - received[sid] <= self._max_age_us
            }

        return MappingProxyType(entries)

    def get(self, symbol: SymbolID) -> Quote | None:
        """Get the latest quote for a symbol."""
        return self._cache.get(symbol)

    def age_us(self, symbol: SymbolID, now_us: int | None = None) -> int | None:
        """
        Get microseconds since the symbol was last updated.

        Returns:
            Age in microseconds, or None if never updated.
        """
        received = self._received_us.get(symbol)
        if received is None:
            return None
        now = get_timestamp_us() if now_us is None else now_us
        return now - received

    def has_all(self, symbols: Iterable[SymbolID] = tuple(SymbolID)) -> bool:
        """Check if every given symbol has a quote."""
        return all(s in self._cache for s in symbols)

    def clear(self) -> None:
        """Clear all cached data."""
        with self._lock:
            self._cache.clear()
            self._received_us.clear()

    @property
    def size(self) -> int:
        """Get number of cached symbols."""
        return len(self._cache)

    @property
    def update_count(self) -> int:
        """Get total number of updates received."""
        return self._update_count

    @property
    def max_age_us(self) -> int | None:
        return self._max_age_us
