"""
Mock quote feed for testing.

A scripted QuoteSource: replays a list of quotes, optionally stays
open for quotes pushed later, and can end with an error.
"""

import asyncio
from collections.abc import AsyncIterator, Iterable

from triarb.core.types import Quote, QuoteSnapshot, SymbolID
from triarb.utils.time import get_timestamp_us


def make_quote(symbol: SymbolID, bid: float, ask: float) -> Quote:
    """Build a quote stamped with the current time."""
    return Quote(symbol=symbol, bid=bid, ask=ask, timestamp_us=get_timestamp_us())


def make_snapshot(
    ab: tuple[float, float] | None,
    bc: tuple[float, float] | None,
    ac: tuple[float, float] | None,
) -> QuoteSnapshot:
    """Build a snapshot from (bid, ask) pairs; None leaves a symbol out."""
    snapshot: dict[SymbolID, Quote] = {}
    for symbol, prices in ((SymbolID.AB, ab), (SymbolID.BC, bc), (SymbolID.AC, ac)):
        if prices is not None:
            snapshot[symbol] = make_quote(symbol, *prices)
    return snapshot


class MockQuoteFeed:
    """
    Scripted quote source.

    Allows injecting quotes programmatically while the runner is live.
    """

    def __init__(
        self,
        quotes: Iterable[Quote] = (),
        error: Exception | None = None,
        hold_open: bool = False,
    ) -> None:
        """
        Initialize mock feed.

        Args:
            quotes: Quotes replayed first.
            error: Raised after the last quote, simulating a broken connection.
            hold_open: Keep the stream open until ``finish()`` is called.
        """
        self._quotes = list(quotes)
        self._error = error
        self._hold_open = hold_open
        self._pending: asyncio.Queue[Quote | None] = asyncio.Queue()
        self.yielded: list[Quote] = []
        self.closed = False

    def push(self, quote: Quote) -> None:
        """Queue a quote for a held-open stream."""
        self._pending.put_nowait(quote)

    def finish(self) -> None:
        """End a held-open stream."""
        self._pending.put_nowait(None)

    async def __aiter__(self) -> AsyncIterator[Quote]:
        for quote in self._quotes:
            self.yielded.append(quote)
            yield quote

        if self._hold_open:
            while True:
                quote = await self._pending.get()
                if quote is None:
                    break
                self.yielded.append(quote)
                yield quote

        if self._error is not None:
            raise self._error

    async def close(self) -> None:
        self.closed = True
