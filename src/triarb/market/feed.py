"""
WebSocket quote feed.

Connects to a single streaming endpoint and turns its text frames into
Quote values:
- Unknown symbols are dropped silently
- Malformed frames are logged and skipped
- The stream ends when the connection closes
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from enum import Enum, auto
from typing import Any

import aiohttp
import orjson

from triarb.config.constants import (
    WS_CONNECT_TIMEOUT,
    WS_HEARTBEAT_INTERVAL,
    WS_MAX_MESSAGE_SIZE,
)
from triarb.core.errors import FeedError, MalformedQuoteError
from triarb.core.types import Quote
from triarb.market.symbols import TriangleSymbols
from triarb.utils.time import get_timestamp_us


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """WebSocket connection state."""

    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    CLOSED = auto()


def _price_field(data: dict[str, Any], name: str, raw: str | bytes) -> float:
    value = data.get(name)
    # bool is an int subclass; True is not a price
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedQuoteError(f"Field '{name}' is not a number: {value!r}", raw)
    if not value > 0:
        raise MalformedQuoteError(f"Field '{name}' must be positive: {value!r}", raw)
    return float(value)


def decode_quote(
    raw: str | bytes,
    symbols: TriangleSymbols,
    timestamp_us: int | None = None,
) -> Quote | None:
    """
    Decode one feed frame.

    Expected payload: ``{"symbol": "FIL-ETH", "bid": 0.1, "ask": 0.11}``.

    Args:
        raw: Frame payload.
        symbols: Triangle symbol table.
        timestamp_us: Receive time (default: now).

    Returns:
        Quote, or None if the symbol is not part of the triangle.

    Raises:
        MalformedQuoteError: If the payload is not a valid quote message.
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise MalformedQuoteError(f"Invalid JSON: {e}", raw) from e

    if not isinstance(data, dict):
        raise MalformedQuoteError(f"Expected object, got {type(data).__name__}", raw)

    name = data.get("symbol")
    if not isinstance(name, str):
        raise MalformedQuoteError("Missing symbol", raw)

    symbol = symbols.resolve(name)
    if symbol is None:
        return None

    return Quote(
        symbol=symbol,
        bid=_price_field(data, "bid", raw),
        ask=_price_field(data, "ask", raw),
        timestamp_us=get_timestamp_us() if timestamp_us is None else timestamp_us,
    )


class QuoteFeed:
    """
    Streaming quote source over a single WebSocket connection.

    Iterate it with ``async for quote in feed``. Iteration connects if
    needed and stops when the server closes the connection. Reconnect
    policy belongs to whoever runs the feed.
    """

    def __init__(
        self,
        url: str,
        symbols: TriangleSymbols,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize the feed.

        Args:
            url: WebSocket endpoint URL.
            symbols: Triangle symbol table used to filter and map messages.
            session: Optional shared session; created on connect otherwise.
        """
        self._url = url
        self._symbols = symbols
        self._session = session
        self._owns_session = session is None

        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._state = ConnectionState.DISCONNECTED

        self._message_count = 0
        self._accepted_count = 0
        self._discarded_count = 0
        self._malformed_count = 0

    @property
    def state(self) -> ConnectionState:
        """Get current connection state."""
        return self._state

    @property
    def url(self) -> str:
        return self._url

    @property
    def message_count(self) -> int:
        """Get total frames received."""
        return self._message_count

    @property
    def accepted_count(self) -> int:
        """Get frames that produced a quote."""
        return self._accepted_count

    @property
    def discarded_count(self) -> int:
        """Get frames for symbols outside the triangle."""
        return self._discarded_count

    @property
    def malformed_count(self) -> int:
        """Get frames that failed to decode."""
        return self._malformed_count

    async def connect(self) -> None:
        """
        Establish the WebSocket connection.

        Raises:
            FeedError: If the connection cannot be established.
        """
        if self._state == ConnectionState.CONNECTED:
            return

        self._state = ConnectionState.CONNECTING

        try:
            if self._session is None or self._session.closed:
                self._session = aiohttp.ClientSession()
                self._owns_session = True

            logger.info(f"Connecting to quote feed {self._url}")

            self._ws = await asyncio.wait_for(
                self._session.ws_connect(
                    self._url,
                    heartbeat=WS_HEARTBEAT_INTERVAL,
                    max_msg_size=WS_MAX_MESSAGE_SIZE,
                ),
                timeout=WS_CONNECT_TIMEOUT,
            )

        except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as e:
            self._state = ConnectionState.DISCONNECTED
            raise FeedError(f"Connection to {self._url} failed: {e}") from e

        self._state = ConnectionState.CONNECTED
        logger.info("Quote feed connected")

    async def close(self) -> None:
        """Close the WebSocket connection."""
        self._state = ConnectionState.CLOSED

        if self._ws and not self._ws.closed:
            await self._ws.close()

        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

        self._ws = None

    def _handle_message(self, msg: aiohttp.WSMessage) -> Quote | None:
        """
        Process a WebSocket message.

        Returns:
            Quote to hand off, or None if the frame is skipped.

        Raises:
            FeedError: On a transport error frame.
        """
        if msg.type == aiohttp.WSMsgType.TEXT:
            self._message_count += 1

            try:
                quote = decode_quote(msg.data, self._symbols)
            except MalformedQuoteError as e:
                self._malformed_count += 1
                logger.warning(f"Skipping malformed quote: {e}")
                return None

            if quote is None:
                self._discarded_count += 1
                logger.debug(f"Discarding quote for untracked symbol: {msg.data!r}")
                return None

            self._accepted_count += 1
            return quote

        if msg.type == aiohttp.WSMsgType.ERROR:
            raise FeedError(f"WebSocket error: {msg.data}")

        # Binary and control frames carry no quotes
        return None

    async def __aiter__(self) -> AsyncIterator[Quote]:
        """Yield quotes until the connection closes."""
        await self.connect()

        if self._ws is None:
            raise FeedError("Not connected")

        try:
            async for msg in self._ws:
                quote = self._handle_message(msg)
                if quote is not None:
                    yield quote
        finally:
            close_code = self._ws.close_code if self._ws else None
            await self.close()

        logger.warning(f"Quote feed closed (code={close_code})")

    async def __aenter__(self) -> "QuoteFeed":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
