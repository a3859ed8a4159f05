"""Mock implementations for testing."""

from tests.mocks.feed import MockQuoteFeed, make_quote, make_snapshot
from tests.mocks.websocket import MockSession, MockWebSocket, quote_frame, text_frame


__all__ = [
    "MockQuoteFeed",
    "MockSession",
    "MockWebSocket",
    "make_quote",
    "make_snapshot",
    "quote_frame",
    "text_frame",
]
