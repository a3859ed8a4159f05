"""
Exception hierarchy for the arbitrage engine.

Runtime data problems (missing or crossed quotes, overdrafts) are not
exceptions; these cover the feed boundary and the task handoff.
"""

from typing import Any


class TriArbError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class FeedError(TriArbError):
    """Connection to the quote feed failed or broke."""


class MalformedQuoteError(FeedError):
    """A feed frame could not be decoded into a quote."""

    def __init__(self, message: str, payload: str | bytes | None = None) -> None:
        super().__init__(message, {"payload": payload})
        self.payload = payload


class FeedUnavailableError(TriArbError):
    """Raised to the decision task once the ingestion side has gone away."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Quote feed unavailable: {reason}")
        self.reason = reason


class HandoffClosedError(TriArbError):
    """Raised to a producer handing off into a closed handoff."""
