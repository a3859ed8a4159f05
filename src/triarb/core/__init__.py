"""Core module containing the runner, the task handoff, and type definitions."""

from triarb.core.errors import (
    FeedError,
    FeedUnavailableError,
    HandoffClosedError,
    MalformedQuoteError,
    TriArbError,
)
from triarb.core.handoff import Handoff
from triarb.core.types import (
    ArbitrageOpportunity,
    Asset,
    CycleResult,
    Direction,
    LegFill,
    OverdraftEvent,
    Quote,
    QuoteSnapshot,
    SymbolID,
)


__all__ = [
    "ArbitrageOpportunity",
    "Asset",
    "CycleResult",
    "Direction",
    "FeedError",
    "FeedUnavailableError",
    "Handoff",
    "HandoffClosedError",
    "LegFill",
    "MalformedQuoteError",
    "OverdraftEvent",
    "Quote",
    "QuoteSnapshot",
    "SymbolID",
    "TriArbError",
]
