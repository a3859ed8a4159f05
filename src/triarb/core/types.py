"""
Type definitions for the arbitrage engine.

This module contains all dataclasses, enums, TypedDicts, and Protocol
definitions used throughout the application. Hot-path values use
slots=True and frozen=True so they can be handed between tasks safely.
"""

from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TypedDict


# =============================================================================
# Enums
# =============================================================================


class Asset(str, Enum):
    """The three assets of the triangle."""

    A = "A"  # base: every cycle starts and ends here
    B = "B"  # intermediate
    C = "C"  # quote settlement


class SymbolID(str, Enum):
    """
    The three cross pairs forming the triangle.

    Closed enumeration: the triangle is fixed at configuration time.
    """

    AB = "A/B"
    BC = "B/C"
    AC = "A/C"

    @property
    def base(self) -> Asset:
        """Asset being priced."""
        return Asset(self.value[0])

    @property
    def quote(self) -> Asset:
        """Asset the price is expressed in."""
        return Asset(self.value[2])


class Direction(str, Enum):
    """Arbitrage cycle direction."""

    FORWARD = "FORWARD"  # A -> B -> C -> A
    REVERSE = "REVERSE"  # A -> C -> B -> A


# =============================================================================
# Market Data Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Quote:
    """
    Best bid and ask for one symbol.

    Frozen: a cache entry is always one whole Quote, never a mix of fields.
    """

    symbol: SymbolID
    bid: float
    ask: float
    timestamp_us: int = 0

    @property
    def spread(self) -> float:
        """Calculate bid-ask spread."""
        return self.ask - self.bid

    @property
    def is_crossed(self) -> bool:
        """Ask below bid; the feed sent something it should not have."""
        return self.ask < self.bid

    @property
    def is_usable(self) -> bool:
        """Positive, uncrossed prices."""
        return self.bid > 0 and self.ask > 0 and not self.is_crossed


QuoteSnapshot = Mapping[SymbolID, Quote]


# =============================================================================
# Opportunity & Execution Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class ArbitrageOpportunity:
    """
    Triggered arbitrage condition.

    Transient: computed per evaluation, never persisted.
    """

    direction: Direction
    implied_gain: float
    prices: tuple[float, float, float]
    timestamp_us: int = 0


@dataclass(slots=True, frozen=True)
class LegFill:
    """Result of applying a single simulated leg to the ledger."""

    index: int
    symbol: SymbolID
    from_asset: Asset
    to_asset: Asset
    price: float
    amount: float
    spent: float
    received: float
    overdrawn: bool = False

    def __repr__(self) -> str:
        return (
            f"Leg{self.index}({self.from_asset.value}->{self.to_asset.value} "
            f"@{self.price} spent={self.spent} received={self.received})"
        )


@dataclass(slots=True, frozen=True)
class CycleResult:
    """Result of executing a complete three-leg cycle."""

    opportunity: ArbitrageOpportunity
    legs: tuple[LegFill, LegFill, LegFill]
    notional: float

    @property
    def direction(self) -> Direction:
        return self.opportunity.direction

    @property
    def net_change(self) -> float:
        """Net change of asset A across the cycle."""
        return self.legs[2].received - self.legs[0].spent

    @property
    def overdrawn(self) -> bool:
        """Whether any leg drove a balance negative."""
        return any(leg.overdrawn for leg in self.legs)


@dataclass(slots=True, frozen=True)
class OverdraftEvent:
    """A debit that drove a ledger balance below zero."""

    asset: Asset
    balance_before: float
    amount: float
    balance_after: float
    timestamp_us: int = 0


# =============================================================================
# TypedDicts for Wire Messages
# =============================================================================


class QuoteMessage(TypedDict):
    """Quote feed text frame."""

    symbol: str
    bid: float
    ask: float


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class QuoteSource(Protocol):
    """Anything the ingestion task can pull quotes from."""

    def __aiter__(self) -> AsyncIterator[Quote]:
        """Iterate quotes until the source closes."""
        ...
