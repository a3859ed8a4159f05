"""Strategy module for arbitrage detection and simulated execution."""

from triarb.strategy.engine import ArbitrageEngine
from triarb.strategy.ledger import Ledger


__all__ = [
    "ArbitrageEngine",
    "Ledger",
]
