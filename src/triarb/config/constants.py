"""
Trading constants and configuration values.

This module contains all hardcoded defaults used throughout the engine.
Values are organized by category for easy maintenance and auditing.
"""

from typing import Final


# =============================================================================
# Quote Feed
# =============================================================================

DEFAULT_FEED_URL: Final[str] = "wss://example.com/ws"


# =============================================================================
# Triangle Definition
# =============================================================================

# Base asset (A), intermediate asset (B), quote-settlement asset (C)
DEFAULT_ASSET_A: Final[str] = "FIL"
DEFAULT_ASSET_B: Final[str] = "ETH"
DEFAULT_ASSET_C: Final[str] = "BSV"

# Wire symbols are "<base><sep><quote>", e.g. FIL-ETH
DEFAULT_SYMBOL_SEPARATOR: Final[str] = "-"


# =============================================================================
# Ledger
# =============================================================================

DEFAULT_BALANCE_A: Final[float] = 700.0
DEFAULT_BALANCE_B: Final[float] = 0.0
DEFAULT_BALANCE_C: Final[float] = 0.0


# =============================================================================
# Trading Costs
# =============================================================================

# Fee charged on the spending side of every leg (0.1%)
DEFAULT_FEE_RATE: Final[float] = 0.001

# Price degradation on the receiving side of every leg (0.01%)
DEFAULT_SLIPPAGE_RATE: Final[float] = 0.0001

# Units of asset A committed per arbitrage cycle
DEFAULT_NOTIONAL: Final[float] = 100.0


# =============================================================================
# WebSocket Configuration
# =============================================================================

WS_HEARTBEAT_INTERVAL: Final[float] = 20.0  # seconds
WS_MAX_MESSAGE_SIZE: Final[int] = 1024 * 1024  # 1MB
WS_CONNECT_TIMEOUT: Final[float] = 10.0  # seconds


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Balance report interval (seconds)
DEFAULT_REPORT_INTERVAL: Final[float] = 10.0

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000

# Samples kept per latency metric
LATENCY_WINDOW_SIZE: Final[int] = 1000
