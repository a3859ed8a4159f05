"""Configuration module for the triangular arbitrage engine."""

from triarb.config.constants import (
    DEFAULT_FEE_RATE,
    DEFAULT_FEED_URL,
    DEFAULT_NOTIONAL,
    DEFAULT_REPORT_INTERVAL,
    DEFAULT_SLIPPAGE_RATE,
)
from triarb.config.settings import Settings, get_settings


__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_FEED_URL",
    "DEFAULT_FEE_RATE",
    "DEFAULT_NOTIONAL",
    "DEFAULT_REPORT_INTERVAL",
    "DEFAULT_SLIPPAGE_RATE",
]
