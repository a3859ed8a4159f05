"""Telemetry module for logging, metrics, and reporting."""

from triarb.telemetry.logger import AsyncLogger, setup_logging
from triarb.telemetry.metrics import MetricsCollector
from triarb.telemetry.reporter import BalanceReporter


__all__ = [
    "AsyncLogger",
    "BalanceReporter",
    "MetricsCollector",
    "setup_logging",
]
