"""
Triangular Arbitrage Simulator.

Streams quotes for a three-pair triangle, detects forward and reverse
arbitrage, and simulates each cycle against a tracked balance ledger.
"""

__version__ = "1.0.0"
