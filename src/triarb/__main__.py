"""
Entry point for the arbitrage simulator.

Usage:
    python -m triarb
    triarb  # if installed via pip

Exits 0 on a requested shutdown and 1 when the quote feed is lost,
so a supervisor can decide whether to restart.
"""

import asyncio
import sys


# Try to use uvloop for better performance
try:
    import uvloop

    uvloop.install()
    UVLOOP_ENABLED = True
except ImportError:
    UVLOOP_ENABLED = False


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    from pydantic import ValidationError

    from triarb import __version__
    from triarb.config.settings import get_settings
    from triarb.core.runner import ArbitrageRunner
    from triarb.telemetry.logger import setup_logging

    print(
        f"""
╔═══════════════════════════════════════════════════════════════╗
║     TRIANGULAR ARBITRAGE SIMULATOR v{__version__:<20}      ║
╚═══════════════════════════════════════════════════════════════╝
    """
    )

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}")
        print("\nSettings are read from the environment or a .env file, e.g.:")
        print("  FEED_URL=wss://example.com/ws")
        print("  FEE_RATE=0.001")
        return 1

    print("Configuration:")
    print(f"  Feed:           {settings.feed_url}")
    print(f"  Triangle:       {settings.asset_a} / {settings.asset_b} / {settings.asset_c}")
    print(
        f"  Balances:       {settings.initial_balance_a} / "
        f"{settings.initial_balance_b} / {settings.initial_balance_c}"
    )
    print(f"  Notional:       {settings.notional} {settings.asset_a}")
    print(f"  Fee rate:       {settings.fee_rate * 100:.3f}%")
    print(f"  Slippage rate:  {settings.slippage_rate * 100:.4f}%")
    print(f"  Report every:   {settings.report_interval:.0f}s")
    if settings.log_file:
        print(f"  Log file:       {settings.log_file}")
    print(f"  uvloop:         {'Enabled' if UVLOOP_ENABLED else 'Disabled'}")
    print()

    async def run_runner() -> int:
        async_logger = setup_logging(level=settings.log_level, log_file=settings.log_file)
        runner = ArbitrageRunner(settings)

        try:
            await runner.run(install_signal_handlers=True)
            return 1 if runner.feed_error else 0

        finally:
            await runner.shutdown()
            async_logger.stop()

    try:
        return asyncio.run(run_runner())
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
