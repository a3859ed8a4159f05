"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading and validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from triarb.config.constants import (
    DEFAULT_ASSET_A,
    DEFAULT_ASSET_B,
    DEFAULT_ASSET_C,
    DEFAULT_BALANCE_A,
    DEFAULT_BALANCE_B,
    DEFAULT_BALANCE_C,
    DEFAULT_FEE_RATE,
    DEFAULT_FEED_URL,
    DEFAULT_NOTIONAL,
    DEFAULT_REPORT_INTERVAL,
    DEFAULT_SLIPPAGE_RATE,
    DEFAULT_SYMBOL_SEPARATOR,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    (e.g. ``FEE_RATE=0.00075``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Quote Feed
    # =========================================================================

    feed_url: str = Field(
        default=DEFAULT_FEED_URL,
        min_length=1,
        description="WebSocket endpoint delivering {symbol, bid, ask} messages",
    )

    # =========================================================================
    # Triangle Definition
    # =========================================================================

    asset_a: str = Field(
        default=DEFAULT_ASSET_A,
        min_length=1,
        description="Base asset; every cycle starts and ends here",
    )
    asset_b: str = Field(
        default=DEFAULT_ASSET_B,
        min_length=1,
        description="Intermediate asset",
    )
    asset_c: str = Field(
        default=DEFAULT_ASSET_C,
        min_length=1,
        description="Quote-settlement asset",
    )
    symbol_separator: str = Field(
        default=DEFAULT_SYMBOL_SEPARATOR,
        description="Separator between base and quote in wire symbols",
    )

    # =========================================================================
    # Ledger
    # =========================================================================

    initial_balance_a: float = Field(default=DEFAULT_BALANCE_A, ge=0.0)
    initial_balance_b: float = Field(default=DEFAULT_BALANCE_B, ge=0.0)
    initial_balance_c: float = Field(default=DEFAULT_BALANCE_C, ge=0.0)

    # =========================================================================
    # Trading Configuration
    # =========================================================================

    fee_rate: float = Field(
        default=DEFAULT_FEE_RATE,
        ge=0.0,
        lt=1.0,
        description="Fee per leg on the spending side (e.g., 0.001 = 0.1%)",
    )

    slippage_rate: float = Field(
        default=DEFAULT_SLIPPAGE_RATE,
        ge=0.0,
        lt=1.0,
        description="Price degradation per leg on the receiving side",
    )

    notional: float = Field(
        default=DEFAULT_NOTIONAL,
        gt=0.0,
        description="Fixed quantity of asset A committed per cycle",
    )

    # =========================================================================
    # Operation Mode
    # =========================================================================

    report_interval: float = Field(
        default=DEFAULT_REPORT_INTERVAL,
        gt=0.0,
        description="Seconds between balance reports",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional log file; receives DEBUG and above regardless of log_level",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("asset_a", "asset_b", "asset_c", mode="after")
    @classmethod
    def normalize_asset(cls, v: str) -> str:
        """Asset names are matched case-sensitively on the wire; only trim."""
        v = v.strip()
        if not v:
            raise ValueError("Asset name cannot be blank")
        return v

    @model_validator(mode="after")
    def validate_triangle(self) -> "Settings":
        """Ensure the three assets form a real triangle."""
        if len({self.asset_a, self.asset_b, self.asset_c}) != 3:
            raise ValueError(
                f"Assets must be distinct, got "
                f"{self.asset_a}/{self.asset_b}/{self.asset_c}"
            )
        return self

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def initial_balances(self) -> tuple[float, float, float]:
        """Initial (A, B, C) balances."""
        return (self.initial_balance_a, self.initial_balance_b, self.initial_balance_c)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()
