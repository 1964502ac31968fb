"""
Runtime configuration for live trading and the exchange cache.

Settings are loaded from environment variables prefixed with ``MARKOV_``
(e.g. ``MARKOV_TRADE_SIZE=250``) or from a ``.env`` file in the working
directory.
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from markov_trader.core.constants import (
    DEFAULT_CACHE_DIRECTORY,
    DEFAULT_LOOKBACK_DAYS,
    DEFAULT_LOOP_INTERVAL_SECONDS,
    DEFAULT_QUOTE_ASSET,
    MAX_TRADE_FRACTION,
)
from markov_trader.core.enums import TradeSizeMode


class TradingSettings(BaseSettings):
    """Live trading settings: order sizing, loop cadence and data lookback."""

    model_config = SettingsConfigDict(
        env_prefix="MARKOV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    trade_size_mode: TradeSizeMode = Field(
        default=TradeSizeMode.FIXED_AMOUNT,
        description="How the amount of a new position is derived",
    )
    trade_size: float = Field(
        default=100.0,
        gt=0,
        description="Quote amount (fixed) or fraction of free balance (percentage)",
    )
    loop_interval_seconds: float = Field(
        default=DEFAULT_LOOP_INTERVAL_SECONDS,
        gt=0,
        description="Delay between trading loop iterations",
    )
    lookback_days: int = Field(
        default=DEFAULT_LOOKBACK_DAYS,
        ge=1,
        description="History window fetched when an engine starts",
    )
    quote_asset: str = Field(
        default=DEFAULT_QUOTE_ASSET,
        description="Asset whose free balance funds percentage-sized orders",
    )
    cache_directory: str = Field(
        default=DEFAULT_CACHE_DIRECTORY,
        description="Directory for cached historical candle files",
    )

    @field_validator("quote_asset")
    @classmethod
    def normalize_quote_asset(cls, v: str) -> str:
        """Quote asset symbols are upper-case and non-empty."""
        normalized = v.strip().upper()
        if not normalized:
            raise ValueError("quote_asset must not be empty")
        return normalized

    @model_validator(mode="after")
    def validate_percentage_size(self) -> "TradingSettings":
        """A percentage trade size is a fraction of the free balance."""
        if (
            self.trade_size_mode == TradeSizeMode.PERCENTAGE_OF_CAPITAL
            and self.trade_size > MAX_TRADE_FRACTION
        ):
            raise ValueError(
                f"trade_size must be a fraction in (0, 1] for percentage sizing, got {self.trade_size}"
            )
        return self


@lru_cache
def get_settings() -> TradingSettings:
    """Get the process-wide settings instance (cached)."""
    return TradingSettings()
