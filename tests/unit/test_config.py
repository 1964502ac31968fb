"""
Unit tests for runtime settings.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from markov_trader.core.config import TradingSettings, get_settings
from markov_trader.core.enums import TradeSizeMode


class TestTradingSettings:
    """Test suite for TradingSettings."""

    def test_should_use_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default values when no environment overrides are present."""
        for key in ["TRADE_SIZE_MODE", "TRADE_SIZE", "LOOP_INTERVAL_SECONDS", "LOOKBACK_DAYS", "QUOTE_ASSET"]:
            monkeypatch.delenv(f"MARKOV_{key}", raising=False)

        settings = TradingSettings(_env_file=None)

        assert settings.trade_size_mode == TradeSizeMode.FIXED_AMOUNT
        assert settings.trade_size == 100.0
        assert settings.loop_interval_seconds == 60
        assert settings.lookback_days == 100
        assert settings.quote_asset == "USDT"

    def test_should_read_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MARKOV_TRADE_SIZE_MODE", "PercentageOfCapital")
        monkeypatch.setenv("MARKOV_TRADE_SIZE", "0.25")
        monkeypatch.setenv("MARKOV_LOOP_INTERVAL_SECONDS", "5")

        settings = TradingSettings(_env_file=None)

        assert settings.trade_size_mode == TradeSizeMode.PERCENTAGE_OF_CAPITAL
        assert settings.trade_size == 0.25
        assert settings.loop_interval_seconds == 5

    def test_should_normalize_quote_asset(self) -> None:
        assert TradingSettings(_env_file=None, quote_asset=" busd ").quote_asset == "BUSD"

    def test_should_reject_empty_quote_asset(self) -> None:
        with pytest.raises(PydanticValidationError):
            TradingSettings(_env_file=None, quote_asset="  ")

    def test_should_reject_non_positive_trade_size(self) -> None:
        with pytest.raises(PydanticValidationError):
            TradingSettings(_env_file=None, trade_size=0)

    def test_should_reject_percentage_above_one(self) -> None:
        """Test that percentage sizing requires a fraction."""
        with pytest.raises(PydanticValidationError, match="fraction"):
            TradingSettings(
                _env_file=None,
                trade_size_mode=TradeSizeMode.PERCENTAGE_OF_CAPITAL,
                trade_size=50,
            )

    def test_should_cache_process_settings(self) -> None:
        assert get_settings() is get_settings()
