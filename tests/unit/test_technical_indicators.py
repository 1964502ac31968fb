"""
Unit tests for technical indicators and the memoizing indicator provider.
"""

import gc

import pytest

from conftest import build_candles, build_closes
from markov_trader.core.exceptions.trading import ConfigurationError
from markov_trader.core.models.candle import CandleSeries
from markov_trader.infrastructure.indicators import (
    AtrIndicator,
    IndicatorProvider,
    RsiIndicator,
    SmaIndicator,
    VolumeSmaIndicator,
    create_indicator,
)


class TestSmaIndicator:
    """Test suite for SMA calculations."""

    def test_should_calculate_sma_with_placeholders(self) -> None:
        """Test that positions before a full window hold 0.0."""
        series = CandleSeries(build_closes([1, 2, 3, 4, 5]))
        assert SmaIndicator(3).calculate(series) == pytest.approx([0.0, 0.0, 2.0, 3.0, 4.0])

    @pytest.mark.parametrize("period", [0, -3])
    def test_should_return_zeros_for_non_positive_period(self, period: int) -> None:
        series = CandleSeries(build_closes([1, 2, 3]))
        assert SmaIndicator(period).calculate(series) == [0.0, 0.0, 0.0]

    def test_should_return_zeros_when_series_is_shorter_than_period(self) -> None:
        series = CandleSeries(build_closes([1, 2]))
        assert SmaIndicator(5).calculate(series) == [0.0, 0.0]

    def test_should_calculate_volume_sma(self) -> None:
        series = CandleSeries(build_candles([(1, 1, 1, 1, 10), (1, 1, 1, 1, 20), (1, 1, 1, 1, 60)]))
        assert VolumeSmaIndicator(2).calculate(series) == pytest.approx([0.0, 15.0, 40.0])


class TestAtrIndicator:
    """Test suite for ATR calculations."""

    def test_should_calculate_wilder_atr(self) -> None:
        series = CandleSeries(build_candles([(10, 11, 9, 10)] * 4))
        assert AtrIndicator(3).calculate(series) == pytest.approx([0.0, 0.0, 2.0, 2.0])

    def test_should_use_gaps_in_true_range(self) -> None:
        """Test that a gap from the previous close widens the true range."""
        series = CandleSeries(build_candles([(10, 11, 9, 10), (20, 21, 19, 20)]))
        assert AtrIndicator(1).calculate(series) == pytest.approx([2.0, 11.0])

    def test_should_return_zeros_without_enough_history(self) -> None:
        series = CandleSeries(build_candles([(10, 11, 9, 10)] * 2))
        assert AtrIndicator(3).calculate(series) == [0.0, 0.0]
        assert AtrIndicator(0).calculate(series) == [0.0, 0.0]


class TestRsiIndicator:
    """Test suite for RSI calculations."""

    def test_should_return_max_when_all_gains(self) -> None:
        series = CandleSeries(build_closes([1, 2, 3, 4, 5, 6]))
        values = RsiIndicator(3).calculate(series)
        assert values == [100.0, 100.0, 100.0]

    def test_should_apply_wilder_smoothing(self) -> None:
        series = CandleSeries(build_closes([1, 2, 1, 2]))
        assert RsiIndicator(2).calculate(series) == pytest.approx([50.0, 75.0])

    def test_should_return_empty_without_enough_history(self) -> None:
        series = CandleSeries(build_closes([1, 2, 3]))
        assert RsiIndicator(3).calculate(series) == []

    def test_should_return_zeros_for_non_positive_period(self) -> None:
        series = CandleSeries(build_closes([1, 2, 3]))
        assert RsiIndicator(0).calculate(series) == [0.0, 0.0, 0.0]

    def test_should_look_up_value_by_candle_index(self) -> None:
        values = [50.0, 75.0]
        assert RsiIndicator.value_at(values, 2, 2) == 50.0
        assert RsiIndicator.value_at(values, 2, 3) == 75.0
        assert RsiIndicator.value_at(values, 2, 1) is None
        assert RsiIndicator.value_at(values, 2, 4) is None


class TestCreateIndicator:
    """Test suite for the indicator factory."""

    def test_should_create_indicator_by_name(self) -> None:
        indicator = create_indicator(" SMA ", 20)
        assert isinstance(indicator, SmaIndicator)
        assert indicator.name == "SMA(20)"

    def test_should_reject_unknown_indicator(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown indicator: macd"):
            create_indicator("macd", 12)


class TestIndicatorProvider:
    """Test suite for per-series indicator memoization."""

    def test_should_share_provider_per_series_instance(self) -> None:
        candles = build_closes([1, 2, 3])
        series = CandleSeries(candles)
        assert IndicatorProvider.for_series(series) is IndicatorProvider.for_series(series)
        assert IndicatorProvider.for_series(series) is not IndicatorProvider.for_series(CandleSeries(candles))

    def test_should_memoize_by_indicator_and_period(self) -> None:
        """Test that repeated requests reuse the cached result."""
        provider = IndicatorProvider.for_series(CandleSeries(build_closes([1, 2, 3, 4])))

        first = provider.sma(2)
        assert provider.sma(2) is first
        assert provider.get("sma", 2) is first
        provider.sma(3)
        provider.volume_sma(2)

        assert provider.cache_size() == 3

    def test_should_dispatch_by_name(self) -> None:
        provider = IndicatorProvider.for_series(CandleSeries(build_closes([1, 2, 3, 4, 5, 6])))
        assert provider.get("RSI", 3) == [100.0, 100.0, 100.0]
        with pytest.raises(ConfigurationError):
            provider.get("ema", 3)

    def test_should_keep_provider_usable_without_caller_reference(self) -> None:
        """Test that a provider obtained from a temporary series still computes."""
        provider = IndicatorProvider.for_series(CandleSeries(build_closes([1, 2, 3])))
        gc.collect()

        assert provider.sma(2) == pytest.approx([0.0, 1.5, 2.5])
        assert provider.series[-1].close == 3

    def test_should_keep_memoized_results_on_series(self) -> None:
        series = CandleSeries(build_closes([1, 2, 3]))
        cached = IndicatorProvider.for_series(series).sma(2)
        gc.collect()

        assert IndicatorProvider.for_series(series).sma(2) is cached
