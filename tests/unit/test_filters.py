"""
Unit tests for signal filters.
"""

from datetime import timedelta

import pytest

from conftest import START, build_candles, build_closes
from markov_trader.core.enums import SignalType
from markov_trader.core.models.candle import Candle
from markov_trader.core.models.signal import Signal
from markov_trader.filters import (
    AtrTargetsFilter,
    EmergencyStopFilter,
    RsiFilter,
    TakeProfitStopLossFilter,
    TrendFilter,
    VolumeFilter,
)

SYMBOL = "BTCUSDT"


def signal_at(candles: list[Candle], index: int, signal_type: SignalType) -> Signal:
    candle = candles[index]
    return Signal(SYMBOL, signal_type, candle.close, candle.timestamp)


class TestFilterNames:
    """Filter names include their parameters."""

    @pytest.mark.parametrize(
        "signal_filter,expected",
        [
            (TrendFilter(), "TrendFilter(200)"),
            (RsiFilter(), "RsiFilter(14, 70, 30)"),
            (VolumeFilter(), "VolumeFilter(20, 1.5)"),
            (AtrTargetsFilter(), "AtrTargetsFilter(14, 2, 1.5)"),
            (TakeProfitStopLossFilter(), "TakeProfitStopLossFilter(0.1, 0.05)"),
            (EmergencyStopFilter(), "EmergencyStop"),
        ],
    )
    def test_should_name_filter_with_parameters(self, signal_filter, expected: str) -> None:
        assert signal_filter.name == expected


class TestTrendFilter:
    """Test suite for TrendFilter."""

    def test_should_drop_buy_against_falling_trend(self) -> None:
        """Test that a Buy after a Down bar below the SMA is dropped."""
        candles = build_closes([10, 10, 10, 9, 8])
        signals = [signal_at(candles, 4, SignalType.BUY), signal_at(candles, 4, SignalType.SELL)]

        passed = TrendFilter(3).apply(signals, {SYMBOL: candles})

        assert [s.type for s in passed] == [SignalType.SELL]

    def test_should_drop_sell_against_rising_trend(self) -> None:
        candles = build_closes([10, 10, 10, 11, 12])
        signals = [signal_at(candles, 4, SignalType.BUY), signal_at(candles, 4, SignalType.SELL)]

        passed = TrendFilter(3).apply(signals, {SYMBOL: candles})

        assert [s.type for s in passed] == [SignalType.BUY]

    def test_should_drop_signals_without_full_sma_window(self) -> None:
        candles = build_closes([10, 11, 12, 13])
        assert TrendFilter(3).apply([signal_at(candles, 1, SignalType.BUY)], {SYMBOL: candles}) == []

    def test_should_drop_signals_without_matching_candle(self) -> None:
        candles = build_closes([10, 11, 12, 13])
        orphan = Signal(SYMBOL, SignalType.BUY, 13.0, START + timedelta(days=30))
        assert TrendFilter(3).apply([orphan], {SYMBOL: candles}) == []
        assert TrendFilter(3).apply([orphan], {}) == []


class TestRsiFilter:
    """Test suite for RsiFilter."""

    def test_should_keep_only_oversold_buys(self) -> None:
        candles = build_closes([5, 4, 3, 2])
        signals = [signal_at(candles, 3, SignalType.BUY), signal_at(candles, 3, SignalType.SELL)]

        passed = RsiFilter(2, 70, 30).apply(signals, {SYMBOL: candles})

        assert [s.type for s in passed] == [SignalType.BUY]

    def test_should_keep_only_overbought_sells(self) -> None:
        candles = build_closes([2, 3, 4, 5])
        signals = [signal_at(candles, 3, SignalType.BUY), signal_at(candles, 3, SignalType.SELL)]

        passed = RsiFilter(2, 70, 30).apply(signals, {SYMBOL: candles})

        assert [s.type for s in passed] == [SignalType.SELL]

    def test_should_drop_signals_before_first_rsi_value(self) -> None:
        candles = build_closes([5, 4, 3, 2])
        assert RsiFilter(2, 70, 30).apply([signal_at(candles, 1, SignalType.BUY)], {SYMBOL: candles}) == []


class TestVolumeFilter:
    """Test suite for VolumeFilter."""

    def test_should_keep_high_volume_bars_only(self) -> None:
        candles = build_candles(
            [(1, 2, 0.5, 1.5, 100), (1, 2, 0.5, 1.5, 100), (1, 2, 0.5, 1.5, 300), (1, 2, 0.5, 1.5, 200)]
        )
        signals = [signal_at(candles, i, SignalType.BUY) for i in (1, 2, 3)]

        passed = VolumeFilter(2, 1.5).apply(signals, {SYMBOL: candles})

        assert [s.timestamp for s in passed] == [candles[2].timestamp]


class TestAtrTargetsFilter:
    """Test suite for AtrTargetsFilter."""

    def test_should_set_buy_targets_from_atr(self) -> None:
        """Test ATR 10 at price 100 gives TP 120 and SL 85."""
        candles = build_candles([(100, 105, 95, 100)] * 3)
        signal = signal_at(candles, 2, SignalType.BUY)

        passed = AtrTargetsFilter(3, 2.0, 1.5).apply([signal], {SYMBOL: candles})

        assert passed == [signal]
        assert signal.take_profit == pytest.approx(120.0)
        assert signal.stop_loss == pytest.approx(85.0)

    def test_should_mirror_targets_for_sells(self) -> None:
        candles = build_candles([(100, 105, 95, 100)] * 3)
        signal = signal_at(candles, 2, SignalType.SELL)

        AtrTargetsFilter(3, 2.0, 1.5).apply([signal], {SYMBOL: candles})

        assert signal.take_profit == pytest.approx(80.0)
        assert signal.stop_loss == pytest.approx(115.0)

    def test_should_pass_signal_untouched_without_atr(self) -> None:
        candles = build_candles([(100, 105, 95, 100)] * 3)
        signal = signal_at(candles, 0, SignalType.BUY)

        passed = AtrTargetsFilter(3, 2.0, 1.5).apply([signal], {SYMBOL: candles})

        assert passed == [signal]
        assert not signal.has_targets

    def test_should_keep_existing_targets(self) -> None:
        candles = build_candles([(100, 105, 95, 100)] * 3)
        signal = signal_at(candles, 2, SignalType.BUY)
        signal.take_profit = 150.0

        AtrTargetsFilter(3, 2.0, 1.5).apply([signal], {SYMBOL: candles})

        assert signal.take_profit == 150.0
        assert signal.stop_loss is None


class TestTakeProfitStopLossFilter:
    """Test suite for TakeProfitStopLossFilter."""

    def test_should_set_percentage_targets(self) -> None:
        buy = Signal(SYMBOL, SignalType.BUY, 100.0, START)
        sell = Signal(SYMBOL, SignalType.SELL, 100.0, START)

        TakeProfitStopLossFilter(0.10, 0.05).apply([buy, sell], {})

        assert (buy.take_profit, buy.stop_loss) == (pytest.approx(110.0), pytest.approx(95.0))
        assert (sell.take_profit, sell.stop_loss) == (pytest.approx(90.0), pytest.approx(105.0))

    def test_should_flag_hold_strategy_for_longs(self) -> None:
        """Test that hold mode drops the long stop-loss and flags the signal."""
        buy = Signal(SYMBOL, SignalType.BUY, 100.0, START)
        sell = Signal(SYMBOL, SignalType.SELL, 100.0, START)

        TakeProfitStopLossFilter(0.10, 0.05, use_hold_strategy_for_longs=True).apply([buy, sell], {})

        assert buy.use_hold_strategy
        assert buy.take_profit == pytest.approx(110.0)
        assert buy.stop_loss is None
        assert not sell.use_hold_strategy
        assert sell.stop_loss == pytest.approx(105.0)

    def test_should_not_override_existing_targets(self) -> None:
        buy = Signal(SYMBOL, SignalType.BUY, 100.0, START, stop_loss=80.0)
        TakeProfitStopLossFilter(0.10, 0.05).apply([buy], {})
        assert buy.stop_loss == 80.0
        assert buy.take_profit is None


class TestEmergencyStopFilter:
    """Test suite for EmergencyStopFilter."""

    def test_should_drop_every_signal(self) -> None:
        signals = [Signal(SYMBOL, SignalType.BUY, 100.0, START)]
        assert EmergencyStopFilter().apply(signals, {}) == []
