"""
Fast/slow simple moving average crossover strategy.
"""

from markov_trader.core.constants import INDICATOR_PLACEHOLDER
from markov_trader.core.enums import SignalType
from markov_trader.core.interfaces.strategy import CandlesBySymbol
from markov_trader.core.models.signal import Signal
from markov_trader.infrastructure.indicators import IndicatorProvider

from .base import BaseStrategy, as_series_map


class SmaCrossoverStrategy(BaseStrategy):
    """Buy when the fast SMA crosses above the slow SMA, Sell when it crosses below."""

    def __init__(self, fast_period: int = 12, slow_period: int = 26):
        super().__init__()
        self.fast_period = fast_period
        self.slow_period = slow_period

    @property
    def name(self) -> str:
        return f"SMA Crossover ({self.fast_period}/{self.slow_period})"

    def generate_signals(self, candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        signals = []
        for symbol, series in as_series_map(candles_by_symbol).items():
            indicators = IndicatorProvider.for_series(series)
            fast = indicators.sma(self.fast_period)
            slow = indicators.sma(self.slow_period)

            for i in range(1, len(series)):
                window = (fast[i - 1], slow[i - 1], fast[i], slow[i])
                if INDICATOR_PLACEHOLDER in window:
                    continue

                if fast[i - 1] < slow[i - 1] and fast[i] > slow[i]:
                    signal_type = SignalType.BUY
                elif fast[i - 1] > slow[i - 1] and fast[i] < slow[i]:
                    signal_type = SignalType.SELL
                else:
                    continue

                candle = series[i]
                signals.append(
                    Signal(
                        symbol=symbol,
                        type=signal_type,
                        price=candle.close,
                        timestamp=candle.timestamp,
                    )
                )
        return signals
