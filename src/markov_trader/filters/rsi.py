"""
RSI confirmation filter.
"""

from markov_trader.core.enums import SignalType
from markov_trader.core.interfaces.strategy import CandlesBySymbol
from markov_trader.core.models.signal import Signal
from markov_trader.infrastructure.indicators import RsiIndicator

from .base import BarContextFilter


class RsiFilter(BarContextFilter):
    """Keeps Buys only when oversold and Sells only when overbought."""

    FILTER_NAME = "RsiFilter"

    def __init__(
        self,
        rsi_period: int = 14,
        overbought_threshold: float = 70.0,
        oversold_threshold: float = 30.0,
    ):
        self.rsi_period = rsi_period
        self.overbought_threshold = overbought_threshold
        self.oversold_threshold = oversold_threshold

    @property
    def name(self) -> str:
        return (
            f"{self.FILTER_NAME}({self.rsi_period}, "
            f"{self.overbought_threshold:g}, {self.oversold_threshold:g})"
        )

    def apply(self, signals: list[Signal], candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        passed = []
        for signal in signals:
            located = self.locate(signal, candles_by_symbol)
            if located is None:
                continue
            series, index = located

            values = self.indicators(series).rsi(self.rsi_period)
            rsi = RsiIndicator.value_at(values, self.rsi_period, index)
            if rsi is None:
                continue

            if signal.type == SignalType.BUY and rsi > self.oversold_threshold:
                continue
            if signal.type == SignalType.SELL and rsi < self.overbought_threshold:
                continue
            passed.append(signal)
        return passed
