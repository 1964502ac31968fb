"""
Long-term trend filter.
"""

from markov_trader.core.constants import INDICATOR_PLACEHOLDER
from markov_trader.core.enums import Movement, SignalType
from markov_trader.core.interfaces.strategy import CandlesBySymbol
from markov_trader.core.models.signal import Signal

from .base import BarContextFilter


class TrendFilter(BarContextFilter):
    """Rejects signals that trade against momentum on the wrong side of a long SMA.

    A Buy is dropped when the prior bar moved Down and the close is below
    the SMA; a Sell is dropped when the prior bar moved Up and the close
    is above it. Bars without a full SMA window are dropped.
    """

    FILTER_NAME = "TrendFilter"

    def __init__(self, long_term_ma_period: int = 200):
        self.long_term_ma_period = long_term_ma_period

    @property
    def name(self) -> str:
        return f"{self.FILTER_NAME}({self.long_term_ma_period})"

    def apply(self, signals: list[Signal], candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        passed = []
        for signal in signals:
            located = self.locate(signal, candles_by_symbol)
            if located is None:
                continue
            series, index = located

            sma = self.indicators(series).sma(self.long_term_ma_period)
            if index >= len(sma) or sma[index] == INDICATOR_PLACEHOLDER:
                continue

            close = series[index].close
            prior = series[index - 1].movement if index > 0 else None

            if signal.type == SignalType.BUY and prior == Movement.DOWN and close < sma[index]:
                continue
            if signal.type == SignalType.SELL and prior == Movement.UP and close > sma[index]:
                continue
            passed.append(signal)
        return passed
