"""
Shared helpers for filters that inspect the bar a signal was raised on.
"""

from markov_trader.core.interfaces.strategy import CandlesBySymbol, ISignalFilter
from markov_trader.core.models.candle import CandleSeries
from markov_trader.core.models.signal import Signal
from markov_trader.infrastructure.indicators import IndicatorProvider


class BarContextFilter(ISignalFilter):
    """Base for filters that resolve a signal to its ``(series, bar index)``."""

    @staticmethod
    def locate(signal: Signal, candles_by_symbol: CandlesBySymbol) -> tuple[CandleSeries, int] | None:
        """Find the signal's bar by ``(symbol, timestamp)``; None if absent."""
        candles = candles_by_symbol.get(signal.symbol)
        if not candles:
            return None
        series = CandleSeries.of(candles)
        index = series.index_of(signal.timestamp)
        if index is None:
            return None
        return series, index

    @staticmethod
    def indicators(series: CandleSeries) -> IndicatorProvider:
        return IndicatorProvider.for_series(series)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
