"""
Strategy base class: filter registry and the filter fold.
"""

from abc import abstractmethod

from loguru import logger

from markov_trader.core.interfaces.strategy import CandlesBySymbol, ISignalFilter, IStrategy
from markov_trader.core.models.candle import CandleSeries
from markov_trader.core.models.signal import Signal


def as_series_map(candles_by_symbol: CandlesBySymbol) -> dict[str, CandleSeries]:
    """Wrap each symbol's candles in a ``CandleSeries`` (existing series are kept)."""
    return {symbol: CandleSeries.of(candles) for symbol, candles in candles_by_symbol.items()}


class BaseStrategy(IStrategy):
    """Common strategy behaviour.

    Subclasses implement ``generate_signals``; filtering is the fold of
    every registered filter's ``apply`` in registration order.
    """

    def __init__(self) -> None:
        self._filters: list[ISignalFilter] = []

    @property
    def filters(self) -> list[ISignalFilter]:
        return list(self._filters)

    def add_filter(self, signal_filter: ISignalFilter) -> None:
        """Register a filter; a filter whose name is already registered is ignored."""
        if any(f.name == signal_filter.name for f in self._filters):
            logger.debug(f"Filter {signal_filter.name} already registered on {self.name}")
            return
        self._filters.append(signal_filter)

    def remove_filter(self, name: str) -> None:
        self._filters = [f for f in self._filters if f.name != name]

    @abstractmethod
    def generate_signals(self, candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        pass

    def get_filtered_signals(self, candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        data = as_series_map(candles_by_symbol)
        signals = self.generate_signals(data)
        raw_count = len(signals)
        for signal_filter in self._filters:
            signals = signal_filter.apply(signals, data)
        logger.debug(f"{self.name}: {raw_count} raw signals, {len(signals)} after filters")
        return signals

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} filters={[f.name for f in self._filters]}>"
