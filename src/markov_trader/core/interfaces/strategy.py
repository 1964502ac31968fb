"""
Strategy and signal filter interface definitions.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from markov_trader.core.models.candle import Candle
from markov_trader.core.models.signal import Signal

type CandlesBySymbol = Mapping[str, Sequence[Candle]]


class ISignalFilter(ABC):
    """Transforms a list of signals: drops some, annotates others."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique filter name; a strategy holds at most one filter per name."""
        pass

    @abstractmethod
    def apply(self, signals: list[Signal], candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        """Return the signals that pass, with any targets set."""
        pass


class IStrategy(ABC):
    """Abstract interface for trading strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def filters(self) -> list[ISignalFilter]:
        """Registered filters in registration order."""
        pass

    @abstractmethod
    def generate_signals(self, candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        """Raw signals over the whole history of every symbol."""
        pass

    @abstractmethod
    def get_filtered_signals(self, candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        """Raw signals folded through the registered filters."""
        pass

    @abstractmethod
    def add_filter(self, signal_filter: ISignalFilter) -> None:
        pass

    @abstractmethod
    def remove_filter(self, name: str) -> None:
        pass
