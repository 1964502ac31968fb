"""
Circuit-breaker filter.
"""

from markov_trader.core.interfaces.strategy import CandlesBySymbol, ISignalFilter
from markov_trader.core.models.signal import Signal


class EmergencyStopFilter(ISignalFilter):
    """Drops every signal."""

    FILTER_NAME = "EmergencyStop"

    @property
    def name(self) -> str:
        return self.FILTER_NAME

    def apply(self, signals: list[Signal], candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        return []
