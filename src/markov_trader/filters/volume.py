"""
Volume confirmation filter.
"""

from markov_trader.core.interfaces.strategy import CandlesBySymbol
from markov_trader.core.models.signal import Signal

from .base import BarContextFilter


class VolumeFilter(BarContextFilter):
    """Keeps signals raised on bars trading at least ``multiplier`` x average volume."""

    FILTER_NAME = "VolumeFilter"

    def __init__(self, volume_ma_period: int = 20, min_volume_multiplier: float = 1.5):
        self.volume_ma_period = volume_ma_period
        self.min_volume_multiplier = min_volume_multiplier

    @property
    def name(self) -> str:
        return f"{self.FILTER_NAME}({self.volume_ma_period}, {self.min_volume_multiplier:g})"

    def apply(self, signals: list[Signal], candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        passed = []
        for signal in signals:
            located = self.locate(signal, candles_by_symbol)
            if located is None:
                continue
            series, index = located

            volume_sma = self.indicators(series).volume_sma(self.volume_ma_period)
            if index >= len(volume_sma):
                continue
            if series[index].volume < volume_sma[index] * self.min_volume_multiplier:
                continue
            passed.append(signal)
        return passed
