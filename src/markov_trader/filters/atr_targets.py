"""
ATR-based take-profit/stop-loss targets.
"""

from markov_trader.core.enums import SignalType
from markov_trader.core.interfaces.strategy import CandlesBySymbol
from markov_trader.core.models.signal import Signal

from .base import BarContextFilter


class AtrTargetsFilter(BarContextFilter):
    """Sets targets at ``price +/- ATR x multiplier``; never drops a signal.

    Signals that already carry a target, or whose bar has no positive ATR,
    pass through unchanged.
    """

    FILTER_NAME = "AtrTargetsFilter"

    def __init__(
        self,
        atr_period: int = 14,
        take_profit_atr_multiplier: float = 2.0,
        stop_loss_atr_multiplier: float = 1.5,
    ):
        self.atr_period = atr_period
        self.take_profit_atr_multiplier = take_profit_atr_multiplier
        self.stop_loss_atr_multiplier = stop_loss_atr_multiplier

    @property
    def name(self) -> str:
        return (
            f"{self.FILTER_NAME}({self.atr_period}, "
            f"{self.take_profit_atr_multiplier:g}, {self.stop_loss_atr_multiplier:g})"
        )

    def apply(self, signals: list[Signal], candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        for signal in signals:
            if signal.has_targets:
                continue
            located = self.locate(signal, candles_by_symbol)
            if located is None:
                continue
            series, index = located

            atr_values = self.indicators(series).atr(self.atr_period)
            if index >= len(atr_values) or atr_values[index] <= 0:
                continue
            atr = atr_values[index]

            if signal.type == SignalType.BUY:
                signal.take_profit = signal.price + atr * self.take_profit_atr_multiplier
                signal.stop_loss = signal.price - atr * self.stop_loss_atr_multiplier
            else:
                signal.take_profit = signal.price - atr * self.take_profit_atr_multiplier
                signal.stop_loss = signal.price + atr * self.stop_loss_atr_multiplier
        return list(signals)
