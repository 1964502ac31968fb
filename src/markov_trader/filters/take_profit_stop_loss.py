"""
Percentage take-profit/stop-loss targets.
"""

from markov_trader.core.enums import SignalType
from markov_trader.core.interfaces.strategy import CandlesBySymbol, ISignalFilter
from markov_trader.core.models.signal import Signal


class TakeProfitStopLossFilter(ISignalFilter):
    """Sets targets as fractions of the signal price when none are set yet.

    With ``use_hold_strategy_for_longs`` a Buy gets a take-profit only and
    is flagged to be held instead of stopped out.
    """

    FILTER_NAME = "TakeProfitStopLossFilter"

    def __init__(
        self,
        take_profit_percentage: float = 0.10,
        stop_loss_percentage: float = 0.05,
        use_hold_strategy_for_longs: bool = False,
    ):
        self.take_profit_percentage = take_profit_percentage
        self.stop_loss_percentage = stop_loss_percentage
        self.use_hold_strategy_for_longs = use_hold_strategy_for_longs

    @property
    def name(self) -> str:
        return f"{self.FILTER_NAME}({self.take_profit_percentage:g}, {self.stop_loss_percentage:g})"

    def apply(self, signals: list[Signal], candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        for signal in signals:
            if signal.has_targets:
                continue

            if signal.type == SignalType.BUY:
                signal.take_profit = signal.price * (1 + self.take_profit_percentage)
                if self.use_hold_strategy_for_longs:
                    signal.use_hold_strategy = True
                    signal.stop_loss = None
                else:
                    signal.stop_loss = signal.price * (1 - self.stop_loss_percentage)
            else:
                signal.take_profit = signal.price * (1 - self.take_profit_percentage)
                signal.stop_loss = signal.price * (1 + self.stop_loss_percentage)
        return list(signals)
