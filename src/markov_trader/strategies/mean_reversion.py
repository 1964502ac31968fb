"""
Consecutive-movement mean reversion strategy.
"""

from markov_trader.core.enums import Movement, SignalType
from markov_trader.core.interfaces.strategy import CandlesBySymbol
from markov_trader.core.models.signal import Signal

from .base import BaseStrategy, as_series_map


class MeanReversionStrategy(BaseStrategy):
    """Fade runs: Buy after N Down bars in a row, Sell after N Up bars in a row.

    The signal is raised on the last bar of the run, at its close.
    """

    def __init__(self, consecutive_movements: int = 3):
        super().__init__()
        self.consecutive_movements = consecutive_movements

    @property
    def name(self) -> str:
        return f"Mean Reversion ({self.consecutive_movements})"

    def generate_signals(self, candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        n = self.consecutive_movements
        if n <= 0:
            return []

        signals = []
        for symbol, series in as_series_map(candles_by_symbol).items():
            movements = series.movements()
            for i in range(n - 1, len(series)):
                run = movements[i - n + 1 : i + 1]
                if any(m != run[0] for m in run):
                    continue

                candle = series[i]
                signals.append(
                    Signal(
                        symbol=symbol,
                        type=SignalType.BUY if run[0] == Movement.DOWN else SignalType.SELL,
                        price=candle.close,
                        timestamp=candle.timestamp,
                    )
                )
        return signals
