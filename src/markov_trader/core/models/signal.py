"""
Strategy signal model.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from markov_trader.core.enums import OrderSide, SignalType


@dataclass
class Signal:
    """A trade intent produced by a strategy and refined by filters.

    Filters may set ``stop_loss``/``take_profit`` and ``use_hold_strategy``
    in place; everything else is fixed once the strategy emits it.
    """

    symbol: str
    type: SignalType
    price: float
    timestamp: datetime
    stop_loss: float | None = None
    take_profit: float | None = None
    use_hold_strategy: bool = False

    @property
    def side(self) -> OrderSide:
        return self.type.to_order_side()

    @property
    def has_targets(self) -> bool:
        """Check if either price target has already been set."""
        return self.stop_loss is not None or self.take_profit is not None

    def copy(self) -> "Signal":
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "type": self.type.value,
            "price": self.price,
            "timestamp": self.timestamp.isoformat(),
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "use_hold_strategy": self.use_hold_strategy,
        }
