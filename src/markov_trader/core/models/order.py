"""
Exchange order model.
"""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from markov_trader.core.enums import OrderSide, OrderStatus, OrderType
from markov_trader.core.types.financial import calculate_notional_value
from markov_trader.core.utils.validation import validate_non_negative, validate_positive


@dataclass
class Order:
    """An order submitted to an exchange."""

    symbol: str
    side: OrderSide
    quantity: float
    price: float
    type: OrderType = OrderType.MARKET
    status: OrderStatus = OrderStatus.NEW
    stop_loss: float | None = None
    take_profit: float | None = None
    use_hold_strategy: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        validate_positive(self.quantity, "Order quantity")
        validate_non_negative(self.price, "Order price")

    @property
    def notional(self) -> float:
        return calculate_notional_value(self.quantity, self.price)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "side": self.side.value,
            "type": self.type.value,
            "status": self.status.value,
            "quantity": self.quantity,
            "price": self.price,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "use_hold_strategy": self.use_hold_strategy,
            "timestamp": self.timestamp.isoformat(),
        }
