"""
Signal, order and trade outcome enumerations.

This module defines the allowed signal directions, order sides and
statuses, and the ways a trade can end.
"""

from enum import StrEnum


class SignalType(StrEnum):
    """
    Direction of a strategy signal.

    A BUY opens a long (or closes a short); a SELL closes a long
    (or opens a short where the engine allows it).
    """

    BUY = "Buy"
    SELL = "Sell"

    def opposite(self) -> "SignalType":
        """Get the opposite signal type."""
        return SignalType.SELL if self == SignalType.BUY else SignalType.BUY

    def to_order_side(self) -> "OrderSide":
        """Get the order side that executes this signal."""
        return OrderSide.BUY if self == SignalType.BUY else OrderSide.SELL


class OrderSide(StrEnum):
    """Side of an order or an open position."""

    BUY = "Buy"
    SELL = "Sell"

    @property
    def is_long(self) -> bool:
        """Check if a position on this side is long."""
        return self == OrderSide.BUY

    def opposite(self) -> "OrderSide":
        """Get the side that closes a position opened on this side."""
        return OrderSide.SELL if self == OrderSide.BUY else OrderSide.BUY


class OrderType(StrEnum):
    """Order execution type."""

    MARKET = "Market"
    LIMIT = "Limit"


class OrderStatus(StrEnum):
    """Lifecycle status of an order."""

    NEW = "New"
    PARTIALLY_FILLED = "PartiallyFilled"
    FILLED = "Filled"
    CANCELED = "Canceled"
    REJECTED = "Rejected"

    @property
    def is_final(self) -> bool:
        """Check if the order can no longer change."""
        return self in [OrderStatus.FILLED, OrderStatus.CANCELED, OrderStatus.REJECTED]


class TradeOutcome(StrEnum):
    """How a trade left the open-position book."""

    OPEN = "Open"
    TAKE_PROFIT = "TakeProfit"
    STOP_LOSS = "StopLoss"
    CLOSED = "Closed"
    MOVED_TO_HOLD = "MovedToHold"

    @property
    def is_target_hit(self) -> bool:
        """Check if the trade was closed by a price target."""
        return self in [TradeOutcome.TAKE_PROFIT, TradeOutcome.STOP_LOSS]
