"""
Trade domain model.
Tracks one position from entry to exit, including commissions and outcome.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from markov_trader.core.enums import OrderSide, TradeOutcome
from markov_trader.core.exceptions.trading import ValidationError
from markov_trader.core.types.financial import ZERO, calculate_notional_value, calculate_pnl
from markov_trader.core.utils.validation import validate_non_negative, validate_positive


@dataclass
class Trade:
    """A position opened on ``side`` at ``entry_price``.

    ``pnl`` is net of both entry and exit commission once the trade is closed.
    """

    symbol: str
    side: OrderSide
    quantity: float
    entry_price: float
    entry_time: datetime
    entry_commission: float = ZERO
    stop_loss: float | None = None
    take_profit: float | None = None
    exit_price: float | None = None
    exit_time: datetime | None = None
    exit_commission: float = ZERO
    pnl: float = ZERO
    outcome: TradeOutcome = TradeOutcome.OPEN
    order_id: str | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        """Validate trade data after initialization."""
        validate_positive(self.quantity, "Quantity")
        validate_positive(self.entry_price, "Entry price")
        validate_non_negative(self.entry_commission, "Commission")

    @property
    def is_open(self) -> bool:
        return self.outcome == TradeOutcome.OPEN

    @property
    def is_long(self) -> bool:
        return self.side.is_long

    @property
    def entry_value(self) -> float:
        """Notional value committed on entry."""
        return calculate_notional_value(self.quantity, self.entry_price)

    @property
    def total_commission(self) -> float:
        return self.entry_commission + self.exit_commission

    def check_targets(self, high: float, low: float) -> tuple[TradeOutcome, float] | None:
        """Resolve the price targets against a bar's range.

        Take-profit is checked before stop-loss, so a bar that spans both
        resolves as a take-profit.

        Returns:
            ``(outcome, target_price)`` when a target was touched, else None
        """
        if self.is_long:
            if self.take_profit is not None and high >= self.take_profit:
                return TradeOutcome.TAKE_PROFIT, self.take_profit
            if self.stop_loss is not None and low <= self.stop_loss:
                return TradeOutcome.STOP_LOSS, self.stop_loss
        else:
            if self.take_profit is not None and low <= self.take_profit:
                return TradeOutcome.TAKE_PROFIT, self.take_profit
            if self.stop_loss is not None and high >= self.stop_loss:
                return TradeOutcome.STOP_LOSS, self.stop_loss
        return None

    def close(
        self,
        exit_price: float,
        exit_time: datetime,
        outcome: TradeOutcome,
        exit_commission: float = ZERO,
    ) -> float:
        """Close the trade and return its net PnL.

        Raises:
            ValidationError: If the trade is already closed
        """
        if not self.is_open:
            raise ValidationError(f"Trade {self.id} is already closed ({self.outcome.value})")

        gross = calculate_pnl(self.entry_price, exit_price, self.quantity, self.side)
        self.exit_price = exit_price
        self.exit_time = exit_time
        self.exit_commission = exit_commission
        self.pnl = gross - self.entry_commission - exit_commission
        self.outcome = outcome
        return self.pnl

    def to_dict(self) -> dict:
        """Convert trade to dictionary."""
        return {
            "id": self.id,
            "order_id": self.order_id,
            "symbol": self.symbol,
            "side": self.side.value,
            "quantity": self.quantity,
            "entry_price": self.entry_price,
            "entry_time": self.entry_time.isoformat(),
            "exit_price": self.exit_price,
            "exit_time": self.exit_time.isoformat() if self.exit_time else None,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "entry_commission": self.entry_commission,
            "exit_commission": self.exit_commission,
            "pnl": self.pnl,
            "outcome": self.outcome.value,
        }
