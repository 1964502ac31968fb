"""
Live trading session record.
"""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from markov_trader.core.enums import OrderSide, SessionStatus, Timeframe, TradeOutcome

from .order import Order
from .trade import Trade


@dataclass
class LiveSession:
    """Bookkeeping for one live trading engine, fed by its order notifications.

    A Buy order opens a long; a Sell order closes the oldest open long of
    the same symbol. Sells with no matching long are ignored.
    """

    strategy_id: uuid.UUID
    strategy_name: str
    symbol: str
    timeframe: Timeframe
    status: SessionStatus = SessionStatus.RUNNING
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    open_positions: list[Trade] = field(default_factory=list)
    trades: list[Trade] = field(default_factory=list)

    @property
    def realized_pnl(self) -> float:
        return sum(t.pnl for t in self.trades)

    def record_order(self, order: Order) -> None:
        """Apply a placed order to the session's positions."""
        if order.side == OrderSide.BUY:
            self.open_positions.append(
                Trade(
                    symbol=order.symbol,
                    side=OrderSide.BUY,
                    quantity=order.quantity,
                    entry_price=order.price,
                    entry_time=order.timestamp,
                    stop_loss=order.stop_loss,
                    take_profit=order.take_profit,
                    order_id=order.id,
                )
            )
            return

        position = next(
            (p for p in self.open_positions if p.is_long and p.symbol == order.symbol),
            None,
        )
        if position is None:
            return
        position.close(order.price, order.timestamp, TradeOutcome.CLOSED)
        self.open_positions.remove(position)
        self.trades.append(position)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "strategy_id": str(self.strategy_id),
            "strategy_name": self.strategy_name,
            "symbol": self.symbol,
            "timeframe": self.timeframe.value,
            "status": self.status.value,
            "start_time": self.start_time.isoformat(),
            "realized_pnl": self.realized_pnl,
            "open_positions": len(self.open_positions),
            "trades": [t.to_dict() for t in self.trades],
        }
