"""
Exchange interface definition.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from markov_trader.core.enums import Timeframe
from markov_trader.core.models.candle import Candle
from markov_trader.core.models.order import Order


class IExchange(ABC):
    """Abstract interface for market data and order execution."""

    @abstractmethod
    async def get_historical_data(
        self,
        symbol: str,
        timeframe: Timeframe,
        start: datetime,
        end: datetime,
    ) -> list[Candle]:
        """
        Fetch candles for ``symbol`` with ``start <= timestamp <= end``.

        Args:
            symbol: Trading pair symbol (e.g. "BTCUSDT")
            timeframe: Candle interval
            start: Start of the range (inclusive)
            end: End of the range (inclusive)

        Returns:
            Candles ordered by timestamp

        Raises:
            ExchangeError: If the data cannot be fetched
        """
        pass

    @abstractmethod
    async def place_order(self, order: Order) -> Order:
        """Submit an order and return it with the status assigned by the exchange."""
        pass

    @abstractmethod
    async def get_order(self, order_id: str) -> Order:
        """Look up an order by id.

        Raises:
            OrderNotFoundError: If the id is unknown
        """
        pass

    @abstractmethod
    async def cancel_order(self, order_id: str) -> None:
        """Cancel an open order.

        Raises:
            OrderNotFoundError: If the id is unknown
            OrderError: If the order can no longer be cancelled
        """
        pass

    @abstractmethod
    async def get_balance(self, asset: str) -> float:
        """Free balance of ``asset``."""
        pass
