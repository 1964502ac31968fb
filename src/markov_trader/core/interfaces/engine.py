"""
Engine interface definitions.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from markov_trader.core.enums import EngineState
from markov_trader.core.models.backtest import BacktestParameters, BacktestResult
from markov_trader.core.models.candle import Candle
from markov_trader.core.models.order import Order
from markov_trader.core.models.trade import Trade

from .strategy import IStrategy

type OrderPlacedHandler = Callable[[Order], None]


class IBacktestEngine(ABC):
    """Replays a strategy over historical candles."""

    @abstractmethod
    async def run(self, strategy: IStrategy, parameters: BacktestParameters) -> BacktestResult:
        pass


class ITradingEngine(ABC):
    """Runs a strategy against live exchange data."""

    @property
    @abstractmethod
    def state(self) -> EngineState:
        pass

    @property
    @abstractmethod
    def open_positions(self) -> dict[str, Trade]:
        pass

    @property
    @abstractmethod
    def trade_history(self) -> list[Trade]:
        pass

    @abstractmethod
    async def start(self) -> None:
        pass

    @abstractmethod
    async def stop(self) -> None:
        pass

    @abstractmethod
    async def get_candles(self, symbol: str) -> list[Candle]:
        pass

    @abstractmethod
    def add_order_placed_handler(self, handler: OrderPlacedHandler) -> None:
        pass

    @abstractmethod
    def remove_order_placed_handler(self, handler: OrderPlacedHandler) -> None:
        pass
