"""
Shared fixtures: candle builders and an in-memory exchange double.
"""

from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest

from markov_trader.core.enums import OrderStatus, Timeframe
from markov_trader.core.exceptions.trading import OrderNotFoundError
from markov_trader.core.interfaces.exchange import IExchange
from markov_trader.core.interfaces.strategy import CandlesBySymbol
from markov_trader.core.models.candle import Candle
from markov_trader.core.models.order import Order
from markov_trader.core.models.signal import Signal
from markov_trader.strategies import BaseStrategy

START = datetime(2024, 1, 1, tzinfo=UTC)

CandleFactory = Callable[..., list[Candle]]


def build_candles(
    rows: Sequence[tuple[float, ...]],
    start: datetime = START,
    step: timedelta = timedelta(days=1),
) -> list[Candle]:
    """Build candles from ``(open, high, low, close[, volume[, trade_count]])`` rows."""
    candles = []
    for i, row in enumerate(rows):
        open_price, high, low, close = row[:4]
        volume = row[4] if len(row) > 4 else 100.0
        trade_count = int(row[5]) if len(row) > 5 else 10
        candles.append(
            Candle(
                timestamp=start + step * i,
                open=open_price,
                high=high,
                low=low,
                close=close,
                volume=volume,
                trade_count=trade_count,
            )
        )
    return candles


def build_closes(closes: Sequence[float], start: datetime = START, volume: float = 100.0) -> list[Candle]:
    """Build candles opening at the previous close, with a 1-unit wick each side."""
    rows = []
    previous = closes[0]
    for close in closes:
        rows.append((previous, max(previous, close) + 1, min(previous, close) - 1, close, volume))
        previous = close
    return build_candles(rows, start=start)


class StubExchange(IExchange):
    """Exchange double serving fixed candles and filling every order."""

    def __init__(self, candles: dict[str, list[Candle]] | None = None, balance: float = 10000.0):
        self.candles: dict[str, list[Candle]] = candles or {}
        self.balances: dict[str, float] = {"USDT": balance}
        self.history_requests: list[tuple[str, Timeframe, datetime, datetime]] = []
        self.orders: list[Order] = []
        self.reject_orders = False
        self.fail_history = False

    async def get_historical_data(self, symbol, timeframe, start, end) -> list[Candle]:
        self.history_requests.append((symbol, timeframe, start, end))
        if self.fail_history:
            raise ConnectionError("exchange unavailable")
        return [c for c in self.candles.get(symbol, []) if start <= c.timestamp <= end]

    async def place_order(self, order: Order) -> Order:
        status = OrderStatus.REJECTED if self.reject_orders else OrderStatus.FILLED
        placed = replace(order, status=status)
        self.orders.append(placed)
        return placed

    async def get_order(self, order_id: str) -> Order:
        for order in self.orders:
            if order.id == order_id:
                return order
        raise OrderNotFoundError(order_id)

    async def cancel_order(self, order_id: str) -> None:
        await self.get_order(order_id)

    async def get_balance(self, asset: str) -> float:
        return self.balances.get(asset, 0.0)


@pytest.fixture
def make_candles() -> CandleFactory:
    """Factory for candles from OHLC(V) rows, one day apart from 2024-01-01 UTC."""
    return build_candles


@pytest.fixture
def make_closes() -> CandleFactory:
    """Factory for a contiguous candle path through the given closes."""
    return build_closes


@pytest.fixture
def stub_exchange() -> StubExchange:
    return StubExchange()


class FixedSignalStrategy(BaseStrategy):
    """Strategy emitting a fixed list of signals regardless of the data."""

    def __init__(self, signals: Sequence[Signal] = ()):
        super().__init__()
        self.signals = list(signals)
        self.calls = 0

    @property
    def name(self) -> str:
        return "Fixed Signals"

    def generate_signals(self, candles_by_symbol: CandlesBySymbol) -> list[Signal]:
        self.calls += 1
        return [s.copy() for s in self.signals]
