"""
Deterministic simulated exchange.

Generates random-walk candles from a seeded NumPy generator and fills
market orders immediately against in-memory balances. Intended for
paper trading, demos and tests; there is no order book.
"""

import math
import zlib
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import numpy as np
from loguru import logger

from markov_trader.core.constants import DEFAULT_QUOTE_ASSET
from markov_trader.core.enums import OrderSide, OrderStatus, OrderType, Timeframe
from markov_trader.core.exceptions.trading import OrderError, OrderNotFoundError
from markov_trader.core.interfaces.exchange import IExchange
from markov_trader.core.models.candle import Candle, ensure_utc
from markov_trader.core.models.order import Order
from markov_trader.core.types.financial import round_amount

DEFAULT_SEED = 12345
DEFAULT_BASE_PRICE = 25000.0
DEFAULT_STARTING_BALANCE = 10000.0

MAX_STEP_CHANGE = 0.012  # Largest close-to-open move per candle, as a fraction of price
MAX_WICK = 0.004  # Largest wick beyond the candle body, as a fraction of price
MAX_VOLUME = 1000.0
MAX_TRADE_COUNT = 500
PRICE_FLOOR = 1.0
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class SimulatedExchange(IExchange):
    """In-memory exchange with reproducible market data.

    Candles sit on the timeframe grid counted from the Unix epoch. A request
    starting right after the last candle generated for the symbol and
    timeframe continues that walk from its last close; any other request
    starts a fresh walk at ``base_price``. The generator is seeded with
    ``(seed, symbol, first grid index)``, so on a fresh exchange the same
    request always yields the same candles.
    """

    def __init__(
        self,
        seed: int = DEFAULT_SEED,
        starting_balances: dict[str, float] | None = None,
        base_price: float = DEFAULT_BASE_PRICE,
        quote_asset: str = DEFAULT_QUOTE_ASSET,
    ):
        self.seed = seed
        self.base_price = base_price
        self.quote_asset = quote_asset.upper()
        if starting_balances is None:
            starting_balances = {self.quote_asset: DEFAULT_STARTING_BALANCE}
        self._balances: dict[str, float] = {k.upper(): v for k, v in starting_balances.items()}
        self._orders: dict[str, Order] = {}
        self._last_prices: dict[str, float] = {}
        self._last_candles: dict[tuple[str, Timeframe], Candle] = {}

    @staticmethod
    def align_to_grid(timestamp: datetime, timeframe: Timeframe) -> datetime:
        """First grid timestamp at or after ``timestamp``."""
        step = Timeframe.to_seconds(timeframe)
        offset = math.ceil((ensure_utc(timestamp) - EPOCH).total_seconds() / step) * step
        return EPOCH + timedelta(seconds=offset)

    async def get_historical_data(
        self,
        symbol: str,
        timeframe: Timeframe,
        start: datetime,
        end: datetime,
    ) -> list[Candle]:
        start = self.align_to_grid(start, timeframe)
        end = ensure_utc(end)
        grid_index = int((start - EPOCH).total_seconds()) // Timeframe.to_seconds(timeframe)
        rng = np.random.default_rng([self.seed, zlib.crc32(symbol.encode()), grid_index])

        previous = self._last_candles.get((symbol, timeframe))
        if previous is not None and previous.timestamp + timeframe.interval == start:
            price = previous.close
        else:
            price = self.base_price

        candles = []
        timestamp = start
        while timestamp <= end:
            open_price = price
            close_price = max(open_price * (1 + rng.uniform(-MAX_STEP_CHANGE, MAX_STEP_CHANGE)), PRICE_FLOOR)
            high = max(open_price, close_price) + open_price * rng.uniform(0, MAX_WICK)
            low = max(min(open_price, close_price) - open_price * rng.uniform(0, MAX_WICK), PRICE_FLOOR / 2)
            candles.append(
                Candle(
                    timestamp=timestamp,
                    open=open_price,
                    high=high,
                    low=low,
                    close=close_price,
                    volume=float(rng.uniform(0, MAX_VOLUME)),
                    trade_count=int(rng.integers(1, MAX_TRADE_COUNT)),
                )
            )
            price = close_price
            timestamp += timeframe.interval

        if candles:
            self._last_prices[symbol] = candles[-1].close
            self._last_candles[(symbol, timeframe)] = candles[-1]
        logger.debug(f"Generated {len(candles)} {timeframe.value} candles for {symbol}")
        return candles

    def _base_asset(self, symbol: str) -> str:
        symbol = symbol.upper()
        if symbol.endswith(self.quote_asset) and len(symbol) > len(self.quote_asset):
            return symbol[: -len(self.quote_asset)]
        return symbol

    async def place_order(self, order: Order) -> Order:
        price = order.price if order.price > 0 else self._last_prices.get(order.symbol, self.base_price)
        placed = replace(order, price=price)

        if order.type == OrderType.LIMIT:
            placed.status = OrderStatus.NEW
        else:
            placed.status = self._fill(placed)

        self._orders[placed.id] = placed
        logger.debug(
            f"Order {placed.id} {placed.side.value} {placed.quantity} {placed.symbol} @ {price}: "
            f"{placed.status.value}"
        )
        return replace(placed)

    def _fill(self, order: Order) -> OrderStatus:
        """Move balances for a market order; returns the resulting status."""
        base = self._base_asset(order.symbol)
        notional = order.quantity * order.price

        if order.side == OrderSide.BUY:
            if self._balances.get(self.quote_asset, 0.0) < notional:
                return OrderStatus.REJECTED
            self._balances[self.quote_asset] = round_amount(self._balances[self.quote_asset] - notional)
            self._balances[base] = round_amount(self._balances.get(base, 0.0) + order.quantity)
        else:
            if self._balances.get(base, 0.0) < order.quantity:
                return OrderStatus.REJECTED
            self._balances[base] = round_amount(self._balances[base] - order.quantity)
            self._balances[self.quote_asset] = round_amount(
                self._balances.get(self.quote_asset, 0.0) + notional
            )
        return OrderStatus.FILLED

    async def get_order(self, order_id: str) -> Order:
        if order_id not in self._orders:
            raise OrderNotFoundError(order_id)
        return replace(self._orders[order_id])

    async def cancel_order(self, order_id: str) -> None:
        if order_id not in self._orders:
            raise OrderNotFoundError(order_id)
        order = self._orders[order_id]
        if order.status.is_final:
            raise OrderError(f"Cannot cancel order {order_id} with status {order.status.value}")
        order.status = OrderStatus.CANCELED
        logger.debug(f"Order {order_id} canceled")

    async def get_balance(self, asset: str) -> float:
        return self._balances.get(asset.upper(), 0.0)
