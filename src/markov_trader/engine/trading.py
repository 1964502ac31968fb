"""
Live trading engine.

Polls the exchange for new candles on a fixed interval, runs the strategy
over the buffered history and trades the signals raised on each symbol's
latest candle. One asyncio task per engine; candle buffers are guarded
by an ``asyncio.Lock`` and positions are only mutated by the loop task.
"""

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta

from loguru import logger

from markov_trader.core.config import TradingSettings, get_settings
from markov_trader.core.constants import INCREMENTAL_FETCH_OFFSET_SECONDS
from markov_trader.core.enums import (
    EngineState,
    OrderSide,
    OrderStatus,
    OrderType,
    SignalType,
    Timeframe,
    TradeOutcome,
    TradeSizeMode,
)
from markov_trader.core.interfaces.engine import ITradingEngine, OrderPlacedHandler
from markov_trader.core.interfaces.exchange import IExchange
from markov_trader.core.interfaces.strategy import IStrategy
from markov_trader.core.models.candle import Candle, CandleSeries
from markov_trader.core.models.order import Order
from markov_trader.core.models.signal import Signal
from markov_trader.core.models.trade import Trade
from markov_trader.core.utils.decorators import log_trades
from markov_trader.core.utils.validation import validate_symbol


class TradingEngine(ITradingEngine):
    """Runs a strategy against live exchange data for a set of symbols."""

    def __init__(
        self,
        exchange: IExchange,
        strategy: IStrategy,
        symbols: Iterable[str],
        timeframe: Timeframe,
        settings: TradingSettings | None = None,
        on_order_placed: Iterable[OrderPlacedHandler] = (),
        clock: Callable[[], datetime] | None = None,
    ):
        self._exchange = exchange
        self._strategy = strategy
        self._symbols = [validate_symbol(s) for s in symbols]
        self._timeframe = timeframe
        self._settings = settings or get_settings()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._handlers: list[OrderPlacedHandler] = list(on_order_placed)

        self._candles: dict[str, CandleSeries] = {s: CandleSeries() for s in self._symbols}
        self._candles_lock = asyncio.Lock()
        self._open_positions: dict[str, Trade] = {}
        self._trade_history: list[Trade] = []

        self._state = EngineState.STOPPED
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def symbols(self) -> list[str]:
        return list(self._symbols)

    @property
    def open_positions(self) -> dict[str, Trade]:
        return dict(self._open_positions)

    @property
    def trade_history(self) -> list[Trade]:
        return list(self._trade_history)

    async def get_candles(self, symbol: str) -> list[Candle]:
        async with self._candles_lock:
            return list(self._candles.get(symbol, ()))

    def add_order_placed_handler(self, handler: OrderPlacedHandler) -> None:
        self._handlers.append(handler)

    def remove_order_placed_handler(self, handler: OrderPlacedHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    async def start(self) -> None:
        """Start the trading loop task; no-op when already running."""
        if self._state == EngineState.RUNNING:
            return
        self._stop_event = asyncio.Event()
        self._state = EngineState.RUNNING
        self._task = asyncio.create_task(self._run(), name=f"trading-engine-{'-'.join(self._symbols)}")
        logger.info(
            f"Trading engine started: {self._strategy.name} on {', '.join(self._symbols)} "
            f"{self._timeframe.value}"
        )

    async def stop(self) -> None:
        """Signal the loop to stop and wait for the running iteration to finish."""
        task = self._task
        if task is None:
            return
        self._stop_event.set()
        await task
        self._task = None
        self._state = EngineState.STOPPED
        logger.info(f"Trading engine stopped: {self._strategy.name}")

    async def _run(self) -> None:
        try:
            try:
                await self._load_initial_history()
            except Exception:
                logger.exception("Trading engine failed to load initial history; engine stopped")
                return

            while not self._stop_event.is_set():
                try:
                    await self.run_iteration()
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.exception("Trading iteration failed; continuing with the next interval")

                if await self._wait_for_stop(self._settings.loop_interval_seconds):
                    break
        except asyncio.CancelledError:
            logger.debug("Trading engine task cancelled")
        finally:
            self._state = EngineState.STOPPED

    async def _wait_for_stop(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds; True when stop was requested."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
            return True
        except TimeoutError:
            return False

    async def _load_initial_history(self) -> None:
        now = self._clock()
        start = now - timedelta(days=self._settings.lookback_days)
        for symbol in self._symbols:
            candles = await self._exchange.get_historical_data(symbol, self._timeframe, start, now)
            async with self._candles_lock:
                self._candles[symbol] = CandleSeries.merge(self._candles[symbol], candles)
            logger.info(f"Loaded {len(candles)} {self._timeframe.value} candles for {symbol}")

    async def _refresh_candles(self) -> None:
        now = self._clock()
        for symbol in self._symbols:
            async with self._candles_lock:
                last = self._candles[symbol].last
            if last is None:
                start = now - timedelta(days=self._settings.lookback_days)
            else:
                start = last.timestamp + timedelta(seconds=INCREMENTAL_FETCH_OFFSET_SECONDS)

            fresh = await self._exchange.get_historical_data(symbol, self._timeframe, start, now)
            async with self._candles_lock:
                self._candles[symbol] = CandleSeries.merge(self._candles[symbol], fresh)
            logger.debug(f"Fetched {len(fresh)} new candles for {symbol}")

    async def run_iteration(self) -> None:
        """Fetch new candles, evaluate the strategy and trade the latest-bar signals."""
        await self._refresh_candles()

        async with self._candles_lock:
            snapshot = dict(self._candles)

        signals = self._strategy.get_filtered_signals(snapshot)
        for signal in signals:
            series = snapshot.get(signal.symbol)
            if series is None or series.last is None or series.last.timestamp != signal.timestamp:
                continue
            await self._execute_signal(signal, series.last)

    async def _execute_signal(self, signal: Signal, latest: Candle) -> None:
        price = signal.price if signal.price > 0 else latest.close
        position = self._open_positions.get(signal.symbol)

        if signal.type == SignalType.BUY and position is None:
            await self._open_long(signal, price)
        elif signal.type == SignalType.SELL and position is not None:
            await self._close_long(position, price)
        else:
            logger.debug(f"No action for {signal.type.value} {signal.symbol} at {signal.timestamp}")

    async def _trade_amount(self) -> float:
        settings = self._settings
        available = 0.0
        if settings.trade_size_mode == TradeSizeMode.PERCENTAGE_OF_CAPITAL:
            available = await self._exchange.get_balance(settings.quote_asset)
        return settings.trade_size_mode.trade_amount(settings.trade_size, available)

    async def _open_long(self, signal: Signal, price: float) -> None:
        if price <= 0:
            logger.warning(f"Skipping Buy for {signal.symbol}: price is zero")
            return

        amount = await self._trade_amount()
        if amount <= 0:
            logger.warning(f"Skipping Buy for {signal.symbol}: no {self._settings.quote_asset} available")
            return

        order = Order(
            symbol=signal.symbol,
            side=OrderSide.BUY,
            quantity=amount / price,
            price=price,
            type=OrderType.MARKET,
            stop_loss=None if signal.use_hold_strategy else signal.stop_loss,
            take_profit=signal.take_profit,
            use_hold_strategy=signal.use_hold_strategy,
            timestamp=self._clock(),
        )
        placed = await self.submit_order(order)
        if placed.status == OrderStatus.REJECTED:
            logger.warning(f"Buy order for {signal.symbol} rejected by exchange")
            return

        self._open_positions[signal.symbol] = Trade(
            symbol=placed.symbol,
            side=OrderSide.BUY,
            quantity=placed.quantity,
            entry_price=placed.price,
            entry_time=placed.timestamp,
            stop_loss=placed.stop_loss,
            take_profit=placed.take_profit,
            order_id=placed.id,
        )
        self._notify(placed)

    async def _close_long(self, position: Trade, price: float) -> None:
        if price <= 0:
            logger.warning(f"Skipping Sell for {position.symbol}: price is zero")
            return

        order = Order(
            symbol=position.symbol,
            side=OrderSide.SELL,
            quantity=position.quantity,
            price=price,
            type=OrderType.MARKET,
        )
        placed = await self.submit_order(order)
        if placed.status == OrderStatus.REJECTED:
            logger.warning(f"Sell order for {position.symbol} rejected by exchange")
            return

        pnl = position.close(placed.price, placed.timestamp, TradeOutcome.CLOSED)
        del self._open_positions[position.symbol]
        self._trade_history.append(position)
        logger.info(f"Closed {position.symbol} long at {placed.price:.2f} with PnL {pnl:.2f}")
        self._notify(placed)

    @log_trades
    async def submit_order(self, order: Order) -> Order:
        """Place an order on the exchange."""
        return await self._exchange.place_order(order)

    def _notify(self, order: Order) -> None:
        for handler in list(self._handlers):
            try:
                handler(order)
            except Exception:
                logger.exception(f"Order placed handler failed for order {order.id}")
