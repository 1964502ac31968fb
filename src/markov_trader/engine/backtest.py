"""
Backtest engine.

Replays a strategy's filtered signals over historical candles for one
symbol. The only suspension point is the historical data fetch; the bar
loop itself is synchronous and deterministic.
"""

from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from markov_trader.core.constants import MIN_TRADE_CAPITAL
from markov_trader.core.enums import OrderSide, SignalType, TradeOutcome
from markov_trader.core.exceptions.trading import DataError, StrategyError, TradingException
from markov_trader.core.interfaces.engine import IBacktestEngine
from markov_trader.core.interfaces.exchange import IExchange
from markov_trader.core.interfaces.strategy import IStrategy
from markov_trader.core.models.backtest import BacktestParameters, BacktestResult, HeldAsset
from markov_trader.core.models.candle import Candle, CandleSeries
from markov_trader.core.models.signal import Signal
from markov_trader.core.models.trade import Trade
from markov_trader.core.types.financial import ZERO, apply_slippage, calculate_commission


@dataclass
class _RunState:
    """Mutable bookkeeping for a single run."""

    parameters: BacktestParameters
    capital: float
    result: BacktestResult
    open_positions: dict[str, Trade] = field(default_factory=dict)


class BacktestEngine(IBacktestEngine):
    """Runs a strategy against an exchange's historical data."""

    def __init__(self, exchange: IExchange):
        self._exchange = exchange

    async def run(self, strategy: IStrategy, parameters: BacktestParameters) -> BacktestResult:
        """
        Execute a backtest.

        Args:
            strategy: Strategy whose filtered signals drive the simulation
            parameters: Run configuration; validated before any data is fetched

        Returns:
            Completed backtest result

        Raises:
            ConfigurationError: If the parameters are invalid
            DataError: If historical data cannot be fetched
            StrategyError: If the strategy fails to produce signals
        """
        parameters.validate()
        logger.info(
            f"Starting backtest of {strategy.name} on {parameters.symbol} {parameters.timeframe.value} "
            f"from {parameters.start_date.isoformat()} to {parameters.end_date.isoformat()}"
        )

        series = await self._fetch(parameters)
        signals = self._signals(strategy, parameters.symbol, series)

        state = _RunState(
            parameters=parameters,
            capital=parameters.initial_capital,
            result=BacktestResult(starting_capital=parameters.initial_capital),
        )

        last_index = len(series) - 1
        for index, candle in enumerate(series):
            self._resolve_targets(state, candle)

            # Signals on the final bar could only be acted on with the next bar's data
            if index == last_index:
                continue

            signal = signals.get(candle.timestamp)
            if signal is not None:
                self._handle_signal(state, signal, candle)

        if series:
            self._liquidate(state, series[-1])

        result = state.result
        result.final_capital = state.capital
        logger.info(
            f"Backtest finished: final capital {result.final_capital:.2f}, "
            f"realized PnL {result.realized_pnl:.2f}, {result.win_count} wins / {result.loss_count} losses, "
            f"{result.hold_count} holds"
        )
        return result

    async def _fetch(self, parameters: BacktestParameters) -> CandleSeries:
        try:
            candles = await self._exchange.get_historical_data(
                parameters.symbol,
                parameters.timeframe,
                parameters.start_date,
                parameters.end_date,
            )
        except TradingException:
            raise
        except Exception as e:
            raise DataError(f"Failed to fetch historical data for {parameters.symbol}: {e}") from e

        series = CandleSeries.of(candles)
        if not series:
            logger.warning(f"No historical data for {parameters.symbol}; nothing to backtest")
        else:
            logger.debug(f"Fetched {len(series)} candles for {parameters.symbol}")
        return series

    @staticmethod
    def _signals(strategy: IStrategy, symbol: str, series: CandleSeries) -> dict[datetime, Signal]:
        """First filtered signal per timestamp for the backtested symbol."""
        if not series:
            return {}
        try:
            filtered = strategy.get_filtered_signals({symbol: series})
        except TradingException:
            raise
        except Exception as e:
            raise StrategyError(f"Strategy {strategy.name} failed to generate signals: {e}") from e

        by_timestamp: dict[datetime, Signal] = {}
        for signal in filtered:
            if signal.symbol == symbol:
                by_timestamp.setdefault(signal.timestamp, signal)
        logger.debug(f"{len(by_timestamp)} tradable signals for {symbol}")
        return by_timestamp

    def _resolve_targets(self, state: _RunState, candle: Candle) -> None:
        for position in list(state.open_positions.values()):
            hit = position.check_targets(candle.high, candle.low)
            if hit is None:
                continue
            outcome, target_price = hit
            self._close_position(state, position, target_price, candle.timestamp, outcome)

    def _handle_signal(self, state: _RunState, signal: Signal, candle: Candle) -> None:
        price = signal.price if signal.price > 0 else candle.close
        position = state.open_positions.get(signal.symbol)

        if position is not None:
            if signal.side != position.side:
                self._close_position(state, position, price, candle.timestamp, TradeOutcome.CLOSED)
            else:
                logger.debug(f"Ignoring {signal.type.value} at {candle.timestamp}: position already open")
            return

        if state.capital <= MIN_TRADE_CAPITAL:
            logger.debug(f"Skipping {signal.type.value} at {candle.timestamp}: capital exhausted")
            return

        self._open_position(state, signal, price, candle.timestamp)

    def _trade_amount(self, state: _RunState) -> float:
        """Requested size, clamped so that amount plus entry commission fits in capital."""
        params = state.parameters
        requested = params.trade_size_mode.trade_amount(params.trade_size_value, state.capital)
        affordable = state.capital / (1 + params.commission_percentage)
        return min(requested, affordable)

    def _open_position(self, state: _RunState, signal: Signal, price: float, timestamp: datetime) -> None:
        params = state.parameters
        amount = self._trade_amount(state)
        if amount <= ZERO:
            return

        side = signal.side
        fill_price = apply_slippage(price, params.slippage_percentage, side)
        quantity = amount / fill_price
        entry_commission = calculate_commission(amount, params.commission_percentage)

        state.capital -= amount + entry_commission
        state.result.total_commission += entry_commission

        if signal.type == SignalType.BUY and signal.use_hold_strategy:
            trade = Trade(
                symbol=signal.symbol,
                side=OrderSide.BUY,
                quantity=quantity,
                entry_price=fill_price,
                entry_time=timestamp,
                entry_commission=entry_commission,
                take_profit=signal.take_profit,
                pnl=-entry_commission,
                outcome=TradeOutcome.MOVED_TO_HOLD,
            )
            state.result.held_assets.append(
                HeldAsset(
                    symbol=signal.symbol,
                    quantity=quantity,
                    entry_price=fill_price,
                    amount=amount,
                    timestamp=timestamp,
                )
            )
            state.result.hold_count += 1
            state.result.trade_history.append(trade)
            logger.debug(f"Moved {quantity:.8f} {signal.symbol} to hold at {fill_price:.2f} ({timestamp})")
            return

        state.open_positions[signal.symbol] = Trade(
            symbol=signal.symbol,
            side=side,
            quantity=quantity,
            entry_price=fill_price,
            entry_time=timestamp,
            entry_commission=entry_commission,
            stop_loss=signal.stop_loss,
            take_profit=signal.take_profit,
        )
        logger.debug(
            f"Opened {'long' if side.is_long else 'short'} {quantity:.8f} {signal.symbol} "
            f"at {fill_price:.2f} ({timestamp})"
        )

    def _close_position(
        self,
        state: _RunState,
        position: Trade,
        price: float,
        timestamp: datetime,
        outcome: TradeOutcome,
    ) -> None:
        params = state.parameters
        fill_price = apply_slippage(price, params.slippage_percentage, position.side.opposite())
        exit_commission = calculate_commission(position.quantity * fill_price, params.commission_percentage)

        pnl = position.close(fill_price, timestamp, outcome, exit_commission)
        committed = position.entry_value + position.entry_commission
        if pnl < -committed:
            # A short can lose at most what was committed to it
            logger.warning(
                f"Loss on {position.symbol} short capped at committed {committed:.2f} (was {pnl:.2f})"
            )
            pnl = position.pnl = -committed
        state.capital += position.entry_value + position.entry_commission + pnl
        del state.open_positions[position.symbol]

        result = state.result
        result.total_commission += exit_commission
        result.realized_pnl += pnl
        if pnl > 0:
            result.win_count += 1
        else:
            result.loss_count += 1
        result.trade_history.append(position)
        logger.debug(
            f"Closed {position.symbol} at {fill_price:.2f} ({outcome.value}) with PnL {pnl:.2f} ({timestamp})"
        )

    def _liquidate(self, state: _RunState, last_candle: Candle) -> None:
        """Close what is still open at the last close and value held assets."""
        for position in list(state.open_positions.values()):
            self._close_position(state, position, last_candle.close, last_candle.timestamp, TradeOutcome.CLOSED)

        state.result.final_held_assets_value = sum(
            asset.value_at(last_candle.close) for asset in state.result.held_assets
        )
