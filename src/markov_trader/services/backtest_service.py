"""
Backtest facade returning results instead of raising.
"""

import uuid

from loguru import logger

from markov_trader.core.exceptions.trading import TradingException
from markov_trader.core.interfaces.exchange import IExchange
from markov_trader.core.models.backtest import BacktestParameters, BacktestResult
from markov_trader.engine.backtest import BacktestEngine

from .strategy_service import StrategyService


class BacktestService:
    """Runs backtests for registered strategies."""

    def __init__(self, exchange: IExchange, strategy_service: StrategyService):
        self._engine = BacktestEngine(exchange)
        self._strategy_service = strategy_service

    async def run_backtest(self, parameters: BacktestParameters, strategy_id: uuid.UUID) -> BacktestResult:
        """
        Run a backtest for a registered strategy.

        Configuration, data and strategy failures come back as a FAILED
        result carrying the error message.
        """
        try:
            strategy = self._strategy_service.get_strategy(strategy_id)
            return await self._engine.run(strategy, parameters)
        except TradingException as e:
            logger.error(f"Backtest failed for strategy {strategy_id}: {e}")
            return BacktestResult.failed(parameters.initial_capital, str(e))
