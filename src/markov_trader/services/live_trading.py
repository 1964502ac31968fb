"""
Live trading sessions: one trading engine per session.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from markov_trader.core.config import TradingSettings, get_settings
from markov_trader.core.enums import EngineState, SessionStatus, Timeframe
from markov_trader.core.exceptions.trading import SessionNotFoundError
from markov_trader.core.interfaces.engine import ITradingEngine, OrderPlacedHandler
from markov_trader.core.interfaces.exchange import IExchange
from markov_trader.core.interfaces.strategy import IStrategy
from markov_trader.core.models.session import LiveSession
from markov_trader.core.utils.validation import validate_symbol
from markov_trader.engine.trading import TradingEngine

from .strategy_service import StrategyService

type EngineFactory = Callable[[IStrategy, str, Timeframe, OrderPlacedHandler], ITradingEngine]


@dataclass
class _RunningSession:
    session: LiveSession
    engine: ITradingEngine
    stopped: bool = False

    def sync_status(self) -> LiveSession:
        """Mark the session stopped once its engine has ended on its own."""
        if self.session.status == SessionStatus.RUNNING and self.engine.state == EngineState.STOPPED:
            logger.warning(f"Live session {self.session.id} engine is no longer running")
            self.session.status = SessionStatus.STOPPED
        return self.session


class LiveTradingService:
    """Starts, tracks and stops live trading sessions."""

    def __init__(
        self,
        exchange: IExchange,
        strategy_service: StrategyService,
        settings: TradingSettings | None = None,
        engine_factory: EngineFactory | None = None,
    ):
        self._exchange = exchange
        self._strategy_service = strategy_service
        self._settings = settings or get_settings()
        self._engine_factory = engine_factory or self._default_engine
        self._sessions: dict[uuid.UUID, _RunningSession] = {}

    def _default_engine(
        self,
        strategy: IStrategy,
        symbol: str,
        timeframe: Timeframe,
        on_order_placed: OrderPlacedHandler,
    ) -> ITradingEngine:
        return TradingEngine(
            self._exchange,
            strategy,
            [symbol],
            timeframe,
            settings=self._settings,
            on_order_placed=[on_order_placed],
        )

    async def start_session(
        self, strategy_id: uuid.UUID, symbol: str, timeframe: str | Timeframe
    ) -> uuid.UUID:
        """
        Start trading a registered strategy on one symbol.

        Raises:
            ConfigurationError: If the timeframe string is not supported
            StrategyNotFoundError: If the strategy id is unknown
        """
        parsed_timeframe = Timeframe.from_string(timeframe)
        symbol = validate_symbol(symbol)
        strategy = self._strategy_service.get_strategy(strategy_id)

        session = LiveSession(
            strategy_id=strategy_id,
            strategy_name=strategy.name,
            symbol=symbol,
            timeframe=parsed_timeframe,
        )
        engine = self._engine_factory(strategy, symbol, parsed_timeframe, session.record_order)
        self._sessions[session.id] = _RunningSession(session=session, engine=engine)

        await engine.start()
        logger.info(f"Live session {session.id} started: {strategy.name} on {symbol} {parsed_timeframe.value}")
        return session.id

    async def stop_session(self, session_id: uuid.UUID) -> LiveSession:
        """Stop a session's engine; stopping a stopped session is a no-op."""
        running = self._get(session_id)
        if running.stopped:
            return running.session

        await running.engine.stop()
        running.engine.remove_order_placed_handler(running.session.record_order)
        running.stopped = True
        running.session.status = SessionStatus.STOPPED
        logger.info(f"Live session {session_id} stopped")
        return running.session

    async def stop_all(self) -> None:
        for session_id in list(self._sessions):
            await self.stop_session(session_id)

    def get_session(self, session_id: uuid.UUID) -> LiveSession:
        return self._get(session_id).sync_status()

    def get_engine(self, session_id: uuid.UUID) -> ITradingEngine:
        return self._get(session_id).engine

    def get_all_sessions(self) -> list[LiveSession]:
        return [running.sync_status() for running in self._sessions.values()]

    def _get(self, session_id: uuid.UUID) -> _RunningSession:
        if session_id not in self._sessions:
            raise SessionNotFoundError(session_id)
        return self._sessions[session_id]
