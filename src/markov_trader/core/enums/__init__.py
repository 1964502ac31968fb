"""
Core enumerations for the trading platform.

This module provides centralized enumerations for domain concepts
like candle movement, signal and order types, timeframes and sizing modes.
"""

from .engine_state import BacktestStatus, EngineState, SessionStatus
from .movement import Movement
from .order_types import OrderSide, OrderStatus, OrderType, SignalType, TradeOutcome
from .timeframes import Timeframe
from .trade_size import TradeSizeMode

__all__ = [
    "BacktestStatus",
    "EngineState",
    "Movement",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "SessionStatus",
    "SignalType",
    "Timeframe",
    "TradeOutcome",
    "TradeSizeMode",
]
