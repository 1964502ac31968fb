"""
Core domain models.
"""

from .analytics import ReversalEvent, ReversalProbability
from .backtest import BacktestParameters, BacktestResult, HeldAsset
from .candle import Candle, CandleSeries, candles_from_json, candles_to_json, ensure_utc
from .order import Order
from .session import LiveSession
from .signal import Signal
from .trade import Trade

__all__ = [
    "BacktestParameters",
    "BacktestResult",
    "Candle",
    "CandleSeries",
    "HeldAsset",
    "LiveSession",
    "Order",
    "ReversalEvent",
    "ReversalProbability",
    "Signal",
    "Trade",
    "candles_from_json",
    "candles_to_json",
    "ensure_utc",
]
