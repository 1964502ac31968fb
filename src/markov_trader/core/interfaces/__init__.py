"""
Abstract interfaces between the engines and their collaborators.
"""

from .engine import IBacktestEngine, ITradingEngine, OrderPlacedHandler
from .exchange import IExchange
from .strategy import CandlesBySymbol, ISignalFilter, IStrategy

__all__ = [
    "CandlesBySymbol",
    "IBacktestEngine",
    "IExchange",
    "ISignalFilter",
    "IStrategy",
    "ITradingEngine",
    "OrderPlacedHandler",
]
