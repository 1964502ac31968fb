"""
Execution engines: historical backtesting and live trading.
"""

from .backtest import BacktestEngine
from .trading import TradingEngine

__all__ = ["BacktestEngine", "TradingEngine"]
