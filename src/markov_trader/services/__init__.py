"""
Presentation-facing service facades.
"""

from .analysis_service import AnalysisService
from .backtest_service import BacktestService
from .live_trading import LiveTradingService
from .strategy_service import StrategyService

__all__ = ["AnalysisService", "BacktestService", "LiveTradingService", "StrategyService"]
