"""
Trading strategies and the strategy/filter registry.
"""

from .base import BaseStrategy
from .mean_reversion import MeanReversionStrategy
from .registry import FILTERS, STRATEGIES, StrategyRegistry
from .sma_crossover import SmaCrossoverStrategy

__all__ = [
    "FILTERS",
    "STRATEGIES",
    "BaseStrategy",
    "MeanReversionStrategy",
    "SmaCrossoverStrategy",
    "StrategyRegistry",
]
