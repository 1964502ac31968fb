"""
Exchange implementations: the historical data caching decorator and a
deterministic simulated exchange.
"""

from .cache_statistics import CacheStatistics
from .caching import CachingExchange
from .simulated import SimulatedExchange

__all__ = ["CacheStatistics", "CachingExchange", "SimulatedExchange"]
