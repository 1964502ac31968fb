"""
Domain exception hierarchy.
"""

from .trading import (
    ConfigurationError,
    DataError,
    ExchangeError,
    InsufficientFundsError,
    OrderError,
    OrderNotFoundError,
    PortfolioError,
    SessionNotFoundError,
    StrategyError,
    StrategyNotFoundError,
    TradingException,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "DataError",
    "ExchangeError",
    "InsufficientFundsError",
    "OrderError",
    "OrderNotFoundError",
    "PortfolioError",
    "SessionNotFoundError",
    "StrategyError",
    "StrategyNotFoundError",
    "TradingException",
    "ValidationError",
]
