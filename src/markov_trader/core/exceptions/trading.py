"""
Custom exception hierarchy for the trading platform.

This module defines domain-specific exceptions for better error handling.
"""


class TradingException(Exception):
    """Base exception for all trading-related errors."""

    pass


class ValidationError(TradingException):
    """Raised when input validation fails."""

    pass


class ConfigurationError(TradingException):
    """Raised when configuration is invalid (timeframe, strategy, filter, parameters)."""

    pass


class DataError(TradingException):
    """Raised when data access or processing fails."""

    pass


class ExchangeError(TradingException):
    """Raised when an exchange call fails."""

    pass


class OrderError(ExchangeError):
    """Raised when an order cannot be placed or changed."""

    pass


class OrderNotFoundError(OrderError):
    """Raised when an order id is unknown to the exchange."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class StrategyError(TradingException):
    """Raised when strategy execution fails."""

    pass


class StrategyNotFoundError(StrategyError):
    """Raised when a strategy id is not registered."""

    def __init__(self, strategy_id: object):
        self.strategy_id = strategy_id
        super().__init__(f"Strategy not found: {strategy_id}")


class SessionNotFoundError(TradingException):
    """Raised when a live session id is unknown."""

    def __init__(self, session_id: object):
        self.session_id = session_id
        super().__init__(f"Live session not found: {session_id}")


class PortfolioError(TradingException):
    """Raised when position or capital bookkeeping fails."""

    pass


class InsufficientFundsError(PortfolioError):
    """Raised when there are insufficient funds for an operation."""

    def __init__(self, required: float, available: float, operation: str = "operation"):
        self.required = required
        self.available = available
        self.operation = operation
        super().__init__(
            f"Insufficient funds for {operation}: required={required:.2f}, available={available:.2f}"
        )
