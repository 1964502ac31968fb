"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

from typing import Any

from markov_trader.core.exceptions.trading import ValidationError


def validate_symbol(symbol: Any, param_name: str = "symbol") -> str:
    """Validate that a value is a non-empty trading symbol.

    Args:
        symbol: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The normalized (upper-case, stripped) symbol

    Raises:
        TypeError: If symbol is not a string
        ValidationError: If symbol is empty
    """
    if not isinstance(symbol, str):
        raise TypeError(f"{param_name} must be str, got {type(symbol).__name__}")
    normalized = symbol.strip().upper()
    if not normalized:
        raise ValidationError(f"{param_name} must not be empty")
    return normalized


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, param_name: str) -> float:
    """Validate that a numeric value is zero or positive.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{param_name} must be non-negative, got {value}")
    return value

