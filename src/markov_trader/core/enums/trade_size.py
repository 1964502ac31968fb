"""
Trade sizing enumeration.
"""

from enum import StrEnum


class TradeSizeMode(StrEnum):
    """
    How the amount committed to a new position is derived.

    FIXED_AMOUNT uses the configured value as a quote-currency amount;
    PERCENTAGE_OF_CAPITAL uses it as a fraction (0-1] of available capital.
    """

    FIXED_AMOUNT = "FixedAmount"
    PERCENTAGE_OF_CAPITAL = "PercentageOfCapital"

    def trade_amount(self, value: float, available: float) -> float:
        """Raw trade amount before clamping to available capital."""
        if self == TradeSizeMode.FIXED_AMOUNT:
            return value
        return available * value
