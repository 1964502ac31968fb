"""
Candle movement enumeration.
"""

from enum import StrEnum


class Movement(StrEnum):
    """
    Direction of a single candle.

    A candle is UP only when it closes strictly above its open;
    flat candles count as DOWN.
    """

    UP = "Up"
    DOWN = "Down"

    @classmethod
    def of(cls, open_price: float, close_price: float) -> "Movement":
        """Derive the movement of a candle from its open and close."""
        return cls.UP if close_price > open_price else cls.DOWN

    def opposite(self) -> "Movement":
        """Get the opposite movement."""
        return Movement.DOWN if self == Movement.UP else Movement.UP
