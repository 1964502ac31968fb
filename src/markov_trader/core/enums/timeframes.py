"""
Candle timeframes.
"""

from datetime import timedelta
from enum import StrEnum

from markov_trader.core.exceptions.trading import ConfigurationError

_SECONDS = {"m": 60, "h": 3600, "d": 86400, "w": 604800}


class Timeframe(StrEnum):
    """Candle intervals supported by the exchanges and the engines."""

    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"

    @classmethod
    def to_seconds(cls, timeframe: "Timeframe") -> int:
        """Number of seconds in one candle of ``timeframe``."""
        value = str(timeframe.value)
        return int(value[:-1]) * _SECONDS[value[-1]]

    @property
    def interval(self) -> timedelta:
        return timedelta(seconds=Timeframe.to_seconds(self))

    @property
    def is_intraday(self) -> bool:
        return self.interval < timedelta(days=1)

    @classmethod
    def from_string(cls, value: str) -> "Timeframe":
        """
        Parse a timeframe from its value ("1h") or its member name ("H1").

        Raises:
            ConfigurationError: If the timeframe is not supported
        """
        if isinstance(value, Timeframe):
            return value

        normalized = str(value).strip()
        for tf in cls:
            if tf.value == normalized.lower() or tf.name == normalized.upper():
                return tf

        raise ConfigurationError(
            f"Unsupported timeframe: {value}. Supported timeframes: {', '.join(tf.value for tf in cls)}"
        )
