"""
Technical Indicators Calculator.

This module provides the SMA, Volume-SMA, ATR and RSI indicators used by
strategies and signal filters. Every indicator maps a candle series to a
list of floats; positions without enough history hold the ``0.0``
placeholder. RSI is the exception: it returns ``len(series) - period``
values, where ``rsi[k]`` belongs to candle ``k + period``.

Implements the Strategy Pattern for the individual indicators, and an
``IndicatorProvider`` that memoizes results per candle series.
"""

from collections.abc import Callable
from threading import RLock
from typing import Protocol

import numpy as np
import pandas as pd
from cachetools import LRUCache, cachedmethod
from cachetools.keys import hashkey
from loguru import logger

from markov_trader.core.constants import INDICATOR_CACHE_SIZE, INDICATOR_PLACEHOLDER, RSI_MAX
from markov_trader.core.exceptions.trading import ConfigurationError
from markov_trader.core.models.candle import CandleSeries


class IndicatorStrategy(Protocol):
    """Protocol for technical indicator calculation strategies."""

    period: int

    @property
    def name(self) -> str: ...

    def calculate(self, series: CandleSeries) -> list[float]:
        """Calculate the indicator for the given series."""
        ...


def _zeros(length: int) -> list[float]:
    return [INDICATOR_PLACEHOLDER] * length


def _rolling_mean(values: np.ndarray, period: int) -> list[float]:
    """Simple moving average with the placeholder before ``period - 1``."""
    if period <= 0:
        return _zeros(len(values))
    rolled = pd.Series(values, dtype=float).rolling(window=period).mean()
    return rolled.fillna(INDICATOR_PLACEHOLDER).tolist()


class SmaIndicator:
    """Simple moving average of close prices."""

    def __init__(self, period: int = 20):
        self.period = period

    @property
    def name(self) -> str:
        return f"SMA({self.period})"

    def calculate(self, series: CandleSeries) -> list[float]:
        return _rolling_mean(series.closes(), self.period)


class VolumeSmaIndicator:
    """Simple moving average of volume."""

    def __init__(self, period: int = 20):
        self.period = period

    @property
    def name(self) -> str:
        return f"VolumeSMA({self.period})"

    def calculate(self, series: CandleSeries) -> list[float]:
        return _rolling_mean(series.volumes(), self.period)


class AtrIndicator:
    """Average True Range with Wilder smoothing."""

    def __init__(self, period: int = 14):
        self.period = period

    @property
    def name(self) -> str:
        return f"ATR({self.period})"

    def calculate(self, series: CandleSeries) -> list[float]:
        n = len(series)
        if self.period <= 0 or n < self.period:
            return _zeros(n)

        highs = series.highs()
        lows = series.lows()
        closes = series.closes()

        true_range = highs - lows
        prev_close = closes[:-1]
        true_range[1:] = np.maximum.reduce(
            [
                highs[1:] - lows[1:],
                np.abs(highs[1:] - prev_close),
                np.abs(lows[1:] - prev_close),
            ]
        )

        atr = np.zeros(n)
        atr[self.period - 1] = true_range[: self.period].mean()
        for i in range(self.period, n):
            atr[i] = (atr[i - 1] * (self.period - 1) + true_range[i]) / self.period

        return atr.tolist()


class RsiIndicator:
    """Relative Strength Index with Wilder smoothing.

    The output is shorter than the series: ``rsi[k]`` belongs to candle
    ``k + period``. Use ``value_at`` to look up by candle index.
    """

    def __init__(self, period: int = 14):
        self.period = period

    @property
    def name(self) -> str:
        return f"RSI({self.period})"

    def calculate(self, series: CandleSeries) -> list[float]:
        n = len(series)
        if self.period <= 0:
            return _zeros(n)
        if n <= self.period:
            return []

        deltas = np.diff(series.closes())
        gains = np.where(deltas > 0, deltas, 0.0)
        losses = np.where(deltas < 0, -deltas, 0.0)

        avg_gain = gains[: self.period].mean()
        avg_loss = losses[: self.period].mean()
        values = [self._rsi(avg_gain, avg_loss)]

        for i in range(self.period, len(deltas)):
            avg_gain = (avg_gain * (self.period - 1) + gains[i]) / self.period
            avg_loss = (avg_loss * (self.period - 1) + losses[i]) / self.period
            values.append(self._rsi(avg_gain, avg_loss))

        return values

    @staticmethod
    def _rsi(avg_gain: float, avg_loss: float) -> float:
        if avg_loss == 0:
            return RSI_MAX
        rs = avg_gain / avg_loss
        return float(RSI_MAX - RSI_MAX / (1 + rs))

    @staticmethod
    def value_at(values: list[float], period: int, candle_index: int) -> float | None:
        """RSI for a candle index, or None when that candle has no RSI yet."""
        offset = candle_index - period
        if offset < 0 or offset >= len(values):
            return None
        return values[offset]


INDICATORS: dict[str, Callable[[int], IndicatorStrategy]] = {
    "sma": SmaIndicator,
    "volume_sma": VolumeSmaIndicator,
    "atr": AtrIndicator,
    "rsi": RsiIndicator,
}


def create_indicator(name: str, period: int) -> IndicatorStrategy:
    """Factory for indicators by name ("sma", "volume_sma", "atr", "rsi").

    Raises:
        ConfigurationError: If the indicator name is unknown
    """
    key = name.strip().lower()
    if key not in INDICATORS:
        raise ConfigurationError(
            f"Unknown indicator: {name}. Available indicators: {', '.join(INDICATORS)}"
        )
    return INDICATORS[key](period)


class IndicatorProvider:
    """
    Memoized indicators for one candle series.

    Obtain instances through ``for_series`` so every consumer of the same
    series shares one cache. The provider is stored on the series and lives
    as long as it does. Results are cached per ``(indicator, period)``.
    """

    _providers_lock = RLock()

    def __init__(self, series: CandleSeries, cache_size: int = INDICATOR_CACHE_SIZE):
        self._series = series
        self._cache: LRUCache = LRUCache(maxsize=cache_size)
        self._lock = RLock()

    @classmethod
    def for_series(cls, series: CandleSeries) -> "IndicatorProvider":
        """Get the provider bound to this series instance."""
        with cls._providers_lock:
            if series._indicators is None:
                series._indicators = cls(series)
            return series._indicators

    @property
    def series(self) -> CandleSeries:
        return self._series

    def _compute(self, name: str, period: int) -> list[float]:
        indicator = create_indicator(name, period)
        series = self.series
        logger.debug(f"Calculating {indicator.name} over {len(series)} candles")
        return indicator.calculate(series)

    @cachedmethod(
        lambda self: self._cache,
        key=lambda self, period: hashkey("sma", period),
        lock=lambda self: self._lock,
    )
    def sma(self, period: int) -> list[float]:
        return self._compute("sma", period)

    @cachedmethod(
        lambda self: self._cache,
        key=lambda self, period: hashkey("volume_sma", period),
        lock=lambda self: self._lock,
    )
    def volume_sma(self, period: int) -> list[float]:
        return self._compute("volume_sma", period)

    @cachedmethod(
        lambda self: self._cache,
        key=lambda self, period: hashkey("atr", period),
        lock=lambda self: self._lock,
    )
    def atr(self, period: int) -> list[float]:
        return self._compute("atr", period)

    @cachedmethod(
        lambda self: self._cache,
        key=lambda self, period: hashkey("rsi", period),
        lock=lambda self: self._lock,
    )
    def rsi(self, period: int) -> list[float]:
        return self._compute("rsi", period)

    def get(self, name: str, period: int) -> list[float]:
        """Memoized indicator by name.

        Raises:
            ConfigurationError: If the indicator name is unknown
        """
        accessors = {
            "sma": self.sma,
            "volume_sma": self.volume_sma,
            "atr": self.atr,
            "rsi": self.rsi,
        }
        key = name.strip().lower()
        if key not in accessors:
            raise ConfigurationError(
                f"Unknown indicator: {name}. Available indicators: {', '.join(accessors)}"
            )
        return accessors[key](period)

    def cache_size(self) -> int:
        """Number of memoized (indicator, period) results."""
        return len(self._cache)
