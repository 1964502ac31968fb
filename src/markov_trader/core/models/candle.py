"""
OHLCV candle model and the immutable candle series container.

A ``CandleSeries`` instance is the memoization scope for technical
indicators: indicators computed for one series are reused by every
filter and strategy that receives the same instance.
"""

from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator, Sequence
from datetime import UTC, datetime
from typing import Any, overload

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, computed_field, field_validator

from markov_trader.core.enums import Movement

OHLCV_COLUMNS = ["open", "high", "low", "close", "volume", "trade_count"]


def ensure_utc(timestamp: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp.astimezone(UTC)


class Candle(BaseModel):
    """A single OHLCV bar. Immutable; compares and hashes by value."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(default=0.0, ge=0)
    trade_count: int = Field(default=0, ge=0)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def movement(self) -> Movement:
        """UP when the bar closed strictly above its open, otherwise DOWN."""
        return Movement.of(self.open, self.close)


CANDLE_LIST_ADAPTER = TypeAdapter(list[Candle])


def candles_to_json(candles: Iterable[Candle]) -> bytes:
    """Serialize candles to the JSON wire shape (``movement`` included)."""
    return CANDLE_LIST_ADAPTER.dump_json(list(candles))


def candles_from_json(data: str | bytes) -> list[Candle]:
    """Parse candles from JSON; ``movement`` is recomputed, not trusted."""
    return CANDLE_LIST_ADAPTER.validate_json(data)


class CandleSeries(Sequence[Candle]):
    """
    Immutable, timestamp-ordered sequence of candles.

    Candles are sorted on construction (stable, so candles sharing a
    timestamp keep their relative order). ``index_of`` resolves a
    timestamp to the position of the last candle carrying it.
    """

    __slots__ = ("_candles", "_timestamps", "_positions", "_indicators")

    def __init__(self, candles: Iterable[Candle] = ()):
        self._candles: tuple[Candle, ...] = tuple(sorted(candles, key=lambda c: c.timestamp))
        self._timestamps: list[datetime] = [c.timestamp for c in self._candles]
        self._positions: dict[datetime, int] = {ts: i for i, ts in enumerate(self._timestamps)}
        # IndicatorProvider bound to this series, created on first use
        self._indicators: Any = None

    @classmethod
    def of(cls, candles: Iterable[Candle]) -> "CandleSeries":
        """Wrap any candle iterable; an existing series is returned as-is."""
        if isinstance(candles, CandleSeries):
            return candles
        return cls(candles)

    @classmethod
    def merge(cls, existing: Iterable[Candle], new: Iterable[Candle]) -> "CandleSeries":
        """Union of two candle collections, without exact duplicates, sorted by timestamp."""
        seen: set[Candle] = set()
        merged = []
        for candle in [*existing, *new]:
            if candle not in seen:
                seen.add(candle)
                merged.append(candle)
        return cls(merged)

    def __len__(self) -> int:
        return len(self._candles)

    @overload
    def __getitem__(self, index: int) -> Candle: ...

    @overload
    def __getitem__(self, index: slice) -> "CandleSeries": ...

    def __getitem__(self, index: int | slice) -> "Candle | CandleSeries":
        if isinstance(index, slice):
            return CandleSeries(self._candles[index])
        return self._candles[index]

    def __iter__(self) -> Iterator[Candle]:
        return iter(self._candles)

    def __repr__(self) -> str:
        if not self._candles:
            return "CandleSeries([])"
        return (
            f"CandleSeries(len={len(self)}, "
            f"first={self._timestamps[0].isoformat()}, last={self._timestamps[-1].isoformat()})"
        )

    @property
    def last(self) -> Candle | None:
        """Most recent candle, or None for an empty series."""
        return self._candles[-1] if self._candles else None

    @property
    def timestamps(self) -> list[datetime]:
        return list(self._timestamps)

    def index_of(self, timestamp: datetime) -> int | None:
        """Position of the candle at ``timestamp``, or None when absent."""
        return self._positions.get(ensure_utc(timestamp))

    def between(self, start: datetime, end: datetime) -> "CandleSeries":
        """Candles with ``start <= timestamp <= end``."""
        lo = bisect_left(self._timestamps, ensure_utc(start))
        hi = bisect_right(self._timestamps, ensure_utc(end))
        return CandleSeries(self._candles[lo:hi])

    def covers(self, start: datetime, end: datetime) -> bool:
        """Check whether the series spans the whole ``[start, end]`` range."""
        if not self._candles:
            return False
        return self._timestamps[0] <= ensure_utc(start) and self._timestamps[-1] >= ensure_utc(end)

    def opens(self) -> np.ndarray:
        return np.array([c.open for c in self._candles], dtype=float)

    def highs(self) -> np.ndarray:
        return np.array([c.high for c in self._candles], dtype=float)

    def lows(self) -> np.ndarray:
        return np.array([c.low for c in self._candles], dtype=float)

    def closes(self) -> np.ndarray:
        return np.array([c.close for c in self._candles], dtype=float)

    def volumes(self) -> np.ndarray:
        return np.array([c.volume for c in self._candles], dtype=float)

    def movements(self) -> list[Movement]:
        return [c.movement for c in self._candles]

    def to_frame(self) -> pd.DataFrame:
        """OHLCV columns indexed by timestamp."""
        if not self._candles:
            return pd.DataFrame(columns=OHLCV_COLUMNS, index=pd.DatetimeIndex([], tz=UTC, name="timestamp"))

        frame = pd.DataFrame(
            [[getattr(c, column) for column in OHLCV_COLUMNS] for c in self._candles],
            columns=OHLCV_COLUMNS,
            index=pd.DatetimeIndex(self._timestamps, name="timestamp"),
        )
        return frame
