"""
Historical data caching decorator for exchanges.

Candles are stored as one JSON file per request range. A cached file is
used only when it spans the whole requested range; anything else goes to
the wrapped exchange and the fresh result replaces the file.
"""

import asyncio
from datetime import datetime
from pathlib import Path

from loguru import logger

from markov_trader.core.constants import CACHE_FILE_DATE_FORMAT, DEFAULT_CACHE_DIRECTORY
from markov_trader.core.enums import Timeframe
from markov_trader.core.interfaces.exchange import IExchange
from markov_trader.core.models.candle import Candle, CandleSeries, candles_from_json, candles_to_json
from markov_trader.core.models.order import Order

from .cache_statistics import CacheStatistics


class CachingExchange(IExchange):
    """Wraps an exchange and caches its historical data on disk.

    Order and balance calls pass straight through to the wrapped exchange.
    """

    def __init__(self, inner: IExchange, cache_directory: str | Path = DEFAULT_CACHE_DIRECTORY):
        self._inner = inner
        self._cache_directory = Path(cache_directory)
        self._cache_directory.mkdir(parents=True, exist_ok=True)
        self._statistics = CacheStatistics()

    @property
    def cache_directory(self) -> Path:
        return self._cache_directory

    @property
    def statistics(self) -> CacheStatistics:
        return self._statistics

    def cache_file_path(self, symbol: str, timeframe: Timeframe, start: datetime, end: datetime) -> Path:
        """Path of the cache file for a request range."""
        file_name = (
            f"{symbol}_{timeframe.value}_"
            f"{start.strftime(CACHE_FILE_DATE_FORMAT)}_{end.strftime(CACHE_FILE_DATE_FORMAT)}.json"
        )
        return self._cache_directory / file_name

    async def get_historical_data(
        self,
        symbol: str,
        timeframe: Timeframe,
        start: datetime,
        end: datetime,
    ) -> list[Candle]:
        file_path = self.cache_file_path(symbol, timeframe, start, end)

        cached = await self._read_cache_file(file_path)
        if cached is not None:
            series = CandleSeries(cached)
            if series.covers(start, end):
                self._statistics.record_hit()
                logger.debug(f"Cache hit for {symbol} {timeframe.value}: {file_path.name}")
                return list(series.between(start, end))

        if cached is not None or not file_path.exists():
            self._statistics.record_miss()
        logger.debug(f"Cache miss for {symbol} {timeframe.value}, fetching from exchange")

        fresh = await self._inner.get_historical_data(symbol, timeframe, start, end)
        if fresh:
            await self._write_cache_file(file_path, fresh)
        return fresh

    async def _read_cache_file(self, file_path: Path) -> list[Candle] | None:
        """Load a cache file in the default executor; unreadable files count as misses."""
        if not file_path.exists():
            return None

        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, file_path.read_bytes)
            return candles_from_json(data)
        except (OSError, ValueError) as e:
            self._statistics.record_miss(corrupt=True)
            logger.warning(f"Ignoring unreadable cache file {file_path.name}: {e}")
            return None

    async def _write_cache_file(self, file_path: Path, candles: list[Candle]) -> None:
        loop = asyncio.get_running_loop()
        payload = candles_to_json(candles)
        try:
            await loop.run_in_executor(None, file_path.write_bytes, payload)
            logger.debug(f"Cached {len(candles)} candles to {file_path.name}")
        except OSError as e:
            logger.error(f"Failed to write cache file {file_path.name}: {e}")

    async def place_order(self, order: Order) -> Order:
        return await self._inner.place_order(order)

    async def get_order(self, order_id: str) -> Order:
        return await self._inner.get_order(order_id)

    async def cancel_order(self, order_id: str) -> None:
        await self._inner.cancel_order(order_id)

    async def get_balance(self, asset: str) -> float:
        return await self._inner.get_balance(asset)
