"""
Hit/miss accounting for the on-disk candle cache.
"""

from collections import Counter
from threading import RLock

from loguru import logger


class CacheStatistics:
    """Thread-safe counters of cache lookups."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._counts: Counter[str] = Counter()

    def record_hit(self) -> None:
        with self._lock:
            self._counts["hits"] += 1

    def record_miss(self, corrupt: bool = False) -> None:
        """Record a miss; ``corrupt`` marks a cache file that could not be read."""
        with self._lock:
            self._counts["misses"] += 1
            if corrupt:
                self._counts["corrupt_files"] += 1

    @property
    def hits(self) -> int:
        with self._lock:
            return self._counts["hits"]

    @property
    def misses(self) -> int:
        with self._lock:
            return self._counts["misses"]

    def get_hit_rate(self) -> float:
        """Hits as a percentage of all lookups; 0 before the first lookup."""
        with self._lock:
            lookups = self._counts["hits"] + self._counts["misses"]
            return self._counts["hits"] / lookups * 100 if lookups else 0.0

    def get_stats(self) -> dict[str, int | float]:
        with self._lock:
            return {
                "hits": self._counts["hits"],
                "misses": self._counts["misses"],
                "corrupt_files": self._counts["corrupt_files"],
                "hit_rate_percent": round(self.get_hit_rate(), 1),
            }

    def reset_stats(self) -> None:
        with self._lock:
            cleared = self.get_stats()
            self._counts.clear()
        logger.debug(f"Cache statistics reset: {cleared['hits']} hits, {cleared['misses']} misses cleared")
