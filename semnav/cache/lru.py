import threading
from collections import OrderedDict

from loguru import logger

from semnav.cache.base import PathCache
from semnav.config import settings
from semnav.domain.address import Address
from semnav.domain.path import Path


class LRUPathCache(PathCache):
    """Size-bounded in-memory path cache with least-recently-used eviction.

    Entries hold user-independent paths only. A lookup moves the entry to the
    most recent position, so every operation takes the same exclusive lock.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        self._max = max_entries or settings.cache_max_entries
        self._cache: OrderedDict[tuple[Address, Address], list[Path]] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def max_entries(self) -> int:
        return self._max

    def get(self, start: Address, goal: Address) -> list[Path] | None:
        """Get a copy of the cached paths. Returns None on miss."""
        key = (start, goal)
        with self._lock:
            if key not in self._cache:
                self.misses += 1
                return None
            self._cache.move_to_end(key)
            self.hits += 1
            return list(self._cache[key])

    def put(self, start: Address, goal: Address, paths: list[Path]) -> None:
        key = (start, goal)
        with self._lock:
            self._cache[key] = list(paths)
            self._cache.move_to_end(key)
            if len(self._cache) > self._max:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug(f"Evicted cached paths {evicted[0].uri} -> {evicted[1].uri}")

    def invalidate(self, start: Address, goal: Address) -> bool:
        with self._lock:
            return self._cache.pop((start, goal), None) is not None

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
