"""Time-limited in-memory cache shared by components that prefetch upstream data."""

import time
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

from cachetools import TTLCache

V = TypeVar("V")

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_MAX_ENTRIES = 256


class PrefetchCache(Generic[V]):
    """Bounded key/value cache whose entries expire after ``ttl_seconds``.

    Expired entries are evicted on every write, and the least recently used
    entry is dropped once ``maxsize`` is reached. The cache is never required
    for correctness: a miss simply means the caller does the work again.

    Args:
        ttl_seconds: Lifetime of each entry.
        maxsize: Maximum number of live entries.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        maxsize: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self._ttl = ttl_seconds
        self._cache: TTLCache[Hashable, V] = TTLCache(
            maxsize=maxsize,
            ttl=ttl_seconds,
            timer=clock,
        )

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def maxsize(self) -> int:
        return int(self._cache.maxsize)

    def get(self, key: Hashable) -> V | None:
        return self._cache.get(key)

    def set(self, key: Hashable, value: V) -> None:
        self._cache[key] = value

    def delete(self, key: Hashable) -> None:
        self._cache.pop(key, None)

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        self._cache.expire()
        return len(self._cache)
