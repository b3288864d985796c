"""In-memory query cache for the API client."""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Hashable

# First element of every cache key
CATEGORIES = "categories"
LABELS = "labels"
TODOS = "todos"

CacheKey = tuple[Hashable, ...]


class QueryCache:
    """Async-aware in-memory cache of query results with TTL support.

    Keys are tuples whose first element names the entity type, e.g.
    ``("todos", "")`` for the inbox or ``("categories",)``. Mutations
    invalidate every key of the entity types they touch.
    """

    def __init__(self, ttl_seconds: int = 300):
        """Initialize cache with a time-to-live in seconds.

        Args:
            ttl_seconds: How long cached data remains valid (default 5 minutes).
        """
        self._entries: dict[CacheKey, tuple[Any, datetime]] = {}
        self._locks: dict[CacheKey, asyncio.Lock] = {}
        # Bumped by invalidate(); a fetch started under an older generation is not cached
        self._generations: dict[Hashable, int] = {}
        self._epoch = 0
        self._ttl = timedelta(seconds=ttl_seconds)

    def is_valid(self, key: CacheKey) -> bool:
        """Check if the entry for ``key`` exists and has not expired."""
        entry = self._entries.get(key)
        if entry is None:
            return False
        return datetime.now() < entry[1]

    def get(self, key: CacheKey) -> Any | None:
        """Get cached data if valid, otherwise None."""
        if self.is_valid(key):
            return self._entries[key][0]
        self._entries.pop(key, None)
        return None

    def set(self, key: CacheKey, data: Any) -> None:
        """Set cached data with current TTL."""
        self._entries[key] = (data, datetime.now() + self._ttl)

    def invalidate(self, *entities: str) -> None:
        """Drop every entry belonging to the given entity types.

        With no arguments the whole cache is cleared.
        """
        if not entities:
            self._epoch += 1
            self._entries.clear()
            return
        for entity in entities:
            self._generations[entity] = self._generations.get(entity, 0) + 1
        for key in [k for k in self._entries if k[0] in entities]:
            del self._entries[key]

    def generation(self, key: CacheKey) -> tuple[int, int]:
        """Invalidation counter covering ``key``."""
        return self._epoch, self._generations.get(key[0], 0)

    def keys(self) -> list[CacheKey]:
        return [key for key in list(self._entries) if self.is_valid(key)]

    async def get_or_fetch(self, key: CacheKey, fetch_func: Callable[[], Awaitable[Any]]) -> Any:
        """Get cached data or fetch it if the entry is missing or stale.

        Concurrent callers for the same key share one fetch. A result whose
        entity was invalidated while the fetch was in flight is returned but
        not cached.
        """
        # Fast path: check cache without lock
        cached = self.get(key)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Double-check after acquiring lock
            cached = self.get(key)
            if cached is not None:
                return cached

            generation = self.generation(key)
            data = await fetch_func()
            # Invalidated while fetching: the result may predate the mutation
            if self.generation(key) == generation:
                self.set(key, data)
            return data
