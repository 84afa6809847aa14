"""Thread-safe bounded LRU cache."""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable
from threading import Lock
from typing import Generic, TypeVar

from recency_cache.contracts import CacheStats, require_positive_int

K = TypeVar("K")
V = TypeVar("V")

logger = logging.getLogger("recency_cache.policies.lru")

_MISSING = object()


class BoundedRecencyCache(Generic[K, V]):
    """Fixed-capacity cache that evicts the least-recently-used entry.

    The OrderedDict is both the key index and the recency list: its first
    entry is the least recently used and its last entry the most recently
    used. Every public method runs under one exclusive lock, so concurrent
    callers observe the calls in a single total order.
    """

    def __init__(self, capacity: int) -> None:
        """Initialize an empty cache; capacity must be a positive integer."""
        self._capacity = require_positive_int(capacity, "capacity")
        self._items: OrderedDict[K, V] = OrderedDict()
        self._lock = Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return the value for `key` and mark it most recently used.

        A hit is a use: the entry moves to the front of the recency order and
        will be the last candidate for eviction. A miss returns `default` and
        leaves the cache unchanged. Use `peek` for a read that does not
        promote.
        """
        with self._lock:
            value = self._items.get(key, _MISSING)
            if value is _MISSING:
                self._misses += 1
                return default
            self._items.move_to_end(key)
            self._hits += 1
            return value

    def peek(self, key: K, default: V | None = None) -> V | None:
        """Return the value for `key` without changing recency or counters."""
        with self._lock:
            return self._items.get(key, default)

    def put(self, key: K, value: V) -> None:
        """Insert or replace `key` as the most recently used entry."""
        with self._lock:
            if key in self._items:
                self._items[key] = value
                self._items.move_to_end(key)
                return
            if len(self._items) >= self._capacity:
                self._evict_locked()
            self._items[key] = value

    def get_or_create(self, key: K, factory: Callable[[], V]) -> V:
        """Return the value for `key`, building and storing it with `factory` on a miss.

        The factory runs while the lock is held, so it is called at most once
        per missing key even under concurrent callers. If it raises, nothing
        is stored.
        """
        with self._lock:
            value = self._items.get(key, _MISSING)
            if value is not _MISSING:
                self._items.move_to_end(key)
                self._hits += 1
                return value

            self._misses += 1
            created = factory()
            if len(self._items) >= self._capacity:
                self._evict_locked()
            self._items[key] = created
            return created

    def remove(self, key: K, default: V | None = None) -> V | None:
        """Delete `key` and return its value, or `default` when absent.

        Pass a sentinel `default` to tell a missing key from a stored None.
        """
        with self._lock:
            return self._items.pop(key, default)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def keys(self) -> list[K]:
        """Return stored keys ordered from most to least recently used."""
        with self._lock:
            return list(reversed(self._items))

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._items),
                capacity=self._capacity,
            )

    def _evict_locked(self) -> None:
        evicted_key, _ = self._items.popitem(last=False)
        self._evictions += 1
        logger.debug("Evicted least recently used key %r", evicted_key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self._capacity}, size={len(self)})"
