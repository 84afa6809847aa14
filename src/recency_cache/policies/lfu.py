"""Thread-safe bounded LFU cache with recency tie-breaking."""

from __future__ import annotations

import logging
from collections import OrderedDict
from threading import Lock
from typing import Generic, TypeVar

from recency_cache.contracts import CacheStats, require_positive_int

K = TypeVar("K")
V = TypeVar("V")

logger = logging.getLogger("recency_cache.policies.lfu")


class FrequencyCache(Generic[K, V]):
    """Fixed-capacity cache that evicts the least-frequently-used entry.

    Entries with equal use counts are ordered by recency, so the victim is
    the least recently touched key among those with the lowest count. Each
    use count has its own OrderedDict bucket, and the lowest non-empty count
    is tracked so eviction and promotion are O(1).
    """

    def __init__(self, capacity: int) -> None:
        """Initialize an empty cache; capacity must be a positive integer."""
        self._capacity = require_positive_int(capacity, "capacity")
        self._values: dict[K, V] = {}
        self._freqs: dict[K, int] = {}
        self._buckets: dict[int, OrderedDict[K, None]] = {}
        self._min_freq = 0
        self._lock = Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return the value for `key`, counting the hit as one more use."""
        with self._lock:
            if key not in self._values:
                self._misses += 1
                return default
            self._touch_locked(key)
            self._hits += 1
            return self._values[key]

    def peek(self, key: K, default: V | None = None) -> V | None:
        """Return the value for `key` without changing its use count."""
        with self._lock:
            return self._values.get(key, default)

    def frequency(self, key: K) -> int | None:
        """Return the use count recorded for `key`, or None when absent."""
        with self._lock:
            return self._freqs.get(key)

    def put(self, key: K, value: V) -> None:
        """Insert `key` with one use, or replace its value and add a use."""
        with self._lock:
            if key in self._values:
                self._values[key] = value
                self._touch_locked(key)
                return

            if len(self._values) >= self._capacity:
                self._evict_locked()

            self._values[key] = value
            self._freqs[key] = 1
            self._buckets.setdefault(1, OrderedDict())[key] = None
            self._min_freq = 1

    def remove(self, key: K, default: V | None = None) -> V | None:
        """Delete `key` and return its value, or `default` when absent."""
        with self._lock:
            if key not in self._values:
                return default
            value = self._values.pop(key)
            freq = self._freqs.pop(key)
            self._detach_locked(key, freq)
            if freq == self._min_freq and freq not in self._buckets:
                # Removal can skip counts, so the next minimum is searched for.
                self._min_freq = min(self._buckets, default=0)
            return value

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self._freqs.clear()
            self._buckets.clear()
            self._min_freq = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._values),
                capacity=self._capacity,
            )

    def _detach_locked(self, key: K, freq: int) -> None:
        bucket = self._buckets[freq]
        del bucket[key]
        if not bucket:
            del self._buckets[freq]

    def _touch_locked(self, key: K) -> None:
        freq = self._freqs[key]
        self._detach_locked(key, freq)
        if freq == self._min_freq and freq not in self._buckets:
            self._min_freq = freq + 1
        self._freqs[key] = freq + 1
        self._buckets.setdefault(freq + 1, OrderedDict())[key] = None

    def _evict_locked(self) -> None:
        bucket = self._buckets[self._min_freq]
        victim, _ = bucket.popitem(last=False)
        if not bucket:
            del self._buckets[self._min_freq]
        del self._values[victim]
        del self._freqs[victim]
        self._evictions += 1
        logger.debug("Evicted key %r with use count %d", victim, self._min_freq)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self._capacity}, size={len(self)})"
