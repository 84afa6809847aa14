"""Approximate LRU cache that evicts the oldest of a random key sample."""

from __future__ import annotations

import logging
import random
from threading import Lock
from typing import Generic, TypeVar

from recency_cache.contracts import CacheStats, require_positive_int

K = TypeVar("K")
V = TypeVar("V")

logger = logging.getLogger("recency_cache.policies.sampled")

_MISSING = object()


class SampledRecencyCache(Generic[K, V]):
    """Fixed-capacity cache with sampling-based LRU eviction.

    Instead of keeping a total recency order, every entry stores the logical
    tick of its last touch. When the cache is full, `sample_size` keys are
    drawn at random and the one touched longest ago is evicted. With
    `sample_size >= capacity` every key is sampled and eviction is exact LRU.
    """

    def __init__(self, capacity: int, sample_size: int = 5, seed: int | None = None) -> None:
        """Initialize an empty cache with an optional RNG seed for reproducibility."""
        self._capacity = require_positive_int(capacity, "capacity")
        self._sample_size = require_positive_int(sample_size, "sample_size")
        self._values: dict[K, V] = {}
        self._ticks: dict[K, int] = {}
        # Dense key list plus positions allows O(1) random access and swap-remove.
        self._keys: list[K] = []
        self._positions: dict[K, int] = {}
        self._clock = 0
        self._rng = random.Random(seed)
        self._lock = Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def sample_size(self) -> int:
        return self._sample_size

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return the value for `key` and refresh its last-use tick."""
        with self._lock:
            value = self._values.get(key, _MISSING)
            if value is _MISSING:
                self._misses += 1
                return default
            self._ticks[key] = self._tick_locked()
            self._hits += 1
            return value

    def peek(self, key: K, default: V | None = None) -> V | None:
        """Return the value for `key` without refreshing its last-use tick."""
        with self._lock:
            return self._values.get(key, default)

    def put(self, key: K, value: V) -> None:
        """Insert or replace `key`, stamping it as the newest entry."""
        with self._lock:
            if key not in self._values:
                if len(self._values) >= self._capacity:
                    self._evict_locked()
                self._positions[key] = len(self._keys)
                self._keys.append(key)
            self._values[key] = value
            self._ticks[key] = self._tick_locked()

    def remove(self, key: K, default: V | None = None) -> V | None:
        """Delete `key` and return its value, or `default` when absent."""
        with self._lock:
            if key not in self._values:
                return default
            self._discard_locked(key)
            return self._values.pop(key)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self._ticks.clear()
            self._keys.clear()
            self._positions.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._values),
                capacity=self._capacity,
            )

    def _tick_locked(self) -> int:
        self._clock += 1
        return self._clock

    def _discard_locked(self, key: K) -> None:
        index = self._positions.pop(key)
        last = self._keys.pop()
        if index < len(self._keys):
            self._keys[index] = last
            self._positions[last] = index
        del self._ticks[key]

    def _evict_locked(self) -> None:
        count = min(self._sample_size, len(self._keys))
        sampled = [self._keys[i] for i in self._rng.sample(range(len(self._keys)), count)]
        victim = min(sampled, key=self._ticks.__getitem__)
        self._discard_locked(victim)
        del self._values[victim]
        self._evictions += 1
        logger.debug("Evicted key %r from a sample of %d", victim, count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(capacity={self._capacity}, "
            f"sample_size={self._sample_size}, size={len(self)})"
        )
