"""Interface shared by the bounded cache policies."""

from __future__ import annotations

from typing import Protocol, TypeVar

from recency_cache.contracts import CacheStats

K = TypeVar("K")
V = TypeVar("V")


class BoundedCache(Protocol[K, V]):
    """Fixed-capacity key/value store with a policy-defined eviction order."""

    @property
    def capacity(self) -> int:
        """Return the maximum number of entries the cache retains."""

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return the value for key, counting the lookup as a use."""

    def peek(self, key: K, default: V | None = None) -> V | None:
        """Return the value for key without touching eviction order."""

    def put(self, key: K, value: V) -> None:
        """Insert or replace key, evicting one entry when full."""

    def remove(self, key: K, default: V | None = None) -> V | None:
        """Delete key and return its value, or default when absent."""

    def clear(self) -> None:
        """Drop every entry."""

    def stats(self) -> CacheStats:
        """Return a snapshot of the cache counters."""

    def __len__(self) -> int:
        """Return the number of stored entries."""

    def __contains__(self, key: object) -> bool:
        """Return whether key is stored, without touching eviction order."""
