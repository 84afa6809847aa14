"""Shared contracts for the bounded cache policies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ConfigurationError(ValueError):
    """Raised when a cache or its settings are constructed with invalid values."""


class EvictionPolicy(StrEnum):
    """Eviction policies a cache can be built with."""

    LRU = "lru"
    LFU = "lfu"
    SAMPLED = "sampled"


def require_positive_int(value: Any, label: str) -> int:
    """Return `value` if it is a positive int, else raise ConfigurationError."""
    # bool is an int subclass; True would otherwise pass as capacity 1.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{label} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise ConfigurationError(f"{label} must be positive, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Point-in-time counters for one cache instance."""

    hits: int
    misses: int
    evictions: int
    size: int
    capacity: int

    @property
    def hit_ratio(self) -> float:
        """Fraction of counted lookups that were hits, 0.0 before any lookup."""
        lookups = self.hits + self.misses
        if lookups == 0:
            return 0.0
        return self.hits / lookups

    def __add__(self, other: CacheStats) -> CacheStats:
        return CacheStats(
            hits=self.hits + other.hits,
            misses=self.misses + other.misses,
            evictions=self.evictions + other.evictions,
            size=self.size + other.size,
            capacity=self.capacity + other.capacity,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize counters to a JSON-compatible dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "size": self.size,
            "capacity": self.capacity,
            "hit_ratio": self.hit_ratio,
        }
