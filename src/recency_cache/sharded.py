"""Key-partitioned cache built from independently locked shards."""

from __future__ import annotations

from collections.abc import Callable
from functools import reduce
from operator import add
from typing import Any, Generic, TypeVar

from recency_cache.contracts import CacheStats, ConfigurationError, require_positive_int
from recency_cache.policies.interfaces import BoundedCache
from recency_cache.policies.lru import BoundedRecencyCache

K = TypeVar("K")
V = TypeVar("V")


def split_capacity(capacity: int, shards: int) -> list[int]:
    """Split `capacity` over `shards`, giving the remainder to the first shards."""
    base, extra = divmod(capacity, shards)
    return [base + 1 if i < extra else base for i in range(shards)]


class ShardedCache(Generic[K, V]):
    """Cache that routes each key to one of several bounded shards.

    Each shard has its own lock, so callers touching different shards do not
    contend. Recency and eviction are tracked per shard: a put can evict the
    oldest key of its own shard while an older key survives in another one.
    The total number of entries never exceeds `capacity`.
    """

    def __init__(
        self,
        capacity: int,
        shards: int,
        shard_factory: Callable[[int], BoundedCache[Any, Any]] = BoundedRecencyCache,
    ) -> None:
        """Initialize `shards` empty shards built by `shard_factory(shard_capacity)`."""
        capacity = require_positive_int(capacity, "capacity")
        shards = require_positive_int(shards, "shards")
        if shards > capacity:
            raise ConfigurationError(f"shards ({shards}) must not exceed capacity ({capacity})")
        self._capacity = capacity
        self._shards: list[BoundedCache[K, V]] = [
            shard_factory(shard_capacity) for shard_capacity in split_capacity(capacity, shards)
        ]

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def shard_count(self) -> int:
        return len(self._shards)

    def shard_for(self, key: K) -> BoundedCache[K, V]:
        """Return the shard responsible for `key`."""
        return self._shards[hash(key) % len(self._shards)]

    def get(self, key: K, default: V | None = None) -> V | None:
        return self.shard_for(key).get(key, default)

    def peek(self, key: K, default: V | None = None) -> V | None:
        return self.shard_for(key).peek(key, default)

    def put(self, key: K, value: V) -> None:
        self.shard_for(key).put(key, value)

    def remove(self, key: K, default: V | None = None) -> V | None:
        return self.shard_for(key).remove(key, default)

    def clear(self) -> None:
        for shard in self._shards:
            shard.clear()

    def stats(self) -> CacheStats:
        """Return counters summed over all shards.

        Shards are read one at a time, so the total is not a single atomic
        snapshot while other threads keep writing.
        """
        return reduce(add, (shard.stats() for shard in self._shards))

    def __len__(self) -> int:
        return sum(len(shard) for shard in self._shards)

    def __contains__(self, key: object) -> bool:
        return key in self.shard_for(key)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self._capacity}, shards={len(self._shards)})"
