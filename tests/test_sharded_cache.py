"""Tests for the key-partitioned cache."""

from __future__ import annotations

import pytest

from recency_cache.contracts import ConfigurationError
from recency_cache.policies.lfu import FrequencyCache
from recency_cache.policies.lru import BoundedRecencyCache
from recency_cache.sharded import ShardedCache, split_capacity


def test_split_capacity_spreads_remainder_over_first_shards() -> None:
    """Shard capacities should differ by at most one and sum to the total."""
    assert split_capacity(10, 3) == [4, 3, 3]
    assert split_capacity(8, 4) == [2, 2, 2, 2]
    assert sum(split_capacity(17, 5)) == 17


def test_total_size_never_exceeds_capacity() -> None:
    """Filling every shard should leave exactly `capacity` entries."""
    cache: ShardedCache[int, int] = ShardedCache(8, 4)
    for i in range(100):
        cache.put(i, i)
        assert len(cache) <= 8

    assert len(cache) == 8
    assert cache.shard_count == 4
    assert cache.stats().evictions == 92


def test_recency_is_tracked_per_shard() -> None:
    """An older key in another shard should survive an eviction in its neighbour."""
    # Small ints hash to themselves, so even keys land in shard 0, odd in shard 1.
    cache: ShardedCache[int, str] = ShardedCache(4, 2)
    cache.put(0, "zero")
    cache.put(1, "one")
    cache.put(2, "two")
    cache.put(4, "four")

    assert 0 not in cache
    assert cache.get(1) == "one"
    assert cache.get(2) == "two"
    assert cache.get(4) == "four"


def test_operations_route_to_owning_shard() -> None:
    """peek, remove and clear should act on the shard that owns each key."""
    cache: ShardedCache[str, int] = ShardedCache(6, 3)
    cache.put("a", 1)
    cache.put("b", 2)

    assert "a" in cache.shard_for("a")
    assert cache.peek("a") == 1
    assert cache.remove("a") == 1
    assert cache.get("a", -1) == -1

    cache.clear()
    assert len(cache) == 0


def test_stats_are_summed_over_shards() -> None:
    """Aggregated stats should add up per-shard counters and capacities."""
    cache: ShardedCache[int, int] = ShardedCache(9, 3)
    for i in range(3):
        cache.put(i, i)
    cache.get(0)
    cache.get(1)
    cache.get(99)

    stats = cache.stats()
    assert stats.capacity == 9
    assert stats.size == 3
    assert (stats.hits, stats.misses) == (2, 1)


def test_custom_shard_factory() -> None:
    """Shards can be built with another policy, such as LFU."""
    cache: ShardedCache[int, int] = ShardedCache(4, 2, shard_factory=FrequencyCache)
    cache.put(0, 0)
    cache.get(0)
    cache.put(2, 2)
    cache.put(4, 4)

    assert isinstance(cache.shard_for(0), FrequencyCache)
    assert 0 in cache
    assert 2 not in cache


def test_default_shards_are_lru() -> None:
    """Without a factory each shard should be a BoundedRecencyCache."""
    cache: ShardedCache[int, int] = ShardedCache(4, 2)
    assert isinstance(cache.shard_for(1), BoundedRecencyCache)
    assert cache.shard_for(1).capacity == 2


@pytest.mark.parametrize(("capacity", "shards"), [(4, 0), (0, 1), (2, 3)])
def test_invalid_layout_is_rejected(capacity: int, shards: int) -> None:
    """Shard counts must be positive and no larger than the total capacity."""
    with pytest.raises(ConfigurationError):
        ShardedCache(capacity, shards)


def test_remove_forwards_default_to_shard() -> None:
    """The owning shard should receive the caller's default on remove."""
    cache: ShardedCache[int, str] = ShardedCache(4, 2)
    cache.put(3, "three")

    assert cache.remove(3, "gone") == "three"
    assert cache.remove(3, "gone") == "gone"
