"""Cache factory functions driven by settings or environment."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from recency_cache.config import CacheSettings
from recency_cache.contracts import EvictionPolicy
from recency_cache.policies.interfaces import BoundedCache
from recency_cache.policies.lfu import FrequencyCache
from recency_cache.policies.lru import BoundedRecencyCache
from recency_cache.policies.sampled import SampledRecencyCache
from recency_cache.sharded import ShardedCache

logger = logging.getLogger("recency_cache.factory")


def _policy_builder(settings: CacheSettings) -> Callable[[int], BoundedCache[Any, Any]]:
    """Return a callable building one cache of the configured policy from a capacity."""
    if settings.policy is EvictionPolicy.LRU:
        return BoundedRecencyCache
    if settings.policy is EvictionPolicy.LFU:
        return FrequencyCache
    return partial(SampledRecencyCache, sample_size=settings.sample_size)


def build_cache(settings: CacheSettings) -> BoundedCache[Any, Any] | ShardedCache[Any, Any]:
    """Build a cache for already-validated settings."""
    builder = _policy_builder(settings)
    logger.info(
        "Building %s cache capacity=%d shards=%d",
        settings.policy.value,
        settings.capacity,
        settings.shards,
    )
    if settings.shards > 1:
        return ShardedCache(settings.capacity, settings.shards, shard_factory=builder)
    return builder(settings.capacity)


def create_cache(
    policy: str | None = None,
    capacity: int | None = None,
    *,
    shards: int | None = None,
    sample_size: int | None = None,
) -> BoundedCache[Any, Any] | ShardedCache[Any, Any]:
    """Create a cache from arguments, falling back to `RECENCY_CACHE_*` variables."""
    settings = CacheSettings.from_env(
        policy=policy,
        capacity=capacity,
        shards=shards,
        sample_size=sample_size,
    )
    return build_cache(settings)
