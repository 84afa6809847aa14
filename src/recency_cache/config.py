"""Environment-driven cache settings."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from recency_cache.contracts import ConfigurationError, EvictionPolicy

ENV_PREFIX = "RECENCY_CACHE_"
_ENV_FIELDS = ("policy", "capacity", "shards", "sample_size")
_INT_FIELDS = frozenset({"capacity", "shards", "sample_size"})


class CacheSettings(BaseModel):
    """Validated settings for building one cache instance."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    policy: EvictionPolicy = EvictionPolicy.LRU
    # Strict: bool and float arguments are rejected, not coerced.
    capacity: int = Field(default=128, gt=0, strict=True)
    shards: int = Field(default=1, ge=1, strict=True)
    sample_size: int = Field(default=5, gt=0, strict=True)

    @field_validator("policy", mode="before")
    @classmethod
    def normalize_policy(cls, value: Any) -> Any:
        """Accept policy names regardless of case or surrounding whitespace."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def validate_shards(self) -> "CacheSettings":
        """Every shard must be able to hold at least one entry."""
        if self.shards > self.capacity:
            raise ValueError("shards must be <= capacity")
        return self

    @classmethod
    def from_values(cls, **values: Any) -> CacheSettings:
        """Validate `values`, raising ConfigurationError on any invalid field."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(_describe(exc)) from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> CacheSettings:
        """Read `RECENCY_CACHE_*` variables; non-None overrides take precedence."""
        values: dict[str, Any] = {}
        for name in _ENV_FIELDS:
            if overrides.get(name) is not None:
                continue
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = _parse_env(name, raw.strip())
        values.update({name: value for name, value in overrides.items() if value is not None})
        return cls.from_values(**values)


def _describe(exc: ValidationError) -> str:
    """Flatten pydantic errors into one message naming each offending field."""
    parts = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "settings"
        parts.append(f"{field}: {error['msg']}")
    return "invalid cache settings: " + "; ".join(parts)


def _parse_env(name: str, raw: str) -> Any:
    """Convert one environment string to the type its field expects."""
    if name not in _INT_FIELDS:
        return raw
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"invalid cache settings: {name}: {ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}"
        ) from exc
