"""Config models and loader.

This module defines Pydantic models for cache configuration. A cache takes its
TTL and capacity from a :class:`CacheConfig`, which can be built in code,
loaded from a JSON file, or derived from environment variables through
:class:`EnvSettings`. Values are validated eagerly so that a non-positive TTL
or capacity fails at construction instead of producing an unbounded cache.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import InvalidCacheConfigError

DEFAULT_TTL_MS = 5 * 60 * 1000
DEFAULT_CAPACITY = 100


class CacheConfig(BaseModel):
    """Immutable configuration for a single cache.

    Attributes
    ----------
    ttl_ms: int
        Time-to-live of every entry, in milliseconds, counted from insertion.
    capacity: int
        Maximum number of entries held at once.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ttl_ms: int = Field(
        DEFAULT_TTL_MS, gt=0, strict=True, description="Entry TTL (ms)"
    )
    capacity: int = Field(
        DEFAULT_CAPACITY, gt=0, strict=True, description="Max entry count"
    )

    @classmethod
    def coerce(
        cls, config: Union["CacheConfig", Mapping[str, Any], None]
    ) -> "CacheConfig":
        """Return a validated config from a model, a mapping, or ``None``.

        Raises
        ------
        InvalidCacheConfigError
            If any field is missing a positive integer value.
        """
        if isinstance(config, CacheConfig):
            return config
        try:
            return cls.model_validate(dict(config or {}))
        except ValidationError as exc:
            raise InvalidCacheConfigError(
                f"Invalid cache configuration: {exc}"
            ) from exc

    @staticmethod
    def load(path: Path) -> "CacheConfig":
        """Load a cache config from a JSON file."""
        try:
            data = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as exc:
            raise InvalidCacheConfigError(
                f"Cache config in {path} is not valid JSON: {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise InvalidCacheConfigError(
                f"Cache config in {path} must be a JSON object"
            )
        return CacheConfig.coerce(data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    default_ttl_ms: Optional[int]
        TTL applied to caches built from these settings.
    default_capacity: Optional[int]
        Capacity applied to caches built from these settings.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="EXPIRING_CACHE_")

    log_level: str = Field("INFO")
    default_ttl_ms: Optional[int] = None
    default_capacity: Optional[int] = None

    def cache_config(self) -> CacheConfig:
        """Build a :class:`CacheConfig`, keeping model defaults for unset values."""
        values: dict[str, int] = {}
        if self.default_ttl_ms is not None:
            values["ttl_ms"] = self.default_ttl_ms
        if self.default_capacity is not None:
            values["capacity"] = self.default_capacity
        return CacheConfig.coerce(values)
