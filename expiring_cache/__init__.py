"""
Expiring cache package.

A bounded, time-expiring in-memory key-value cache with expiry-ordered
eviction, plus configuration, per-scope ownership and logging helpers.
"""

from .__version__ import __version__
from .config.models import CacheConfig, EnvSettings
from .errors import (
    ExpiringCacheError,
    InvalidCacheConfigError,
    KeyCanonicalizationError,
)
from .utils.cache import Cache, CacheEntry, create
from .utils.keys import canonical_key
from .utils.scope import CacheScope

__all__ = [
    "__version__",
    "Cache",
    "CacheConfig",
    "CacheEntry",
    "CacheScope",
    "EnvSettings",
    "ExpiringCacheError",
    "InvalidCacheConfigError",
    "KeyCanonicalizationError",
    "canonical_key",
    "create",
]
