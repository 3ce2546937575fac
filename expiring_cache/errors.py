"""Exception hierarchy for the expiring cache."""

from __future__ import annotations


class ExpiringCacheError(Exception):
    """Base error for the expiring cache package."""


class InvalidCacheConfigError(ExpiringCacheError, ValueError):
    """Raised when a cache is constructed with a non-positive TTL or capacity."""


class KeyCanonicalizationError(ExpiringCacheError, TypeError):
    """Raised when a key cannot be serialized to a stable canonical form."""
