"""Bounded, time-expiring in-memory cache.

This module provides a typed cache built on :class:`cachetools.Cache` that
adds a fixed per-cache TTL and an expiry-ordered eviction policy:

- Every entry expires ``ttl_ms`` milliseconds after it was inserted. Reads
  never extend an entry's lifetime.
- Expired entries are removed lazily when read, and eagerly by a prune pass
  at the start of every write.
- When a write would add a new key to a full cache, the single entry with the
  soonest expiry is evicted first. Overwriting an existing key never evicts.

Because the TTL is the same for every entry of a cache, "soonest to expire"
is the same as "oldest inserted": the policy is FIFO under uniform TTL, not
LRU. Reading an entry does not protect it from eviction.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Optional, Tuple, TypeVar, Union

from cachetools import Cache as _BaseCache  # type: ignore[import-untyped]

from ..config.models import DEFAULT_CAPACITY, DEFAULT_TTL_MS, CacheConfig
from .keys import canonical_key

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Return a monotonic timestamp in milliseconds."""
    return time.monotonic() * 1000.0


@dataclass(slots=True)
class CacheEntry(Generic[V]):
    """A cached value and the clock reading at which it expires."""

    value: V
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


class _ExpiryOrderedStore(_BaseCache):
    """Entry-count bounded store whose eviction victim is the soonest expiry.

    ``cachetools.Cache`` calls :meth:`popitem` only when inserting a key that
    is not yet stored would exceed ``maxsize``.
    """

    def popitem(self) -> Tuple[str, CacheEntry[Any]]:
        soonest_key: Optional[str] = None
        soonest_expiry = float("inf")
        for key, entry in self.items():
            # Strict comparison keeps the first entry encountered on ties
            if entry.expires_at < soonest_expiry:
                soonest_expiry = entry.expires_at
                soonest_key = key
        if soonest_key is None:
            raise KeyError(f"{type(self).__name__} is empty")
        entry = self.pop(soonest_key)
        logger.debug(
            "Evicted cache entry %s (expires_at=%.3f, capacity=%d)",
            soonest_key,
            entry.expires_at,
            self.maxsize,
        )
        return soonest_key, entry


class Cache(Generic[K, V]):
    """Bounded TTL cache with expiry-ordered eviction.

    Parameters
    ----------
    ttl_ms: int
        Lifetime of every entry in milliseconds. Must be positive.
    capacity: int
        Maximum number of entries to retain. Must be positive.
    clock: Callable[[], float], optional
        Zero-argument callable returning the current time in milliseconds.
        Defaults to a monotonic clock so wall-clock changes do not affect
        expiry.

    Keys are canonicalized with :func:`canonical_key`, so any JSON-like value
    (including dicts in any insertion order) can be used as a key. All public
    operations are serialized by an internal lock.
    """

    def __init__(
        self,
        ttl_ms: int = DEFAULT_TTL_MS,
        capacity: int = DEFAULT_CAPACITY,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        config = CacheConfig.coerce({"ttl_ms": ttl_ms, "capacity": capacity})
        self._ttl_ms = config.ttl_ms
        self._capacity = config.capacity
        self._clock: Clock = clock or monotonic_ms
        self._store = _ExpiryOrderedStore(maxsize=config.capacity)
        self._lock = threading.Lock()

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Return the live value for `key`, or `default` if missing or expired."""
        cache_key = canonical_key(key)
        with self._lock:
            entry = self._live_entry(cache_key)
        if entry is None:
            return default
        return entry.value

    def set(self, key: K, value: V) -> None:
        """Insert or overwrite `key` with `value` and a fresh expiry.

        Expired entries are pruned first. If `key` is new and the cache is
        still full, the entry closest to expiry is evicted.
        """
        cache_key = canonical_key(key)
        with self._lock:
            now = self._clock()
            self._prune(now)
            self._store[cache_key] = CacheEntry(
                value=value, expires_at=now + self._ttl_ms
            )

    def delete(self, key: K) -> bool:
        """Remove `key`; return True if a live entry was removed."""
        cache_key = canonical_key(key)
        with self._lock:
            entry = self._store.pop(cache_key, None)
        return entry is not None and not entry.is_expired(self._clock())

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
        logger.debug("Cleared %d cache entries", count)

    def __contains__(self, key: object) -> bool:
        cache_key = canonical_key(key)
        with self._lock:
            return self._live_entry(cache_key) is not None

    def __len__(self) -> int:
        """Number of stored entries, including expired ones not yet pruned."""
        with self._lock:
            return len(self._store)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(ttl_ms={self._ttl_ms}, "
            f"capacity={self._capacity}, size={len(self._store)})"
        )

    # Callers must hold self._lock

    def _live_entry(self, cache_key: str) -> Optional[CacheEntry[V]]:
        entry = self._store.get(cache_key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._store[cache_key]
            return None
        return entry

    def _prune(self, now: float) -> None:
        expired = [k for k, e in self._store.items() if e.is_expired(now)]
        for cache_key in expired:
            del self._store[cache_key]
        if expired:
            logger.debug("Pruned %d expired cache entries", len(expired))


def create(
    config: Union[CacheConfig, Mapping[str, Any], None] = None,
    *,
    clock: Optional[Clock] = None,
) -> Cache[Any, Any]:
    """Create a cache from a :class:`CacheConfig`, a mapping, or defaults.

    Parameters
    ----------
    config: CacheConfig | Mapping | None
        ``ttl_ms`` and ``capacity`` settings. Missing values fall back to
        5 minutes and 100 entries.
    clock: Callable[[], float], optional
        Millisecond clock override, mainly for tests.

    Raises
    ------
    InvalidCacheConfigError
        If ``ttl_ms`` or ``capacity`` is not a positive integer.
    """
    cfg = CacheConfig.coerce(config)
    cache: Cache[Any, Any] = Cache(cfg.ttl_ms, cfg.capacity, clock=clock)
    logger.info(
        "Created cache",
        extra={"ttl_ms": cfg.ttl_ms, "capacity": cfg.capacity},
    )
    return cache
