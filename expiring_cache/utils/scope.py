"""Per-scope cache ownership.

A scope is any long-lived owner object (a request handler, a session, a
component instance). :class:`CacheScope` hands each owner exactly one
:class:`~expiring_cache.utils.cache.Cache` and keeps returning it for as long
as the owner is alive. The registry only holds weak references to owners, so
a cache is discarded together with its owner; no process-wide singleton is
involved.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import Any, Mapping, Optional, Union

from ..config.models import CacheConfig
from .cache import Cache, Clock

logger = logging.getLogger(__name__)


class CacheScope:
    """Registry mapping owner objects to their own cache.

    Parameters
    ----------
    config: CacheConfig | Mapping | None
        Settings applied to every cache this scope creates.
    clock: Callable[[], float], optional
        Millisecond clock passed to created caches.

    Owners must be hashable and support weak references.
    """

    def __init__(
        self,
        config: Union[CacheConfig, Mapping[str, Any], None] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = CacheConfig.coerce(config)
        self._clock = clock
        self._caches: "weakref.WeakKeyDictionary[Any, Cache[Any, Any]]" = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.Lock()

    def for_owner(self, owner: Any) -> Cache[Any, Any]:
        """Return the cache owned by `owner`, creating it on first use."""
        with self._lock:
            cache = self._caches.get(owner)
            if cache is None:
                cache = Cache(
                    self.config.ttl_ms, self.config.capacity, clock=self._clock
                )
                self._caches[owner] = cache
                logger.debug(
                    "Created cache for %s owner at %#x", type(owner).__name__, id(owner)
                )
            return cache

    def release(self, owner: Any) -> bool:
        """Discard the cache owned by `owner`; return True if one existed."""
        with self._lock:
            cache = self._caches.pop(owner, None)
        if cache is None:
            return False
        cache.clear()
        return True

    def __contains__(self, owner: object) -> bool:
        with self._lock:
            return owner in self._caches

    def __len__(self) -> int:
        with self._lock:
            return len(self._caches)
