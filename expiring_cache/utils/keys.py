"""Key canonicalization for cache lookups.

Caller keys may be composite (lists, tuples, mappings) and are therefore not
necessarily hashable. Each key is serialized to a deterministic string with
``orjson`` and ``OPT_SORT_KEYS`` so that two mappings holding the same items
produce the same canonical key regardless of insertion order.

Notes
-----
- Tuples and lists serialize identically, so ``("a", 1)`` and ``["a", 1]``
  address the same entry.
- Floats with an integral value are keyed as ints, so ``1`` and ``1.0``
  address the same entry, matching Python equality.
- NaN and infinite floats have no JSON form and are rejected, as are sets,
  arbitrary objects, non-string mapping keys and cyclic structures. All of
  these raise :class:`KeyCanonicalizationError`.
- Only lists, tuples and dicts are walked. Floats nested inside other
  orjson-native types (e.g. dataclasses) are serialized as orjson emits them.
"""

from __future__ import annotations

import math
from typing import Any, Set

import orjson

from ..errors import KeyCanonicalizationError

_DUMPS_OPTIONS = orjson.OPT_SORT_KEYS

# orjson only encodes integers in this range
_INT_MIN = -(2**63)
_INT_MAX = 2**64 - 1


def _normalize(value: Any, active: Set[int]) -> Any:
    if isinstance(value, float):
        if not math.isfinite(value):
            raise KeyCanonicalizationError(
                f"Cannot canonicalize non-finite float {value!r} in cache key"
            )
        if value.is_integer() and _INT_MIN <= value <= _INT_MAX:
            return int(value)
        return value
    if isinstance(value, (list, tuple, dict)):
        marker = id(value)
        if marker in active:
            raise KeyCanonicalizationError(
                f"Cannot canonicalize cyclic {type(value).__name__} in cache key"
            )
        active.add(marker)
        try:
            if isinstance(value, dict):
                return {k: _normalize(v, active) for k, v in value.items()}
            return [_normalize(item, active) for item in value]
        finally:
            active.discard(marker)
    return value


def canonical_key(key: Any) -> str:
    """Return the canonical string form of ``key``.

    Raises
    ------
    KeyCanonicalizationError
        If ``key`` has no deterministic JSON representation.
    """
    normalized = _normalize(key, set())
    try:
        return orjson.dumps(normalized, option=_DUMPS_OPTIONS).decode("utf-8")
    except orjson.JSONEncodeError as exc:
        raise KeyCanonicalizationError(
            f"Cannot canonicalize cache key of type {type(key).__name__}: {exc}"
        ) from exc
