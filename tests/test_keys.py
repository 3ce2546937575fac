"""
Tests for cache key canonicalization.
"""

from dataclasses import dataclass

import pytest

from expiring_cache import KeyCanonicalizationError, canonical_key


def test_primitive_keys():
    """Primitives serialize to their JSON form."""
    assert canonical_key("a") == '"a"'
    assert canonical_key(1) == "1"
    assert canonical_key(None) == "null"
    assert canonical_key(True) == "true"


def test_string_and_number_keys_do_not_collide():
    """A string and a number with the same digits are different keys."""
    assert canonical_key("1") != canonical_key(1)


def test_mapping_key_order_is_irrelevant():
    """Equal mappings produce the same canonical key."""
    first = {"b": 1, "a": {"y": 2, "x": 3}}
    second = {"a": {"x": 3, "y": 2}, "b": 1}
    assert canonical_key(first) == canonical_key(second)
    assert canonical_key(first) == '{"a":{"x":3,"y":2},"b":1}'


def test_tuples_and_lists_are_equivalent():
    """Sequences serialize the same regardless of container type."""
    assert canonical_key(("a", 1)) == canonical_key(["a", 1])


def test_canonicalization_is_stable_across_calls():
    """Repeated calls yield identical output."""
    key = {"filters": ["x", "y"], "page": 3}
    assert canonical_key(key) == canonical_key(dict(key))


def test_dataclass_keys_are_supported():
    """Dataclasses serialize by field."""

    @dataclass
    class Query:
        term: str
        limit: int

    key = canonical_key(Query("x", 5))
    assert key == canonical_key(Query("x", 5))
    assert '"term":"x"' in key


@pytest.mark.parametrize(
    "bad_key",
    [
        {1, 2},
        object(),
        {1: "non-string mapping key"},
    ],
)
def test_unserializable_keys_raise(bad_key):
    """Keys without a deterministic form raise KeyCanonicalizationError."""
    with pytest.raises(KeyCanonicalizationError):
        canonical_key(bad_key)


def test_cyclic_key_raises():
    """Self-referencing structures are rejected."""
    cyclic: list = []
    cyclic.append(cyclic)
    with pytest.raises(KeyCanonicalizationError):
        canonical_key(cyclic)


def test_error_is_a_type_error():
    """The canonicalization error can be caught as TypeError."""
    with pytest.raises(TypeError) as excinfo:
        canonical_key({"s": {1}})
    assert excinfo.value.__cause__ is not None


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_floats_raise(value):
    """NaN and infinities have no JSON form and are rejected."""
    with pytest.raises(KeyCanonicalizationError):
        canonical_key(value)


def test_non_finite_float_nested_in_mapping_raises():
    """Non-finite floats are rejected at any depth."""
    with pytest.raises(KeyCanonicalizationError):
        canonical_key({"outer": [1, {"inner": float("nan")}]})
    with pytest.raises(KeyCanonicalizationError):
        canonical_key(("a", float("inf")))


def test_integral_floats_match_ints():
    """Numbers equal in Python produce the same canonical key."""
    assert canonical_key(1.0) == canonical_key(1) == "1"
    assert canonical_key(-0.0) == canonical_key(0)
    assert canonical_key({"page": 2.0}) == canonical_key({"page": 2})
    assert canonical_key([3.0, "x"]) == canonical_key((3, "x"))


def test_fractional_floats_are_kept():
    """Non-integral floats stay distinct from nearby ints."""
    assert canonical_key(1.5) == "1.5"
    assert canonical_key(1.5) != canonical_key(1)


def test_shared_substructure_is_not_a_cycle():
    """The same list referenced twice is fine as long as it is not cyclic."""
    shared = [1, 2]
    assert canonical_key([shared, shared]) == "[[1,2],[1,2]]"
