"""Structural equality for JSON values.

Used by ``enum`` membership and ``uniqueItems``. Integers and floats compare by
numeric value, arrays compare element by element in order, and objects compare
by member set regardless of member order. ``True`` is not equal to ``1``.
"""

from typing import Any, Iterable, List

from jschema.jsonvalue import json_kind
from jschema.schemamodel import SchemaType

HASH_SEED = 17
HASH_MULTIPLIER = 31
HASH_MASK = (1 << 64) - 1

NUMERIC_KINDS = (SchemaType.INTEGER, SchemaType.NUMBER)


def deep_equals(a: Any, b: Any) -> bool:
    """Returns True if *a* and *b* are the same JSON value."""
    kind_a = json_kind(a)
    kind_b = json_kind(b)

    if kind_a in NUMERIC_KINDS and kind_b in NUMERIC_KINDS:
        return a == b
    if kind_a != kind_b:
        return False

    if kind_a == SchemaType.ARRAY:
        return len(a) == len(b) and all(deep_equals(x, y) for x, y in zip(a, b))
    if kind_a == SchemaType.OBJECT:
        if a.keys() != b.keys():
            return False
        return all(deep_equals(a[key], b[key]) for key in a)
    return a == b


def structural_hash(value: Any) -> int:
    """Hash consistent with :func:`deep_equals`."""
    kind = json_kind(value)

    if kind == SchemaType.NULL:
        return hash(None)
    if kind in NUMERIC_KINDS:
        # hash(2) == hash(2.0) in Python.
        return hash(value)
    if kind in (SchemaType.BOOLEAN, SchemaType.STRING):
        return hash((kind, value))
    if kind == SchemaType.ARRAY:
        result = HASH_SEED
        for element in value:
            result = (result * HASH_MULTIPLIER + structural_hash(element)) & HASH_MASK
        return result

    # Member order must not matter, so member hashes are combined with a
    # commutative operation.
    result = HASH_SEED
    for key, member in value.items():
        result = (result + hash(key) * HASH_MULTIPLIER + structural_hash(member)) & HASH_MASK
    return result


class _HashedValue:
    """Wraps a JSON value so it can be a dict/set key under :func:`deep_equals`."""

    __slots__ = ('value', '_hash')

    def __init__(self, value: Any) -> None:
        self.value = value
        self._hash = structural_hash(value)

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _HashedValue) and deep_equals(self.value, other.value)


def distinct(values: Iterable[Any]) -> List[Any]:
    """The values of *values* with structural duplicates removed, in first-seen order."""
    seen = set()
    result = []
    for value in values:
        hashed = _HashedValue(value)
        if hashed not in seen:
            seen.add(hashed)
            result.append(value)
    return result


def count_distinct(values: Iterable[Any]) -> int:
    return len(distinct(values))


def token_matches_enum(value: Any, enum: Iterable[Any]) -> bool:
    """True if *value* is structurally equal to any member of *enum*."""
    return any(deep_equals(value, candidate) for candidate in enum)
