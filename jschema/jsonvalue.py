"""Helpers for JSON instance values.

Instances are the plain Python values produced by :func:`json.loads`:
``None``, ``bool``, ``int``, ``float``, ``str``, ``list`` and ``dict``.
"""

import json
from typing import Any, Iterable

from jsonpointer import escape

from jschema.schemamodel import SchemaType

HIGH_SURROGATES = range(0xD800, 0xDC00)
LOW_SURROGATES = range(0xDC00, 0xE000)


def json_kind(value: Any) -> SchemaType:
    """Returns the JSON type of *value*.

    ``bool`` is tested before ``int`` since it is an ``int`` subclass in Python.

    Raises:
        TypeError: If *value* is not a JSON value
    """
    if value is None:
        return SchemaType.NULL
    if isinstance(value, bool):
        return SchemaType.BOOLEAN
    if isinstance(value, int):
        return SchemaType.INTEGER
    if isinstance(value, float):
        return SchemaType.NUMBER
    if isinstance(value, str):
        return SchemaType.STRING
    if isinstance(value, list):
        return SchemaType.ARRAY
    if isinstance(value, dict):
        return SchemaType.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def unicode_length(value: str) -> int:
    """Length of *value* counting a high/low surrogate pair as one character."""
    length = 0
    previous = None
    for ch in value:
        if not (previous is not None and ord(previous) in HIGH_SURROGATES and ord(ch) in LOW_SURROGATES):
            length += 1
        previous = ch
    return length


def child_path(path: str, key: Any) -> str:
    """JSON Pointer of member *key* (or index) below *path*."""
    return f"{path}/{escape(str(key))}"


def format_value(value: Any) -> str:
    """Renders an instance or schema value as a message argument."""
    return json.dumps(value, ensure_ascii=False)


def format_list(values: Iterable[Any]) -> str:
    return ', '.join(format_value(v) for v in values)


def format_names(names: Iterable[str]) -> str:
    return ', '.join(names)


def format_types(types: Iterable[SchemaType]) -> str:
    return ', '.join(str(t) for t in types)
