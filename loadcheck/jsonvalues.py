"""
Helpers for working with already-parsed JSON values.

Parsed JSON arrives as plain Python objects, which blur a few distinctions
JSON itself keeps: ``bool`` is a subclass of ``int`` and ``True == 1``.
Everything here treats booleans and numbers as separate JSON types.
"""

from __future__ import annotations

import json
from typing import Any


class _Missing:
    """Marker for a value that is absent, as opposed to JSON ``null``."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def is_number(value: Any) -> bool:
    """Return True for JSON numbers (ints and floats, never bools)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def json_type(value: Any) -> str:
    """
    Return the JSON type name of *value*.

    One of ``string``, ``number``, ``boolean``, ``object``, ``array``,
    ``null``, or ``undefined`` for :data:`MISSING` and non-JSON objects.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return "undefined"


def json_equal(left: Any, right: Any) -> bool:
    """Deep equality that keeps ``True`` and ``1`` apart."""
    left_type = json_type(left)
    if left_type != json_type(right):
        return False
    if left_type == "object":
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[key], right[key]) for key in left)
    if left_type == "array":
        if len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right))
    return left == right


def _normalise_numbers(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {key: _normalise_numbers(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalise_numbers(item) for item in value]
    return value


def canonical_json(value: Any) -> str:
    """Serialise *value* with sorted keys so equal values give equal text."""
    return json.dumps(
        _normalise_numbers(value),
        sort_keys=True,
        separators=(",", ":"),
        default=repr,
    )


def utf16_length(text: str) -> int:
    """Length of *text* in UTF-16 code units, as JSON Schema tooling on JS counts it."""
    return len(text) + sum(1 for char in text if ord(char) > 0xFFFF)
