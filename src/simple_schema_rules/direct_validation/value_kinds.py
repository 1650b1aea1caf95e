"""Closed-set classification of JSON values."""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum


class ValueKind(str, Enum):
    """Runtime kind of a value, computed once before kind-specific checks."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    OTHER = "other"


def kind_of(value: object) -> ValueKind:
    """Classify a Python value; `bool` is never a number."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int | float | Decimal):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list | tuple):
        return ValueKind.ARRAY
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    return ValueKind.OTHER


def matches_type(value: object, kind: ValueKind, type_name: str) -> bool:
    """Return True when a value of `kind` satisfies the schema type name."""
    if type_name == "number":
        return kind is ValueKind.NUMBER and not is_nan(value)
    if type_name == "integer":
        return kind is ValueKind.NUMBER and is_integral(value)
    return kind.value == type_name


def is_nan(value: object) -> bool:
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def is_integral(value: object) -> bool:
    """Return True for numbers whose fractional part is exactly zero."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value) and value.is_integer()
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return False


def json_equal(left: object, right: object) -> bool:
    """Deep structural equality with JSON semantics (1 == 1.0, True != 1)."""
    left_kind = kind_of(left)
    if left_kind is not kind_of(right):
        return False
    if left_kind is ValueKind.ARRAY:
        assert isinstance(left, list | tuple) and isinstance(right, list | tuple)
        return len(left) == len(right) and all(
            json_equal(left_item, right_item) for left_item, right_item in zip(left, right)
        )
    if left_kind is ValueKind.OBJECT:
        assert isinstance(left, Mapping) and isinstance(right, Mapping)
        return left.keys() == right.keys() and all(
            json_equal(left[key], right[key]) for key in left
        )
    return left == right


def has_duplicates(items: list[object] | tuple[object, ...]) -> bool:
    for index, item in enumerate(items):
        for other in items[index + 1 :]:
            if json_equal(item, other):
                return True
    return False
