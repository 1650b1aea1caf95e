"""Value classification tests."""

from __future__ import annotations

from decimal import Decimal

import pytest
from simple_schema_rules.direct_validation import ValueKind, json_equal, kind_of
from simple_schema_rules.direct_validation.value_kinds import has_duplicates, matches_type


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ValueKind.NULL),
        (True, ValueKind.BOOLEAN),
        (0, ValueKind.NUMBER),
        (1.5, ValueKind.NUMBER),
        (Decimal("2.5"), ValueKind.NUMBER),
        ("text", ValueKind.STRING),
        ([1, 2], ValueKind.ARRAY),
        ({"a": 1}, ValueKind.OBJECT),
        (object(), ValueKind.OTHER),
    ],
)
def test_kind_of_classifies_json_values(value: object, expected: ValueKind) -> None:
    assert kind_of(value) is expected


def test_booleans_are_not_numbers() -> None:
    assert matches_type(True, kind_of(True), "number") is False
    assert matches_type(True, kind_of(True), "integer") is False
    assert matches_type(True, kind_of(True), "boolean") is True


def test_integer_type_accepts_integral_floats() -> None:
    assert matches_type(3.0, ValueKind.NUMBER, "integer") is True
    assert matches_type(3.5, ValueKind.NUMBER, "integer") is False
    assert matches_type(float("inf"), ValueKind.NUMBER, "integer") is False


def test_nan_is_not_a_number_type() -> None:
    assert matches_type(float("nan"), ValueKind.NUMBER, "number") is False


def test_json_equal_uses_json_semantics() -> None:
    assert json_equal(1, 1.0) is True
    assert json_equal(True, 1) is False
    assert json_equal({"a": [1, {"b": None}]}, {"a": [1.0, {"b": None}]}) is True
    assert json_equal({"a": 1}, {"a": 1, "b": 2}) is False
    assert json_equal([1, 2], [2, 1]) is False


def test_has_duplicates_compares_structurally() -> None:
    assert has_duplicates([{"a": 1}, {"a": 1.0}]) is True
    assert has_duplicates([1, True]) is False
    assert has_duplicates([]) is False
