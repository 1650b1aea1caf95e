"""Detailed failure collection tests."""

from __future__ import annotations

from typing import Any

import pytest
from simple_schema_rules.direct_validation import validate
from simple_schema_rules.error_reporting import (
    FailureCode,
    ValidationFailure,
    detailed_errors,
    normalize_target_path,
    specific_errors,
)

PERSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "age": {"type": "integer", "minimum": 0},
        "email": {"type": "string", "format": "email"},
        "tags": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["name"],
    "additionalProperties": False,
}

BROKEN_PERSON = {"age": -1, "tags": ["a", 1], "nickname": "x"}


def _summary(failures: list[ValidationFailure]) -> list[tuple[str, FailureCode]]:
    return [(failure.path, failure.code) for failure in failures]


def test_collects_every_failure_with_its_path() -> None:
    failures = detailed_errors(BROKEN_PERSON, PERSON_SCHEMA)

    assert _summary(failures) == [
        ("name", FailureCode.REQUIRED),
        ("age", FailureCode.MINIMUM),
        ("tags[1]", FailureCode.TYPE_MISMATCH),
        ("nickname", FailureCode.ADDITIONAL_PROPERTIES),
    ]
    assert failures[0].message == "is required"
    assert failures[1].message == "must be greater than or equal to 0"
    assert failures[1].value == -1
    assert failures[2].message == "expected string, got number"


def test_valid_value_has_no_failures() -> None:
    assert detailed_errors({"name": "Ada", "tags": []}, PERSON_SCHEMA) == []


def test_type_mismatch_suppresses_other_keywords_at_the_same_node() -> None:
    failures = detailed_errors(3, {"type": "string", "minLength": 5})

    assert _summary(failures) == [("", FailureCode.TYPE_MISMATCH)]
    assert failures[0].constraint == ["string"]


def test_false_schema_reports_a_dedicated_code() -> None:
    failures = detailed_errors({"extra": 1}, {"properties": {"extra": False}})

    assert _summary(failures) == [("extra", FailureCode.FALSE_SCHEMA)]


def test_all_of_reports_branch_failures_and_summary() -> None:
    failures = detailed_errors(5, {"allOf": [{"minimum": 10}, {"maximum": 20}]})

    assert _summary(failures) == [("", FailureCode.MINIMUM), ("", FailureCode.ALL_OF)]
    assert failures[1].message == "must match all schemas in allOf (1 failed)"


def test_one_of_reports_the_match_count() -> None:
    failures = detailed_errors(5, {"oneOf": [{"maximum": 10}, {"minimum": 3}]})

    assert _summary(failures) == [("", FailureCode.ONE_OF)]
    assert failures[0].message == "must match exactly one schema in oneOf (matched 2)"


def test_contains_and_unique_items() -> None:
    schema = {"type": "array", "uniqueItems": True, "contains": {"const": "admin"}}

    failures = detailed_errors(["user", "user"], schema)

    assert _summary(failures) == [("", FailureCode.UNIQUE_ITEMS), ("", FailureCode.CONTAINS)]


def test_additional_tuple_items_are_reported_per_item() -> None:
    schema = {"items": [{"type": "string"}], "additionalItems": False}

    failures = detailed_errors(["a", 1, 2], schema)

    assert _summary(failures) == [
        ("[1]", FailureCode.ADDITIONAL_ITEMS),
        ("[2]", FailureCode.ADDITIONAL_ITEMS),
    ]


def test_conditional_failures_come_from_the_selected_branch() -> None:
    schema = {
        "if": {"properties": {"country": {"const": "US"}}},
        "then": {"required": ["zip"]},
    }

    failures = detailed_errors({"country": "US"}, schema)

    assert _summary(failures) == [("zip", FailureCode.REQUIRED)]


def test_dependency_failures_point_at_the_missing_member() -> None:
    schema = {"dependencies": {"credit_card": ["billing_address"]}}

    failures = detailed_errors({"credit_card": "4111"}, schema)

    assert _summary(failures) == [("billing_address", FailureCode.DEPENDENCIES)]
    assert failures[0].message == "is required when 'credit_card' is present"


def test_references_keep_the_instance_path() -> None:
    schema = {
        "definitions": {"positive": {"type": "number", "exclusiveMinimum": 0}},
        "type": "array",
        "items": {"$ref": "#/definitions/positive"},
    }

    failures = detailed_errors([1, 0], schema)

    assert _summary(failures) == [("[1]", FailureCode.EXCLUSIVE_MINIMUM)]
    assert failures[0].message == "must be greater than 0"


def test_nested_object_paths_are_dotted() -> None:
    schema = {
        "properties": {
            "address": {
                "type": "object",
                "properties": {"city": {"type": "string", "maxLength": 3}},
            }
        }
    }

    failures = detailed_errors({"address": {"city": "Berlin"}}, schema)

    assert _summary(failures) == [("address.city", FailureCode.MAX_LENGTH)]


@pytest.mark.parametrize(
    "value",
    [
        {"name": "Ada"},
        BROKEN_PERSON,
        {"name": "", "email": "ada"},
        {"name": "Ada", "age": 1.5},
        "not an object",
        {"name": "Ada", "tags": "x"},
    ],
)
def test_failures_are_empty_exactly_when_value_is_valid(value: Any) -> None:
    assert (detailed_errors(value, PERSON_SCHEMA) == []) is validate(value, PERSON_SCHEMA)


@pytest.mark.parametrize("target", ["tags[1]", "/tags/1", "tags"])
def test_specific_errors_filter_to_the_target_subtree(target: str) -> None:
    failures = specific_errors(BROKEN_PERSON, PERSON_SCHEMA, target)

    assert _summary(failures) == [("tags[1]", FailureCode.TYPE_MISMATCH)]


def test_specific_errors_does_not_match_sibling_prefixes() -> None:
    schema = {"properties": {"tag": {"type": "string"}, "tags": {"type": "array"}}}

    failures = specific_errors({"tag": 1, "tags": 1}, schema, "tag")

    assert _summary(failures) == [("tag", FailureCode.TYPE_MISMATCH)]


def test_empty_target_keeps_every_failure() -> None:
    assert specific_errors(BROKEN_PERSON, PERSON_SCHEMA, "") == detailed_errors(
        BROKEN_PERSON, PERSON_SCHEMA
    )


def test_normalize_target_path_converts_json_pointers() -> None:
    assert normalize_target_path("/a~1b/0/name") == "a/b[0].name"
    assert normalize_target_path("items[2]") == "items[2]"


def test_describe_renders_root_path() -> None:
    failure = ValidationFailure(path="", code=FailureCode.CONST, message="must be equal to 1")

    assert failure.describe() == "<root>: must be equal to 1"


def test_deeply_nested_failure_is_reported_at_its_full_path() -> None:
    linked = {"type": "object", "properties": {"next": {"$ref": "#"}}}
    chain: dict[str, Any] = {"next": 5}
    for _ in range(60):
        chain = {"next": chain}

    failures = detailed_errors(chain, linked)

    assert [(failure.path, failure.code) for failure in failures] == [
        (".".join(["next"] * 61), FailureCode.TYPE_MISMATCH)
    ]
