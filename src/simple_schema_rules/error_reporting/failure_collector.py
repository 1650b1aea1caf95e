"""Detailed failure collection service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from jsonpointer import JsonPointer, JsonPointerException

from simple_schema_rules.configuration.runtime_settings import ValidationSettings
from simple_schema_rules.direct_validation.schema_evaluator import (
    EvaluationContext,
    FormatsInput,
    RootInput,
    SchemaInput,
    additional_member_names,
    count_matching,
    evaluate,
    number_violations,
    prepare_evaluation,
    selected_branch,
    string_violations,
    tuple_item_schema,
)
from simple_schema_rules.direct_validation.value_kinds import (
    ValueKind,
    has_duplicates,
    json_equal,
    kind_of,
    matches_type,
)
from simple_schema_rules.schema_documents import (
    ArrayConstraints,
    BooleanSchema,
    Composition,
    ObjectConstraints,
    SchemaNode,
)

from .failure_models import FailureCode, ValidationFailure

_LOGGER = logging.getLogger("simple_schema_rules.errors")
_LOGGER.addHandler(logging.NullHandler())

_KEYWORD_FAILURES: Mapping[str, tuple[FailureCode, str]] = {
    "minLength": (FailureCode.MIN_LENGTH, "must be at least {} characters long"),
    "maxLength": (FailureCode.MAX_LENGTH, "must be at most {} characters long"),
    "pattern": (FailureCode.PATTERN, "must match pattern '{}'"),
    "format": (FailureCode.FORMAT, "must be a valid '{}'"),
    "contentEncoding": (FailureCode.CONTENT_ENCODING, "must be {}-encoded"),
    "contentMediaType": (FailureCode.CONTENT_MEDIA_TYPE, "must be valid {} content"),
    "minimum": (FailureCode.MINIMUM, "must be greater than or equal to {}"),
    "maximum": (FailureCode.MAXIMUM, "must be less than or equal to {}"),
    "exclusiveMinimum": (FailureCode.EXCLUSIVE_MINIMUM, "must be greater than {}"),
    "exclusiveMaximum": (FailureCode.EXCLUSIVE_MAXIMUM, "must be less than {}"),
    "multipleOf": (FailureCode.MULTIPLE_OF, "must be a multiple of {}"),
}


@dataclass
class _CollectionState:
    """Mutable collector shared by one detailed validation run."""

    context: EvaluationContext
    failures: list[ValidationFailure]

    def add(
        self,
        path: str,
        code: FailureCode,
        message: str,
        value: Any = None,
        constraint: Any = None,
    ) -> None:
        self.failures.append(
            ValidationFailure(
                path=path, code=code, message=message, value=value, constraint=constraint
            )
        )


def detailed_errors(
    value: Any,
    schema: SchemaInput,
    custom_formats: FormatsInput | None = None,
    root_schema: RootInput | None = None,
    *,
    settings: ValidationSettings | None = None,
) -> list[ValidationFailure]:
    """Collect every failing keyword at every reachable path.

    The list is empty exactly when `validate` returns True for the same input.
    """
    node, context = prepare_evaluation(schema, custom_formats, root_schema, settings)
    state = _CollectionState(context=context, failures=[])
    _collect(value, node, "", state, 0)
    _LOGGER.debug("Collected %d validation failure(s)", len(state.failures))
    return state.failures


def specific_errors(
    value: Any,
    schema: SchemaInput,
    target_path: str,
    custom_formats: FormatsInput | None = None,
    root_schema: RootInput | None = None,
    *,
    settings: ValidationSettings | None = None,
) -> list[ValidationFailure]:
    """Like `detailed_errors`, restricted to failures at or below `target_path`.

    `target_path` uses the failure path notation (`tags[0].name`) or a JSON
    Pointer (`/tags/0/name`).
    """
    target = normalize_target_path(target_path)
    return [
        failure
        for failure in detailed_errors(
            value, schema, custom_formats, root_schema, settings=settings
        )
        if is_within(failure.path, target)
    ]


def normalize_target_path(target_path: str) -> str:
    if not target_path.startswith("/"):
        return target_path
    try:
        parts = JsonPointer(target_path).parts
    except JsonPointerException:
        return target_path
    path = ""
    for part in parts:
        path = index_path(path, int(part)) if part.isdigit() else member_path(path, part)
    return path


def is_within(path: str, target: str) -> bool:
    if not target or path == target:
        return True
    return path.startswith(f"{target}.") or path.startswith(f"{target}[")


def member_path(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def _collect(value: Any, node: SchemaNode, path: str, state: _CollectionState, depth: int) -> None:
    context = state.context
    if evaluate(value, node, context, depth):
        return
    if isinstance(node, BooleanSchema):
        state.add(path, FailureCode.FALSE_SCHEMA, "no value is allowed here", value, False)
        return
    if node.reference is not None:
        _collect(value, context.resolve(node.reference), path, state, depth + 1)
        return

    before = len(state.failures)
    kind = kind_of(value)
    if node.types is not None and not any(
        matches_type(value, kind, type_name) for type_name in node.types
    ):
        actual = type(value).__name__ if kind is ValueKind.OTHER else kind.value
        state.add(
            path,
            FailureCode.TYPE_MISMATCH,
            f"expected {' or '.join(node.types)}, got {actual}",
            value,
            list(node.types),
        )
        return
    if node.has_const and not json_equal(value, node.const):
        state.add(path, FailureCode.CONST, f"must be equal to {node.const!r}", value, node.const)
    if node.enum is not None and not any(json_equal(value, member) for member in node.enum):
        state.add(
            path,
            FailureCode.ENUM,
            f"must be one of {list(node.enum)!r}",
            value,
            list(node.enum),
        )

    if kind is ValueKind.STRING and node.string is not None:
        for keyword, constraint in string_violations(value, node.string, context.formats):
            _add_keyword_failure(state, path, keyword, value, constraint)
    elif kind is ValueKind.NUMBER and node.number is not None:
        for keyword, constraint in number_violations(value, node.number):
            _add_keyword_failure(state, path, keyword, value, constraint)
    elif kind is ValueKind.ARRAY and node.array is not None:
        _collect_array(value, node.array, path, state)
    elif kind is ValueKind.OBJECT and node.obj is not None:
        _collect_object(value, node.obj, path, state, depth)

    if node.composition is not None:
        _collect_composition(value, node.composition, path, state, depth)
    if node.conditional is not None:
        branch = selected_branch(value, node.conditional, context, depth + 1)
        if branch is not None:
            _collect(value, branch, path, state, depth + 1)

    if len(state.failures) == before:
        state.add(path, FailureCode.SCHEMA_MISMATCH, "does not match the schema", value)


def _add_keyword_failure(
    state: _CollectionState, path: str, keyword: str, value: Any, constraint: Any
) -> None:
    code, template = _KEYWORD_FAILURES[keyword]
    state.add(path, code, template.format(constraint), value, constraint)


def _collect_array(
    items: list[Any],
    constraints: ArrayConstraints,
    path: str,
    state: _CollectionState,
) -> None:
    context = state.context
    count = len(items)
    if constraints.min_items is not None and count < constraints.min_items:
        state.add(
            path,
            FailureCode.MIN_ITEMS,
            f"must contain at least {constraints.min_items} items",
            items,
            constraints.min_items,
        )
    if constraints.max_items is not None and count > constraints.max_items:
        state.add(
            path,
            FailureCode.MAX_ITEMS,
            f"must contain at most {constraints.max_items} items",
            items,
            constraints.max_items,
        )
    if constraints.unique_items and has_duplicates(items):
        state.add(path, FailureCode.UNIQUE_ITEMS, "must not contain duplicate items", items, True)

    if constraints.tuple_items is not None:
        declared = len(constraints.tuple_items)
        for index, item in enumerate(items):
            item_schema = tuple_item_schema(constraints, index)
            if item_schema is None:
                continue
            item_path = index_path(path, index)
            if index >= declared and item_schema == BooleanSchema(False):
                state.add(
                    item_path,
                    FailureCode.ADDITIONAL_ITEMS,
                    f"is not allowed, at most {declared} items are declared",
                    item,
                    declared,
                )
            else:
                _collect(item, item_schema, item_path, state, 0)
    elif constraints.items is not None:
        for index, item in enumerate(items):
            _collect(item, constraints.items, index_path(path, index), state, 0)

    contains = constraints.contains
    if contains is not None and not any(
        evaluate(item, contains, context, 0) for item in items
    ):
        state.add(
            path,
            FailureCode.CONTAINS,
            "must contain at least one matching item",
            items,
            contains.raw,
        )


def _collect_object(
    value: Mapping[str, Any],
    constraints: ObjectConstraints,
    path: str,
    state: _CollectionState,
    depth: int,
) -> None:
    context = state.context
    count = len(value)
    if constraints.min_properties is not None and count < constraints.min_properties:
        state.add(
            path,
            FailureCode.MIN_PROPERTIES,
            f"must have at least {constraints.min_properties} properties",
            value,
            constraints.min_properties,
        )
    if constraints.max_properties is not None and count > constraints.max_properties:
        state.add(
            path,
            FailureCode.MAX_PROPERTIES,
            f"must have at most {constraints.max_properties} properties",
            value,
            constraints.max_properties,
        )
    for name in constraints.required:
        if name not in value:
            state.add(member_path(path, name), FailureCode.REQUIRED, "is required", None, name)

    for name, member_schema in constraints.properties.items():
        if name in value:
            _collect(value[name], member_schema, member_path(path, name), state, 0)
    for pattern, member_schema in constraints.pattern_properties:
        for name, member in value.items():
            if pattern.search(name):
                _collect(member, member_schema, member_path(path, name), state, 0)
    if constraints.additional_properties is not None:
        for name in additional_member_names(value, constraints):
            name_path = member_path(path, name)
            if constraints.additional_properties == BooleanSchema(False):
                state.add(
                    name_path,
                    FailureCode.ADDITIONAL_PROPERTIES,
                    "is not an allowed property",
                    value[name],
                    False,
                )
            else:
                _collect(
                    value[name], constraints.additional_properties, name_path, state, 0
                )
    if constraints.property_names is not None:
        for name in value:
            if not evaluate(name, constraints.property_names, context, 0):
                state.add(
                    member_path(path, name),
                    FailureCode.PROPERTY_NAMES,
                    f"property name '{name}' is not valid",
                    name,
                    constraints.property_names.raw,
                )

    for trigger, names in constraints.dependent_required.items():
        if trigger not in value:
            continue
        for name in names:
            if name not in value:
                state.add(
                    member_path(path, name),
                    FailureCode.DEPENDENCIES,
                    f"is required when '{trigger}' is present",
                    None,
                    list(names),
                )
    for trigger, dependent_schema in constraints.dependent_schemas.items():
        if trigger in value and not evaluate(value, dependent_schema, context, depth + 1):
            state.add(
                path,
                FailureCode.DEPENDENCIES,
                f"does not satisfy the schema required by '{trigger}'",
                value,
                dependent_schema.raw,
            )
            _collect(value, dependent_schema, path, state, depth + 1)


def _collect_composition(
    value: Any,
    composition: Composition,
    path: str,
    state: _CollectionState,
    depth: int,
) -> None:
    context = state.context
    if composition.all_of is not None:
        failing = [
            branch
            for branch in composition.all_of
            if not evaluate(value, branch, context, depth + 1)
        ]
        for branch in failing:
            _collect(value, branch, path, state, depth + 1)
        if failing:
            state.add(
                path,
                FailureCode.ALL_OF,
                f"must match all schemas in allOf ({len(failing)} failed)",
                value,
                [branch.raw for branch in composition.all_of],
            )
    if composition.any_of is not None and not any(
        evaluate(value, branch, context, depth + 1) for branch in composition.any_of
    ):
        state.add(
            path,
            FailureCode.ANY_OF,
            "must match at least one schema in anyOf",
            value,
            [branch.raw for branch in composition.any_of],
        )
    if composition.one_of is not None:
        matched = count_matching(value, composition.one_of, context, depth + 1)
        if matched != 1:
            state.add(
                path,
                FailureCode.ONE_OF,
                f"must match exactly one schema in oneOf (matched {matched})",
                value,
                [branch.raw for branch in composition.one_of],
            )
    if composition.not_ is not None and evaluate(value, composition.not_, context, depth + 1):
        state.add(
            path,
            FailureCode.NOT,
            "must not match the schema in not",
            value,
            composition.not_.raw,
        )
