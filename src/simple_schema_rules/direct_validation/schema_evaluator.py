"""Direct pass/fail evaluation of values against schemas."""

from __future__ import annotations

import base64
import binascii
import json
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, TypeAlias

from simple_schema_rules.configuration.runtime_settings import (
    DEFAULT_MAX_DEPTH,
    ValidationSettings,
)
from simple_schema_rules.format_checks import FormatPredicate, FormatRegistry
from simple_schema_rules.reference_resolution import resolve_schema
from simple_schema_rules.schema_documents import (
    ArrayConstraints,
    BooleanSchema,
    Composition,
    Conditional,
    NumberConstraints,
    ObjectConstraints,
    RootSchema,
    Schema,
    SchemaError,
    SchemaNode,
    StringConstraints,
    parse_schema,
)

from .value_kinds import ValueKind, has_duplicates, json_equal, kind_of, matches_type

SchemaInput: TypeAlias = Mapping[str, Any] | bool | Schema | BooleanSchema
RootInput: TypeAlias = Mapping[str, Any] | bool | RootSchema
FormatsInput: TypeAlias = Mapping[str, FormatPredicate] | FormatRegistry


class SchemaRecursionLimitError(SchemaError):
    """Raised when schema evaluation nests deeper than the configured limit."""


@dataclass(frozen=True)
class EvaluationContext:
    """Read-only state shared by every step of one evaluation."""

    root: RootSchema
    formats: FormatRegistry
    max_depth: int = DEFAULT_MAX_DEPTH

    def resolve(self, reference: str) -> SchemaNode:
        return resolve_schema(reference, self.root)

    def guard(self, depth: int) -> None:
        """Reject `depth` past the limit.

        Depth counts schema re-entries on one value (`$ref`, composition,
        conditionals, dependent schemas). It restarts at zero for each member
        or element, so only cycles that never descend into the data trip it.
        """
        if depth > self.max_depth:
            raise SchemaRecursionLimitError(
                f"Schema evaluation exceeded the maximum depth of {self.max_depth}."
            )


def prepare_evaluation(
    schema: SchemaInput,
    custom_formats: FormatsInput | None = None,
    root_schema: RootInput | None = None,
    settings: ValidationSettings | None = None,
) -> tuple[SchemaNode, EvaluationContext]:
    """Parse the schema and build the context used by one validation call.

    Without an explicit root, the schema document is its own root.
    """
    settings = settings or ValidationSettings()
    node = schema if isinstance(schema, Schema | BooleanSchema) else parse_schema(schema)
    if root_schema is None:
        root = RootSchema(document=node.raw)
    elif isinstance(root_schema, RootSchema):
        root = root_schema
    else:
        root = RootSchema(document=root_schema)
    if isinstance(custom_formats, FormatRegistry):
        formats = custom_formats
    else:
        formats = FormatRegistry(custom_formats, reject_unknown=settings.reject_unknown_formats)
    return node, EvaluationContext(root=root, formats=formats, max_depth=settings.max_depth)


def validate(
    value: Any,
    schema: SchemaInput,
    custom_formats: FormatsInput | None = None,
    root_schema: RootInput | None = None,
    *,
    settings: ValidationSettings | None = None,
) -> bool:
    """Return True when `value` satisfies `schema`.

    Data that does not match yields False. Only malformed schemas raise
    (`SchemaError` and its subclasses).
    """
    node, context = prepare_evaluation(schema, custom_formats, root_schema, settings)
    return evaluate(value, node, context)


def evaluate(value: Any, node: SchemaNode, context: EvaluationContext, depth: int = 0) -> bool:
    """Recursive decision function; stops at the first failing keyword."""
    if isinstance(node, BooleanSchema):
        return node.accepts
    context.guard(depth)
    if node.reference is not None:
        return evaluate(value, context.resolve(node.reference), context, depth + 1)

    kind = kind_of(value)
    if node.types is not None and not any(
        matches_type(value, kind, type_name) for type_name in node.types
    ):
        return False
    if node.has_const and not json_equal(value, node.const):
        return False
    if node.enum is not None and not any(json_equal(value, member) for member in node.enum):
        return False

    if kind is ValueKind.STRING and node.string is not None:
        if next(string_violations(value, node.string, context.formats), None) is not None:
            return False
    elif kind is ValueKind.NUMBER and node.number is not None:
        if next(number_violations(value, node.number), None) is not None:
            return False
    elif kind is ValueKind.ARRAY and node.array is not None:
        if not _satisfies_array(value, node.array, context):
            return False
    elif kind is ValueKind.OBJECT and node.obj is not None:
        if not _satisfies_object(value, node.obj, context, depth):
            return False

    if node.composition is not None and not _satisfies_composition(
        value, node.composition, context, depth
    ):
        return False
    if node.conditional is not None:
        return _satisfies_conditional(value, node.conditional, context, depth)
    return True


def string_violations(
    value: str, constraints: StringConstraints, formats: FormatRegistry
) -> Iterator[tuple[str, Any]]:
    """Yield `(keyword, constraint)` for each string keyword the value breaks."""
    length = len(value)
    if constraints.min_length is not None and length < constraints.min_length:
        yield "minLength", constraints.min_length
    if constraints.max_length is not None and length > constraints.max_length:
        yield "maxLength", constraints.max_length
    if constraints.pattern is not None and constraints.pattern.search(value) is None:
        yield "pattern", constraints.pattern.pattern
    if constraints.format is not None and not formats.check(constraints.format, value):
        yield "format", constraints.format
    if constraints.content_encoding is not None and not is_valid_content_encoding(
        value, constraints.content_encoding
    ):
        yield "contentEncoding", constraints.content_encoding
    if constraints.content_media_type is not None and not is_valid_content_media_type(
        value, constraints.content_media_type, constraints.content_encoding
    ):
        yield "contentMediaType", constraints.content_media_type


def number_violations(value: Any, constraints: NumberConstraints) -> Iterator[tuple[str, Any]]:
    """Yield `(keyword, constraint)` for each numeric keyword the value breaks."""
    if constraints.minimum is not None and value < constraints.minimum:
        yield "minimum", constraints.minimum
    if constraints.maximum is not None and value > constraints.maximum:
        yield "maximum", constraints.maximum
    if constraints.exclusive_minimum is not None and value <= constraints.exclusive_minimum:
        yield "exclusiveMinimum", constraints.exclusive_minimum
    if constraints.exclusive_maximum is not None and value >= constraints.exclusive_maximum:
        yield "exclusiveMaximum", constraints.exclusive_maximum
    if constraints.multiple_of is not None and not is_multiple_of(value, constraints.multiple_of):
        yield "multipleOf", constraints.multiple_of


def is_multiple_of(value: Any, multiple: int | float) -> bool:
    """Remainder-based multiple check, exact for decimal literals like 0.1."""
    try:
        return Decimal(str(value)) % Decimal(str(multiple)) == 0
    except InvalidOperation:
        quotient = float(value) / float(multiple)
        return math.isfinite(quotient) and quotient.is_integer()


def is_valid_content_encoding(value: str, encoding: str) -> bool:
    if encoding.lower() != "base64":
        return True
    if len(value) % 4:
        return False
    try:
        base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def is_valid_content_media_type(value: str, media_type: str, encoding: str | None) -> bool:
    if media_type.lower() != "application/json":
        return True
    text = value
    if encoding is not None and encoding.lower() == "base64":
        try:
            text = base64.b64decode(value, validate=True).decode("utf-8")
        except (binascii.Error, ValueError):
            return False
    try:
        json.loads(text)
    except json.JSONDecodeError:
        return False
    return True


def tuple_item_schema(constraints: ArrayConstraints, index: int) -> SchemaNode | None:
    """Schema governing position `index` of a tuple-style array, if any."""
    if constraints.tuple_items is None:
        raise ValueError("Array constraints do not declare tuple items.")
    if index < len(constraints.tuple_items):
        return constraints.tuple_items[index]
    return constraints.additional_items


def additional_member_names(value: Mapping[str, Any], constraints: ObjectConstraints) -> list[str]:
    """Members claimed by neither `properties` nor `patternProperties`."""
    return [
        name
        for name in value
        if name not in constraints.properties
        and not any(pattern.search(name) for pattern, _ in constraints.pattern_properties)
    ]


def _satisfies_array(
    items: list[Any], constraints: ArrayConstraints, context: EvaluationContext
) -> bool:
    if constraints.min_items is not None and len(items) < constraints.min_items:
        return False
    if constraints.max_items is not None and len(items) > constraints.max_items:
        return False
    if constraints.unique_items and has_duplicates(items):
        return False

    if constraints.tuple_items is not None:
        for index, item in enumerate(items):
            item_schema = tuple_item_schema(constraints, index)
            if item_schema is not None and not evaluate(item, item_schema, context, 0):
                return False
    elif constraints.items is not None:
        if not all(evaluate(item, constraints.items, context, 0) for item in items):
            return False

    if constraints.contains is not None:
        contains = constraints.contains
        return any(evaluate(item, contains, context, 0) for item in items)
    return True


def _satisfies_object(
    value: Mapping[str, Any],
    constraints: ObjectConstraints,
    context: EvaluationContext,
    depth: int,
) -> bool:
    if constraints.min_properties is not None and len(value) < constraints.min_properties:
        return False
    if constraints.max_properties is not None and len(value) > constraints.max_properties:
        return False
    if any(name not in value for name in constraints.required):
        return False

    for name, member_schema in constraints.properties.items():
        if name in value and not evaluate(value[name], member_schema, context, 0):
            return False
    for pattern, member_schema in constraints.pattern_properties:
        for name, member in value.items():
            if pattern.search(name) and not evaluate(member, member_schema, context, 0):
                return False
    if constraints.additional_properties is not None:
        for name in additional_member_names(value, constraints):
            if not evaluate(value[name], constraints.additional_properties, context, 0):
                return False
    if constraints.property_names is not None:
        for name in value:
            if not evaluate(name, constraints.property_names, context, 0):
                return False

    for trigger, names in constraints.dependent_required.items():
        if trigger in value and any(name not in value for name in names):
            return False
    for trigger, dependent_schema in constraints.dependent_schemas.items():
        if trigger in value and not evaluate(value, dependent_schema, context, depth + 1):
            return False
    return True


def _satisfies_composition(
    value: Any, composition: Composition, context: EvaluationContext, depth: int
) -> bool:
    if composition.all_of is not None and not all(
        evaluate(value, branch, context, depth + 1) for branch in composition.all_of
    ):
        return False
    if composition.any_of is not None and not any(
        evaluate(value, branch, context, depth + 1) for branch in composition.any_of
    ):
        return False
    if composition.one_of is not None and count_matching(
        value, composition.one_of, context, depth + 1
    ) != 1:
        return False
    if composition.not_ is not None and evaluate(value, composition.not_, context, depth + 1):
        return False
    return True


def count_matching(
    value: Any, branches: tuple[SchemaNode, ...], context: EvaluationContext, depth: int
) -> int:
    return sum(1 for branch in branches if evaluate(value, branch, context, depth))


def selected_branch(
    value: Any, conditional: Conditional, context: EvaluationContext, depth: int
) -> SchemaNode | None:
    """Return `then` when `if` holds, `else` otherwise; either may be absent."""
    if evaluate(value, conditional.if_, context, depth):
        return conditional.then
    return conditional.else_


def _satisfies_conditional(
    value: Any, conditional: Conditional, context: EvaluationContext, depth: int
) -> bool:
    branch = selected_branch(value, conditional, context, depth + 1)
    return branch is None or evaluate(value, branch, context, depth + 1)
