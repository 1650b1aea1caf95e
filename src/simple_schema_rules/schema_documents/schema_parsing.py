"""Schema parsing and loading service."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from .schema_models import (
    ArrayConstraints,
    BooleanSchema,
    Composition,
    Conditional,
    NumberConstraints,
    ObjectConstraints,
    RootSchema,
    Schema,
    SchemaNode,
    StringConstraints,
)

SCHEMA_TYPES = frozenset({"null", "boolean", "string", "number", "integer", "array", "object"})

_STRING_KEYWORDS = (
    "minLength",
    "maxLength",
    "pattern",
    "format",
    "contentEncoding",
    "contentMediaType",
)
_NUMBER_KEYWORDS = ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf")
_ARRAY_KEYWORDS = ("items", "additionalItems", "minItems", "maxItems", "uniqueItems", "contains")
_OBJECT_KEYWORDS = (
    "properties",
    "required",
    "patternProperties",
    "additionalProperties",
    "propertyNames",
    "minProperties",
    "maxProperties",
    "dependencies",
    "dependentRequired",
    "dependentSchemas",
)
_COMPOSITION_KEYWORDS = ("allOf", "anyOf", "oneOf", "not")


class SchemaError(Exception):
    """Raised for malformed schema documents."""


def load_schema_document(text: str) -> RootSchema:
    """Parse JSON schema text into a root schema."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Invalid JSON schema: {exc}") from exc
    return _as_root(document)


def load_schema_file(path: Path | str) -> RootSchema:
    """Read a JSON or YAML schema file into a root schema."""
    schema_path = Path(path)
    if not schema_path.exists():
        raise SchemaError(f"Schema file not found: {schema_path}")
    text = schema_path.read_text(encoding="utf-8")
    if schema_path.suffix.lower() not in {".yaml", ".yml"}:
        return load_schema_document(text)
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid YAML schema: {exc}") from exc
    return _as_root(document)


def parse_schema(node: Any) -> SchemaNode:
    """Convert a JSON schema node into its tagged representation.

    Keywords this dialect does not know are ignored. Keywords it does know
    but whose values are malformed raise `SchemaError`.
    """
    if isinstance(node, bool):
        return BooleanSchema(accepts=node)
    if not isinstance(node, Mapping):
        raise SchemaError("Schema nodes must be objects or booleans.")

    reference = node.get("$ref")
    if reference is not None:
        if not isinstance(reference, str):
            raise SchemaError("$ref must be a string.")
        return Schema(raw=node, reference=reference)

    enum = node.get("enum")
    if enum is not None and (isinstance(enum, str) or not isinstance(enum, Sequence)):
        raise SchemaError("enum must be a list.")

    return Schema(
        raw=node,
        types=_parse_types(node.get("type")),
        has_const="const" in node,
        const=node.get("const"),
        enum=tuple(enum) if enum is not None else None,
        string=_parse_string_constraints(node),
        number=_parse_number_constraints(node),
        array=_parse_array_constraints(node),
        obj=_parse_object_constraints(node),
        composition=_parse_composition(node),
        conditional=_parse_conditional(node),
    )


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a schema regular expression, caching the result."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise SchemaError(f"Invalid regular expression {pattern!r}: {exc}") from exc


def _as_root(document: Any) -> RootSchema:
    if not isinstance(document, Mapping | bool):
        raise SchemaError("Schema document root must be an object or a boolean.")
    parse_schema(document)
    return RootSchema(document=document)


def _parse_types(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    names = [value] if isinstance(value, str) else value
    if not isinstance(names, Sequence) or isinstance(names, str):
        raise SchemaError("type must be a string or a list of strings.")
    for name in names:
        if not isinstance(name, str):
            raise SchemaError("type entries must be strings.")
        if name not in SCHEMA_TYPES:
            raise SchemaError(f"Unsupported schema type: {name}")
    return tuple(names)


def _parse_string_constraints(node: Mapping[str, Any]) -> StringConstraints | None:
    if not any(keyword in node for keyword in _STRING_KEYWORDS):
        return None
    pattern = node.get("pattern")
    if pattern is not None and not isinstance(pattern, str):
        raise SchemaError("pattern must be a string.")
    return StringConstraints(
        min_length=_optional_count(node, "minLength"),
        max_length=_optional_count(node, "maxLength"),
        pattern=compile_pattern(pattern) if pattern is not None else None,
        format=_optional_text(node, "format"),
        content_encoding=_optional_text(node, "contentEncoding"),
        content_media_type=_optional_text(node, "contentMediaType"),
    )


def _parse_number_constraints(node: Mapping[str, Any]) -> NumberConstraints | None:
    if not any(keyword in node for keyword in _NUMBER_KEYWORDS):
        return None
    minimum = _optional_number(node, "minimum")
    maximum = _optional_number(node, "maximum")
    exclusive_minimum, minimum = _normalize_exclusive(node.get("exclusiveMinimum"), minimum)
    exclusive_maximum, maximum = _normalize_exclusive(node.get("exclusiveMaximum"), maximum)
    multiple_of = _optional_number(node, "multipleOf")
    if multiple_of is not None and multiple_of <= 0:
        raise SchemaError("multipleOf must be greater than zero.")
    return NumberConstraints(
        minimum=minimum,
        maximum=maximum,
        exclusive_minimum=exclusive_minimum,
        exclusive_maximum=exclusive_maximum,
        multiple_of=multiple_of,
    )


def _normalize_exclusive(
    flag_or_bound: Any, inclusive: int | float | None
) -> tuple[int | float | None, int | float | None]:
    """Return `(exclusive_bound, inclusive_bound)` with the legacy flag folded in."""
    if flag_or_bound is None:
        return None, inclusive
    if isinstance(flag_or_bound, bool):
        if flag_or_bound and inclusive is not None:
            return inclusive, None
        return None, inclusive
    if not isinstance(flag_or_bound, int | float):
        raise SchemaError("exclusive bounds must be numbers or booleans.")
    return flag_or_bound, inclusive


def _parse_array_constraints(node: Mapping[str, Any]) -> ArrayConstraints | None:
    if not any(keyword in node for keyword in _ARRAY_KEYWORDS):
        return None
    items = node.get("items")
    tuple_items: tuple[SchemaNode, ...] | None = None
    single_items: SchemaNode | None = None
    if isinstance(items, list):
        tuple_items = tuple(parse_schema(item) for item in items)
    elif items is not None:
        single_items = parse_schema(items)
    return ArrayConstraints(
        items=single_items,
        tuple_items=tuple_items,
        additional_items=_optional_schema(node, "additionalItems"),
        min_items=_optional_count(node, "minItems"),
        max_items=_optional_count(node, "maxItems"),
        unique_items=node.get("uniqueItems") is True,
        contains=_optional_schema(node, "contains"),
    )


def _parse_object_constraints(node: Mapping[str, Any]) -> ObjectConstraints | None:
    if not any(keyword in node for keyword in _OBJECT_KEYWORDS):
        return None
    dependent_required, dependent_schemas = _parse_dependencies(node)
    return ObjectConstraints(
        properties={
            name: parse_schema(child)
            for name, child in _optional_mapping(node, "properties").items()
        },
        required=_string_tuple(node.get("required", ()), "required"),
        pattern_properties=tuple(
            (compile_pattern(pattern), parse_schema(child))
            for pattern, child in _optional_mapping(node, "patternProperties").items()
        ),
        additional_properties=_optional_schema(node, "additionalProperties"),
        property_names=_optional_schema(node, "propertyNames"),
        min_properties=_optional_count(node, "minProperties"),
        max_properties=_optional_count(node, "maxProperties"),
        dependent_required=dependent_required,
        dependent_schemas=dependent_schemas,
    )


def _parse_dependencies(
    node: Mapping[str, Any],
) -> tuple[dict[str, tuple[str, ...]], dict[str, SchemaNode]]:
    dependent_required: dict[str, tuple[str, ...]] = {}
    dependent_schemas: dict[str, SchemaNode] = {}
    for trigger, dependency in _optional_mapping(node, "dependencies").items():
        if isinstance(dependency, list):
            dependent_required[trigger] = _string_tuple(dependency, "dependencies")
        else:
            dependent_schemas[trigger] = parse_schema(dependency)
    for trigger, names in _optional_mapping(node, "dependentRequired").items():
        dependent_required[trigger] = _string_tuple(names, "dependentRequired")
    for trigger, child in _optional_mapping(node, "dependentSchemas").items():
        dependent_schemas[trigger] = parse_schema(child)
    return dependent_required, dependent_schemas


def _parse_composition(node: Mapping[str, Any]) -> Composition | None:
    if not any(keyword in node for keyword in _COMPOSITION_KEYWORDS):
        return None
    return Composition(
        all_of=_optional_schema_list(node, "allOf"),
        any_of=_optional_schema_list(node, "anyOf"),
        one_of=_optional_schema_list(node, "oneOf"),
        not_=_optional_schema(node, "not"),
    )


def _parse_conditional(node: Mapping[str, Any]) -> Conditional | None:
    if "if" not in node:
        return None
    return Conditional(
        if_=parse_schema(node["if"]),
        then=_optional_schema(node, "then"),
        else_=_optional_schema(node, "else"),
    )


def _optional_schema(node: Mapping[str, Any], keyword: str) -> SchemaNode | None:
    if keyword not in node:
        return None
    return parse_schema(node[keyword])


def _optional_schema_list(node: Mapping[str, Any], keyword: str) -> tuple[SchemaNode, ...] | None:
    if keyword not in node:
        return None
    value = node[keyword]
    if not isinstance(value, list):
        raise SchemaError(f"{keyword} must be a list of schemas.")
    return tuple(parse_schema(child) for child in value)


def _optional_mapping(node: Mapping[str, Any], keyword: str) -> Mapping[str, Any]:
    value = node.get(keyword)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SchemaError(f"{keyword} must be an object.")
    return value


def _optional_count(node: Mapping[str, Any], keyword: str) -> int | None:
    value = node.get(keyword)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float) or value < 0:
        raise SchemaError(f"{keyword} must be a non-negative integer.")
    if isinstance(value, float) and not value.is_integer():
        raise SchemaError(f"{keyword} must be a non-negative integer.")
    return int(value)


def _optional_number(node: Mapping[str, Any], keyword: str) -> int | float | None:
    value = node.get(keyword)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise SchemaError(f"{keyword} must be a number.")
    return value


def _optional_text(node: Mapping[str, Any], keyword: str) -> str | None:
    value = node.get(keyword)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchemaError(f"{keyword} must be a string.")
    return value


def _string_tuple(value: Any, keyword: str) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise SchemaError(f"{keyword} must be a list of strings.")
    if not all(isinstance(item, str) for item in value):
        raise SchemaError(f"{keyword} entries must be strings.")
    return tuple(value)
