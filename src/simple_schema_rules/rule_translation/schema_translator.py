"""Schema to rule record translation service."""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from typing import Any

from simple_schema_rules.direct_validation.value_kinds import ValueKind, kind_of
from simple_schema_rules.reference_resolution import resolve_schema
from simple_schema_rules.schema_documents import (
    ArrayConstraints,
    BooleanSchema,
    NumberConstraints,
    ObjectConstraints,
    RootSchema,
    Schema,
    SchemaError,
    SchemaNode,
    StringConstraints,
    parse_schema,
)

from .rule_records import RuleRecord

_LOGGER = logging.getLogger("simple_schema_rules.rules")
_LOGGER.addHandler(logging.NullHandler())

_ROOT_REFERENCE = "#"


def translate(
    schema: Mapping[str, Any] | bool | RootSchema | Schema | BooleanSchema,
    root_schema: Mapping[str, Any] | bool | RootSchema | None = None,
) -> list[RuleRecord]:
    """Flatten a schema into deterministic, depth-first rule records.

    Without an explicit root, the schema document is its own root.
    """
    document = schema.document if isinstance(schema, RootSchema) else schema
    node = document if isinstance(document, Schema | BooleanSchema) else parse_schema(document)
    root = _root_for(node, root_schema)
    active = frozenset({_ROOT_REFERENCE}) if root.document is node.raw else frozenset()

    node, active, cyclic_reference = _follow_references(node, root, active)
    if cyclic_reference is not None:
        raise SchemaError(f"Reference cycle without a concrete schema: {cyclic_reference}")

    records: list[RuleRecord] = []
    if isinstance(node, Schema):
        _translate_root(node, root=root, active=active, records=records)
    _LOGGER.debug("Translated schema into %d rule record(s)", len(records))
    return records


def translate_node(node: SchemaNode, root: RootSchema, path: str = "") -> RuleRecord:
    """Build the single record describing `node` itself, without nested records."""
    resolved, _, cyclic_reference = _follow_references(node, root, frozenset())
    if cyclic_reference is not None:
        raise SchemaError(f"Reference cycle without a concrete schema: {cyclic_reference}")
    primary, secondary, nullable = _classify(resolved)
    return RuleRecord(
        path=path,
        primary_type=primary,
        secondary_types=secondary,
        nullable=nullable,
        constraints=extract_constraints(resolved),
        root=root,
    )


def extract_constraints(node: SchemaNode) -> dict[str, Any]:
    """Map the keywords of one node onto the rule constraint vocabulary."""
    if isinstance(node, BooleanSchema):
        return {} if node.accepts else {"not": {}}
    constraints: dict[str, Any] = {}
    if node.reference is not None:
        constraints["ref"] = node.reference
        return constraints
    if node.types is not None and "integer" in node.types:
        constraints["integer"] = True
    if node.string is not None:
        _add_string_constraints(constraints, node.string)
    if node.number is not None:
        _add_number_constraints(constraints, node.number)
    if node.array is not None:
        _add_array_constraints(constraints, node.array)
    if node.obj is not None:
        _add_object_constraints(constraints, node.obj)
    if node.enum is not None:
        constraints["enum"] = list(node.enum)
    if node.has_const:
        constraints["const"] = node.const
    _add_composition_constraints(constraints, node)
    _add_conditional_constraints(constraints, node)
    return constraints


def _root_for(
    node: SchemaNode, root_schema: Mapping[str, Any] | bool | RootSchema | None
) -> RootSchema:
    if root_schema is None:
        return RootSchema(document=node.raw)
    if isinstance(root_schema, RootSchema):
        return root_schema
    return RootSchema(document=root_schema)


def _follow_references(
    node: SchemaNode, root: RootSchema, active: frozenset[str]
) -> tuple[SchemaNode, frozenset[str], str | None]:
    """Resolve `$ref` chains, stopping at a reference already being expanded."""
    while isinstance(node, Schema) and node.reference is not None:
        reference = node.reference
        if reference in active:
            return node, active, reference
        active = active | {reference}
        node = resolve_schema(reference, root)
    return node, active, None


def _translate_root(
    node: Schema, *, root: RootSchema, active: frozenset[str], records: list[RuleRecord]
) -> None:
    composition = node.composition
    obj = node.obj if _may_be(node, "object") else None
    if composition is not None and (
        composition.all_of is not None
        or composition.any_of is not None
        or composition.one_of is not None
    ):
        primary, secondary, nullable = _classify(node)
        records.append(
            RuleRecord(
                path="",
                primary_type=primary,
                secondary_types=secondary,
                nullable=nullable,
                constraints=extract_constraints(node),
                root=root,
            )
        )
    elif obj is not None:
        root_constraints: dict[str, Any] = {}
        _add_object_constraints(root_constraints, obj)
        _add_conditional_constraints(root_constraints, node)
        if composition is not None and composition.not_ is not None:
            root_constraints["not"] = composition.not_.raw
        if root_constraints:
            records.append(
                RuleRecord(path="", primary_type="object", constraints=root_constraints, root=root)
            )
    if obj is not None:
        _translate_properties(obj, prefix="", root=root, active=active, records=records)


def _translate_properties(
    constraints: ObjectConstraints,
    *,
    prefix: str,
    root: RootSchema,
    active: frozenset[str],
    records: list[RuleRecord],
) -> None:
    for name, child in constraints.properties.items():
        child_path = name if not prefix else f"{prefix}.{name}"
        _translate_field(
            child,
            path=child_path,
            is_required=name in constraints.required,
            root=root,
            active=active,
            records=records,
        )


def _translate_field(  # pylint: disable=too-many-arguments
    node: SchemaNode,
    *,
    path: str,
    is_required: bool,
    root: RootSchema,
    active: frozenset[str],
    records: list[RuleRecord],
) -> None:
    resolved, active, cyclic_reference = _follow_references(node, root, active)
    if cyclic_reference is not None:
        target = resolve_schema(cyclic_reference, root)
        primary, secondary, nullable = _classify(target)
        records.append(
            RuleRecord(
                path=path,
                primary_type=primary,
                secondary_types=secondary,
                nullable=nullable,
                constraints={"ref": cyclic_reference},
                is_required=is_required,
                root=root,
            )
        )
        return

    primary, secondary, nullable = _classify(resolved)
    records.append(
        RuleRecord(
            path=path,
            primary_type=primary,
            secondary_types=secondary,
            nullable=nullable,
            constraints=extract_constraints(resolved),
            is_required=is_required,
            root=root,
        )
    )
    if not isinstance(resolved, Schema):
        return

    if resolved.obj is not None and _may_be(resolved, "object"):
        _translate_properties(resolved.obj, prefix=path, root=root, active=active, records=records)
    array = resolved.array
    if (
        array is not None
        and array.items is not None
        and array.tuple_items is None
        and array.items != BooleanSchema(True)
        and _may_be(resolved, "array")
    ):
        _translate_field(
            array.items,
            path=f"{path}[*]",
            is_required=False,
            root=root,
            active=active,
            records=records,
        )


def _may_be(node: Schema, type_name: str) -> bool:
    return node.types is None or type_name in node.types


def _classify(node: SchemaNode) -> tuple[str, tuple[str, ...], bool]:
    """Return `(primary_type, secondary_types, nullable)` for a node."""
    if isinstance(node, BooleanSchema) or node.reference is not None:
        return "any", (), False
    if node.types is None:
        return _infer_type(node), (), False
    names: list[str] = []
    for type_name in node.types:
        mapped = "number" if type_name == "integer" else type_name
        if mapped != "null" and mapped not in names:
            names.append(mapped)
    if not names:
        return "null", (), False
    return names[0], tuple(names[1:]), "null" in node.types


def _infer_type(node: Schema) -> str:
    if node.enum:
        kinds = {_kind_name(member) for member in node.enum}
        return kinds.pop() if len(kinds) == 1 else "any"
    if node.has_const:
        return _kind_name(node.const)
    groups = (
        ("string", node.string),
        ("number", node.number),
        ("array", node.array),
        ("object", node.obj),
    )
    for type_name, group in groups:
        if group is not None:
            return type_name
    return "any"


def _kind_name(value: Any) -> str:
    kind = kind_of(value)
    return "any" if kind is ValueKind.OTHER else kind.value


def _add_string_constraints(constraints: dict[str, Any], string: StringConstraints) -> None:
    _put(constraints, "min_length", string.min_length)
    _put(constraints, "max_length", string.max_length)
    if string.pattern is not None:
        constraints["pattern"] = string.pattern.pattern
    _put(constraints, "format", string.format)
    _put(constraints, "content_encoding", string.content_encoding)
    _put(constraints, "content_media_type", string.content_media_type)


def _add_number_constraints(constraints: dict[str, Any], number: NumberConstraints) -> None:
    lower = _tighter_bound(number.minimum, number.exclusive_minimum, lower=True)
    if lower is not None:
        bound, exclusive = lower
        constraints["min"] = bound
        if exclusive:
            constraints["exclusive_min"] = True
    upper = _tighter_bound(number.maximum, number.exclusive_maximum, lower=False)
    if upper is not None:
        bound, exclusive = upper
        constraints["max"] = bound
        if exclusive:
            constraints["exclusive_max"] = True
    _put(constraints, "multiple_of", number.multiple_of)


def _tighter_bound(
    inclusive: int | float | None, exclusive: int | float | None, *, lower: bool
) -> tuple[int | float, bool] | None:
    if exclusive is None:
        return None if inclusive is None else (inclusive, False)
    if inclusive is None:
        return exclusive, True
    exclusive_wins = exclusive >= inclusive if lower else exclusive <= inclusive
    return (exclusive, True) if exclusive_wins else (inclusive, False)


def _add_array_constraints(constraints: dict[str, Any], array: ArrayConstraints) -> None:
    if array.tuple_items is not None:
        constraints["items"] = [item.raw for item in array.tuple_items]
        if array.additional_items is not None:
            constraints["additional_items"] = array.additional_items.raw
    elif array.items is not None:
        constraints["items"] = array.items.raw
    if array.contains is not None:
        constraints["contains"] = array.contains.raw
    _put(constraints, "min_items", array.min_items)
    _put(constraints, "max_items", array.max_items)
    if array.unique_items:
        constraints["unique_items"] = True


def _add_object_constraints(constraints: dict[str, Any], obj: ObjectConstraints) -> None:
    if obj.additional_properties is not None:
        constraints["additional_properties"] = obj.additional_properties.raw
    if obj.property_names is not None:
        constraints["property_names"] = obj.property_names.raw
    if obj.pattern_properties:
        constraints["pattern_properties"] = {
            pattern.pattern: member.raw for pattern, member in obj.pattern_properties
        }
    _put(constraints, "min_properties", obj.min_properties)
    _put(constraints, "max_properties", obj.max_properties)
    if obj.dependent_required:
        constraints["dependent_required"] = {
            trigger: list(names) for trigger, names in obj.dependent_required.items()
        }
    if obj.dependent_schemas:
        constraints["dependent_schemas"] = {
            trigger: member.raw for trigger, member in obj.dependent_schemas.items()
        }


def _add_composition_constraints(constraints: dict[str, Any], node: Schema) -> None:
    composition = node.composition
    if composition is None:
        return
    if composition.all_of is not None:
        constraints["all_of"] = [branch.raw for branch in composition.all_of]
    if composition.any_of is not None:
        constraints["any_of"] = [branch.raw for branch in composition.any_of]
    if composition.one_of is not None:
        constraints["one_of"] = [branch.raw for branch in composition.one_of]
    if composition.not_ is not None:
        constraints["not"] = composition.not_.raw


def _add_conditional_constraints(constraints: dict[str, Any], node: Schema) -> None:
    conditional = node.conditional
    if conditional is None:
        return
    constraints["if"] = conditional.if_.raw
    if conditional.then is not None:
        constraints["then"] = conditional.then.raw
    if conditional.else_ is not None:
        constraints["else"] = conditional.else_.raw


def _put(constraints: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        constraints[key] = value


_KEYWORDS_BY_CONSTRAINT = {
    "min_length": "minLength",
    "max_length": "maxLength",
    "pattern": "pattern",
    "format": "format",
    "content_encoding": "contentEncoding",
    "content_media_type": "contentMediaType",
    "multiple_of": "multipleOf",
    "enum": "enum",
    "const": "const",
    "items": "items",
    "additional_items": "additionalItems",
    "contains": "contains",
    "min_items": "minItems",
    "max_items": "maxItems",
    "unique_items": "uniqueItems",
    "additional_properties": "additionalProperties",
    "property_names": "propertyNames",
    "pattern_properties": "patternProperties",
    "min_properties": "minProperties",
    "max_properties": "maxProperties",
    "dependent_required": "dependentRequired",
    "dependent_schemas": "dependentSchemas",
    "all_of": "allOf",
    "any_of": "anyOf",
    "one_of": "oneOf",
    "not": "not",
    "if": "if",
    "then": "then",
    "else": "else",
}


def record_to_schema(
    record: RuleRecord,
    keys: Collection[str] | None = None,
    *,
    include_type: bool = True,
) -> dict[str, Any]:
    """Rebuild a schema fragment from a record's constraints.

    `keys` limits the fragment to those constraint keys. A recursive
    reference record becomes a plain `$ref` fragment.
    """
    constraints = {
        key: value
        for key, value in record.constraints.items()
        if keys is None or key in keys
    }
    if "ref" in constraints:
        return {"$ref": constraints["ref"]}

    schema: dict[str, Any] = {}
    if include_type and record.primary_type != "any":
        integer = record.constraints.get("integer", False)
        types = [
            "integer" if type_name == "number" and integer else type_name
            for type_name in (record.primary_type, *record.secondary_types)
        ]
        if record.nullable:
            types.append("null")
        schema["type"] = types[0] if len(types) == 1 else types
    if "min" in constraints:
        keyword = "exclusiveMinimum" if constraints.get("exclusive_min") else "minimum"
        schema[keyword] = constraints["min"]
    if "max" in constraints:
        keyword = "exclusiveMaximum" if constraints.get("exclusive_max") else "maximum"
        schema[keyword] = constraints["max"]
    for key, value in constraints.items():
        keyword = _KEYWORDS_BY_CONSTRAINT.get(key)
        if keyword is not None:
            schema[keyword] = value
    return schema
