"""Rule record to chain emission service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from functools import partial
from typing import Any

from simple_schema_rules.direct_validation.schema_evaluator import (
    evaluate,
    is_valid_content_media_type,
    prepare_evaluation,
)
from simple_schema_rules.format_checks import FormatPredicate, FormatRegistry
from simple_schema_rules.rule_translation import RuleRecord, record_to_schema, translate_node
from simple_schema_rules.schema_documents import RootSchema, Schema, SchemaNode, parse_schema

from .chain_contracts import Chain, ChainBuilder, ChainCapabilityError, FieldBuilder, Predicate

_LOGGER = logging.getLogger("simple_schema_rules.chains")
_LOGGER.addHandler(logging.NullHandler())

_FORMAT_METHODS = {
    "email": "email",
    "uri": "url",
    "url": "url",
    "uuid": "uuid",
    "date-time": "datetime",
    "date": "date",
    "time": "time",
    "ipv4": "ipv4",
    "ipv6": "ipv6",
    "hostname": "hostname",
    "duration": "duration",
}

_KEYS_BY_TYPE = {
    "string": frozenset(
        {"min_length", "max_length", "pattern", "format", "content_encoding", "content_media_type"}
    ),
    "number": frozenset({"min", "max", "exclusive_min", "exclusive_max", "multiple_of", "integer"}),
    "array": frozenset(
        {"items", "additional_items", "contains", "min_items", "max_items", "unique_items"}
    ),
    "object": frozenset(
        {
            "additional_properties",
            "property_names",
            "pattern_properties",
            "min_properties",
            "max_properties",
            "dependent_required",
        }
    ),
}
_VALUE_KEYS = frozenset({"enum", "const"})
_PREDICATE_KEYS = frozenset(
    {"all_of", "any_of", "one_of", "not", "if", "then", "else", "ref", "dependent_schemas"}
)
_ROOT_HANDLED_KEYS = frozenset({"dependent_required"})
_MEMBER_KEYWORDS = ("properties", "required")
_MEMBER_RELATIVE_KEYWORDS = {
    "additional_properties": "additionalProperties",
    "pattern_properties": "patternProperties",
}


@dataclass(frozen=True)
class _EmissionContext:
    """Read-only state shared while emitting one record and its sub-rules."""

    record: RuleRecord
    builder: ChainBuilder
    formats: FormatRegistry

    def call(self, target: Any, method_name: str, *args: Any, **kwargs: Any) -> Any:
        method = getattr(target, method_name, None)
        if not callable(method):
            location = self.record.path or "<root>"
            raise ChainCapabilityError(
                f"Chain {type(target).__name__} has no '{method_name}' method "
                f"(needed for rule at {location})."
            )
        return method(*args, **kwargs)


def emit(
    record: RuleRecord,
    builder: ChainBuilder,
    custom_formats: Mapping[str, FormatPredicate] | FormatRegistry | None = None,
) -> Chain:
    """Express one rule record as calls on a chain obtained from `builder`.

    Raises:
      ChainCapabilityError: If the chain lacks a method the record needs.
    """
    context = _EmissionContext(record=record, builder=builder, formats=_registry(custom_formats))
    constraints = record.constraints

    if record.secondary_types:
        branches = [
            _apply_type_constraints(_entry_point(context, type_name), type_name, context)
            for type_name in (record.primary_type, *record.secondary_types)
        ]
        chain = _apply_presence(context.call(builder, "union", branches), context)
    else:
        chain = _apply_presence(_entry_point(context, record.primary_type), context)
        chain = _apply_type_constraints(chain, record.primary_type, context)

    predicate_keys = _PREDICATE_KEYS.intersection(constraints)
    if predicate_keys:
        schema = record_to_schema(record, predicate_keys, include_type=False)
        predicate = schema_predicate(schema, record.root, context.formats)
        chain = context.call(chain, "custom", predicate)
    return chain


def register_rules(
    records: Sequence[RuleRecord],
    field_builder: FieldBuilder,
    custom_formats: Mapping[str, FormatPredicate] | FormatRegistry | None = None,
) -> FieldBuilder:
    """Register every record on an object-level field builder.

    Field records go through `field(path, definition)`. Root-level
    constraints become `strict()`, `required_if(...)` and, for everything
    else, one `refine(predicate)` over the whole object.
    """
    formats = _registry(custom_formats)
    root_record: RuleRecord | None = None
    for record in records:
        if record.is_root:
            root_record = record
            continue
        field_builder = _call_field_builder(
            field_builder, "field", record.path, partial(_field_definition, record, formats)
        )
    if root_record is not None:
        field_builder = _register_root(root_record, records, field_builder, formats)
    _LOGGER.debug("Registered %d rule record(s)", len(records))
    return field_builder


def schema_predicate(
    schema: Mapping[str, Any] | bool,
    root: RootSchema | None,
    formats: FormatRegistry,
) -> Predicate:
    """Return a predicate deciding values against `schema` with the direct validator."""
    node, context = prepare_evaluation(schema, formats, root)

    def predicate(value: Any) -> bool:
        return evaluate(value, node, context)

    return predicate


def _registry(
    custom_formats: Mapping[str, FormatPredicate] | FormatRegistry | None,
) -> FormatRegistry:
    if isinstance(custom_formats, FormatRegistry):
        return custom_formats
    return FormatRegistry(custom_formats)


def _field_definition(record: RuleRecord, formats: FormatRegistry, builder: ChainBuilder) -> Chain:
    return emit(record, builder, formats)


def _register_root(
    record: RuleRecord,
    records: Sequence[RuleRecord],
    field_builder: FieldBuilder,
    formats: FormatRegistry,
) -> FieldBuilder:
    constraints = record.constraints
    handled = set(_ROOT_HANDLED_KEYS)
    if constraints.get("additional_properties") is False:
        field_builder = _call_field_builder(field_builder, "strict")
        handled.add("additional_properties")
    for trigger, names in constraints.get("dependent_required", {}).items():
        for name in names:
            field_builder = _call_field_builder(
                field_builder, "required_if", name, partial(_has_member, trigger)
            )

    remaining = set(constraints) - handled
    if not remaining:
        return field_builder
    schema = record_to_schema(record, remaining)
    if "additional_properties" in remaining:
        # additionalProperties is relative to the declared member names.
        schema["properties"] = {
            name: True
            for name in (_top_level_name(other.path) for other in records if not other.is_root)
        }
    return _call_field_builder(
        field_builder, "refine", schema_predicate(schema, record.root, formats)
    )


def _call_field_builder(
    field_builder: FieldBuilder, method_name: str, *args: Any
) -> FieldBuilder:
    method = getattr(field_builder, method_name, None)
    if not callable(method):
        raise ChainCapabilityError(
            f"Field builder {type(field_builder).__name__} has no '{method_name}' method."
        )
    return method(*args)


def _top_level_name(path: str) -> str:
    return path.split(".", 1)[0].split("[", 1)[0]


def _has_member(name: str, data: Any) -> bool:
    return isinstance(data, Mapping) and name in data


def _entry_point(context: _EmissionContext, type_name: str) -> Chain:
    if type_name == "null":
        return context.call(context.builder, "literal", None)
    return context.call(context.builder, type_name)


def _apply_presence(chain: Chain, context: _EmissionContext) -> Chain:
    if context.record.is_required:
        chain = context.call(chain, "required")
    if context.record.nullable:
        chain = context.call(chain, "nullable")
    return chain


def _apply_type_constraints(chain: Chain, type_name: str, context: _EmissionContext) -> Chain:
    """Apply bounds, pattern, format, encoding, values and sub-rules in that order."""
    keys = _KEYS_BY_TYPE.get(type_name, frozenset()) | _VALUE_KEYS
    constraints = {
        key: value for key, value in context.record.constraints.items() if key in keys
    }
    if type_name == "string":
        chain = _apply_string_bounds(chain, constraints, context)
        chain = _apply_string_content(chain, constraints, context)
    elif type_name == "number":
        chain = _apply_number_bounds(chain, constraints, context)
    elif type_name == "array":
        chain = _apply_array_bounds(chain, constraints, context)
    elif type_name == "object":
        chain = _apply_object_bounds(chain, constraints, context)

    if "enum" in constraints:
        chain = context.call(chain, "one_of", list(constraints["enum"]))
    if "const" in constraints:
        chain = context.call(chain, "literal", constraints["const"])

    if type_name == "array":
        chain = _apply_array_sub_rules(chain, constraints, context)
    elif type_name == "object":
        chain = _apply_object_sub_rules(chain, constraints, context)
    return chain


def _apply_string_bounds(
    chain: Chain, constraints: Mapping[str, Any], context: _EmissionContext
) -> Chain:
    if "min_length" in constraints:
        chain = context.call(chain, "min", constraints["min_length"])
    if "max_length" in constraints:
        chain = context.call(chain, "max", constraints["max_length"])
    return chain


def _apply_string_content(
    chain: Chain, constraints: Mapping[str, Any], context: _EmissionContext
) -> Chain:
    if "pattern" in constraints:
        chain = context.call(chain, "pattern", constraints["pattern"])
    if "format" in constraints:
        chain = _apply_format(chain, constraints["format"], context)
    encoding = constraints.get("content_encoding")
    if encoding is not None:
        chain = context.call(chain, "content_encoding", encoding)
    media_type = constraints.get("content_media_type")
    if media_type is not None:
        chain = context.call(
            chain,
            "refine",
            partial(_matches_media_type, media_type=media_type, encoding=encoding),
        )
    return chain


def _apply_format(chain: Chain, format_name: str, context: _EmissionContext) -> Chain:
    formats = context.formats
    if formats.is_custom(format_name):
        return context.call(chain, "refine", formats.custom_formats[format_name])
    method_name = _FORMAT_METHODS.get(format_name)
    if method_name is not None:
        return context.call(chain, method_name)
    if formats.is_known(format_name) or formats.reject_unknown:
        return context.call(chain, "refine", partial(formats.check, format_name))
    _LOGGER.debug("Skipping unknown format %r at %s", format_name, context.record.path)
    return chain


def _matches_media_type(value: Any, *, media_type: str, encoding: str | None) -> bool:
    return isinstance(value, str) and is_valid_content_media_type(value, media_type, encoding)


def _apply_number_bounds(
    chain: Chain, constraints: Mapping[str, Any], context: _EmissionContext
) -> Chain:
    if "min" in constraints:
        chain = context.call(
            chain, "min", constraints["min"], exclusive=bool(constraints.get("exclusive_min"))
        )
    if "max" in constraints:
        chain = context.call(
            chain, "max", constraints["max"], exclusive=bool(constraints.get("exclusive_max"))
        )
    if constraints.get("integer"):
        chain = context.call(chain, "integer")
    if "multiple_of" in constraints:
        chain = context.call(chain, "multiple_of", constraints["multiple_of"])
    return chain


def _apply_array_bounds(
    chain: Chain, constraints: Mapping[str, Any], context: _EmissionContext
) -> Chain:
    if "min_items" in constraints:
        chain = context.call(chain, "min_items", constraints["min_items"])
    if "max_items" in constraints:
        chain = context.call(chain, "max_items", constraints["max_items"])
    if constraints.get("unique_items"):
        chain = context.call(chain, "unique")
    return chain


def _apply_object_bounds(
    chain: Chain, constraints: Mapping[str, Any], context: _EmissionContext
) -> Chain:
    if "min_properties" in constraints:
        chain = context.call(chain, "min_properties", constraints["min_properties"])
    if "max_properties" in constraints:
        chain = context.call(chain, "max_properties", constraints["max_properties"])
    return chain


def _apply_array_sub_rules(
    chain: Chain, constraints: Mapping[str, Any], context: _EmissionContext
) -> Chain:
    items = constraints.get("items")
    if isinstance(items, list):
        branches = [_branch(item, context) for item in items]
        additional = _policy(constraints.get("additional_items", True), context)
        chain = context.call(chain, "tuple", branches, additional=additional)
    elif items is not None:
        chain = context.call(chain, "items", _branch(items, context))
    if "contains" in constraints:
        chain = context.call(chain, "contains", _branch(constraints["contains"], context))
    return chain


def _apply_object_sub_rules(
    chain: Chain, constraints: Mapping[str, Any], context: _EmissionContext
) -> Chain:
    if "property_names" in constraints:
        chain = context.call(
            chain, "property_names", _branch(constraints["property_names"], context)
        )
    if "additional_properties" in constraints:
        chain = context.call(
            chain,
            "additional_properties",
            _policy(constraints["additional_properties"], context),
        )
    if "pattern_properties" in constraints:
        branches = {
            pattern: _branch(member, context)
            for pattern, member in constraints["pattern_properties"].items()
        }
        chain = context.call(chain, "pattern_properties", branches)
    if "dependent_required" in constraints:
        chain = context.call(chain, "dependent_required", constraints["dependent_required"])
    return chain


def _policy(raw: Any, context: _EmissionContext) -> bool | Chain:
    return raw if isinstance(raw, bool) else _branch(raw, context)


def _branch(raw: Any, context: _EmissionContext) -> Chain:
    """Emit a sub-schema as an independent chain from the same builder.

    Declared members of an object branch have no chain method. They are
    checked by one trailing `custom(predicate)` together with the member
    keywords that depend on them.
    """
    root = context.record.root or RootSchema(document=raw)
    node = parse_schema(raw)
    if isinstance(node, Schema) and node.reference is not None:
        # References stay lazy so recursive definitions do not expand forever.
        record = RuleRecord(
            path=context.record.path,
            primary_type="any",
            constraints={"ref": node.reference},
            root=root,
        )
        return emit(record, context.builder, context.formats)

    record = translate_node(node, root, context.record.path)
    members = _member_schema(node)
    if not members:
        return emit(record, context.builder, context.formats)
    record = replace(
        record,
        constraints={
            key: value
            for key, value in record.constraints.items()
            if key not in _MEMBER_RELATIVE_KEYWORDS
        },
    )
    chain = emit(record, context.builder, context.formats)
    return context.call(chain, "custom", schema_predicate(members, root, context.formats))


def _member_schema(node: SchemaNode) -> dict[str, Any]:
    if not isinstance(node, Schema) or node.obj is None:
        return {}
    members = {keyword: node.raw[keyword] for keyword in _MEMBER_KEYWORDS if keyword in node.raw}
    if members:
        for keyword in _MEMBER_RELATIVE_KEYWORDS.values():
            if keyword in node.raw:
                members[keyword] = node.raw[keyword]
    return members

