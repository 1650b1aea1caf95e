"""Resolution of in-document `$ref` pointers."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote

from jsonpointer import JsonPointer, JsonPointerException

from simple_schema_rules.schema_documents import RootSchema, SchemaError, SchemaNode, parse_schema

_LOGGER = logging.getLogger("simple_schema_rules.references")
_LOGGER.addHandler(logging.NullHandler())

_DEFINITION_ALIASES = {"definitions": "$defs", "$defs": "definitions"}
_DATA_KEYWORDS = frozenset({"const", "enum", "default", "examples"})
_SCHEMA_MAP_KEYWORDS = frozenset(
    {"properties", "patternProperties", "definitions", "$defs", "dependencies", "dependentSchemas"}
)


class SchemaReferenceError(SchemaError):
    """Base class for `$ref` failures."""


class UnresolvableReferenceError(SchemaReferenceError):
    """Raised when a pointer segment does not exist in the document."""


class UnsupportedReferenceError(SchemaReferenceError):
    """Raised for references outside the current document."""


def resolve_reference(reference: str, root: RootSchema | Mapping[str, Any] | bool) -> Any:
    """Return the raw schema node a `#/...` reference designates."""
    root_schema = root if isinstance(root, RootSchema) else RootSchema(document=root)
    if not reference.startswith("#"):
        raise UnsupportedReferenceError(f"External $ref not supported: {reference}")

    try:
        segments = JsonPointer(unquote(reference[1:])).parts
    except JsonPointerException as exc:
        raise UnresolvableReferenceError(f"Cannot resolve $ref {reference}: {exc}") from exc

    current: Any = root_schema.document
    for segment in segments:
        current = _step(current, segment, reference)
    _LOGGER.debug("Resolved %s through %d segment(s)", reference, len(segments))
    return current


def resolve_schema(reference: str, root: RootSchema | Mapping[str, Any] | bool) -> SchemaNode:
    """Resolve a reference and parse the target node."""
    return parse_schema(resolve_reference(reference, root))


def resolve_all_references(
    schema: Mapping[str, Any] | bool, root: RootSchema | Mapping[str, Any] | bool | None = None
) -> Any:
    """Return a copy of `schema` with every `$ref` replaced by its target.

    A reference met again while its own target is being expanded stays a
    `$ref`, so recursive definitions come back finite. Without an explicit
    root, the schema document is its own root.
    """
    if root is None:
        root_schema = RootSchema(document=schema)
    else:
        root_schema = root if isinstance(root, RootSchema) else RootSchema(document=root)
    return _inline(schema, root_schema, frozenset())


def _inline(node: Any, root: RootSchema, active: frozenset[str]) -> Any:
    if isinstance(node, list):
        return [_inline(member, root, active) for member in node]
    if not isinstance(node, Mapping):
        return node
    reference = node.get("$ref")
    if isinstance(reference, str):
        if reference in active:
            _LOGGER.debug("Keeping recursive $ref %s", reference)
            return dict(node)
        return _inline(resolve_reference(reference, root), root, active | {reference})
    inlined: dict[str, Any] = {}
    for key, value in node.items():
        if key in _DATA_KEYWORDS:
            inlined[key] = value
        elif key in _SCHEMA_MAP_KEYWORDS and isinstance(value, Mapping):
            inlined[key] = {name: _inline(member, root, active) for name, member in value.items()}
        else:
            inlined[key] = _inline(value, root, active)
    return inlined


def _step(current: Any, segment: str, reference: str) -> Any:
    if isinstance(current, Mapping):
        if segment in current:
            return current[segment]
        alias = _DEFINITION_ALIASES.get(segment)
        if alias is not None and alias in current:
            return current[alias]
    elif isinstance(current, list) and segment.isdigit():
        index = int(segment)
        if index < len(current):
            return current[index]
    raise UnresolvableReferenceError(
        f"Cannot resolve $ref {reference}: missing segment {segment!r}"
    )
