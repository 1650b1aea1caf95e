"""Schema document entities."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias


@dataclass(frozen=True)
class BooleanSchema:
    """The `true` (accept everything) and `false` (reject everything) schema forms."""

    accepts: bool

    @property
    def raw(self) -> bool:
        return self.accepts


@dataclass(frozen=True)
class StringConstraints:
    """Keywords applied only when the value is a string."""

    min_length: int | None = None
    max_length: int | None = None
    pattern: re.Pattern[str] | None = None
    format: str | None = None
    content_encoding: str | None = None
    content_media_type: str | None = None


@dataclass(frozen=True)
class NumberConstraints:
    """Keywords applied only when the value is a number.

    Legacy boolean exclusive flags are already folded into the exclusive bounds.
    """

    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: int | float | None = None
    exclusive_maximum: int | float | None = None
    multiple_of: int | float | None = None


@dataclass(frozen=True)
class ArrayConstraints:
    """Keywords applied only when the value is an array."""

    items: SchemaNode | None = None
    tuple_items: tuple[SchemaNode, ...] | None = None
    additional_items: SchemaNode | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False
    contains: SchemaNode | None = None


@dataclass(frozen=True)
class ObjectConstraints:  # pylint: disable=too-many-instance-attributes
    """Keywords applied only when the value is an object."""

    properties: Mapping[str, SchemaNode] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    pattern_properties: tuple[tuple[re.Pattern[str], SchemaNode], ...] = ()
    additional_properties: SchemaNode | None = None
    property_names: SchemaNode | None = None
    min_properties: int | None = None
    max_properties: int | None = None
    dependent_required: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    dependent_schemas: Mapping[str, SchemaNode] = field(default_factory=dict)


@dataclass(frozen=True)
class Composition:
    """Boolean combinators over sub-schemas."""

    all_of: tuple[SchemaNode, ...] | None = None
    any_of: tuple[SchemaNode, ...] | None = None
    one_of: tuple[SchemaNode, ...] | None = None
    not_: SchemaNode | None = None


@dataclass(frozen=True)
class Conditional:
    """`if`/`then`/`else` branch selection."""

    if_: SchemaNode
    then: SchemaNode | None = None
    else_: SchemaNode | None = None


@dataclass(frozen=True)
class Schema:  # pylint: disable=too-many-instance-attributes
    """Parsed schema node; every constraint group is optional."""

    raw: Mapping[str, Any]
    types: tuple[str, ...] | None = None
    has_const: bool = False
    const: Any = None
    enum: tuple[Any, ...] | None = None
    reference: str | None = None
    string: StringConstraints | None = None
    number: NumberConstraints | None = None
    array: ArrayConstraints | None = None
    obj: ObjectConstraints | None = None
    composition: Composition | None = None
    conditional: Conditional | None = None


SchemaNode: TypeAlias = Schema | BooleanSchema


@dataclass(frozen=True)
class RootSchema:
    """Top-level schema document that references are resolved against."""

    document: Mapping[str, Any] | bool

    @property
    def definitions(self) -> Mapping[str, Any]:
        """Addressable sub-schemas declared under `definitions` or `$defs`."""
        if not isinstance(self.document, Mapping):
            return {}
        definitions = self.document.get("definitions")
        if not isinstance(definitions, Mapping):
            definitions = self.document.get("$defs")
        return definitions if isinstance(definitions, Mapping) else {}
