"""Schema document exports."""

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
from .schema_parsing import (
    SCHEMA_TYPES,
    SchemaError,
    compile_pattern,
    load_schema_document,
    load_schema_file,
    parse_schema,
)

__all__ = [
    "ArrayConstraints",
    "BooleanSchema",
    "Composition",
    "Conditional",
    "NumberConstraints",
    "ObjectConstraints",
    "RootSchema",
    "Schema",
    "SchemaNode",
    "StringConstraints",
    "SCHEMA_TYPES",
    "SchemaError",
    "compile_pattern",
    "load_schema_document",
    "load_schema_file",
    "parse_schema",
]
