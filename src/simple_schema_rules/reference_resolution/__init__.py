"""Reference resolution exports."""

from .pointer_resolver import (
    SchemaReferenceError,
    UnresolvableReferenceError,
    UnsupportedReferenceError,
    resolve_all_references,
    resolve_reference,
    resolve_schema,
)

__all__ = [
    "SchemaReferenceError",
    "UnresolvableReferenceError",
    "UnsupportedReferenceError",
    "resolve_all_references",
    "resolve_reference",
    "resolve_schema",
]
