"""Format check exports."""

from .builtin_formats import BUILTIN_FORMATS, is_uuid
from .format_registry import FormatPredicate, FormatRegistry, validate_format

__all__ = [
    "BUILTIN_FORMATS",
    "FormatPredicate",
    "FormatRegistry",
    "is_uuid",
    "validate_format",
]
