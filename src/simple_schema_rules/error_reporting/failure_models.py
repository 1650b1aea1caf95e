"""Validation failure entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FailureCode(str, Enum):
    """Stable code per violated keyword."""

    TYPE_MISMATCH = "TYPE_MISMATCH"
    CONST = "CONST"
    ENUM = "ENUM"
    MIN_LENGTH = "MIN_LENGTH"
    MAX_LENGTH = "MAX_LENGTH"
    PATTERN = "PATTERN"
    FORMAT = "FORMAT"
    CONTENT_ENCODING = "CONTENT_ENCODING"
    CONTENT_MEDIA_TYPE = "CONTENT_MEDIA_TYPE"
    MINIMUM = "MINIMUM"
    MAXIMUM = "MAXIMUM"
    EXCLUSIVE_MINIMUM = "EXCLUSIVE_MINIMUM"
    EXCLUSIVE_MAXIMUM = "EXCLUSIVE_MAXIMUM"
    MULTIPLE_OF = "MULTIPLE_OF"
    MIN_ITEMS = "MIN_ITEMS"
    MAX_ITEMS = "MAX_ITEMS"
    UNIQUE_ITEMS = "UNIQUE_ITEMS"
    ADDITIONAL_ITEMS = "ADDITIONAL_ITEMS"
    CONTAINS = "CONTAINS"
    MIN_PROPERTIES = "MIN_PROPERTIES"
    MAX_PROPERTIES = "MAX_PROPERTIES"
    REQUIRED = "REQUIRED"
    ADDITIONAL_PROPERTIES = "ADDITIONAL_PROPERTIES"
    PROPERTY_NAMES = "PROPERTY_NAMES"
    DEPENDENCIES = "DEPENDENCIES"
    ALL_OF = "ALL_OF"
    ANY_OF = "ANY_OF"
    ONE_OF = "ONE_OF"
    NOT = "NOT"
    FALSE_SCHEMA = "FALSE_SCHEMA"
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"


@dataclass(frozen=True)
class ValidationFailure:
    """One failing keyword at one location of the validated value."""

    path: str
    code: FailureCode
    message: str
    value: Any = None
    constraint: Any = None

    def describe(self) -> str:
        """Render as `path: message`, using `<root>` for the empty path."""
        return f"{self.path or '<root>'}: {self.message}"
