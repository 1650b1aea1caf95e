"""Rule record entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from simple_schema_rules.schema_documents import RootSchema

RULE_TYPES = ("string", "number", "boolean", "array", "object", "null", "any")


@dataclass(frozen=True)
class RuleRecord:  # pylint: disable=too-many-instance-attributes
    """Flattened, path-keyed rule for one field of a validated object.

    The empty path addresses the object itself. Array elements use `[*]`
    (`tags[*].name`). Constraint values that are sub-schemas are kept in their
    raw JSON form.
    """

    path: str
    primary_type: str
    secondary_types: tuple[str, ...] = ()
    nullable: bool = False
    constraints: Mapping[str, Any] = field(default_factory=dict)
    is_required: bool = False
    root: RootSchema | None = field(default=None, compare=False, repr=False)

    @property
    def is_root(self) -> bool:
        return not self.path

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable view of the record without its root."""
        return {
            "path": self.path,
            "primary_type": self.primary_type,
            "secondary_types": list(self.secondary_types),
            "nullable": self.nullable,
            "is_required": self.is_required,
            "constraints": dict(self.constraints),
        }
