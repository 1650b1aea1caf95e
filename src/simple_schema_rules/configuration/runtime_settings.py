"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from simple_schema_rules.schema_documents import compile_pattern

DEFAULT_MAX_DEPTH = 100
UNKNOWN_FORMAT_POLICIES = ("allow", "reject")


@dataclass(frozen=True)
class ValidationSettings:
    """Knobs shared by the direct validator and the error generator."""

    unknown_formats: str = "allow"
    max_depth: int = DEFAULT_MAX_DEPTH

    @property
    def reject_unknown_formats(self) -> bool:
        return self.unknown_formats == "reject"


@dataclass(frozen=True)
class FormatPatternConfig:
    """Custom format declared in configuration as a regular expression."""

    name: str
    pattern: str

    def as_predicate(self) -> Callable[[str], bool]:
        compiled = compile_pattern(self.pattern)
        return lambda value: compiled.search(value) is not None


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path | None
    validation: ValidationSettings = field(default_factory=ValidationSettings)
    formats: tuple[FormatPatternConfig, ...] = ()

    def custom_formats(self) -> dict[str, Callable[[str], bool]]:
        """Return configured formats as predicates keyed by format name."""
        return {entry.name: entry.as_predicate() for entry in self.formats}
