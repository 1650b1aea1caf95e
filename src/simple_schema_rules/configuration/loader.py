"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from simple_schema_rules.schema_documents import SchemaError, compile_pattern

from .runtime_settings import (
    DEFAULT_MAX_DEPTH,
    UNKNOWN_FORMAT_POLICIES,
    Configuration,
    FormatPatternConfig,
    ValidationSettings,
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    validation = _parse_validation_section(parsed.get("validation"))
    formats = _parse_formats_section(parsed.get("formats"))

    return Configuration(path=path, validation=validation, formats=formats)


def _parse_validation_section(value: Any) -> ValidationSettings:
    section = _optional_mapping(value, "validation")
    unknown_formats = _require_non_empty_string(
        section.get("unknown_formats", "allow"), "validation.unknown_formats"
    ).lower()
    if unknown_formats not in UNKNOWN_FORMAT_POLICIES:
        raise ConfigurationError(
            "validation.unknown_formats must be one of: " + ", ".join(UNKNOWN_FORMAT_POLICIES)
        )
    max_depth = _require_positive_int(
        section.get("max_depth", DEFAULT_MAX_DEPTH), "validation.max_depth"
    )
    return ValidationSettings(unknown_formats=unknown_formats, max_depth=max_depth)


def _parse_formats_section(value: Any) -> tuple[FormatPatternConfig, ...]:
    section = _optional_mapping(value, "formats")
    formats: list[FormatPatternConfig] = []
    for name, definition in section.items():
        label = f"formats.{name}"
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("Format names must be non-empty strings.")
        entry = _require_mapping(definition, label)
        pattern = _require_non_empty_string(entry.get("pattern"), f"{label}.pattern")
        try:
            compile_pattern(pattern)
        except SchemaError as exc:
            raise ConfigurationError(f"{label}.pattern is invalid: {exc}") from exc
        formats.append(FormatPatternConfig(name=name.strip(), pattern=pattern))
    return tuple(formats)


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    return _require_mapping(value, section_name)


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
