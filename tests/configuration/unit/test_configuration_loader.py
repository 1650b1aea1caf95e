"""Configuration loader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from simple_schema_rules.configuration import ConfigurationError, load_configuration


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_loads_yaml_configuration(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "config.yaml",
        """
validation:
  unknown_formats: REJECT
  max_depth: 25
formats:
  order-number:
    pattern: "^ORD-[0-9]{3}$"
""",
    )

    configuration = load_configuration(config_path)

    assert configuration.path == config_path
    assert configuration.validation.unknown_formats == "reject"
    assert configuration.validation.reject_unknown_formats is True
    assert configuration.validation.max_depth == 25
    custom_formats = configuration.custom_formats()
    assert set(custom_formats) == {"order-number"}
    assert custom_formats["order-number"]("ORD-123") is True
    assert custom_formats["order-number"]("ORD-12") is False


def test_empty_configuration_uses_defaults(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "config.yaml", "")

    configuration = load_configuration(config_path)

    assert configuration.validation.unknown_formats == "allow"
    assert configuration.validation.max_depth == 100
    assert configuration.formats == ()


def test_loads_json_configuration(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "config.json",
        json.dumps({"formats": {"sku": {"pattern": "^[A-Z]{3}$"}}}),
    )

    configuration = load_configuration(config_path)

    assert configuration.custom_formats()["sku"]("ABC") is True


def test_errors_when_configuration_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        load_configuration(tmp_path / "missing.yaml")


def test_errors_when_configuration_root_is_not_mapping(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "config.yaml", "[]")

    with pytest.raises(ConfigurationError, match="Configuration root must be a mapping"):
        load_configuration(config_path)


@pytest.mark.parametrize(
    ("contents", "message"),
    [
        ("validation: []", "'validation' must be a mapping"),
        ("validation:\n  unknown_formats: maybe", "must be one of: allow, reject"),
        ("validation:\n  unknown_formats: 3", "validation.unknown_formats must be a string"),
        ("validation:\n  max_depth: 0", "validation.max_depth must be greater than zero"),
        ("validation:\n  max_depth: true", "validation.max_depth must be an integer"),
        ("formats:\n  sku: '^A'", "'formats.sku' must be a mapping"),
        ("formats:\n  sku: {}", "formats.sku.pattern must be a string"),
        ("formats:\n  sku:\n    pattern: ' '", "formats.sku.pattern must not be empty"),
        ("formats:\n  sku:\n    pattern: '('", "formats.sku.pattern is invalid"),
    ],
)
def test_errors_when_sections_are_invalid(tmp_path: Path, contents: str, message: str) -> None:
    config_path = _write_file(tmp_path / "config.yaml", contents)

    with pytest.raises(ConfigurationError, match=message):
        load_configuration(config_path)
