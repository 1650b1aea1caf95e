"""Format registry tests."""

from __future__ import annotations

import pytest
from simple_schema_rules.format_checks import FormatRegistry, validate_format


def test_builtin_formats_are_checked() -> None:
    registry = FormatRegistry()

    assert registry.check("email", "jane@example.com") is True
    assert registry.check("email", "jane") is False


def test_custom_formats_take_precedence_over_builtins() -> None:
    registry = FormatRegistry({"email": lambda value: value.endswith("@corp.example")})

    assert registry.check("email", "jane@corp.example") is True
    assert registry.check("email", "jane@example.com") is False
    assert registry.is_custom("email") is True


def test_unknown_formats_pass_by_default() -> None:
    registry = FormatRegistry()

    assert registry.is_known("credit-card") is False
    assert registry.check("credit-card", "anything") is True


def test_unknown_formats_fail_when_rejected() -> None:
    registry = FormatRegistry(reject_unknown=True)

    assert registry.check("credit-card", "anything") is False
    assert registry.check("ipv4", "10.0.0.1") is True


def test_non_callable_custom_format_is_rejected() -> None:
    with pytest.raises(TypeError, match="order-id"):
        FormatRegistry({"order-id": "^ORD-"})  # type: ignore[dict-item]


def test_supported_formats_lists_builtins_and_custom_names() -> None:
    registry = FormatRegistry({"order-id": lambda value: value.startswith("ORD-")})

    supported = registry.supported_formats()

    assert "order-id" in supported
    assert "date-time" in supported
    assert list(supported) == sorted(supported)


def test_validate_format_is_a_one_shot_check() -> None:
    assert validate_format("uuid", "123e4567-e89b-12d3-a456-426614174000") is True
    assert validate_format("order-id", "x", {"order-id": lambda value: value == "ORD-1"}) is False
    assert validate_format("mystery", "x", reject_unknown=True) is False
