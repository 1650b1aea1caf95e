"""Built-in format predicate tests."""

from __future__ import annotations

import pytest
from simple_schema_rules.format_checks import BUILTIN_FORMATS, is_uuid


@pytest.mark.parametrize(
    ("format_name", "value"),
    [
        ("email", "jane.doe+tag@example.co.uk"),
        ("uri", "https://example.com/path?q=1"),
        ("uri", "mailto:jane@example.com"),
        ("url", "http://localhost:8080"),
        ("uri-reference", "/relative/path"),
        ("uri-reference", "../up"),
        ("uuid", "123e4567-e89b-42d3-a456-426614174000"),
        ("date", "2024-02-29"),
        ("date-time", "2024-02-29T23:59:59.123Z"),
        ("date-time", "2024-02-29t08:00:00+05:30"),
        ("time", "08:30:00"),
        ("time", "08:30:00.5-02:00"),
        ("duration", "P1Y2M10DT2H30M"),
        ("duration", "PT0.5S"),
        ("duration", "P3W"),
        ("ipv4", "192.168.0.1"),
        ("ipv6", "2001:db8::1"),
        ("ipv6", "fe80::1%eth0"),
        ("hostname", "api.example.com"),
        ("hostname", "example.com."),
        ("json-pointer", "/a~1b/0"),
        ("json-pointer", ""),
        ("relative-json-pointer", "1/name"),
        ("relative-json-pointer", "0#"),
        ("iri", "https://例え.jp/パス"),
        ("iri-reference", "/パス"),
        ("uri-template", "/users/{id}/posts{?page}"),
        ("regex", "^[a-z]+$"),
    ],
)
def test_builtin_formats_accept_valid_values(format_name: str, value: str) -> None:
    assert BUILTIN_FORMATS[format_name](value) is True


@pytest.mark.parametrize(
    ("format_name", "value"),
    [
        ("email", "not-an-email"),
        ("email", "jane..doe@example.com"),
        ("uri", "example.com"),
        ("uri", "http://"),
        ("uri-reference", "has space"),
        ("uuid", "123e4567-e89b-62d3-a456-426614174000"),
        ("uuid", "not-a-uuid"),
        ("date", "2023-02-29"),
        ("date", "2024-1-01"),
        ("date-time", "2024-02-30T10:00:00Z"),
        ("date-time", "2024-02-01 10:00:00"),
        ("date-time", "2024-02-01T10:00:00+24:00"),
        ("time", "24:00:00"),
        ("duration", "P"),
        ("duration", "PT"),
        ("duration", "P1YT"),
        ("duration", "1Y"),
        ("ipv4", "256.0.0.1"),
        ("ipv6", "2001:db8:::1"),
        ("hostname", "-leading.example.com"),
        ("hostname", "a" * 64 + ".com"),
        ("hostname", "a" * 254),
        ("json-pointer", "no-leading-slash"),
        ("json-pointer", "/bad~2escape"),
        ("relative-json-pointer", "/absolute"),
        ("uri-template", "/users/{id"),
        ("uri-template", "/users/{{id}}"),
        ("regex", "(unclosed"),
    ],
)
def test_builtin_formats_reject_invalid_values(format_name: str, value: str) -> None:
    assert BUILTIN_FORMATS[format_name](value) is False


def test_uuid_can_be_pinned_to_a_version() -> None:
    version_four = "123e4567-e89b-42d3-a456-426614174000"

    assert is_uuid(version_four, version=4) is True
    assert is_uuid(version_four, version=1) is False
