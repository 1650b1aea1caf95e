"""Built-in string format predicates."""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Callable, Mapping
from datetime import date, datetime
from urllib.parse import urlsplit

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_URI_PATTERN = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]*):(\S+)$")
_SCHEME_PREFIX_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-([1-5])[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_TIME_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})?$"
)
_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})?$")
_DURATION_PATTERN = re.compile(
    r"^P(?!$)(\d+Y)?(\d+M)?(\d+W)?(\d+D)?(T(?=\d)(\d+H)?(\d+M)?(\d+(?:\.\d+)?S)?)?$"
)
_HOSTNAME_LABEL_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?$")
_JSON_POINTER_PATTERN = re.compile(r"^(?:/(?:[^/~]|~[01])*)*$")
_RELATIVE_JSON_POINTER_PATTERN = re.compile(r"^(?:0|[1-9][0-9]*)(?:#|(?:/(?:[^/~]|~[01])*)*)$")
_IRI_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:\S*$")
_IRI_REFERENCE_PATTERN = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:\S*|/\S*|[^\s:/]+)$")
_URI_TEMPLATE_PATTERN = re.compile(r"^[^{}]*(?:\{[^{}]+\}[^{}]*)*$")


def is_email(value: str) -> bool:
    if ".." in value:
        return False
    return _EMAIL_PATTERN.fullmatch(value) is not None


def is_uri(value: str) -> bool:
    match = _URI_PATTERN.fullmatch(value)
    if match is None:
        return False
    if match.group(2).startswith("//"):
        try:
            return bool(urlsplit(value).netloc)
        except ValueError:
            return False
    return True


def is_uri_reference(value: str) -> bool:
    if is_uri(value):
        return True
    if any(character.isspace() for character in value):
        return False
    if ":" in value and _SCHEME_PREFIX_PATTERN.match(value) is None:
        return False
    return value.startswith("/") or ":" not in value


def is_uuid(value: str, version: int | None = None) -> bool:
    """Return True for RFC 4122 UUIDs, optionally pinned to one version."""
    match = _UUID_PATTERN.fullmatch(value)
    if match is None:
        return False
    return version is None or int(match.group(1)) == version


def is_date(value: str) -> bool:
    if _DATE_PATTERN.fullmatch(value) is None:
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_date_time(value: str) -> bool:
    match = _DATE_TIME_PATTERN.fullmatch(value)
    if match is None:
        return False
    year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
    try:
        datetime(year, month, day, hour, minute, second)
    except ValueError:
        return False
    return _is_valid_offset(match.group(8))


def is_time(value: str) -> bool:
    match = _TIME_PATTERN.fullmatch(value)
    if match is None:
        return False
    hour, minute, second = (int(part) for part in match.groups()[:3])
    if hour > 23 or minute > 59 or second > 59:
        return False
    return _is_valid_offset(match.group(5))


def is_duration(value: str) -> bool:
    return _DURATION_PATTERN.fullmatch(value) is not None


def is_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def is_ipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def is_hostname(value: str) -> bool:
    if not value or len(value) > 253:
        return False
    labels = value[:-1].split(".") if value.endswith(".") else value.split(".")
    return all(_HOSTNAME_LABEL_PATTERN.fullmatch(label) for label in labels)


def is_json_pointer(value: str) -> bool:
    return _JSON_POINTER_PATTERN.fullmatch(value) is not None


def is_relative_json_pointer(value: str) -> bool:
    return _RELATIVE_JSON_POINTER_PATTERN.fullmatch(value) is not None


def is_iri(value: str) -> bool:
    return _IRI_PATTERN.fullmatch(value) is not None


def is_iri_reference(value: str) -> bool:
    return _IRI_REFERENCE_PATTERN.fullmatch(value) is not None


def is_uri_template(value: str) -> bool:
    return _URI_TEMPLATE_PATTERN.fullmatch(value) is not None


def is_regex(value: str) -> bool:
    try:
        re.compile(value)
    except re.error:
        return False
    return True


def _is_valid_offset(offset: str | None) -> bool:
    if offset is None or offset in {"Z", "z"}:
        return True
    hours, minutes = int(offset[1:3]), int(offset[4:6])
    return hours <= 23 and minutes <= 59


BUILTIN_FORMATS: Mapping[str, Callable[[str], bool]] = {
    "email": is_email,
    "uri": is_uri,
    "url": is_uri,
    "uri-reference": is_uri_reference,
    "uuid": is_uuid,
    "date": is_date,
    "date-time": is_date_time,
    "time": is_time,
    "duration": is_duration,
    "ipv4": is_ipv4,
    "ipv6": is_ipv6,
    "hostname": is_hostname,
    "json-pointer": is_json_pointer,
    "relative-json-pointer": is_relative_json_pointer,
    "iri": is_iri,
    "iri-reference": is_iri_reference,
    "uri-template": is_uri_template,
    "regex": is_regex,
}
