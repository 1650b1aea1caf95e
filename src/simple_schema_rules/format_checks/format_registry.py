"""Format name to predicate registry."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from .builtin_formats import BUILTIN_FORMATS

_LOGGER = logging.getLogger("simple_schema_rules.formats")
_LOGGER.addHandler(logging.NullHandler())

FormatPredicate = Callable[[str], bool]


class FormatRegistry:
    """Looks up caller-supplied formats first, then the built-in ones.

    Unknown format names pass unless `reject_unknown` is set.
    """

    def __init__(
        self,
        custom_formats: Mapping[str, FormatPredicate] | None = None,
        *,
        reject_unknown: bool = False,
    ) -> None:
        custom = dict(custom_formats or {})
        for name, predicate in custom.items():
            if not callable(predicate):
                raise TypeError(f"Custom format '{name}' must be callable.")
        self._custom = custom
        self._reject_unknown = reject_unknown

    @property
    def custom_formats(self) -> Mapping[str, FormatPredicate]:
        return self._custom

    @property
    def reject_unknown(self) -> bool:
        return self._reject_unknown

    def check(self, format_name: str, value: str) -> bool:
        """Return True when `value` satisfies the named format."""
        predicate = self._custom.get(format_name) or BUILTIN_FORMATS.get(format_name)
        if predicate is None:
            _LOGGER.debug(
                "Unknown format %r (reject_unknown=%s)", format_name, self._reject_unknown
            )
            return not self._reject_unknown
        return bool(predicate(value))

    def is_known(self, format_name: str) -> bool:
        return format_name in self._custom or format_name in BUILTIN_FORMATS

    def is_custom(self, format_name: str) -> bool:
        return format_name in self._custom

    def supported_formats(self) -> tuple[str, ...]:
        return tuple(sorted(set(BUILTIN_FORMATS) | set(self._custom)))


def validate_format(
    format_name: str,
    value: str,
    custom_formats: Mapping[str, FormatPredicate] | None = None,
    *,
    reject_unknown: bool = False,
) -> bool:
    """One-shot format check without keeping a registry around."""
    return FormatRegistry(custom_formats, reject_unknown=reject_unknown).check(format_name, value)
