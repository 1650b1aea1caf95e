"""Contracts of the externally supplied chain-building collaborator."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

Predicate = Callable[[Any], bool]


class ChainCapabilityError(Exception):
    """Raised when a chain lacks a method needed to express a rule."""


class Chain(Protocol):
    """Chainable rule object returned by a builder entry point.

    Only the methods a record actually needs are looked up, so partial
    implementations work for schemas that stay within their capabilities.
    """

    def required(self) -> Chain: ...

    def nullable(self) -> Chain: ...

    def min(self, value: Any, *, exclusive: bool = False) -> Chain: ...

    def max(self, value: Any, *, exclusive: bool = False) -> Chain: ...

    def integer(self) -> Chain: ...

    def multiple_of(self, value: int | float) -> Chain: ...

    def min_items(self, count: int) -> Chain: ...

    def max_items(self, count: int) -> Chain: ...

    def unique(self) -> Chain: ...

    def min_properties(self, count: int) -> Chain: ...

    def max_properties(self, count: int) -> Chain: ...

    def pattern(self, regex: str) -> Chain: ...

    def email(self) -> Chain: ...

    def url(self) -> Chain: ...

    def uuid(self) -> Chain: ...

    def refine(self, predicate: Predicate) -> Chain: ...

    def content_encoding(self, encoding: str) -> Chain: ...

    def one_of(self, values: Sequence[Any]) -> Chain: ...

    def literal(self, value: Any) -> Chain: ...

    def tuple(self, branches: Sequence[Chain], *, additional: bool | Chain = True) -> Chain: ...

    def items(self, branch: Chain) -> Chain: ...

    def contains(self, branch: Chain) -> Chain: ...

    def property_names(self, branch: Chain) -> Chain: ...

    def additional_properties(self, policy: bool | Chain) -> Chain: ...

    def pattern_properties(self, branches: Mapping[str, Chain]) -> Chain: ...

    def dependent_required(self, dependencies: Mapping[str, Sequence[str]]) -> Chain: ...

    def custom(self, predicate: Predicate) -> Chain: ...


class ChainBuilder(Protocol):
    """Factory of fresh chains, one entry point per rule type."""

    def string(self) -> Chain: ...

    def number(self) -> Chain: ...

    def boolean(self) -> Chain: ...

    def array(self) -> Chain: ...

    def object(self) -> Chain: ...

    def any(self) -> Chain: ...

    def literal(self, value: Any) -> Chain: ...

    def union(self, branches: Sequence[Chain]) -> Chain: ...


class FieldBuilder(Protocol):
    """Object-level builder that collects per-path field definitions."""

    def field(self, path: str, definition: Callable[[ChainBuilder], Chain]) -> FieldBuilder: ...

    def strict(self) -> FieldBuilder: ...

    def required_if(self, path: str, condition: Predicate) -> FieldBuilder: ...

    def refine(self, predicate: Predicate) -> FieldBuilder: ...
