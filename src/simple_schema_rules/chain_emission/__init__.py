"""Chain emission domain exports."""

from .chain_contracts import Chain, ChainBuilder, ChainCapabilityError, FieldBuilder, Predicate
from .rule_emitter import emit, register_rules, schema_predicate

__all__ = [
    "Chain",
    "ChainBuilder",
    "ChainCapabilityError",
    "FieldBuilder",
    "Predicate",
    "emit",
    "register_rules",
    "schema_predicate",
]
