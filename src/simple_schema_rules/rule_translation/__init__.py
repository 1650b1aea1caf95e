"""Rule translation domain exports."""

from .rule_records import RULE_TYPES, RuleRecord
from .schema_translator import extract_constraints, record_to_schema, translate, translate_node

__all__ = [
    "RULE_TYPES",
    "RuleRecord",
    "extract_constraints",
    "record_to_schema",
    "translate",
    "translate_node",
]
