"""Direct validation exports."""

from .schema_evaluator import (
    EvaluationContext,
    SchemaRecursionLimitError,
    evaluate,
    is_multiple_of,
    prepare_evaluation,
    validate,
)
from .value_kinds import ValueKind, json_equal, kind_of

__all__ = [
    "EvaluationContext",
    "SchemaRecursionLimitError",
    "evaluate",
    "is_multiple_of",
    "prepare_evaluation",
    "validate",
    "ValueKind",
    "json_equal",
    "kind_of",
]
