"""Error reporting domain exports."""

from .failure_collector import detailed_errors, normalize_target_path, specific_errors
from .failure_models import FailureCode, ValidationFailure

__all__ = [
    "FailureCode",
    "ValidationFailure",
    "detailed_errors",
    "normalize_target_path",
    "specific_errors",
]
