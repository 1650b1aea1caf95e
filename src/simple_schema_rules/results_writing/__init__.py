"""Results writing domain exports."""

from .failure_report_writer import (
    FAILURE_COLUMNS,
    FAILURES_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    SCHEMA_SHEET_NAME,
    write_failure_report,
)
from .report_models import InstanceOutcome, OutcomeStatus, RunMetadata

__all__ = [
    "FAILURE_COLUMNS",
    "FAILURES_SHEET_NAME",
    "RUN_INFO_SHEET_NAME",
    "SCHEMA_SHEET_NAME",
    "InstanceOutcome",
    "OutcomeStatus",
    "RunMetadata",
    "write_failure_report",
]
