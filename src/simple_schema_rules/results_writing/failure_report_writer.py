"""Failure report workbook writer service."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .report_models import InstanceOutcome, OutcomeStatus, RunMetadata

FAILURES_SHEET_NAME = "Failures"
SCHEMA_SHEET_NAME = "Schema"
RUN_INFO_SHEET_NAME = "RunInfo"
FAILURE_COLUMNS = ("Instance", "Valid", "Path", "Code", "Message")

_COLUMN_WIDTHS = (30, 10, 30, 24, 60)


def write_failure_report(
    output_path: Path | str,
    schema_text: str,
    outcomes: Sequence[InstanceOutcome],
    run_metadata: RunMetadata,
) -> Path:
    """Write one workbook summarizing validation outcomes for many instances.

    Each failure gets its own row; a valid instance gets a single row with
    empty failure columns.
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = FAILURES_SHEET_NAME
    _write_failure_header(sheet)
    _write_failure_rows(sheet, outcomes)
    _write_schema_sheet(workbook, schema_text)
    _write_run_info_sheet(workbook, run_metadata, outcomes)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output


def _write_failure_header(sheet) -> None:
    for index, (label, width) in enumerate(zip(FAILURE_COLUMNS, _COLUMN_WIDTHS), start=1):
        sheet.cell(row=1, column=index, value=label)
        sheet.cell(row=1, column=index).style = "Headline 1"
        sheet.column_dimensions[get_column_letter(index)].width = width
    sheet.freeze_panes = "A2"


def _write_failure_rows(sheet, outcomes: Sequence[InstanceOutcome]) -> None:
    row = 2
    for outcome in outcomes:
        if not outcome.failures:
            sheet.cell(row=row, column=1, value=outcome.instance_name)
            sheet.cell(row=row, column=2, value=outcome.status.value)
            row += 1
            continue
        for failure in outcome.failures:
            values = (
                outcome.instance_name,
                outcome.status.value,
                failure.path or "<root>",
                failure.code.value,
                failure.message,
            )
            for column, value in enumerate(values, start=1):
                sheet.cell(row=row, column=column, value=value)
            row += 1


def _write_schema_sheet(workbook, schema_text: str) -> None:
    sheet = workbook.create_sheet(SCHEMA_SHEET_NAME)
    schema_hash = hashlib.sha256(schema_text.encode("utf-8")).hexdigest()
    entries = (
        ("schema_hash", schema_hash),
        ("schema_text", schema_text),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)


def _write_run_info_sheet(
    workbook, run_metadata: RunMetadata, outcomes: Sequence[InstanceOutcome]
) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    invalid = sum(1 for outcome in outcomes if outcome.status is OutcomeStatus.INVALID)
    entries: tuple[tuple[str, Any], ...] = (
        ("run_start", run_metadata.run_start.isoformat()),
        ("schema_path", str(run_metadata.schema_path)),
        ("output_path", str(run_metadata.output_path)),
        ("instances", len(outcomes)),
        ("valid", len(outcomes) - invalid),
        ("invalid", invalid),
        ("failures", sum(len(outcome.failures) for outcome in outcomes)),
        ("failure_codes", json.dumps(_count_codes(outcomes), sort_keys=True)),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)


def _count_codes(outcomes: Sequence[InstanceOutcome]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for outcome in outcomes:
        for failure in outcome.failures:
            counts[failure.code.value] = counts.get(failure.code.value, 0) + 1
    return counts
