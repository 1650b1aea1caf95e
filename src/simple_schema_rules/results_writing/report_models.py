"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from simple_schema_rules.error_reporting import ValidationFailure


class OutcomeStatus(str, Enum):
    """Rendered status in the Valid column."""

    VALID = "VALID"
    INVALID = "INVALID"


@dataclass(frozen=True)
class InstanceOutcome:
    """Failures collected for one validated instance document."""

    instance_name: str
    failures: tuple[ValidationFailure, ...]

    @property
    def status(self) -> OutcomeStatus:
        return OutcomeStatus.INVALID if self.failures else OutcomeStatus.VALID


@dataclass(frozen=True)
class RunMetadata:
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    schema_path: Path
    output_path: Path
