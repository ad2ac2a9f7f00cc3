"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from sample_build_checker.build_orchestration import OutcomeStatus
from sample_build_checker.unit_discovery import BuildUnit


@dataclass(frozen=True)
class UnitStatusEntry:
    """One row of the detailed results list."""

    unit: BuildUnit
    status: OutcomeStatus


@dataclass(frozen=True)
class RunSummary:
    """Aggregate over every unit outcome of one run, in discovery order."""

    total: int
    successful: int
    failed: int
    entries: tuple[UnitStatusEntry, ...]

    @property
    def exit_code(self) -> int:
        return 0 if self.failed == 0 else 1


@dataclass(frozen=True)
class RunMetadata:
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    samples_root: Path
    execution_mode: str
