"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sample_build_checker.build_orchestration import BuildOutcome
from sample_build_checker.configuration.runtime_settings import HarnessSettings
from sample_build_checker.results_writing import RunSummary


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one run."""

    settings: HarnessSettings
    aggregate_only: bool = False
    report_output: Path | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    summary: RunSummary
    outcomes: tuple[BuildOutcome, ...]
    execution_mode: str
    report_path: Path | None = None

    @property
    def exit_code(self) -> int:
        return self.summary.exit_code
