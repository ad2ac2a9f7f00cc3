"""Tests for run execution domain entities."""

from __future__ import annotations

from pathlib import Path

from sample_build_checker.build_orchestration import BuildOutcome, FailureReason
from sample_build_checker.configuration import load_configuration
from sample_build_checker.results_writing import RunSummary, summarize_outcomes
from sample_build_checker.run_execution.run_contracts import RunOutcome, RunRequest
from sample_build_checker.unit_discovery import BuildUnit


def test_run_request_defaults_to_building_without_report(tmp_path: Path) -> None:
    request = RunRequest(settings=load_configuration(repository_root=tmp_path))

    assert request.aggregate_only is False
    assert request.report_output is None


def test_run_outcome_exit_code_follows_summary() -> None:
    unit = BuildUnit(path="samples/a", directory=Path("/repo/samples/a"))
    failed = BuildOutcome.failure(unit, FailureReason.BUILD_FAILED)

    outcome = RunOutcome(
        summary=summarize_outcomes([unit], [failed]),
        outcomes=(failed,),
        execution_mode="sequential",
    )

    assert outcome.exit_code == 1
    assert outcome.report_path is None


def test_empty_summary_is_green() -> None:
    summary = RunSummary(total=0, successful=0, failed=0, entries=())

    assert summary.exit_code == 0
