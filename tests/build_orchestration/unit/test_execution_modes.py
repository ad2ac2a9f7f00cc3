"""Tests for sequential and parallel scheduling."""

from __future__ import annotations

import threading
from pathlib import Path

from sample_build_checker.build_orchestration import (
    BuildOutcome,
    Echo,
    FailureReason,
    OutcomeStatus,
    ParallelExecution,
    SequentialExecution,
    artifact_path,
)
from sample_build_checker.build_strategies import StrategyKind
from sample_build_checker.unit_discovery import BuildUnit


def _units(tmp_path: Path, count: int) -> tuple[BuildUnit, ...]:
    return tuple(
        BuildUnit(path=f"samples/unit-{index}", directory=tmp_path / f"unit-{index}")
        for index in range(count)
    )


def _build_failing(failing_paths: set[str]):
    def build(unit: BuildUnit, echo: Echo) -> BuildOutcome:
        echo(f"start {unit.path}")
        echo(f"end {unit.path}")
        if unit.path in failing_paths:
            return BuildOutcome.failure(
                unit, FailureReason.BUILD_FAILED, strategy=StrategyKind.BUILD_SCRIPT
            )
        return BuildOutcome.success(unit, StrategyKind.BUILD_SCRIPT)

    return build


def test_sequential_execution_builds_every_unit_in_order(tmp_path: Path) -> None:
    units = _units(tmp_path, 3)
    lines: list[str] = []

    outcomes = SequentialExecution().execute(
        units, _build_failing({"samples/unit-1"}), lines.append
    )

    assert [outcome.unit for outcome in outcomes] == list(units)
    assert [outcome.status for outcome in outcomes] == [
        OutcomeStatus.SUCCESS,
        OutcomeStatus.FAILURE,
        OutcomeStatus.SUCCESS,
    ]
    assert lines[:2] == ["start samples/unit-0", "end samples/unit-0"]


def test_sequential_execution_records_artifacts_when_results_dir_is_set(tmp_path: Path) -> None:
    units = _units(tmp_path, 2)
    results_dir = tmp_path / "results"

    SequentialExecution(results_dir=results_dir).execute(
        units, _build_failing(set()), lambda _: None
    )

    assert all(artifact_path(results_dir, unit).is_file() for unit in units)


def test_parallel_execution_returns_outcomes_in_unit_order_despite_completion_order(
    tmp_path: Path,
) -> None:
    units = _units(tmp_path, 4)
    finished = {unit.path: threading.Event() for unit in units}
    completion_order: list[str] = []
    completion_lock = threading.Lock()

    def build(unit: BuildUnit, echo: Echo) -> BuildOutcome:
        index = units.index(unit)
        if index + 1 < len(units):
            finished[units[index + 1].path].wait(timeout=5)
        echo(f"start {unit.path}")
        echo(f"end {unit.path}")
        with completion_lock:
            completion_order.append(unit.path)
        finished[unit.path].set()
        if index == 2:
            return BuildOutcome.failure(unit, FailureReason.INSTALL_FAILED)
        return BuildOutcome.success(unit, StrategyKind.LENIENT_TYPE_CHECK)

    lines: list[str] = []
    outcomes = ParallelExecution(max_workers=4).execute(units, build, lines.append)

    assert completion_order == [unit.path for unit in reversed(units)]
    assert [outcome.unit.path for outcome in outcomes] == [unit.path for unit in units]
    assert [outcome.status for outcome in outcomes] == [
        OutcomeStatus.SUCCESS,
        OutcomeStatus.SUCCESS,
        OutcomeStatus.FAILURE,
        OutcomeStatus.SUCCESS,
    ]
    assert outcomes[2].failure_reason == FailureReason.INSTALL_FAILED
    assert outcomes[0].strategy == StrategyKind.LENIENT_TYPE_CHECK
    for start_index in range(0, len(lines), 2):
        path = lines[start_index].removeprefix("start ")
        assert lines[start_index + 1] == f"end {path}"


def test_parallel_and_sequential_modes_agree(tmp_path: Path) -> None:
    units = _units(tmp_path, 5)
    build = _build_failing({"samples/unit-0", "samples/unit-3"})

    sequential = SequentialExecution().execute(units, build, lambda _: None)
    parallel = ParallelExecution(max_workers=3).execute(units, build, lambda _: None)

    assert [(o.unit.path, o.status) for o in sequential] == [
        (o.unit.path, o.status) for o in parallel
    ]


def test_parallel_execution_writes_artifacts_to_results_dir(tmp_path: Path) -> None:
    units = _units(tmp_path, 2)
    results_dir = tmp_path / "results"

    ParallelExecution(max_workers=2, results_dir=results_dir).execute(
        units, _build_failing(set()), lambda _: None
    )

    assert sorted(path.name for path in results_dir.iterdir()) == sorted(
        artifact_path(results_dir, unit).name for unit in units
    )
    assert all(path.name.startswith("samples__unit-") for path in results_dir.iterdir())


def test_units_with_similar_flattened_paths_keep_separate_outcomes(tmp_path: Path) -> None:
    units = (
        BuildUnit(path="samples/a/b__c", directory=tmp_path / "a" / "b__c"),
        BuildUnit(path="samples/a__b/c", directory=tmp_path / "a__b" / "c"),
    )
    results_dir = tmp_path / "results"
    build = _build_failing(set())

    sequential = SequentialExecution().execute(units, build, lambda _: None)
    parallel = ParallelExecution(max_workers=2, results_dir=results_dir).execute(
        units, build, lambda _: None
    )

    assert [o.status for o in sequential] == [OutcomeStatus.SUCCESS, OutcomeStatus.SUCCESS]
    assert [o.status for o in parallel] == [OutcomeStatus.SUCCESS, OutcomeStatus.SUCCESS]
    assert len(list(results_dir.glob("*.json"))) == 2


def test_parallel_execution_reports_crashed_worker_as_failure(tmp_path: Path) -> None:
    units = _units(tmp_path, 2)

    def build(unit: BuildUnit, echo: Echo) -> BuildOutcome:
        if unit.path == "samples/unit-0":
            raise RuntimeError("worker crashed")
        return BuildOutcome.success(unit, StrategyKind.BUILD_SCRIPT)

    outcomes = ParallelExecution(max_workers=2).execute(units, build, lambda _: None)

    assert outcomes[0].status == OutcomeStatus.FAILURE
    assert outcomes[0].failure_reason == FailureReason.MISSING_RESULT
    assert outcomes[1].status == OutcomeStatus.SUCCESS
