"""Sequential and worker-parallel scheduling of unit builds."""

from __future__ import annotations

import logging
import tempfile
import threading
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

from sample_build_checker.unit_discovery import BuildUnit

from .outcome_artifacts import artifact_path, read_outcome_artifacts, write_outcome_artifact
from .unit_build_service import Echo
from .unit_outcomes import BuildOutcome

logger = logging.getLogger(__name__)

UnitBuilder = Callable[[BuildUnit, Echo], BuildOutcome]


class ExecutionMode(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for strategies that schedule unit builds."""

    name: str

    def execute(
        self, units: Sequence[BuildUnit], build: UnitBuilder, echo: Echo
    ) -> tuple[BuildOutcome, ...]: ...


class SequentialExecution:  # pylint: disable=too-few-public-methods
    """Builds units one after another, streaming console lines as they happen."""

    name = "sequential"

    def __init__(self, *, results_dir: Path | None = None) -> None:
        self._results_dir = results_dir

    def execute(
        self, units: Sequence[BuildUnit], build: UnitBuilder, echo: Echo
    ) -> tuple[BuildOutcome, ...]:
        outcomes: list[BuildOutcome] = []
        for unit in units:
            outcome = build(unit, echo)
            if self._results_dir is not None:
                write_outcome_artifact(outcome, self._results_dir)
            outcomes.append(outcome)
        return tuple(outcomes)


class ParallelExecution:  # pylint: disable=too-few-public-methods
    """Builds units on a thread pool.

    Each worker buffers its console lines and flushes them as one block when
    its unit finishes. Outcomes are written to per-unit artifacts and the
    aggregate is read back from those artifacts in unit order, so completion
    order never leaks into the result.
    """

    name = "parallel"

    def __init__(self, *, max_workers: int, results_dir: Path | None = None) -> None:
        self._max_workers = max(1, max_workers)
        self._results_dir = results_dir

    def execute(
        self, units: Sequence[BuildUnit], build: UnitBuilder, echo: Echo
    ) -> tuple[BuildOutcome, ...]:
        console_lock = threading.Lock()
        with _artifact_directory(self._results_dir) as results_dir:
            executor = ThreadPoolExecutor(max_workers=self._max_workers)
            try:
                futures = [
                    executor.submit(
                        _build_and_record, unit, build, echo, console_lock, results_dir
                    )
                    for unit in units
                ]
                wait(futures)
            except KeyboardInterrupt:
                executor.shutdown(wait=False, cancel_futures=True)
                raise
            executor.shutdown(wait=True)
            return read_outcome_artifacts(units, results_dir)


def _build_and_record(
    unit: BuildUnit,
    build: UnitBuilder,
    echo: Echo,
    console_lock: threading.Lock,
    results_dir: Path,
) -> None:
    artifact_path(results_dir, unit).unlink(missing_ok=True)
    lines: list[str] = []
    outcome = build(unit, lines.append)
    try:
        write_outcome_artifact(outcome, results_dir)
    except OSError:
        logger.exception("Failed to record outcome for %s", unit.path)
    with console_lock:
        for line in lines:
            echo(line)


@contextmanager
def _artifact_directory(results_dir: Path | None) -> Iterator[Path]:
    if results_dir is not None:
        results_dir.mkdir(parents=True, exist_ok=True)
        yield results_dir
        return
    with tempfile.TemporaryDirectory(prefix="sample-build-") as temporary:
        yield Path(temporary)
