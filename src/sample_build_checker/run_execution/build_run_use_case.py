"""Run execution use-case service."""

from __future__ import annotations

import logging
import shlex
from datetime import UTC, datetime

from sample_build_checker.build_orchestration import (
    BuildOutcome,
    Echo,
    ExecutionMode,
    ParallelExecution,
    SequentialExecution,
    build_unit,
    read_outcome_artifacts,
)
from sample_build_checker.command_execution import ProcessRunner, SubprocessRunner
from sample_build_checker.configuration.runtime_settings import HarnessSettings
from sample_build_checker.results_writing import (
    RunMetadata,
    render_discovery,
    render_summary,
    summarize_outcomes,
    write_results_workbook,
)
from sample_build_checker.unit_discovery import BuildUnit, discover_units

from .run_contracts import RunOutcome, RunRequest

logger = logging.getLogger(__name__)

AGGREGATE_MODE_NAME = "aggregate"


class RunExecutionError(Exception):
    """Raised when a run cannot be started or completed."""


class RootInstallError(RunExecutionError):
    """Raised when the repository-root dependency install fails."""


def execute_sample_build_run(
    request: RunRequest,
    *,
    echo: Echo,
    runner: ProcessRunner | None = None,
) -> RunOutcome:
    """Discover, build and report every sample; return the run outcome.

    Unit failures are reported in the outcome. Only run-level problems raise.

    Raises:
      ConfigurationError: If the samples root is missing or unreadable.
      NoUnitsFoundError: If discovery finds no unit.
      RootInstallError: If installing repository-root dependencies fails.
      RunExecutionError: If aggregation is requested without a results directory.
    """
    settings = request.settings
    if request.aggregate_only and settings.results_dir is None:
        raise RunExecutionError("Aggregating recorded outcomes requires a results directory.")
    resolved_runner = runner or SubprocessRunner(
        timeout_seconds=settings.execution.timeout_seconds
    )
    run_start = datetime.now(UTC)

    echo("🔍 Discovering samples...")
    units = discover_units(
        settings.samples_root,
        repository_root=settings.repository_root,
        manifest_filename=settings.manifest_filename,
        dependency_cache_dirname=settings.dependency_cache_dirname,
    )
    render_discovery(units, echo)

    if request.aggregate_only and settings.results_dir is not None:
        mode_name = AGGREGATE_MODE_NAME
        outcomes = read_outcome_artifacts(units, settings.results_dir)
    else:
        _install_root_dependencies(settings, runner=resolved_runner, echo=echo)
        mode = select_execution_mode(settings)
        mode_name = mode.name
        outcomes = _build_units(units, mode, settings=settings, runner=resolved_runner, echo=echo)

    summary = summarize_outcomes(units, outcomes)
    render_summary(summary, echo)

    report_path = None
    if request.report_output is not None:
        report_path = write_results_workbook(
            request.report_output,
            summary,
            outcomes,
            RunMetadata(
                run_start=run_start,
                samples_root=settings.samples_root,
                execution_mode=mode_name,
            ),
        )
    return RunOutcome(
        summary=summary,
        outcomes=outcomes,
        execution_mode=mode_name,
        report_path=report_path,
    )


def select_execution_mode(settings: HarnessSettings) -> ExecutionMode:
    """Pick sequential or worker-parallel scheduling from the settings."""
    if settings.execution.parallelism > 1:
        return ParallelExecution(
            max_workers=settings.execution.parallelism,
            results_dir=settings.results_dir,
        )
    return SequentialExecution(results_dir=settings.results_dir)


def _install_root_dependencies(
    settings: HarnessSettings, *, runner: ProcessRunner, echo: Echo
) -> None:
    manifest = settings.repository_root / settings.manifest_filename
    if not settings.root_install or not manifest.is_file():
        logger.debug(
            "Skipping root install (enabled=%s, manifest=%s)", settings.root_install, manifest
        )
        return

    echo("📦 Installing root dependencies...")
    result = runner.run(settings.commands.install, settings.repository_root)
    if not result.succeeded:
        for line in result.output.rstrip().splitlines():
            echo(f"    {line}")
        raise RootInstallError(
            f"Root dependency install failed with exit code {result.exit_code}: "
            f"{shlex.join(result.command)}"
        )


def _build_units(
    units: tuple[BuildUnit, ...],
    mode: ExecutionMode,
    *,
    settings: HarnessSettings,
    runner: ProcessRunner,
    echo: Echo,
) -> tuple[BuildOutcome, ...]:
    echo("🔨 Building samples...")
    echo("")

    def build(unit: BuildUnit, unit_echo: Echo) -> BuildOutcome:
        return build_unit(unit, runner=runner, settings=settings, echo=unit_echo)

    return mode.execute(units, build, echo)
