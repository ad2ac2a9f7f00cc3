"""Per-unit install and build service."""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from sample_build_checker.build_strategies import (
    DEFAULT_STRATEGY_RULES,
    StrategyKind,
    StrategyRule,
    UnitInspection,
    select_strategy,
)
from sample_build_checker.command_execution import CommandResult, ProcessRunner
from sample_build_checker.configuration.runtime_settings import HarnessSettings
from sample_build_checker.unit_discovery import BuildUnit

from .unit_outcomes import BuildOutcome, FailureReason

logger = logging.getLogger(__name__)

Echo = Callable[[str], None]

UNIT_RULE = "-" * 40


class UnitBuildError(Exception):
    """Raised inside the unit boundary when one step of a unit build fails."""

    reason = FailureReason.UNEXPECTED_ERROR

    def __init__(
        self,
        message: str,
        *,
        strategy: StrategyKind | None = None,
        diagnostics: str | None = None,
    ) -> None:
        super().__init__(message)
        self.strategy = strategy
        self.diagnostics = diagnostics


class UnitInstallFailure(UnitBuildError):
    """Dependency installation for a unit exited non-zero."""

    reason = FailureReason.INSTALL_FAILED


class UnitBuildFailure(UnitBuildError):
    """The selected build or type-check command exited non-zero."""

    reason = FailureReason.BUILD_FAILED


def build_unit(
    unit: BuildUnit,
    *,
    runner: ProcessRunner,
    settings: HarnessSettings,
    echo: Echo,
    rules: tuple[StrategyRule, ...] = DEFAULT_STRATEGY_RULES,
) -> BuildOutcome:
    """Install and build one unit, returning exactly one outcome.

    Unit-level problems never propagate: failed commands and unexpected errors
    are folded into a failure outcome carrying the captured diagnostics.
    """
    echo(f"🚀 Building: {unit.path}")
    echo(UNIT_RULE)

    outcome = _attempt_unit_build(unit, runner=runner, settings=settings, echo=echo, rules=rules)

    if outcome.succeeded:
        echo("  ✅ SUCCESS")
    else:
        _echo_diagnostics(outcome, echo)
        echo("  ❌ FAILED")
    echo("")
    return outcome


def _attempt_unit_build(
    unit: BuildUnit,
    *,
    runner: ProcessRunner,
    settings: HarnessSettings,
    echo: Echo,
    rules: tuple[StrategyRule, ...],
) -> BuildOutcome:
    try:
        _install_dependencies(unit, runner=runner, settings=settings)
        return _apply_strategy(
            unit,
            UnitInspection(unit, settings),
            runner=runner,
            echo=echo,
            rules=rules,
        )
    except UnitBuildError as exc:
        return BuildOutcome.failure(
            unit,
            exc.reason,
            strategy=exc.strategy,
            diagnostics=exc.diagnostics,
            note=str(exc),
        )
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.debug("Unexpected error while building %s", unit.path, exc_info=True)
        return BuildOutcome.failure(
            unit,
            FailureReason.UNEXPECTED_ERROR,
            diagnostics=f"{type(exc).__name__}: {exc}",
            note="Unexpected error while building the unit",
        )


def _install_dependencies(
    unit: BuildUnit, *, runner: ProcessRunner, settings: HarnessSettings
) -> None:
    result = runner.run(settings.commands.install, unit.directory)
    if not result.succeeded:
        raise UnitInstallFailure(_failure_message(result), diagnostics=result.output)


def _apply_strategy(
    unit: BuildUnit,
    inspection: UnitInspection,
    *,
    runner: ProcessRunner,
    echo: Echo,
    rules: tuple[StrategyRule, ...],
) -> BuildOutcome:
    rule = select_strategy(inspection, rules)
    for announcement in rule.announcements(inspection):
        echo(f"  {announcement}")

    command = rule.command(inspection)
    if command is None:
        return BuildOutcome.success(unit, rule.kind, note="No typed source files found")

    result = runner.run(command, unit.directory)
    if not result.succeeded:
        raise UnitBuildFailure(
            _failure_message(result), strategy=rule.kind, diagnostics=result.output
        )
    return BuildOutcome.success(unit, rule.kind)


def _failure_message(result: CommandResult) -> str:
    return f"{shlex.join(result.command)} exited with code {result.exit_code}"


def _echo_diagnostics(outcome: BuildOutcome, echo: Echo) -> None:
    if outcome.note:
        echo(f"  {outcome.note}")
    if outcome.diagnostics:
        for line in outcome.diagnostics.rstrip().splitlines():
            echo(f"    {line}")
