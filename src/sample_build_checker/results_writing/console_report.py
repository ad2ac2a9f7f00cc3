"""Console summary rendering service."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from sample_build_checker.build_orchestration import BuildOutcome, OutcomeStatus
from sample_build_checker.unit_discovery import BuildUnit

from .report_models import RunSummary, UnitStatusEntry

SUMMARY_RULE = "=" * 40


def summarize_outcomes(
    units: Sequence[BuildUnit], outcomes: Sequence[BuildOutcome]
) -> RunSummary:
    """Join outcomes back to their units by path and count them.

    Raises:
      ValueError: If any unit lacks an outcome, has more than one, or an outcome
        belongs to a unit that was never discovered.
    """
    outcome_by_path: dict[str, BuildOutcome] = {}
    for outcome in outcomes:
        if outcome.unit.path in outcome_by_path:
            raise ValueError(f"Duplicate outcome for unit {outcome.unit.path}")
        outcome_by_path[outcome.unit.path] = outcome

    unit_paths = [unit.path for unit in units]
    missing = [path for path in unit_paths if path not in outcome_by_path]
    if missing:
        raise ValueError(f"Units without outcome: {', '.join(missing)}")
    unknown = sorted(set(outcome_by_path) - set(unit_paths))
    if unknown:
        raise ValueError(f"Outcomes for undiscovered units: {', '.join(unknown)}")

    entries = tuple(
        UnitStatusEntry(unit=unit, status=outcome_by_path[unit.path].status) for unit in units
    )
    successful = sum(1 for entry in entries if entry.status == OutcomeStatus.SUCCESS)
    return RunSummary(
        total=len(entries),
        successful=successful,
        failed=len(entries) - successful,
        entries=entries,
    )


def render_discovery(units: Sequence[BuildUnit], echo: Callable[[str], None]) -> None:
    """Print the discovered unit list."""
    echo(f"📋 Found {len(units)} samples:")
    for unit in units:
        echo(f"  - {unit.path}")
    echo("")


def render_summary(summary: RunSummary, echo: Callable[[str], None]) -> None:
    """Print counts, the per-unit status list and the closing verdict line."""
    echo(SUMMARY_RULE)
    echo("📊 BUILD SUMMARY")
    echo(SUMMARY_RULE)
    echo(f"Total samples: {summary.total}")
    echo(f"Successful: ✅ {summary.successful}")
    echo(f"Failed: ❌ {summary.failed}")
    echo("")

    echo("📝 Detailed Results:")
    for entry in summary.entries:
        marker = "✅" if entry.status == OutcomeStatus.SUCCESS else "❌"
        echo(f"  {marker} {entry.unit.path}")

    echo("")
    if summary.failed:
        echo("⚠️ Some builds failed!")
    else:
        echo("🎉 All builds successful!")
