"""Results workbook writer service."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter

from sample_build_checker.build_orchestration import BuildOutcome

from .report_models import RunMetadata, RunSummary

RESULTS_SHEET_NAME = "Results"
RUN_INFO_SHEET_NAME = "RunInfo"
RESULTS_COLUMNS = ("Unit", "Status", "Strategy", "Reason", "Note", "Diagnostics")

# Excel rejects cell values longer than this.
_MAX_CELL_LENGTH = 32767


def write_results_workbook(
    output_path: Path | str,
    summary: RunSummary,
    outcomes: Sequence[BuildOutcome],
    run_metadata: RunMetadata,
) -> Path:
    """Write a workbook with one row per unit plus a RunInfo sheet."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = RESULTS_SHEET_NAME
    _write_header(sheet)

    outcome_by_path = {outcome.unit.path: outcome for outcome in outcomes}
    for row, entry in enumerate(summary.entries, start=2):
        outcome = outcome_by_path[entry.unit.path]
        values = (
            entry.unit.path,
            entry.status.value,
            outcome.strategy.value if outcome.strategy else None,
            outcome.failure_reason.value if outcome.failure_reason else None,
            _sanitize(outcome.note),
            _sanitize(outcome.diagnostics),
        )
        for column, value in enumerate(values, start=1):
            sheet.cell(row=row, column=column, value=value)

    _write_run_info_sheet(workbook, summary, run_metadata)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output.resolve()


def _write_header(sheet) -> None:
    for column, label in enumerate(RESULTS_COLUMNS, start=1):
        sheet.cell(row=1, column=column, value=label)
        sheet.cell(row=1, column=column).style = "Headline 1"
        sheet.column_dimensions[get_column_letter(column)].width = 60 if column == 1 else 20
    sheet.freeze_panes = "A2"


def _write_run_info_sheet(workbook, summary: RunSummary, run_metadata: RunMetadata) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    entries = (
        ("run_start", run_metadata.run_start.isoformat()),
        ("samples_root", str(run_metadata.samples_root)),
        ("execution_mode", run_metadata.execution_mode),
        ("total", summary.total),
        ("successful", summary.successful),
        ("failed", summary.failed),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)


def _sanitize(text: str | None) -> str | None:
    if text is None:
        return None
    cleaned = ILLEGAL_CHARACTERS_RE.sub("", text)
    return cleaned[-_MAX_CELL_LENGTH:]
