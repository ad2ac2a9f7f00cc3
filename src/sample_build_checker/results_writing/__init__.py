"""Results writing domain exports."""

from .console_report import render_discovery, render_summary, summarize_outcomes
from .report_models import RunMetadata, RunSummary, UnitStatusEntry
from .run_report_writer import write_results_workbook

__all__ = [
    "RunMetadata",
    "RunSummary",
    "UnitStatusEntry",
    "render_discovery",
    "render_summary",
    "summarize_outcomes",
    "write_results_workbook",
]
