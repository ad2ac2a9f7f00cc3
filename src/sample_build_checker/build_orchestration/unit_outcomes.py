"""Build orchestration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sample_build_checker.build_strategies import StrategyKind
from sample_build_checker.unit_discovery import BuildUnit


class OutcomeStatus(str, Enum):
    """Terminal status of one unit in one run."""

    SUCCESS = "success"
    FAILURE = "failed"


class FailureReason(str, Enum):
    """Why a unit outcome is a failure."""

    INSTALL_FAILED = "install_failed"
    BUILD_FAILED = "build_failed"
    UNEXPECTED_ERROR = "unexpected_error"
    MISSING_RESULT = "missing_result"


@dataclass(frozen=True)
class BuildOutcome:
    """Result of attempting to build one unit."""

    unit: BuildUnit
    status: OutcomeStatus
    strategy: StrategyKind | None = None
    failure_reason: FailureReason | None = None
    diagnostics: str | None = None
    note: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @staticmethod
    def success(
        unit: BuildUnit, strategy: StrategyKind, *, note: str | None = None
    ) -> BuildOutcome:
        return BuildOutcome(
            unit=unit,
            status=OutcomeStatus.SUCCESS,
            strategy=strategy,
            note=note,
        )

    @staticmethod
    def failure(
        unit: BuildUnit,
        reason: FailureReason,
        *,
        strategy: StrategyKind | None = None,
        diagnostics: str | None = None,
        note: str | None = None,
    ) -> BuildOutcome:
        return BuildOutcome(
            unit=unit,
            status=OutcomeStatus.FAILURE,
            strategy=strategy,
            failure_reason=reason,
            diagnostics=diagnostics,
            note=note,
        )
