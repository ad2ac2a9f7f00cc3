"""Build orchestration domain exports."""

from .execution_modes import ExecutionMode, ParallelExecution, SequentialExecution, UnitBuilder
from .outcome_artifacts import artifact_path, read_outcome_artifacts, write_outcome_artifact
from .unit_build_service import (
    Echo,
    UnitBuildError,
    UnitBuildFailure,
    UnitInstallFailure,
    build_unit,
)
from .unit_outcomes import BuildOutcome, FailureReason, OutcomeStatus

__all__ = [
    "BuildOutcome",
    "FailureReason",
    "OutcomeStatus",
    "Echo",
    "UnitBuildError",
    "UnitBuildFailure",
    "UnitInstallFailure",
    "build_unit",
    "ExecutionMode",
    "ParallelExecution",
    "SequentialExecution",
    "UnitBuilder",
    "artifact_path",
    "read_outcome_artifacts",
    "write_outcome_artifact",
]
