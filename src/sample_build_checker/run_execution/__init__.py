"""Run execution domain exports."""

from .build_run_use_case import (
    RootInstallError,
    RunExecutionError,
    execute_sample_build_run,
    select_execution_mode,
)
from .run_contracts import RunOutcome, RunRequest

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RootInstallError",
    "RunExecutionError",
    "execute_sample_build_run",
    "select_execution_mode",
]
