"""Command execution domain exports."""

from .process_runner import (
    COMMAND_NOT_FOUND_EXIT_CODE,
    TIMEOUT_EXIT_CODE,
    CommandResult,
    ProcessRunner,
    SubprocessRunner,
)

__all__ = [
    "COMMAND_NOT_FOUND_EXIT_CODE",
    "TIMEOUT_EXIT_CODE",
    "CommandResult",
    "ProcessRunner",
    "SubprocessRunner",
]
