"""Subprocess invocation for install, build and type-check commands."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND_EXIT_CODE = 127
TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True)
class CommandResult:
    """Exit status and combined output of one finished command."""

    command: tuple[str, ...]
    exit_code: int
    output: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ProcessRunner(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for command runners used by the orchestrator."""

    def run(self, command: tuple[str, ...], cwd: Path) -> CommandResult: ...


class SubprocessRunner:  # pylint: disable=too-few-public-methods
    """Runs commands with `subprocess`, folding spawn errors and timeouts into exit codes."""

    def __init__(self, *, timeout_seconds: int | None = None) -> None:
        self._timeout_seconds = timeout_seconds

    def run(self, command: tuple[str, ...], cwd: Path) -> CommandResult:
        command_text = shlex.join(command)
        logger.debug("Running %s in %s", command_text, cwd)
        try:
            completed = subprocess.run(
                list(command),
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self._timeout_seconds,
                check=False,
            )
        except FileNotFoundError:
            return self._finish(
                command, COMMAND_NOT_FOUND_EXIT_CODE, f"Command not found: {command_text}"
            )
        except subprocess.TimeoutExpired as exc:
            partial = _decode_partial_output(exc.output)
            message = f"Command timed out after {self._timeout_seconds}s: {command_text}"
            return self._finish(command, TIMEOUT_EXIT_CODE, f"{partial}{message}")
        except OSError as exc:
            return self._finish(
                command, COMMAND_NOT_FOUND_EXIT_CODE, f"Command failed to start: {exc}"
            )
        return self._finish(command, completed.returncode, completed.stdout or "")

    @staticmethod
    def _finish(command: tuple[str, ...], exit_code: int, output: str) -> CommandResult:
        logger.debug("%s exited with %d", shlex.join(command), exit_code)
        if output:
            logger.debug("Output of %s:\n%s", shlex.join(command), output)
        return CommandResult(command=command, exit_code=exit_code, output=output)


def _decode_partial_output(output: str | bytes | None) -> str:
    if not output:
        return ""
    text = output.decode("utf-8", errors="replace") if isinstance(output, bytes) else output
    return text if text.endswith("\n") else f"{text}\n"
