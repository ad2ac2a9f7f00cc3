"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CommandSettings:
    """External tool invocations used while validating samples."""

    install: tuple[str, ...]
    build: tuple[str, ...]
    type_check: tuple[str, ...]
    lenient_type_check: tuple[str, ...]


@dataclass(frozen=True)
class ExecutionSettings:
    """Scheduling settings for one run."""

    parallelism: int
    timeout_seconds: int | None


@dataclass(frozen=True)
class HarnessSettings:  # pylint: disable=too-many-instance-attributes
    """Top-level settings aggregate."""

    samples_root: Path
    repository_root: Path
    manifest_filename: str
    dependency_cache_dirname: str
    build_script_name: str
    strict_config_filename: str
    typed_source_suffixes: tuple[str, ...]
    root_install: bool
    results_dir: Path | None
    commands: CommandSettings
    execution: ExecutionSettings
