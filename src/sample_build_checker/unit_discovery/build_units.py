"""Unit discovery domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class BuildUnit:
    """One independently buildable sample directory."""

    path: str
    directory: Path = field(compare=False)

    @property
    def name(self) -> str:
        return self.path


@dataclass(frozen=True)
class PackageManifest:
    """The parts of a unit manifest the harness cares about."""

    source_path: Path
    scripts: Mapping[str, str]

    def declares_script(self, script_name: str) -> bool:
        return script_name in self.scripts
