"""Sample discovery and manifest inspection service."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator, Sequence
from pathlib import Path

from sample_build_checker.configuration import ConfigurationError

from .build_units import BuildUnit, PackageManifest

logger = logging.getLogger(__name__)


class NoUnitsFoundError(Exception):
    """Raised when the samples root holds no directory with a manifest."""


class ManifestError(Exception):
    """Raised when a unit manifest cannot be read."""


def discover_units(
    samples_root: Path,
    *,
    repository_root: Path,
    manifest_filename: str = "package.json",
    dependency_cache_dirname: str = "node_modules",
) -> tuple[BuildUnit, ...]:
    """Return every unit below ``samples_root`` in deterministic traversal order.

    Raises:
      ConfigurationError: If the samples root is missing or unreadable.
      NoUnitsFoundError: If no directory below the root carries a manifest.
    """
    root = samples_root.resolve()
    if not root.is_dir():
        raise ConfigurationError(f"Samples root not found: {samples_root}")
    if not os.access(root, os.R_OK | os.X_OK):
        raise ConfigurationError(f"Samples root is not readable: {samples_root}")

    label_base = _label_base(root, repository_root.resolve())
    units = tuple(
        BuildUnit(path=directory.relative_to(label_base).as_posix(), directory=directory)
        for directory in _walk_sorted(root, dependency_cache_dirname)
        if (directory / manifest_filename).is_file()
    )
    if not units:
        raise NoUnitsFoundError(f"No samples found below {samples_root}")
    logger.debug("Discovered %d units below %s", len(units), root)
    return units


def read_package_manifest(
    unit: BuildUnit, manifest_filename: str = "package.json"
) -> PackageManifest:
    """Parse the unit manifest and return its declared scripts."""
    manifest_path = unit.directory / manifest_filename
    try:
        parsed = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ManifestError(f"Failed to read manifest {manifest_path}: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ManifestError(f"Manifest root must be an object: {manifest_path}")

    scripts = parsed.get("scripts") or {}
    if not isinstance(scripts, dict):
        raise ManifestError(f"Manifest scripts must be an object: {manifest_path}")
    return PackageManifest(
        source_path=manifest_path,
        scripts={str(name): str(command) for name, command in scripts.items()},
    )


def find_typed_sources(
    directory: Path,
    *,
    suffixes: Sequence[str] = (".ts",),
    dependency_cache_dirname: str = "node_modules",
) -> tuple[str, ...]:
    """Return sorted paths, relative to ``directory``, of typed source files."""
    matches: list[str] = []
    for current in _walk_sorted(directory, dependency_cache_dirname):
        for entry in sorted(current.iterdir()):
            if entry.is_file() and entry.name.endswith(tuple(suffixes)):
                matches.append(entry.relative_to(directory).as_posix())
    return tuple(matches)


def _walk_sorted(root: Path, dependency_cache_dirname: str) -> Iterator[Path]:
    for current, dirnames, _filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name != dependency_cache_dirname)
        yield Path(current)


def _label_base(root: Path, repository_root: Path) -> Path:
    if root == repository_root or root.is_relative_to(repository_root):
        return repository_root
    return root.parent
