"""Unit discovery domain exports."""

from .build_units import BuildUnit, PackageManifest
from .unit_scanner import (
    ManifestError,
    NoUnitsFoundError,
    discover_units,
    find_typed_sources,
    read_package_manifest,
)

__all__ = [
    "BuildUnit",
    "PackageManifest",
    "ManifestError",
    "NoUnitsFoundError",
    "discover_units",
    "find_typed_sources",
    "read_package_manifest",
]
