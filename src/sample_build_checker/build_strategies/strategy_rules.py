"""Ordered build strategy rules.

Each rule pairs a predicate over a unit with the command it runs. Rules are
evaluated in priority order and the first matching rule is applied:

1. explicit build script declared in the manifest,
2. strict compiler configuration present (type-check only),
3. typed sources present (lenient type-check over exactly those files),
4. nothing to check, which counts as success.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import cached_property

from sample_build_checker.configuration.runtime_settings import HarnessSettings
from sample_build_checker.unit_discovery import (
    BuildUnit,
    PackageManifest,
    find_typed_sources,
    read_package_manifest,
)


class StrategyKind(str, Enum):
    """Build strategy that decided a unit outcome."""

    BUILD_SCRIPT = "build_script"
    STRICT_TYPE_CHECK = "strict_type_check"
    LENIENT_TYPE_CHECK = "lenient_type_check"
    NO_TYPED_SOURCES = "no_typed_sources"


class UnitInspection:
    """Lazily gathered facts about one unit's directory."""

    def __init__(self, unit: BuildUnit, settings: HarnessSettings) -> None:
        self.unit = unit
        self.settings = settings

    @cached_property
    def manifest(self) -> PackageManifest:
        return read_package_manifest(self.unit, self.settings.manifest_filename)

    @cached_property
    def has_strict_config(self) -> bool:
        return (self.unit.directory / self.settings.strict_config_filename).is_file()

    @cached_property
    def typed_sources(self) -> tuple[str, ...]:
        return find_typed_sources(
            self.unit.directory,
            suffixes=self.settings.typed_source_suffixes,
            dependency_cache_dirname=self.settings.dependency_cache_dirname,
        )


@dataclass(frozen=True)
class StrategyRule:
    """One predicate-to-command rule."""

    kind: StrategyKind
    applies: Callable[[UnitInspection], bool]
    command: Callable[[UnitInspection], tuple[str, ...] | None]
    announcements: Callable[[UnitInspection], tuple[str, ...]]


def _declares_build_script(inspection: UnitInspection) -> bool:
    return inspection.manifest.declares_script(inspection.settings.build_script_name)


def _build_script_command(inspection: UnitInspection) -> tuple[str, ...]:
    return inspection.settings.commands.build


def _build_script_announcements(inspection: UnitInspection) -> tuple[str, ...]:
    return (f"📝 Running {shlex.join(inspection.settings.commands.build)}",)


def _strict_type_check_command(inspection: UnitInspection) -> tuple[str, ...]:
    return inspection.settings.commands.type_check


def _has_typed_sources(inspection: UnitInspection) -> bool:
    return bool(inspection.typed_sources)


def _lenient_type_check_command(inspection: UnitInspection) -> tuple[str, ...]:
    return inspection.settings.commands.lenient_type_check + inspection.typed_sources


def _always(_inspection: UnitInspection) -> bool:
    return True


def _no_command(_inspection: UnitInspection) -> None:
    return None


DEFAULT_STRATEGY_RULES: tuple[StrategyRule, ...] = (
    StrategyRule(
        kind=StrategyKind.BUILD_SCRIPT,
        applies=_declares_build_script,
        command=_build_script_command,
        announcements=_build_script_announcements,
    ),
    StrategyRule(
        kind=StrategyKind.STRICT_TYPE_CHECK,
        applies=lambda inspection: inspection.has_strict_config,
        command=_strict_type_check_command,
        announcements=lambda _inspection: ("🔧 Running TypeScript compiler",),
    ),
    StrategyRule(
        kind=StrategyKind.LENIENT_TYPE_CHECK,
        applies=_has_typed_sources,
        command=_lenient_type_check_command,
        announcements=lambda _inspection: ("🔍 Checking TypeScript syntax",),
    ),
    StrategyRule(
        kind=StrategyKind.NO_TYPED_SOURCES,
        applies=_always,
        command=_no_command,
        announcements=lambda _inspection: (
            "🔍 Checking TypeScript syntax",
            "ℹ️ No TypeScript files found",
        ),
    ),
)


def select_strategy(
    inspection: UnitInspection,
    rules: tuple[StrategyRule, ...] = DEFAULT_STRATEGY_RULES,
) -> StrategyRule:
    """Return the first rule whose predicate matches the inspected unit."""
    for rule in rules:
        if rule.applies(inspection):
            return rule
    raise LookupError(f"No build strategy applies to {inspection.unit.path}")
