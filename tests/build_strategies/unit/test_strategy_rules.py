"""Build strategy rule tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from sample_build_checker.build_strategies import (
    DEFAULT_STRATEGY_RULES,
    StrategyKind,
    UnitInspection,
    select_strategy,
)
from sample_build_checker.configuration import HarnessSettings, load_configuration
from sample_build_checker.unit_discovery import BuildUnit


def _settings(tmp_path: Path) -> HarnessSettings:
    return load_configuration(repository_root=tmp_path)


def _make_unit(
    tmp_path: Path,
    *,
    build_script: bool = False,
    tsconfig: bool = False,
    sources: tuple[str, ...] = (),
) -> BuildUnit:
    directory = tmp_path / "samples" / "unit"
    directory.mkdir(parents=True)
    scripts = {"build": "tsc"} if build_script else {"start": "node index.js"}
    (directory / "package.json").write_text(json.dumps({"scripts": scripts}), encoding="utf-8")
    if tsconfig:
        (directory / "tsconfig.json").write_text("{}", encoding="utf-8")
    for source in sources:
        source_path = directory / source
        source_path.parent.mkdir(parents=True, exist_ok=True)
        source_path.write_text("export {};", encoding="utf-8")
    return BuildUnit(path="samples/unit", directory=directory)


def test_rules_are_ordered_by_priority() -> None:
    assert [rule.kind for rule in DEFAULT_STRATEGY_RULES] == [
        StrategyKind.BUILD_SCRIPT,
        StrategyKind.STRICT_TYPE_CHECK,
        StrategyKind.LENIENT_TYPE_CHECK,
        StrategyKind.NO_TYPED_SOURCES,
    ]


def test_build_script_wins_over_strict_config_and_sources(tmp_path: Path) -> None:
    unit = _make_unit(tmp_path, build_script=True, tsconfig=True, sources=("index.ts",))
    inspection = UnitInspection(unit, _settings(tmp_path))

    rule = select_strategy(inspection)

    assert rule.kind == StrategyKind.BUILD_SCRIPT
    assert rule.command(inspection) == ("npm", "run", "build")
    assert rule.announcements(inspection) == ("📝 Running npm run build",)


def test_strict_config_wins_over_typed_sources(tmp_path: Path) -> None:
    unit = _make_unit(tmp_path, tsconfig=True, sources=("index.ts",))
    inspection = UnitInspection(unit, _settings(tmp_path))

    rule = select_strategy(inspection)

    assert rule.kind == StrategyKind.STRICT_TYPE_CHECK
    assert rule.command(inspection) == ("npx", "tsc", "--noEmit")
    assert rule.announcements(inspection) == ("🔧 Running TypeScript compiler",)


def test_lenient_check_covers_exactly_the_typed_sources(tmp_path: Path) -> None:
    unit = _make_unit(tmp_path, sources=("src/main.ts", "index.ts", "node_modules/x/y.ts"))
    inspection = UnitInspection(unit, _settings(tmp_path))

    rule = select_strategy(inspection)

    assert rule.kind == StrategyKind.LENIENT_TYPE_CHECK
    assert rule.command(inspection) == (
        "npx",
        "tsc",
        "--noEmit",
        "--skipLibCheck",
        "index.ts",
        "src/main.ts",
    )


def test_no_typed_sources_runs_nothing(tmp_path: Path) -> None:
    unit = _make_unit(tmp_path)
    inspection = UnitInspection(unit, _settings(tmp_path))

    rule = select_strategy(inspection)

    assert rule.kind == StrategyKind.NO_TYPED_SOURCES
    assert rule.command(inspection) is None
    assert rule.announcements(inspection) == (
        "🔍 Checking TypeScript syntax",
        "ℹ️ No TypeScript files found",
    )


def test_build_announcement_follows_configured_command(tmp_path: Path) -> None:
    config_path = tmp_path / "sample-build.yaml"
    config_path.write_text("commands:\n  build: pnpm build\n", encoding="utf-8")
    settings = load_configuration(config_path, repository_root=tmp_path)
    inspection = UnitInspection(_make_unit(tmp_path, build_script=True), settings)

    rule = select_strategy(inspection)

    assert rule.command(inspection) == ("pnpm", "build")
    assert rule.announcements(inspection) == ("📝 Running pnpm build",)


def test_select_strategy_raises_when_no_rule_matches(tmp_path: Path) -> None:
    inspection = UnitInspection(_make_unit(tmp_path), _settings(tmp_path))

    with pytest.raises(LookupError):
        select_strategy(inspection, rules=DEFAULT_STRATEGY_RULES[:1])
