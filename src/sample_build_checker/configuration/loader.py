"""Configuration loader service."""

from __future__ import annotations

import shlex
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import CommandSettings, ExecutionSettings, HarnessSettings

DEFAULT_CONFIG_FILENAME = "sample-build.yaml"
DEFAULT_SAMPLES_ROOT = "samples"

_DEFAULT_COMMANDS = {
    "install": ("npm", "ci"),
    "build": ("npm", "run", "build"),
    "type_check": ("npx", "tsc", "--noEmit"),
    "lenient_type_check": ("npx", "tsc", "--noEmit", "--skipLibCheck"),
}


class ConfigurationError(Exception):
    """Raised when the harness configuration or samples root is invalid."""


def load_configuration(
    config_path: Path | str | None = None,
    *,
    repository_root: Path | None = None,
) -> HarnessSettings:
    """Load harness settings, falling back to defaults for every missing key.

    Args:
      config_path: Optional YAML settings file. ``None`` means built-in defaults.
        Relative paths inside the file resolve against the file's directory.
      repository_root: Directory unit paths are reported relative to. Defaults to
        the current working directory.

    Raises:
      ConfigurationError: If the file is missing, unparsable or holds invalid values.
    """
    base_path = (repository_root or Path.cwd()).resolve()
    parsed: Mapping[str, Any] = {}
    file_base_path = base_path
    if config_path is not None:
        parsed = _read_settings_file(Path(config_path))
        file_base_path = Path(config_path).resolve().parent

    if "samples_root" in parsed:
        samples_root = _resolve_path(
            file_base_path, _require_non_empty_string(parsed["samples_root"], "samples_root")
        )
    else:
        samples_root = _resolve_path(base_path, DEFAULT_SAMPLES_ROOT)
    results_dir_raw = _optional_string(parsed.get("results_dir"), "results_dir")
    suffixes = _normalize_string_sequence(
        parsed.get("typed_source_suffixes", [".ts"]), "typed_source_suffixes"
    )
    if not suffixes:
        raise ConfigurationError("typed_source_suffixes must contain at least one suffix.")

    return HarnessSettings(
        samples_root=samples_root,
        repository_root=base_path,
        manifest_filename=_require_non_empty_string(
            parsed.get("manifest_filename", "package.json"), "manifest_filename"
        ),
        dependency_cache_dirname=_require_non_empty_string(
            parsed.get("dependency_cache_dirname", "node_modules"), "dependency_cache_dirname"
        ),
        build_script_name=_require_non_empty_string(
            parsed.get("build_script_name", "build"), "build_script_name"
        ),
        strict_config_filename=_require_non_empty_string(
            parsed.get("strict_config_filename", "tsconfig.json"), "strict_config_filename"
        ),
        typed_source_suffixes=suffixes,
        root_install=_require_bool(parsed.get("root_install", True), "root_install"),
        results_dir=_resolve_path(file_base_path, results_dir_raw) if results_dir_raw else None,
        commands=_parse_commands_section(parsed.get("commands")),
        execution=_parse_execution_section(parsed.get("execution")),
    )


def _read_settings_file(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")
    return parsed


def _parse_commands_section(value: Any) -> CommandSettings:
    section = _optional_mapping(value, "commands")
    unknown = sorted(set(section) - set(_DEFAULT_COMMANDS))
    if unknown:
        raise ConfigurationError(f"Unknown command keys: {', '.join(unknown)}")
    commands = {
        key: _normalize_command(section.get(key, default), f"commands.{key}")
        for key, default in _DEFAULT_COMMANDS.items()
    }
    return CommandSettings(**commands)


def _parse_execution_section(value: Any) -> ExecutionSettings:
    section = _optional_mapping(value, "execution")
    parallelism = _require_positive_int(section.get("parallelism", 1), "execution.parallelism")
    timeout_raw = section.get("timeout_seconds")
    timeout_seconds = (
        None
        if timeout_raw is None
        else _require_positive_int(timeout_raw, "execution.timeout_seconds")
    )
    return ExecutionSettings(parallelism=parallelism, timeout_seconds=timeout_seconds)


def _normalize_command(value: Any, field_name: str) -> tuple[str, ...]:
    if isinstance(value, str):
        parts = tuple(shlex.split(value))
    elif isinstance(value, Sequence):
        parts = _normalize_string_sequence(value, field_name)
    else:
        raise ConfigurationError(f"{field_name} must be a string or list of strings.")
    if not parts:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return parts


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
