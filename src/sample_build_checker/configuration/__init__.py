"""Configuration domain exports."""

from .loader import (
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_SAMPLES_ROOT,
    ConfigurationError,
    load_configuration,
)
from .runtime_settings import CommandSettings, ExecutionSettings, HarnessSettings

__all__ = [
    "CommandSettings",
    "ExecutionSettings",
    "HarnessSettings",
    "ConfigurationError",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_SAMPLES_ROOT",
]
