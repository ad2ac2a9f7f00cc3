"""Build strategy domain exports."""

from .strategy_rules import (
    DEFAULT_STRATEGY_RULES,
    StrategyKind,
    StrategyRule,
    UnitInspection,
    select_strategy,
)

__all__ = [
    "DEFAULT_STRATEGY_RULES",
    "StrategyKind",
    "StrategyRule",
    "UnitInspection",
    "select_strategy",
]
