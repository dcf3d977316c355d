"""Domain model for level tables and importance decisions."""

from __future__ import annotations

from .levels import DEFAULT_LEVELS, LevelsInput, LevelTable, classify_levels, get_minimum_level, normalise_levels
from .ranking import NOT_FOUND, compare_rank, level_from_array, resolve_rank, resolve_threshold
from .result import NOT_IMPORTANT, ImportanceResult

__all__ = [
    "DEFAULT_LEVELS",
    "ImportanceResult",
    "LevelTable",
    "LevelsInput",
    "NOT_FOUND",
    "NOT_IMPORTANT",
    "classify_levels",
    "compare_rank",
    "get_minimum_level",
    "level_from_array",
    "normalise_levels",
    "resolve_rank",
    "resolve_threshold",
]
