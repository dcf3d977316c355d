"""Public package surface for log-level threshold decisions.

``Llevel`` is the entry point; the remaining names expose the default table,
the result type, and the environment-driven constructor.
"""

from __future__ import annotations

from .adapters import run_pending
from .config import enable_dotenv, from_environment
from .domain import DEFAULT_LEVELS, NOT_FOUND, ImportanceResult, get_minimum_level
from .llevel import ImportanceCallback, Llevel

__all__ = [
    "DEFAULT_LEVELS",
    "ImportanceCallback",
    "ImportanceResult",
    "Llevel",
    "NOT_FOUND",
    "enable_dotenv",
    "from_environment",
    "get_minimum_level",
    "run_pending",
]
