"""Rank lookups over a single level-table snapshot.

Purpose
-------
Implement the resolver, the array reducer, and the threshold comparison as
pure functions. Each function receives the table explicitly so a caller can
read the active table once and run a whole decision against that snapshot.

Contents
--------
* ``NOT_FOUND`` sentinel rank.
* :func:`resolve_rank`, :func:`resolve_threshold`, :func:`level_from_array`,
  :func:`compare_rank`, :func:`coerce_minimum_rank`.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any

from .levels import LevelTable, get_minimum_level, is_rank

NOT_FOUND = -1


def resolve_rank(table: LevelTable, level: Any, use_minimum_as_fallback: bool = False) -> float:
    """Return the rank of ``level`` in ``table`` or :data:`NOT_FOUND`.

    Lookups are case-insensitive. With ``use_minimum_as_fallback`` an absent
    label is replaced by the table's minimum level before the lookup.

    Examples
    --------
    >>> from lib_llevel.domain.levels import DEFAULT_LEVELS
    >>> resolve_rank(DEFAULT_LEVELS, "WARN")
    4
    >>> resolve_rank(DEFAULT_LEVELS, "ysnp")
    -1
    >>> resolve_rank(DEFAULT_LEVELS, "ysnp", use_minimum_as_fallback=True)
    0
    >>> resolve_rank(DEFAULT_LEVELS, 4)
    -1
    """

    if not isinstance(level, str):
        return NOT_FOUND
    name = level.lower()
    if use_minimum_as_fallback and name not in table:
        name = get_minimum_level(table)
    rank = table.get(name)
    if not is_rank(rank):
        return NOT_FOUND
    return rank


def resolve_threshold(table: LevelTable, minimum_level: Any) -> float:
    """Resolve an explicitly supplied minimum level.

    Behaves like :func:`resolve_rank` with fallback enabled, and additionally
    falls back when the stored rank equals :data:`NOT_FOUND` because such a
    level (``off`` in the default table) cannot be told apart from an absent
    one. Ranks below ``-1`` are returned as-is.
    """

    rank = resolve_rank(table, minimum_level, use_minimum_as_fallback=True)
    if rank == NOT_FOUND and isinstance(minimum_level, str):
        rank = resolve_rank(table, get_minimum_level(table))
    return rank


def level_from_array(table: LevelTable, candidates: Any) -> str | None:
    """Return the lower-cased candidate with the highest rank.

    Only lists and tuples are accepted. Ties go to the later candidate and
    only ranks ``>= 0`` can win; unresolvable entries are skipped.

    Examples
    --------
    >>> from lib_llevel.domain.levels import DEFAULT_LEVELS
    >>> level_from_array(DEFAULT_LEVELS, ["fatal", "trace", "off"])
    'fatal'
    >>> level_from_array(DEFAULT_LEVELS, ["Trace", None])
    'trace'
    >>> level_from_array(DEFAULT_LEVELS, []) is None
    True
    """

    if not isinstance(candidates, (list, tuple)):
        return None

    top_level: str | None = None
    top_rank: float = 0
    for candidate in candidates:
        rank = resolve_rank(table, candidate)
        if rank >= top_rank:
            top_rank = rank
            top_level = candidate.lower()
    return top_level


def coerce_minimum_rank(value: Any) -> int:
    """Truncate ``value`` toward zero; anything non-numeric becomes ``0``.

    Examples
    --------
    >>> coerce_minimum_rank(3.9), coerce_minimum_rank(-2.5), coerce_minimum_rank("8")
    (3, -2, 8)
    >>> coerce_minimum_rank(None), coerce_minimum_rank("loud"), coerce_minimum_rank(float("nan"))
    (0, 0, 0)
    """

    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return 0
    if not isinstance(value, Real) or not math.isfinite(value):
        return 0
    return int(value)


def compare_rank(table: LevelTable, level: Any, minimum_rank: Any) -> float:
    """Return the rank of ``level`` when it reaches ``minimum_rank``, else ``-1``."""

    rank = resolve_rank(table, level)
    if rank < 0:
        return NOT_FOUND
    return rank if rank >= coerce_minimum_rank(minimum_rank) else NOT_FOUND


__all__ = [
    "NOT_FOUND",
    "coerce_minimum_rank",
    "compare_rank",
    "level_from_array",
    "resolve_rank",
    "resolve_threshold",
]
