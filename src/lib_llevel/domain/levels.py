"""Level table model: defaults, input classification, and normalisation.

Purpose
-------
Own the mapping from level names to numeric ranks. Every table handed to the
rest of the package is lower-cased, filtered to finite numbers, and frozen so
callers can only replace it wholesale.

Contents
--------
* ``DEFAULT_LEVELS`` - immutable default table.
* :class:`LevelsInput` - closed classification of level-table inputs.
* :func:`classify_levels`, :func:`normalise_levels`, :func:`get_minimum_level`.

System Role
-----------
Pure domain helpers consumed by :mod:`lib_llevel.domain.ranking` and the
:class:`lib_llevel.llevel.Llevel` façade. No I/O, no shared mutable state.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from numbers import Real
from types import MappingProxyType
from typing import Any

LevelTable = Mapping[str, float]

FALLBACK_MINIMUM_LEVEL = "trace"

DEFAULT_LEVELS: LevelTable = MappingProxyType(
    {
        "off": -1,
        "fatal": 16,
        "error": 8,
        "warn": 4,
        "info": 2,
        "debug": 1,
        "trace": 0,
    }
)
# ``off`` carries a negative rank so it can never be chosen as the minimum.


class LevelsInput(Enum):
    """Shape of a value offered as a level table."""

    ABSENT = "absent"
    INVALID = "invalid"
    MAPPING = "mapping"


def classify_levels(candidate: Any) -> LevelsInput:
    """Return the :class:`LevelsInput` variant describing ``candidate``.

    Examples
    --------
    >>> classify_levels(None)
    <LevelsInput.ABSENT: 'absent'>
    >>> classify_levels([])
    <LevelsInput.INVALID: 'invalid'>
    >>> classify_levels({"info": 2})
    <LevelsInput.MAPPING: 'mapping'>
    """

    if candidate is None:
        return LevelsInput.ABSENT
    if isinstance(candidate, Mapping):
        return LevelsInput.MAPPING
    return LevelsInput.INVALID


def is_rank(value: Any) -> bool:
    """Return ``True`` when ``value`` is a finite real number usable as a rank.

    Booleans are rejected even though they subclass :class:`int`.
    """

    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def normalise_levels(candidate: Any) -> LevelTable | None:
    """Build a frozen table from ``candidate`` or return ``None`` when invalid.

    Keys are lower-cased; entries whose key is not a string or whose value is
    not a finite number are dropped. When two keys collapse onto the same
    lower-case name the one iterated last wins.

    Examples
    --------
    >>> dict(normalise_levels({"TRACE": 0, "trace": 1, "skip": "me"}))
    {'trace': 1}
    >>> normalise_levels(["info"]) is None
    True
    """

    if classify_levels(candidate) is not LevelsInput.MAPPING:
        return None

    table: dict[str, float] = {}
    for name, rank in candidate.items():
        if not isinstance(name, str) or not is_rank(rank):
            continue
        table[name.lower()] = rank
    return MappingProxyType(table)


def get_minimum_level(levels: Any) -> str:
    """Return the label with the smallest non-negative rank in ``levels``.

    Negative ranks mark disabling levels and are never selected. The first
    entry wins on ties. Anything that is not a mapping, or a mapping without
    a qualifying entry, yields ``"trace"``.

    Examples
    --------
    >>> get_minimum_level({"info": 0, "trace": 1})
    'info'
    >>> get_minimum_level({"none": -1})
    'trace'
    >>> get_minimum_level(None)
    'trace'
    """

    if classify_levels(levels) is not LevelsInput.MAPPING:
        return FALLBACK_MINIMUM_LEVEL

    minimum_level = FALLBACK_MINIMUM_LEVEL
    lowest = math.inf
    for name, rank in levels.items():
        if is_rank(rank) and 0 <= rank < lowest:
            lowest = rank
            minimum_level = name
    return minimum_level


__all__ = [
    "DEFAULT_LEVELS",
    "FALLBACK_MINIMUM_LEVEL",
    "LevelTable",
    "LevelsInput",
    "classify_levels",
    "get_minimum_level",
    "is_rank",
    "normalise_levels",
]
