"""Level-threshold façade used on a logging library's hot path.

Purpose
-------
Answer "is an entry at this level important enough to emit" for a configured
minimum level, and expose the primitives behind that answer.

Contents
--------
* :class:`Llevel` - owns the active level table and the configured level.

System Role
-----------
Composition point between the pure domain functions in
:mod:`lib_llevel.domain` and the deferred delivery adapter in
:mod:`lib_llevel.adapters.deferred`. Each operation reads the active table
once and works on that snapshot; replacing the table swaps in a new frozen
mapping, so a decision never observes a partial update.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping

from .adapters.deferred import schedule
from .domain.levels import (
    DEFAULT_LEVELS,
    LevelsInput,
    LevelTable,
    classify_levels,
    get_minimum_level,
    normalise_levels,
)
from .domain.ranking import (
    NOT_FOUND,
    compare_rank,
    level_from_array,
    resolve_rank,
    resolve_threshold,
)
from .domain.result import NOT_IMPORTANT, ImportanceResult

LOGGER = logging.getLogger(__name__)

ImportanceCallback = Callable[[None, bool, str | None], Any]

_ACTIVE_TABLE = object()


class Llevel:
    """Compare log levels against a minimum threshold.

    Parameters
    ----------
    level:
        Configured minimum level. Kept verbatim when its lower-cased form is
        in the table, otherwise replaced by the table's minimum level. A
        mapping passed here is used as the custom level table instead.
    levels:
        Custom level table. ``None`` or anything that is not a mapping
        selects :data:`~lib_llevel.domain.levels.DEFAULT_LEVELS`.

    Attributes
    ----------
    level:
        Plain attribute; consumers may reassign or delete it.
    levels:
        Active frozen table, or ``None`` once reset. Assigning ``None`` or
        deleting it makes the next resolution restore the default table.

    Examples
    --------
    >>> ll = Llevel("warn")
    >>> ll.important_sync("error", "warn"), ll.important_sync("info", "warn")
    (True, False)
    >>> ll.level_from_array(["info", "FATAL"])
    'fatal'
    >>> Llevel({"none": -1, "warning": 0}).level
    'warning'
    """

    def __init__(self, level: Any = None, levels: Any = None) -> None:
        if not isinstance(self, Llevel):
            raise TypeError("Llevel must be instantiated using Llevel(...)")

        if classify_levels(level) is LevelsInput.MAPPING:
            levels = level

        self._levels: LevelTable | None = None
        if classify_levels(levels) is LevelsInput.MAPPING:
            self.set_levels(levels)
        else:
            self._levels = DEFAULT_LEVELS

        table = self._table()
        if isinstance(level, str) and level.lower() in table:
            self.level: Any = level
        else:
            self.level = get_minimum_level(table)

    def __repr__(self) -> str:
        levels = dict(self._levels) if self._levels is not None else None
        return f"{type(self).__name__}(level={getattr(self, 'level', None)!r}, levels={levels!r})"

    @classmethod
    def from_environment(
        cls,
        level: Any = None,
        levels: Mapping[str, Any] | None = None,
        *,
        use_dotenv: bool | None = None,
    ) -> "Llevel":
        """Build an instance from ``LLEVEL_*`` environment variables.

        See :func:`lib_llevel.config.from_environment`.
        """

        from .config import from_environment

        return from_environment(level, levels, use_dotenv=use_dotenv)

    @property
    def levels(self) -> LevelTable | None:
        """Return the active level table, ``None`` when uninitialised."""

        return self._levels

    @levels.setter
    def levels(self, value: Any) -> None:
        if value is None:
            self._levels = None
            return
        self.set_levels(value)

    @levels.deleter
    def levels(self) -> None:
        self._levels = None

    def set_levels(self, levels: Any) -> None:
        """Replace the active table with a normalised copy of ``levels``.

        Anything that is not a mapping is ignored and the current table is
        kept. Entries missing from ``levels`` are dropped from the table.
        """

        table = normalise_levels(levels)
        if table is None:
            LOGGER.debug("Ignoring level table of type %s", type(levels).__name__)
            return
        self._levels = table
        LOGGER.debug("Installed level table with %d entries", len(table))

    def get_minimum_level(self, levels: Any = _ACTIVE_TABLE) -> str:
        """Return the lowest non-negative level of ``levels``.

        Without an argument the active table is scanned.
        """

        if levels is _ACTIVE_TABLE:
            levels = self._table()
        return get_minimum_level(levels)

    def resolve(self, level: Any, use_minimum_as_fallback: bool = False) -> float:
        """Return the rank of ``level``, or ``-1`` when it cannot be resolved."""

        return resolve_rank(self._table(), level, use_minimum_as_fallback)

    def level_from_array(self, levels: Any) -> str | None:
        """Return the highest-ranked level of ``levels`` in lower case."""

        return level_from_array(self._table(), levels)

    def compare(self, level: Any, minimum_rank: Any) -> float:
        """Return the rank of ``level`` if it reaches ``minimum_rank``, else ``-1``."""

        return compare_rank(self._table(), level, minimum_rank)

    def evaluate(self, level: Any, minimum_level: Any) -> ImportanceResult:
        """Decide importance against an explicit ``minimum_level``.

        ``level`` may be a single label or a list/tuple of candidate labels;
        the highest-ranked candidate takes part in the decision. An unknown
        ``minimum_level``, or one ranked ``-1`` such as ``off``, falls back to
        the table's minimum level.

        Examples
        --------
        >>> Llevel().evaluate(["Fatal", "info"], "warn")
        ImportanceResult(important=True, level='fatal')
        >>> Llevel().evaluate("trace", "warn")
        ImportanceResult(important=False, level='trace')
        """

        table = self._table()
        minimum_rank = resolve_threshold(table, minimum_level)
        if minimum_rank == NOT_FOUND:
            return NOT_IMPORTANT
        return self._decide(table, level, minimum_rank)

    def important_sync(self, level: Any, minimum_level: Any) -> bool:
        """Return ``True`` when ``level`` reaches ``minimum_level``."""

        return self.evaluate(level, minimum_level).important

    def important(
        self,
        level: Any,
        minimum_or_callback: Any = None,
        callback: ImportanceCallback | None = None,
    ) -> None:
        """Decide importance and hand the outcome to ``callback`` on a later turn.

        ``minimum_or_callback`` is either the minimum level or, when callable,
        the callback itself. Without an explicit minimum the configured
        :attr:`level` is used; that path does not fall back for disabling
        levels, so an instance configured at ``off`` rejects everything.

        The callback is called exactly once as ``callback(None, important,
        level)``, never before this method returns. The first argument is
        always ``None``. Inside a running event loop it runs on a later loop
        iteration; otherwise it waits for :func:`lib_llevel.run_pending` (or
        interpreter exit) and never runs alongside the caller.
        """

        if callable(minimum_or_callback):
            callback = minimum_or_callback
            minimum_or_callback = None

        result = self._evaluate_for(level, minimum_or_callback)
        if callable(callback):
            schedule(callback, *result.as_callback_args())

    async def important_async(self, level: Any, minimum_level: Any = None) -> ImportanceResult:
        """Awaitable form of :meth:`important` returning an :class:`ImportanceResult`.

        The decision is computed in full as soon as the coroutine starts; it
        then yields to the event loop once before returning it.
        """

        result = self._evaluate_for(level, minimum_level)
        await asyncio.sleep(0)
        return result

    def _evaluate_for(self, level: Any, minimum_level: Any) -> ImportanceResult:
        if minimum_level is not None:
            return self.evaluate(level, minimum_level)

        table = self._table()
        minimum_rank = resolve_rank(table, getattr(self, "level", None), use_minimum_as_fallback=True)
        if minimum_rank < 0:
            return NOT_IMPORTANT
        return self._decide(table, level, minimum_rank)

    @staticmethod
    def _decide(table: LevelTable, level: Any, minimum_rank: float) -> ImportanceResult:
        if isinstance(level, (list, tuple)):
            level = level_from_array(table, level)
        if resolve_rank(table, level) < 0:
            return NOT_IMPORTANT
        return ImportanceResult(
            important=compare_rank(table, level, minimum_rank) >= 0,
            level=level.lower(),
        )

    def _table(self) -> LevelTable:
        """Return the active table, restoring the defaults when it was reset."""
        table = self._levels
        if table is None:
            LOGGER.debug("Level table missing; restoring default levels")
            table = self._levels = DEFAULT_LEVELS
        return table


__all__ = ["ImportanceCallback", "Llevel"]
