"""Outcome of an importance decision."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ImportanceResult:
    """Answer to "should this entry be emitted".

    Attributes
    ----------
    important:
        ``True`` when the winning level reaches the minimum rank.
    level:
        Lower-cased level that took part in the decision, or ``None`` when no
        level could be resolved.
    """

    important: bool = False
    level: str | None = None

    def __bool__(self) -> bool:
        return self.important

    def as_callback_args(self) -> tuple[None, bool, str | None]:
        """Return the error-first argument triple handed to callbacks."""

        return None, self.important, self.level


NOT_IMPORTANT = ImportanceResult()


__all__ = ["ImportanceResult", "NOT_IMPORTANT"]
