"""Environment-driven construction of :class:`lib_llevel.Llevel`.

Purpose
-------
Let host applications configure the threshold and the level table through
environment variables, optionally seeded from the nearest ``.env`` file.

Contents
--------
* ``LEVEL_ENV_VAR`` / ``LEVELS_ENV_VAR`` / ``DOTENV_ENV_VAR`` names.
* :func:`enable_dotenv` - load ``.env`` once per process via python-dotenv.
* :func:`parse_levels` - parse ``name=rank`` comma-separated tables.
* :func:`from_environment` - build an :class:`~lib_llevel.Llevel`.

System Role
-----------
Edge-of-system configuration. The domain never reads the environment; only
this module does, and only when asked to.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

from dotenv import find_dotenv, load_dotenv

if TYPE_CHECKING:
    from .llevel import Llevel

LOGGER = logging.getLogger(__name__)

LEVEL_ENV_VAR = "LLEVEL_LEVEL"
LEVELS_ENV_VAR = "LLEVEL_LEVELS"
DOTENV_ENV_VAR = "LLEVEL_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}

_DOTENV_LOCK = threading.Lock()
_DOTENV_LOADED = False
_DOTENV_PATH: Path | None = None


def env_bool(name: str, default: bool) -> bool:
    """Return the boolean value of an environment variable with fallback.

    Examples
    --------
    >>> import os
    >>> _ = os.environ.pop('LLEVEL_EXAMPLE_BOOL', None)
    >>> env_bool('LLEVEL_EXAMPLE_BOOL', default=True)
    True
    >>> os.environ['LLEVEL_EXAMPLE_BOOL'] = 'off'
    >>> env_bool('LLEVEL_EXAMPLE_BOOL', default=True)
    False
    """
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def enable_dotenv(path: str | os.PathLike[str] | None = None) -> Path | None:
    """Load the nearest ``.env`` file into :data:`os.environ`.

    The search starts in the current working directory and walks upwards.
    Variables already present in the environment are never overridden. The
    file is loaded at most once per process; later calls return the path
    found by the first one.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, or ``None`` when none was found.
    """

    global _DOTENV_LOADED, _DOTENV_PATH

    with _DOTENV_LOCK:
        if _DOTENV_LOADED:
            return _DOTENV_PATH
        candidate = str(path) if path is not None else find_dotenv(usecwd=True)
        if candidate and Path(candidate).is_file():
            load_dotenv(candidate, override=False)
            _DOTENV_PATH = Path(candidate).resolve()
            LOGGER.debug("Loaded environment overrides from %s", _DOTENV_PATH)
        else:
            _DOTENV_PATH = None
        _DOTENV_LOADED = True
        return _DOTENV_PATH


def _reset_dotenv_state_for_testing() -> None:
    """Forget any previously loaded ``.env`` file."""

    global _DOTENV_LOADED, _DOTENV_PATH
    with _DOTENV_LOCK:
        _DOTENV_LOADED = False
        _DOTENV_PATH = None


def parse_levels(raw: str | None) -> dict[str, float]:
    """Convert ``name=rank`` comma-separated strings into a level table.

    Pairs without ``=``, with an empty name, or with a rank that is not a
    number are skipped. Integral ranks stay integers.

    Examples
    --------
    >>> parse_levels('off=-1, audit = 12, info=2')
    {'off': -1, 'audit': 12, 'info': 2}
    >>> parse_levels('loud=9.5,broken,quiet=x')
    {'loud': 9.5}
    >>> parse_levels(None)
    {}
    """
    if not raw:
        return {}
    result: dict[str, float] = {}
    for chunk in raw.split(","):
        if "=" not in chunk:
            continue
        name, value = chunk.split("=", 1)
        name = name.strip()
        value = value.strip()
        if not name or not value:
            continue
        try:
            result[name] = int(value)
        except ValueError:
            try:
                result[name] = float(value)
            except ValueError:
                continue
    return result


def from_environment(
    level: Any = None,
    levels: Mapping[str, Any] | None = None,
    *,
    use_dotenv: bool | None = None,
) -> "Llevel":
    """Build an :class:`~lib_llevel.Llevel` honouring environment overrides.

    ``LLEVEL_LEVEL`` replaces ``level`` and a parseable ``LLEVEL_LEVELS``
    replaces ``levels``. ``use_dotenv`` wins over ``LLEVEL_USE_DOTENV`` when
    deciding whether to load ``.env`` first.

    Examples
    --------
    >>> import os
    >>> os.environ['LLEVEL_LEVEL'] = 'warn'
    >>> from_environment(use_dotenv=False).level
    'warn'
    >>> _ = os.environ.pop('LLEVEL_LEVEL')
    """

    from .llevel import Llevel

    if use_dotenv is None:
        use_dotenv = env_bool(DOTENV_ENV_VAR, False)
    if use_dotenv:
        enable_dotenv()

    level = os.getenv(LEVEL_ENV_VAR, level)
    env_levels = parse_levels(os.getenv(LEVELS_ENV_VAR))
    if env_levels:
        levels = env_levels
    return Llevel(level, levels)


__all__ = [
    "DOTENV_ENV_VAR",
    "LEVELS_ENV_VAR",
    "LEVEL_ENV_VAR",
    "enable_dotenv",
    "env_bool",
    "from_environment",
    "parse_levels",
]
