"""Deferred callback delivery for the callback-style decision API.

Purpose
-------
Guarantee that callbacks handed to :meth:`lib_llevel.Llevel.important` only
run on a later cooperative turn, never while the caller is still executing.

Contents
--------
* :class:`DeferredDispatcher` - FIFO of callbacks waiting for the next turn.
* :func:`schedule` - route a callback to the running asyncio loop, or to the
  shared dispatcher when no loop is running.
* :func:`run_pending` - take a turn: run everything the shared dispatcher holds.
* :func:`get_dispatcher` - access the shared dispatcher.

System Role
-----------
Outermost layer of the package: the domain computes a result synchronously,
this adapter only decides *when* the consumer sees it. Without an event loop
the turn boundary is explicit: the host calls :func:`run_pending` where it
yields control, and interpreter shutdown takes a final turn.
"""

from __future__ import annotations

import asyncio
import atexit
import logging
import threading
from collections import deque
from collections.abc import Callable
from typing import Any

LOGGER = logging.getLogger(__name__)

_Job = tuple[Callable[..., Any], tuple[Any, ...]]


class DeferredDispatcher:
    """Hold submitted callbacks until :meth:`run_pending` is called.

    Callbacks run one at a time in submission order, on the thread that calls
    :meth:`run_pending`, and each one exactly once. Exceptions raised by a
    callback are logged and do not stop the remaining ones.

    Examples
    --------
    >>> seen = []
    >>> dispatcher = DeferredDispatcher()
    >>> dispatcher.submit(seen.append, "late")
    >>> seen, len(dispatcher)
    ([], 1)
    >>> dispatcher.run_pending()
    1
    >>> seen, len(dispatcher)
    (['late'], 0)
    """

    def __init__(self) -> None:
        self._pending: deque[_Job] = deque()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Return the number of callbacks waiting for a turn."""
        with self._lock:
            return len(self._pending)

    def submit(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue ``callback(*args)`` for the next turn."""

        with self._lock:
            self._pending.append((callback, args))

    def run_pending(self) -> int:
        """Run queued callbacks until the queue is empty; return how many ran.

        Callbacks submitted while draining run in the same turn, after the
        ones already queued.
        """

        count = 0
        while True:
            with self._lock:
                if not self._pending:
                    return count
                callback, args = self._pending.popleft()
            count += 1
            try:
                callback(*args)
            except Exception as exc:
                LOGGER.error("Deferred callback %r raised an exception; continuing", callback, exc_info=exc)


_DISPATCHER = DeferredDispatcher()
atexit.register(_DISPATCHER.run_pending)


def get_dispatcher() -> DeferredDispatcher:
    """Return the process-wide dispatcher used when no event loop is running."""

    return _DISPATCHER


def run_pending() -> int:
    """Deliver every callback scheduled outside an event loop.

    Call this where the host application yields control, e.g. once per
    iteration of its main loop. Returns the number of callbacks run.
    """

    return _DISPATCHER.run_pending()


def schedule(callback: Callable[..., Any], *args: Any) -> None:
    """Invoke ``callback(*args)`` on a later turn, never synchronously.

    Inside a running asyncio loop the call goes through ``loop.call_soon``;
    otherwise it waits in the shared :class:`DeferredDispatcher` until
    :func:`run_pending` is called or the interpreter exits.
    """

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        _DISPATCHER.submit(callback, *args)
    else:
        loop.call_soon(callback, *args)


__all__ = ["DeferredDispatcher", "get_dispatcher", "run_pending", "schedule"]
