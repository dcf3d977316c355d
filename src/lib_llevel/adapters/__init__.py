"""Adapters handling delivery of decision results."""

from __future__ import annotations

from .deferred import DeferredDispatcher, get_dispatcher, run_pending, schedule

__all__ = ["DeferredDispatcher", "get_dispatcher", "run_pending", "schedule"]
