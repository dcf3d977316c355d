from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Iterator

import pytest

from lib_llevel.adapters.deferred import DeferredDispatcher, get_dispatcher, run_pending, schedule


@pytest.fixture
def shared_dispatcher() -> Iterator[DeferredDispatcher]:
    shared = get_dispatcher()
    shared.run_pending()
    yield shared
    shared.run_pending()


def test_dispatcher_runs_nothing_at_submit_time() -> None:
    processed: list[str] = []
    dispatcher = DeferredDispatcher()

    dispatcher.submit(processed.append, "queued")

    assert processed == []
    assert len(dispatcher) == 1


def test_dispatcher_runs_callbacks_in_submission_order() -> None:
    processed: list[int] = []
    dispatcher = DeferredDispatcher()
    for index in range(5):
        dispatcher.submit(processed.append, index)

    assert dispatcher.run_pending() == 5
    assert processed == [0, 1, 2, 3, 4]


def test_dispatcher_runs_callbacks_on_the_draining_thread() -> None:
    seen: list[threading.Thread] = []
    dispatcher = DeferredDispatcher()
    dispatcher.submit(lambda: seen.append(threading.current_thread()))

    dispatcher.run_pending()

    assert seen == [threading.current_thread()]


def test_dispatcher_runs_each_callback_exactly_once() -> None:
    processed: list[str] = []
    dispatcher = DeferredDispatcher()
    dispatcher.submit(processed.append, "once")

    assert dispatcher.run_pending() == 1
    assert dispatcher.run_pending() == 0
    assert processed == ["once"]
    assert len(dispatcher) == 0


def test_dispatcher_drains_callbacks_queued_while_draining() -> None:
    processed: list[str] = []
    dispatcher = DeferredDispatcher()

    def first() -> None:
        processed.append("first")
        dispatcher.submit(processed.append, "nested")

    dispatcher.submit(first)
    dispatcher.submit(processed.append, "second")

    assert dispatcher.run_pending() == 3
    assert processed == ["first", "second", "nested"]


def test_dispatcher_survives_callback_exception(caplog: pytest.LogCaptureFixture) -> None:
    processed: list[str] = []
    calls: list[str] = []
    dispatcher = DeferredDispatcher()

    def explode() -> None:
        calls.append("explode")
        raise RuntimeError("callback boom")

    with caplog.at_level(logging.ERROR, logger="lib_llevel.adapters.deferred"):
        dispatcher.submit(explode)
        dispatcher.submit(processed.append, "after")
        assert dispatcher.run_pending() == 2

    assert calls == ["explode"]
    assert processed == ["after"]
    assert any("raised an exception" in record.getMessage() for record in caplog.records)
    assert dispatcher.run_pending() == 0
    assert calls == ["explode"]


def test_run_pending_without_work_returns_zero() -> None:
    assert DeferredDispatcher().run_pending() == 0


def test_schedule_without_loop_waits_for_run_pending(shared_dispatcher: DeferredDispatcher) -> None:
    processed: list[str] = []

    schedule(processed.append, "callback")
    processed.append("caller")

    assert processed == ["caller"]
    assert len(shared_dispatcher) == 1
    assert run_pending() == 1
    assert processed == ["caller", "callback"]


def test_schedule_inside_loop_defers_to_next_iteration(shared_dispatcher: DeferredDispatcher) -> None:
    order: list[str] = []

    async def scenario() -> None:
        schedule(order.append, "callback")
        order.append("caller")
        await asyncio.sleep(0)

    asyncio.run(scenario())

    assert order == ["caller", "callback"]
    assert len(shared_dispatcher) == 0
