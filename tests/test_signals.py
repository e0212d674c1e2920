# tests/test_signals.py

from __future__ import annotations

import logging

import pytest

from taskdeck.services.signals import PREFERENCES_CHANGED, TASKS_CHANGED, SignalBus


def test_emit_fans_out_to_every_listener() -> None:
    bus = SignalBus()
    calls: list[str] = []
    bus.subscribe(TASKS_CHANGED, lambda: calls.append("a"))
    bus.subscribe(TASKS_CHANGED, lambda: calls.append("b"))
    bus.subscribe(PREFERENCES_CHANGED, lambda: calls.append("prefs"))

    assert bus.emit(TASKS_CHANGED) == 2
    assert sorted(calls) == ["a", "b"]


def test_emit_without_listeners() -> None:
    assert SignalBus().emit(TASKS_CHANGED) == 0


def test_failing_listener_is_logged_and_others_still_run(caplog: pytest.LogCaptureFixture) -> None:
    bus = SignalBus()
    calls: list[str] = []

    def broken() -> None:
        raise RuntimeError("boom")

    bus.subscribe(TASKS_CHANGED, broken)
    bus.subscribe(TASKS_CHANGED, lambda: calls.append("ok"))

    with caplog.at_level(logging.ERROR, logger="taskdeck.services.signals"):
        bus.emit(TASKS_CHANGED)

    assert calls == ["ok"]
    assert any(r.getMessage() == "signal.listener_failed" for r in caplog.records)


def test_unsubscribe_is_idempotent() -> None:
    bus = SignalBus()
    unsubscribe = bus.subscribe(TASKS_CHANGED, lambda: None)
    assert bus.listener_count(TASKS_CHANGED) == 1
    unsubscribe()
    unsubscribe()
    assert bus.listener_count(TASKS_CHANGED) == 0


def test_listener_may_unsubscribe_during_emit() -> None:
    bus = SignalBus()
    calls: list[int] = []
    holder: dict[str, object] = {}

    def once() -> None:
        calls.append(1)
        holder["unsub"]()  # type: ignore[operator]

    holder["unsub"] = bus.subscribe(TASKS_CHANGED, once)
    bus.emit(TASKS_CHANGED)
    bus.emit(TASKS_CHANGED)
    assert calls == [1]
