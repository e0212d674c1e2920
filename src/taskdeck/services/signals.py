"""In-process publish/subscribe channel for "something changed" signals."""

from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, Dict

logger = logging.getLogger(__name__)

TASKS_CHANGED = "tasksUpdated"
PREFERENCES_CHANGED = "preferencesUpdated"

Listener = Callable[[], None]


class SignalBus:
    """
    Fan-out of payload-free signals to any number of listeners.

    Listeners re-read whatever store they care about; the bus carries only
    the signal name. No ordering between listeners is promised.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, Dict[int, Listener]] = {}
        self._next_id = 1
        self._lock = RLock()

    def subscribe(self, signal: str, listener: Listener) -> Callable[[], None]:
        with self._lock:
            listener_id = self._next_id
            self._next_id += 1
            self._listeners.setdefault(signal, {})[listener_id] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.get(signal, {}).pop(listener_id, None)

        return unsubscribe

    def emit(self, signal: str) -> int:
        with self._lock:
            listeners = list(self._listeners.get(signal, {}).values())

        for listener in listeners:
            try:
                listener()
            except Exception:
                # one broken view must not block the others or the caller
                logger.exception("signal.listener_failed", extra={"category": "signals", "signal": signal})
        return len(listeners)

    def listener_count(self, signal: str) -> int:
        with self._lock:
            return len(self._listeners.get(signal, {}))
