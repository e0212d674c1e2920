# tests/conftest.py

from __future__ import annotations

import pytest

from taskdeck.services.signals import SignalBus
from taskdeck.services.task_service import TaskService
from taskdeck.services.task_store import TaskStore
from taskdeck.services.toasts import ToastFeed

from .fakes import FakeClock, FlakyStorage


@pytest.fixture()
def storage() -> FlakyStorage:
    return FlakyStorage()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def bus() -> SignalBus:
    return SignalBus()


@pytest.fixture()
def store(storage: FlakyStorage, bus: SignalBus, clock: FakeClock) -> TaskStore:
    """Fresh store over empty memory storage; tests call load() themselves when it matters."""
    return TaskStore(storage, signals=bus, clock=clock)


@pytest.fixture()
def toasts() -> ToastFeed:
    return ToastFeed()


@pytest.fixture()
def service(store: TaskStore, toasts: ToastFeed) -> TaskService:
    return TaskService(store, toasts)
