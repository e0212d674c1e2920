from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from taskdeck.domain.codec import TASKS_KEY, CorruptTasksError, decode_tasks, encode_tasks
from taskdeck.domain.errors import PersistenceError
from taskdeck.domain.task_models import (
    Task,
    TaskDraft,
    TaskIdAllocator,
    TaskPatch,
    apply_patch,
    require_title,
)
from taskdeck.infra.db.kv_memory import KeyValueStorage
from taskdeck.services.signals import TASKS_CHANGED, SignalBus

logger = logging.getLogger("taskdeck.store")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStore:
    """
    Owner of the task collection.

    Every mutation rewrites the full collection under the "tasks" key and
    then emits TASKS_CHANGED. If the write fails the in-memory change is
    kept, listeners are still told (the write was attempted), and the
    caller gets a PersistenceError.

    Operations on an id that is not in the store do nothing and return
    None/False.

    Mutations hold a lock from the in-memory change through the write and
    the signal, so concurrent requests persist in the order they applied.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        signals: Optional[SignalBus] = None,
        clock: Optional[Clock] = None,
    ):
        self.storage = storage
        self.signals = signals or SignalBus()
        self._clock = clock or _utcnow
        self._ids = TaskIdAllocator()
        self._tasks: List[Task] = []
        self._lock = asyncio.Lock()

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        index = self._index_of(task_id)
        return None if index is None else self._tasks[index]

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        return self.signals.subscribe(TASKS_CHANGED, listener)

    async def load(self) -> Tuple[Task, ...]:
        async with self._lock:
            self._tasks = await self._read()
            self._ids.seed(t.id for t in self._tasks)
        logger.info("store.loaded", extra={"category": "tasks", "event": "store.loaded", "total": len(self._tasks)})
        self.signals.emit(TASKS_CHANGED)
        return self.tasks

    async def add(self, draft: TaskDraft) -> Task:
        title = require_title(draft.title)
        async with self._lock:
            now = self._clock()
            task = Task(
                id=self._ids.next_id(now),
                title=title,
                description=draft.description or "",
                due_date=draft.due_date,
                priority=draft.priority,
                status=draft.status,
                created_at=now,
            )
            self._tasks.insert(0, task)
            await self._commit("task.add", task.id)
        return task

    async def update(self, task_id: str, patch: TaskPatch) -> Optional[Task]:
        async with self._lock:
            index = self._index_of(task_id)
            if index is None:
                return None
            updated = apply_patch(self._tasks[index], patch)
            self._tasks[index] = updated
            await self._commit("task.update", task_id)
        return updated

    async def remove(self, task_id: str) -> bool:
        async with self._lock:
            index = self._index_of(task_id)
            if index is None:
                return False
            del self._tasks[index]
            await self._commit("task.remove", task_id)
        return True

    async def toggle_status(self, task_id: str) -> Optional[Task]:
        async with self._lock:
            index = self._index_of(task_id)
            if index is None:
                return None
            task = self._tasks[index]
            toggled = task.model_copy(update={"status": task.status.toggled()})
            self._tasks[index] = toggled
            await self._commit("task.toggle", task_id)
        return toggled

    # ---- internals ----

    def _index_of(self, task_id: str) -> Optional[int]:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    async def _read(self) -> List[Task]:
        try:
            raw = await self.storage.get(TASKS_KEY)
        except Exception:
            logger.exception("store.read_failed", extra={"category": "tasks", "event": "store.read_failed"})
            return []

        if raw is None:
            return []

        try:
            tasks, skipped = decode_tasks(raw)
        except CorruptTasksError as exc:
            logger.warning(
                "store.corrupt",
                extra={"category": "tasks", "event": "store.corrupt", "reason": str(exc)},
            )
            return []

        if skipped:
            logger.warning(
                "store.entries_skipped",
                extra={"category": "tasks", "event": "store.entries_skipped", "skipped": skipped},
            )
        return tasks

    async def _commit(self, event: str, task_id: str) -> None:
        try:
            payload = encode_tasks(self._tasks)
            await self.storage.set(TASKS_KEY, payload)
        except Exception as exc:
            logger.error(
                "store.write_failed",
                exc_info=True,
                extra={"category": "tasks", "event": event, "task_id": task_id},
            )
            self.signals.emit(TASKS_CHANGED)
            raise PersistenceError(f"Could not save tasks: {exc}") from exc

        logger.debug("store.saved", extra={"category": "tasks", "event": event, "task_id": task_id})
        self.signals.emit(TASKS_CHANGED)
