import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from taskdeck.domain.errors import NotFoundError, PersistenceError, ValidationError
from taskdeck.domain.projections import compute_stats, filter_tasks, parse_selection
from taskdeck.domain.task_models import FilterSelection, Task, TaskDraft, TaskPatch, TaskStats
from taskdeck.services.task_store import TaskStore
from taskdeck.services.toasts import ToastFeed

logger = logging.getLogger("taskdeck.tasks")


def greeting(now: datetime) -> str:
    if now.hour < 12:
        return "Good morning"
    if now.hour < 18:
        return "Good afternoon"
    return "Good evening"


def empty_message(selection: FilterSelection) -> str:
    if selection is FilterSelection.all:
        return "You don't have any tasks yet. Add your first task to get started!"
    return f"No {selection.value} tasks available. Try changing the filter or add a new task."


@dataclass(frozen=True)
class Dashboard:
    greeting: str
    today_label: str
    selection: FilterSelection
    stats: TaskStats
    tasks: List[Task]
    empty_message: str


class TaskService:
    def __init__(self, store: TaskStore, toasts: ToastFeed):
        self.store = store
        self.toasts = toasts

    async def create_task(self, data: TaskDraft) -> Task:
        try:
            task = await self.store.add(data)
        except (ValidationError, PersistenceError) as exc:
            self.toasts.error(exc.message)
            raise
        logger.info("task.create", extra={"category": "tasks", "event": "task.create", "task_id": task.id, "title": task.title})
        self.toasts.success("Task added successfully!")
        return task

    async def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        try:
            task = await self.store.update(task_id, patch)
        except (ValidationError, PersistenceError) as exc:
            self.toasts.error(exc.message)
            raise
        if task is None:
            raise NotFoundError(task_id)
        logger.info("task.update", extra={"category": "tasks", "event": "task.update", "task_id": task_id})
        self.toasts.success("Task updated!")
        return task

    async def delete_task(self, task_id: str) -> bool:
        try:
            removed = await self.store.remove(task_id)
        except PersistenceError as exc:
            self.toasts.error(exc.message)
            raise
        logger.info("task.delete", extra={"category": "tasks", "event": "task.delete", "task_id": task_id, "removed": removed})
        self.toasts.info("Task deleted")
        return removed

    async def toggle_task(self, task_id: str) -> Task:
        try:
            task = await self.store.toggle_status(task_id)
        except PersistenceError as exc:
            self.toasts.error(exc.message)
            raise
        if task is None:
            raise NotFoundError(task_id)
        logger.info(
            "task.toggle",
            extra={"category": "tasks", "event": "task.toggle", "task_id": task_id, "status": task.status.value},
        )
        self.toasts.info(f"Task marked as {task.status.value}")
        return task

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.store.get(task_id)

    def list_tasks(
        self,
        selection: Union[FilterSelection, str, None] = FilterSelection.all,
        now: Optional[datetime] = None,
    ) -> List[Task]:
        return filter_tasks(self.store.tasks, selection, now)

    def stats(self, now: Optional[datetime] = None) -> TaskStats:
        return compute_stats(self.store.tasks, now)

    def dashboard(
        self,
        selection: Union[FilterSelection, str, None] = FilterSelection.all,
        now: Optional[datetime] = None,
    ) -> Dashboard:
        now = now or datetime.now()
        chosen = parse_selection(selection)
        snapshot = self.store.tasks
        return Dashboard(
            greeting=greeting(now),
            today_label=now.strftime("%A, %B %d, %Y").replace(" 0", " "),
            selection=chosen,
            stats=compute_stats(snapshot, now),
            tasks=filter_tasks(snapshot, chosen, now),
            empty_message=empty_message(chosen),
        )
