from __future__ import annotations
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from taskdeck.domain.errors import ValidationError


class TaskStatus(str, Enum):
    pending = "pending"
    completed = "completed"

    def toggled(self) -> "TaskStatus":
        if self is TaskStatus.completed:
            return TaskStatus.pending
        return TaskStatus.completed


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class FilterSelection(str, Enum):
    all = "all"
    pending = "pending"
    completed = "completed"
    high = "high"
    overdue = "overdue"


def _tomorrow() -> date:
    return date.today() + timedelta(days=1)


class _WireModel(BaseModel):
    # camelCase on the wire (dueDate, createdAt), snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("due_date", mode="before", check_fields=False)
    @classmethod
    def _blank_due_date(cls, value):
        # the date input can be cleared, which leaves an empty string behind
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TaskDraft(_WireModel):
    title: str = ""
    description: str = ""
    due_date: Optional[date] = Field(default_factory=_tomorrow)
    priority: TaskPriority = TaskPriority.medium
    status: TaskStatus = TaskStatus.pending


class TaskPatch(_WireModel):
    """Edit payload; fields left as None keep the task's current value."""

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None


class Task(_WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str
    description: str = ""
    due_date: Optional[date] = None
    priority: TaskPriority = TaskPriority.medium
    status: TaskStatus = TaskStatus.pending
    created_at: datetime

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be empty")
        return value

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.completed


class TaskStats(BaseModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0


def require_title(title: Optional[str]) -> str:
    """Return the trimmed title or raise ValidationError when it is blank."""
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Task title cannot be empty!")
    return cleaned


def apply_patch(task: Task, patch: TaskPatch) -> Task:
    changes = patch.model_dump(exclude_none=True, exclude_unset=True)
    if "title" in changes:
        changes["title"] = require_title(changes["title"])
    # id and created_at are not part of TaskPatch, so they survive the merge
    return task.model_copy(update=changes)


class TaskIdAllocator:
    """
    Hands out ids derived from the creation time in milliseconds.

    Two tasks created within the same millisecond (or a clock that went
    backwards) get the next free number instead of a duplicate.
    """

    # millisecond timestamps are 13 digits; anything far longer is not ours
    MAX_ID_DIGITS = 18

    def __init__(self):
        self._last = 0

    def seed(self, ids: Iterable[str]) -> None:
        for raw in ids:
            # isdigit() also accepts "²" and friends, which int() rejects
            if raw.isascii() and raw.isdecimal() and len(raw) <= self.MAX_ID_DIGITS:
                self._last = max(self._last, int(raw))

    def next_id(self, now: datetime) -> str:
        candidate = int(now.timestamp() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)
