"""
Read-only views derived from a task snapshot.

Everything here is a pure function of the task list, the filter selection and
the current instant, so callers can recompute on every change signal without
worrying about stale state.

Overdue is decided on calendar dates: a task due today is not overdue yet.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable, Optional, Union

from taskdeck.domain.errors import ValidationError
from taskdeck.domain.task_models import FilterSelection, Task, TaskPriority, TaskStats, TaskStatus

Instant = Union[date, datetime]


def today(now: Optional[Instant] = None) -> date:
    if now is None:
        return date.today()
    # datetime is a subclass of date, so check it first
    if isinstance(now, datetime):
        return now.date()
    return now


def is_overdue(due_date: Optional[date], now: Optional[Instant] = None) -> bool:
    """Status agnostic: callers exclude completed tasks themselves."""
    if due_date is None:
        return False
    return due_date < today(now)


def _overdue(task: Task, day: date) -> bool:
    return not task.is_completed and is_overdue(task.due_date, day)


def _predicate(selection: FilterSelection, day: date) -> Callable[[Task], bool]:
    if selection is FilterSelection.pending:
        return lambda t: t.status is TaskStatus.pending
    if selection is FilterSelection.completed:
        return lambda t: t.status is TaskStatus.completed
    if selection is FilterSelection.high:
        return lambda t: t.priority is TaskPriority.high
    if selection is FilterSelection.overdue:
        return lambda t: _overdue(t, day)
    return lambda t: True


def parse_selection(selection: Union[FilterSelection, str, None]) -> FilterSelection:
    if selection is None:
        return FilterSelection.all
    try:
        return FilterSelection(selection)
    except ValueError:
        raise ValidationError(f"Unknown filter: {selection}") from None


def filter_tasks(
    tasks: Iterable[Task],
    selection: Union[FilterSelection, str, None] = FilterSelection.all,
    now: Optional[Instant] = None,
) -> list[Task]:
    keep = _predicate(parse_selection(selection), today(now))
    return [t for t in tasks if keep(t)]


def compute_stats(tasks: Iterable[Task], now: Optional[Instant] = None) -> TaskStats:
    day = today(now)
    stats = TaskStats()
    for t in tasks:
        stats.total += 1
        if t.status is TaskStatus.completed:
            stats.completed += 1
        else:
            stats.pending += 1
            if is_overdue(t.due_date, day):
                stats.overdue += 1
    return stats
