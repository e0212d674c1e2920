from __future__ import annotations
import json
import logging
from typing import Iterable, List, Tuple

from pydantic import ValidationError as ModelValidationError

from taskdeck.domain.task_models import Task

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"


class CorruptTasksError(ValueError):
    pass


def encode_tasks(tasks: Iterable[Task]) -> str:
    # exactly: id, title, description, dueDate, priority, status, createdAt
    return json.dumps(
        [t.model_dump(mode="json", by_alias=True) for t in tasks],
        ensure_ascii=False,
    )


def decode_tasks(raw: str) -> Tuple[List[Task], int]:
    """
    Parse the stored "tasks" payload.

    Returns the tasks in stored order plus the number of entries skipped
    because they were malformed or repeated an id already seen.
    Raises CorruptTasksError when the payload is not a JSON array at all.
    """
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise CorruptTasksError(f"tasks payload is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise CorruptTasksError(f"tasks payload must be an array, got {type(data).__name__}")

    tasks: List[Task] = []
    seen: set[str] = set()
    skipped = 0
    for index, item in enumerate(data):
        try:
            task = Task.model_validate(item)
        except ModelValidationError as exc:
            skipped += 1
            logger.warning("tasks.decode: skipping entry %s (%s)", index, exc.error_count())
            continue
        if task.id in seen:
            skipped += 1
            logger.warning("tasks.decode: skipping duplicate id %s", task.id)
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks, skipped
