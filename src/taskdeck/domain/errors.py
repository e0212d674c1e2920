from __future__ import annotations


class TaskError(Exception):
    """Base class for errors raised by the task store and services."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskError):
    """User input broke a domain rule. Nothing was changed."""

    status_code = 422


class NotFoundError(TaskError):
    status_code = 404

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class PersistenceError(TaskError):
    """
    Writing to durable storage failed.

    The in-memory collection already reflects the change; only the write
    was lost.
    """

    status_code = 507
