from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from threading import RLock
from typing import List, Optional, Protocol

logger = logging.getLogger("taskdeck.toast")


class ToastLevel(str, Enum):
    success = "success"
    info = "info"
    error = "error"


@dataclass(frozen=True, slots=True)
class Toast:
    toast_id: int
    level: ToastLevel
    message: str
    timestamp: datetime


class ToastPort(Protocol):
    """Fire-and-forget user notifications. Never gates core behavior."""

    def push(self, level: ToastLevel, message: str) -> None:
        ...


class ToastFeed:
    """Bounded toast history for polling clients; every toast is also logged."""

    def __init__(self, *, history_limit: int = 100):
        self._toasts: deque[Toast] = deque(maxlen=history_limit)
        self._next_id = 1
        self._lock = RLock()

    def push(self, level: ToastLevel, message: str) -> None:
        with self._lock:
            toast = Toast(
                toast_id=self._next_id,
                level=level,
                message=message,
                timestamp=datetime.now(timezone.utc),
            )
            self._next_id += 1
            self._toasts.append(toast)

        log = logger.warning if level is ToastLevel.error else logger.info
        log(message, extra={"category": "toast", "event": f"toast.{level.value}", "toast_id": toast.toast_id})

    def success(self, message: str) -> None:
        self.push(ToastLevel.success, message)

    def info(self, message: str) -> None:
        self.push(ToastLevel.info, message)

    def error(self, message: str) -> None:
        self.push(ToastLevel.error, message)

    def recent(self, *, after_id: Optional[int] = None, limit: int = 50) -> List[Toast]:
        with self._lock:
            items = [t for t in self._toasts if after_id is None or t.toast_id > after_id]
        if limit <= 0:
            return []
        return items[-limit:]
