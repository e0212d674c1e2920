from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, WebSocket

from taskdeck.services.task_store import TaskStore

router = APIRouter(tags=["tasks"])
logger = logging.getLogger("taskdeck.ws")


def get_store() -> TaskStore:
    # Overwritten in main.py
    raise RuntimeError("TaskStore not wired")


@router.websocket("/ws/tasks")
async def ws_tasks(websocket: WebSocket):
    """Push a bare "tasksUpdated" message each time the store changes."""
    await websocket.accept()

    loop = asyncio.get_running_loop()
    changes: asyncio.Queue[None] = asyncio.Queue(maxsize=1)

    def on_change() -> None:
        # Several changes between two sends collapse into one message;
        # clients re-fetch the whole view anyway.
        def _put() -> None:
            if not changes.full():
                changes.put_nowait(None)

        loop.call_soon_threadsafe(_put)

    async def wait_disconnect() -> None:
        # clients never send anything; reading only notices the close
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

    unsubscribe = get_store().subscribe(on_change)
    closed = asyncio.ensure_future(wait_disconnect())
    changed: Optional[asyncio.Future] = None
    logger.info("ws.connect", extra={"category": "ws", "event": "ws.connect"})
    try:
        await websocket.send_json({"type": "hello"})
        while True:
            changed = asyncio.ensure_future(changes.get())
            done, _ = await asyncio.wait({changed, closed}, return_when=asyncio.FIRST_COMPLETED)
            if closed in done:
                return
            await websocket.send_json({"type": "tasksUpdated"})
    finally:
        closed.cancel()
        if changed is not None:
            changed.cancel()
        unsubscribe()
        logger.info("ws.disconnect", extra={"category": "ws", "event": "ws.disconnect"})
