from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from starlette.templating import Jinja2Templates

from taskdeck.domain.task_models import FilterSelection, TaskStats
from taskdeck.services.preferences import PreferencesStore
from taskdeck.services.task_service import TaskService
from taskdeck.services.toasts import ToastFeed

router = APIRouter(tags=["dashboard"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


# Overwritten in main.py, same as tasks.get_service
def get_service() -> TaskService:
    raise RuntimeError("TaskService not wired")


def get_preferences() -> PreferencesStore:
    raise RuntimeError("PreferencesStore not wired")


def get_toasts() -> ToastFeed:
    raise RuntimeError("ToastFeed not wired")


@router.get("/", response_class=HTMLResponse)
def home(request: Request, filter: FilterSelection = Query(FilterSelection.all)):
    board = get_service().dashboard(filter)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "board": board,
            "dark_mode": get_preferences().dark_mode,
            "filters": list(FilterSelection),
        },
    )


@router.get("/api/stats", response_model=TaskStats)
def get_stats():
    return get_service().stats()


@router.get("/api/preferences")
def get_prefs():
    return {"darkMode": get_preferences().dark_mode}


@router.post("/api/preferences/dark-mode/toggle")
async def toggle_dark_mode():
    dark = await get_preferences().toggle_dark_mode()
    return {"darkMode": dark}


@router.get("/api/toasts")
def list_toasts(after: Optional[int] = None, limit: int = 50):
    limit = max(1, min(limit, 100))
    items = get_toasts().recent(after_id=after, limit=limit)
    return {
        "returned": len(items),
        "items": [
            {
                "id": t.toast_id,
                "level": t.level.value,
                "message": t.message,
                "ts": t.timestamp.isoformat(),
            }
            for t in items
        ],
    }
