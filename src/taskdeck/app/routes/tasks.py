from fastapi import APIRouter, HTTPException, Query, Response
from taskdeck.domain.task_models import FilterSelection, Task, TaskDraft, TaskPatch
from taskdeck.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_service() -> TaskService:
    # Overwritten in main.py:
    # tasks.get_service = lambda: svc
    raise RuntimeError("TaskService not wired")


@router.post("", response_model=Task, status_code=201)
async def create_task(payload: TaskDraft):
    svc = get_service()
    return await svc.create_task(payload)


@router.get("", response_model=list[Task])
async def list_tasks(filter: FilterSelection = Query(FilterSelection.all)):
    svc = get_service()
    return svc.list_tasks(filter)


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str):
    svc = get_service()
    task = svc.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.put("/{task_id}", response_model=Task)
async def update_task(task_id: str, payload: TaskPatch):
    svc = get_service()
    return await svc.update_task(task_id, payload)


@router.post("/{task_id}/toggle", response_model=Task)
async def toggle_task(task_id: str):
    svc = get_service()
    return await svc.toggle_task(task_id)


@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: str):
    svc = get_service()
    await svc.delete_task(task_id)
    return Response(status_code=204)
