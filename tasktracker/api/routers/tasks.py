"""Tasks router."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.api.deps import get_session, get_task_service
from tasktracker.api.schemas.task import (
    ResetResponse,
    TaskActionResponse,
    TaskCompleteResponse,
    TaskNameRequest,
    TaskResponse,
)
from tasktracker.services.task_service import TaskService

router = APIRouter()


# Registered before the /{task_id} routes
@router.post("/reset", response_model=ResetResponse)
async def reset_tasks(
    session: AsyncSession = Depends(get_session),
    svc: TaskService = Depends(get_task_service),
) -> ResetResponse:
    result = await svc.reset_to_defaults(session)
    return ResetResponse(message=result.message, tasks_count=result.tasks_count)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    session: AsyncSession = Depends(get_session),
    svc: TaskService = Depends(get_task_service),
) -> list[TaskResponse]:
    tasks = await svc.list(session)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    session: AsyncSession = Depends(get_session),
    svc: TaskService = Depends(get_task_service),
) -> TaskResponse:
    task = await svc.get(session, task_id)
    return TaskResponse.model_validate(task)


@router.post("", response_model=TaskActionResponse, status_code=201)
async def create_task(
    body: TaskNameRequest,
    session: AsyncSession = Depends(get_session),
    svc: TaskService = Depends(get_task_service),
) -> TaskActionResponse:
    task = await svc.create(session, body.name)
    return TaskActionResponse(message="Task created successfully", id=task.id, name=task.name)


@router.put("/{task_id}", response_model=TaskActionResponse)
async def rename_task(
    task_id: str,
    body: TaskNameRequest,
    session: AsyncSession = Depends(get_session),
    svc: TaskService = Depends(get_task_service),
) -> TaskActionResponse:
    task = await svc.rename(session, task_id, body.name)
    return TaskActionResponse(message="Task updated successfully", id=task.id, name=task.name)


@router.patch("/{task_id}/complete", response_model=TaskCompleteResponse)
async def complete_task(
    task_id: str,
    session: AsyncSession = Depends(get_session),
    svc: TaskService = Depends(get_task_service),
) -> TaskCompleteResponse:
    task = await svc.complete(session, task_id)
    return TaskCompleteResponse(message="Task marked as DONE", id=task.id, name=task.name)


@router.delete("/{task_id}", response_model=TaskActionResponse)
async def delete_task(
    task_id: str,
    session: AsyncSession = Depends(get_session),
    svc: TaskService = Depends(get_task_service),
) -> TaskActionResponse:
    snapshot = await svc.delete(session, task_id)
    return TaskActionResponse(
        message="Task deleted successfully", id=snapshot.id, name=snapshot.name
    )
