# routers/tasks.py — Single-task operations
from fastapi import APIRouter, Depends

from auth import get_current_user, CurrentUser
from routers.boards import get_task_service
from schemas import (
    TaskRequest, TaskOut, MoveTaskStatusRequest, AssignTaskRequest, MessageOut,
)
from services.tasks import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(
    task_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return await service.get(user.external_id, task_id)


@router.put("/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: str,
    data: TaskRequest,
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return await service.update(user.external_id, task_id, data)


@router.patch("/{task_id}/status", response_model=TaskOut)
async def move_task(
    task_id: str,
    data: MoveTaskStatusRequest,
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return await service.move(user.external_id, task_id, data)


@router.patch("/{task_id}/assign", response_model=TaskOut)
async def assign_task(
    task_id: str,
    data: AssignTaskRequest,
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """A null assignee clears the assignment"""
    return await service.assign(user.external_id, task_id, data)


@router.delete("/{task_id}", response_model=MessageOut)
async def delete_task(
    task_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    await service.delete(user.external_id, task_id)
    return MessageOut(message="task deleted successfully")
