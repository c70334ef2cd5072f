# routers/boards.py — Boards and the tasks on them
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import get_current_user, CurrentUser
from database import get_db_session
from routers.workspaces import get_board_service
from schemas import BoardRequest, BoardOut, TaskRequest, TaskOut, MessageOut
from services.boards import BoardService
from services.tasks import TaskService

router = APIRouter(prefix="/api/v1/boards", tags=["Boards"])


def get_task_service(db: AsyncSession = Depends(get_db_session)) -> TaskService:
    return TaskService(db)


@router.get("/{board_id}", response_model=BoardOut)
async def get_board(
    board_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return await service.get(user.external_id, board_id)


@router.put("/{board_id}", response_model=BoardOut)
async def update_board(
    board_id: str,
    data: BoardRequest,
    user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return await service.update(user.external_id, board_id, data)


@router.delete("/{board_id}", response_model=MessageOut)
async def delete_board(
    board_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    """Deletes the board together with its tasks"""
    await service.delete(user.external_id, board_id)
    return MessageOut(message="board deleted successfully")


# ============================================================
# TASKS
# ============================================================

@router.post("/{board_id}/tasks", response_model=TaskOut, status_code=201)
async def create_task(
    board_id: str,
    data: TaskRequest,
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """New tasks are appended after the last task on the board"""
    return await service.create(user.external_id, board_id, data)


@router.get("/{board_id}/tasks", response_model=List[TaskOut])
async def list_tasks(
    board_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Tasks ordered by status position, then task position"""
    return await service.list_for_board(user.external_id, board_id)
