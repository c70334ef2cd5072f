# routers/statuses.py — Global task statuses
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import get_current_user, CurrentUser
from database import get_db_session
from schemas import StatusRequest, StatusOut, MessageOut
from services.statuses import StatusService

router = APIRouter(prefix="/api/v1/statuses", tags=["Statuses"])


def get_status_service(db: AsyncSession = Depends(get_db_session)) -> StatusService:
    return StatusService(db)


@router.post("", response_model=StatusOut, status_code=201)
async def create_status(
    data: StatusRequest,
    user: CurrentUser = Depends(get_current_user),
    service: StatusService = Depends(get_status_service),
):
    return await service.create(user.external_id, data)


@router.get("", response_model=List[StatusOut])
async def list_statuses(
    user: CurrentUser = Depends(get_current_user),
    service: StatusService = Depends(get_status_service),
):
    return await service.list(user.external_id)


@router.get("/{status_id}", response_model=StatusOut)
async def get_status(
    status_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: StatusService = Depends(get_status_service),
):
    return await service.get(user.external_id, status_id)


@router.put("/{status_id}", response_model=StatusOut)
async def update_status(
    status_id: str,
    data: StatusRequest,
    user: CurrentUser = Depends(get_current_user),
    service: StatusService = Depends(get_status_service),
):
    return await service.update(user.external_id, status_id, data)


@router.delete("/{status_id}", response_model=MessageOut)
async def delete_status(
    status_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: StatusService = Depends(get_status_service),
):
    """Refused while active tasks still use the status"""
    await service.delete(user.external_id, status_id)
    return MessageOut(message="status deleted successfully")
