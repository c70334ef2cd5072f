# routers/workspaces.py — Workspaces, their members and their boards
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import get_current_user, CurrentUser
from database import get_db_session
from schemas import (
    WorkspaceRequest, WorkspaceOut, MemberOut, InviteMemberRequest,
    UpdateMemberRoleRequest, BoardRequest, BoardOut, MessageOut,
)
from services.boards import BoardService
from services.workspaces import WorkspaceService

router = APIRouter(prefix="/api/v1/workspaces", tags=["Workspaces"])


def get_workspace_service(db: AsyncSession = Depends(get_db_session)) -> WorkspaceService:
    return WorkspaceService(db)


def get_board_service(db: AsyncSession = Depends(get_db_session)) -> BoardService:
    return BoardService(db)


# ============================================================
# WORKSPACES
# ============================================================

@router.post("", response_model=WorkspaceOut, status_code=201)
async def create_workspace(
    data: WorkspaceRequest,
    user: CurrentUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Create a workspace; the caller becomes its owner"""
    return await service.create(user.external_id, data)


@router.get("", response_model=List[WorkspaceOut])
async def list_workspaces(
    user: CurrentUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """List workspaces the caller is a member of"""
    return await service.list_for_user(user.external_id)


@router.get("/{workspace_id}", response_model=WorkspaceOut)
async def get_workspace(
    workspace_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    return await service.get(user.external_id, workspace_id)


@router.put("/{workspace_id}", response_model=WorkspaceOut)
async def update_workspace(
    workspace_id: str,
    data: WorkspaceRequest,
    user: CurrentUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Owner only"""
    return await service.update(user.external_id, workspace_id, data)


@router.delete("/{workspace_id}", response_model=MessageOut)
async def delete_workspace(
    workspace_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Owner only; boards and tasks are removed with the workspace"""
    await service.delete(user.external_id, workspace_id)
    return MessageOut(message="workspace deleted successfully")


# ============================================================
# MEMBERS
# ============================================================

@router.get("/{workspace_id}/members", response_model=List[MemberOut])
async def list_members(
    workspace_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    return await service.list_members(user.external_id, workspace_id)


@router.post("/{workspace_id}/members", response_model=MemberOut, status_code=201)
async def invite_member(
    workspace_id: str,
    data: InviteMemberRequest,
    user: CurrentUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Owner or admin only"""
    return await service.invite(user.external_id, workspace_id, data)


@router.put("/{workspace_id}/members/{user_id}", response_model=MemberOut)
async def update_member_role(
    workspace_id: str,
    user_id: str,
    data: UpdateMemberRoleRequest,
    user: CurrentUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Owner only; the owner's own role cannot be changed"""
    return await service.change_role(user.external_id, workspace_id, user_id, data)


@router.delete("/{workspace_id}/members/{user_id}", response_model=MessageOut)
async def remove_member(
    workspace_id: str,
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Owner or admin only; the owner cannot be removed"""
    await service.remove_member(user.external_id, workspace_id, user_id)
    return MessageOut(message="member removed successfully")


# ============================================================
# BOARDS
# ============================================================

@router.post("/{workspace_id}/boards", response_model=BoardOut, status_code=201)
async def create_board(
    workspace_id: str,
    data: BoardRequest,
    user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return await service.create(user.external_id, workspace_id, data)


@router.get("/{workspace_id}/boards", response_model=List[BoardOut])
async def list_boards(
    workspace_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return await service.list_for_workspace(user.external_id, workspace_id)
