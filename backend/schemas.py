# schemas.py — Request bodies and externally-safe projections
# Projections only ever carry external ids; internal ids and credential
# hashes never leave the service layer.
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from models import User, Workspace, WorkspaceMember, Board, Status, Task, MemberRole, TaskPriority


def _ts(dt) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat() if isinstance(dt, datetime) else str(dt)


def _enum_value(value) -> str:
    return value.value if hasattr(value, "value") else str(value)


# ============================================================
# USERS
# ============================================================

class UserOut(BaseModel):
    external_id: str
    name: str
    email: str
    avatar_url: Optional[str] = None
    created_at: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    avatar_url: Optional[str] = None


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut


def user_out(u: User) -> UserOut:
    return UserOut(
        external_id=u.external_id,
        name=u.name,
        email=u.email,
        avatar_url=u.avatar_url,
        created_at=_ts(u.created_at),
    )


# ============================================================
# WORKSPACES & MEMBERS
# ============================================================

class WorkspaceRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class WorkspaceOut(BaseModel):
    external_id: str
    name: str
    description: Optional[str] = None
    owner_external_id: str
    created_at: Optional[str] = None
    modified_at: Optional[str] = None


class InviteMemberRequest(BaseModel):
    user_external_id: str
    role: str = MemberRole.MEMBER.value


class UpdateMemberRoleRequest(BaseModel):
    role: str


class MemberOut(BaseModel):
    user_external_id: str
    name: str
    email: str
    role: str
    joined_at: Optional[str] = None


def workspace_out(w: Workspace) -> WorkspaceOut:
    return WorkspaceOut(
        external_id=w.external_id,
        name=w.name,
        description=w.description,
        owner_external_id=w.owner.external_id,
        created_at=_ts(w.created_at),
        modified_at=_ts(w.modified_at),
    )


def member_out(m: WorkspaceMember) -> MemberOut:
    return MemberOut(
        user_external_id=m.user.external_id,
        name=m.user.name,
        email=m.user.email,
        role=_enum_value(m.role),
        joined_at=_ts(m.joined_at),
    )


# ============================================================
# BOARDS
# ============================================================

class BoardRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class BoardOut(BaseModel):
    external_id: str
    workspace_external_id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None
    modified_at: Optional[str] = None


def board_out(b: Board) -> BoardOut:
    return BoardOut(
        external_id=b.external_id,
        workspace_external_id=b.workspace.external_id,
        name=b.name,
        description=b.description,
        created_at=_ts(b.created_at),
        modified_at=_ts(b.modified_at),
    )


# ============================================================
# STATUSES
# ============================================================

class StatusRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = None
    position: Optional[int] = None


class StatusOut(BaseModel):
    external_id: str
    name: str
    color: Optional[str] = None
    position: int
    created_at: Optional[str] = None
    modified_at: Optional[str] = None


def status_out(s: Status) -> StatusOut:
    return StatusOut(
        external_id=s.external_id,
        name=s.name,
        color=s.color,
        position=s.position,
        created_at=_ts(s.created_at),
        modified_at=_ts(s.modified_at),
    )


# ============================================================
# TASKS
# ============================================================

class TaskRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    status_external_id: str
    assigned_to_external_id: Optional[str] = None


class MoveTaskStatusRequest(BaseModel):
    status_external_id: str


class AssignTaskRequest(BaseModel):
    # null unassigns
    assigned_to_external_id: Optional[str] = None


class TaskStatusInfo(BaseModel):
    external_id: str
    name: str
    color: Optional[str] = None


class TaskAssigneeInfo(BaseModel):
    external_id: str
    name: str


class TaskOut(BaseModel):
    external_id: str
    board_external_id: str
    status: TaskStatusInfo
    assigned_to: Optional[TaskAssigneeInfo] = None
    created_by_external_id: str
    title: str
    description: Optional[str] = None
    priority: str
    due_date: Optional[str] = None
    position: int
    created_at: Optional[str] = None
    modified_at: Optional[str] = None


def task_out(t: Task) -> TaskOut:
    assignee = None
    if t.assignee is not None:
        assignee = TaskAssigneeInfo(external_id=t.assignee.external_id, name=t.assignee.name)
    return TaskOut(
        external_id=t.external_id,
        board_external_id=t.board.external_id,
        status=TaskStatusInfo(
            external_id=t.status.external_id,
            name=t.status.name,
            color=t.status.color,
        ),
        assigned_to=assignee,
        created_by_external_id=t.creator.external_id,
        title=t.title,
        description=t.description,
        priority=_enum_value(t.priority or TaskPriority.LOW),
        due_date=_ts(t.due_date),
        position=t.position or 0,
        created_at=_ts(t.created_at),
        modified_at=_ts(t.modified_at),
    )


class MessageOut(BaseModel):
    message: str
