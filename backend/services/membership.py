# services/membership.py — Workspace membership rows
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from errors import ConflictError, InvalidArgumentError, NotFoundError
from models import User, Workspace, WorkspaceMember, MemberRole, Lifecycle

logger = logging.getLogger("nexboard.membership")


def parse_role(value) -> MemberRole:
    """Coerce client input to a MemberRole, rejecting anything else."""
    try:
        return MemberRole(value)
    except ValueError:
        allowed = ", ".join(r.value for r in MemberRole)
        raise InvalidArgumentError(f"invalid role '{value}', expected one of: {allowed}")


class MembershipTable:
    """Source of truth for who belongs to a workspace and with which role.

    Writes are staged on the caller's session and committed by the
    orchestrator, so a check and the write it guards share one transaction.
    Invariant: exactly one ``owner`` row per workspace, held by
    ``workspace.owner_id``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _row(self, workspace_id: int, user_id: int):
        stmt = select(WorkspaceMember).where(
            WorkspaceMember.workspace_id == workspace_id,
            WorkspaceMember.user_id == user_id,
        )
        result = await self.db.execute(stmt)
        return result.scalars().unique().one_or_none()

    async def role_of(self, workspace: Workspace, user: User) -> MemberRole:
        row = await self._row(workspace.id, user.id)
        if row is None:
            raise NotFoundError("user is not a member of this workspace")
        return MemberRole(row.role)

    async def list_members(self, workspace: Workspace) -> List[WorkspaceMember]:
        stmt = (
            select(WorkspaceMember)
            .join(User, WorkspaceMember.user_id == User.id)
            .where(
                WorkspaceMember.workspace_id == workspace.id,
                User.lifecycle == Lifecycle.ACTIVE,
            )
            .order_by(WorkspaceMember.joined_at.asc(), WorkspaceMember.user_id.asc())
        )
        result = await self.db.execute(stmt)
        members = list(result.scalars().unique().all())
        # Owner first, everyone else by join time
        members.sort(key=lambda m: 0 if m.user_id == workspace.owner_id else 1)
        return members

    def add_owner(self, workspace: Workspace, owner: User) -> WorkspaceMember:
        """Stage the owner row for a workspace that is being created."""
        row = WorkspaceMember(workspace=workspace, user=owner, role=MemberRole.OWNER)
        self.db.add(row)
        return row

    async def add_member(self, workspace: Workspace, user: User, role) -> WorkspaceMember:
        parsed = parse_role(role)
        if parsed == MemberRole.OWNER:
            raise InvalidArgumentError("a workspace has exactly one owner; invite as admin or member")
        if await self._row(workspace.id, user.id) is not None:
            raise ConflictError("user is already a member of this workspace")

        row = WorkspaceMember(workspace_id=workspace.id, user_id=user.id, role=parsed)
        row.user = user
        self.db.add(row)
        return row

    async def change_role(self, workspace: Workspace, user: User, new_role) -> WorkspaceMember:
        if user.id == workspace.owner_id:
            raise InvalidArgumentError("cannot change the workspace owner's role")
        parsed = parse_role(new_role)
        if parsed == MemberRole.OWNER:
            raise InvalidArgumentError("ownership cannot be granted through a role change")

        row = await self._row(workspace.id, user.id)
        if row is None:
            raise NotFoundError("user is not a member of this workspace")
        row.role = parsed
        return row

    async def remove_member(self, workspace: Workspace, user: User) -> None:
        if user.id == workspace.owner_id:
            raise InvalidArgumentError("cannot remove the workspace owner")

        row = await self._row(workspace.id, user.id)
        if row is None:
            raise NotFoundError("user is not a member of this workspace")
        await self.db.delete(row)
