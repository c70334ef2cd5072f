# services/workspaces.py — Workspace and membership orchestration
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Workspace, WorkspaceMember, Lifecycle
from schemas import (
    WorkspaceRequest, WorkspaceOut, MemberOut, InviteMemberRequest,
    UpdateMemberRoleRequest, workspace_out, member_out,
)
from services.access_policy import AccessPolicy, Capability, ResourceRef
from services.common import commit
from services.identity import IdentityResolver
from services.membership import MembershipTable

logger = logging.getLogger("nexboard.workspaces")


class WorkspaceService:
    def __init__(
        self,
        db: AsyncSession,
        identities: Optional[IdentityResolver] = None,
        memberships: Optional[MembershipTable] = None,
        policy: Optional[AccessPolicy] = None,
    ):
        self.db = db
        self.identities = identities or IdentityResolver(db)
        self.memberships = memberships or MembershipTable(db)
        self.policy = policy or AccessPolicy(db, self.identities, self.memberships)

    # --- Workspaces ---

    async def create(self, actor_external_id: str, data: WorkspaceRequest) -> WorkspaceOut:
        actor = await self.identities.user(actor_external_id)

        workspace = Workspace(name=data.name, description=data.description, owner=actor)
        self.db.add(workspace)
        self.memberships.add_owner(workspace, actor)
        # Workspace row and owner membership commit together
        await commit(self.db)

        logger.info(f"Workspace {workspace.external_id} created by {actor.external_id}")
        return workspace_out(workspace)

    async def list_for_user(self, actor_external_id: str) -> List[WorkspaceOut]:
        actor = await self.identities.user(actor_external_id)
        stmt = (
            select(Workspace)
            .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
            .where(
                WorkspaceMember.user_id == actor.id,
                Workspace.lifecycle == Lifecycle.ACTIVE,
            )
            .order_by(Workspace.created_at.asc(), Workspace.id.asc())
        )
        result = await self.db.execute(stmt)
        return [workspace_out(w) for w in result.scalars().unique().all()]

    async def get(self, actor_external_id: str, workspace_external_id: str) -> WorkspaceOut:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.workspace(workspace_external_id), Capability.IS_MEMBER,
        )
        return workspace_out(decision.workspace)

    async def update(
        self, actor_external_id: str, workspace_external_id: str, data: WorkspaceRequest,
    ) -> WorkspaceOut:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.workspace(workspace_external_id), Capability.IS_OWNER,
        )
        workspace = decision.workspace
        workspace.name = data.name
        workspace.description = data.description
        await commit(self.db)
        return workspace_out(workspace)

    async def delete(self, actor_external_id: str, workspace_external_id: str) -> None:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.workspace(workspace_external_id), Capability.IS_OWNER,
        )
        # Members, boards and their tasks go with it
        await self.db.delete(decision.workspace)
        await commit(self.db)
        logger.info(f"Workspace {workspace_external_id} deleted by {actor_external_id}")

    # --- Members ---

    async def list_members(self, actor_external_id: str, workspace_external_id: str) -> List[MemberOut]:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.workspace(workspace_external_id), Capability.IS_MEMBER,
        )
        members = await self.memberships.list_members(decision.workspace)
        return [member_out(m) for m in members]

    async def invite(
        self, actor_external_id: str, workspace_external_id: str, data: InviteMemberRequest,
    ) -> MemberOut:
        actor = await self.identities.user(actor_external_id)
        workspace = await self.identities.workspace(workspace_external_id)
        target = await self.identities.user(data.user_external_id, label="target user")
        await self.policy.enforce(actor, workspace, Capability.IS_OWNER_OR_ADMIN)

        row = await self.memberships.add_member(workspace, target, data.role)
        await commit(self.db, "user is already a member of this workspace")

        logger.info(
            f"User {target.external_id} added to workspace {workspace.external_id} "
            f"as {row.role.value} by {actor.external_id}"
        )
        return member_out(row)

    async def change_role(
        self,
        actor_external_id: str,
        workspace_external_id: str,
        target_external_id: str,
        data: UpdateMemberRoleRequest,
    ) -> MemberOut:
        actor = await self.identities.user(actor_external_id)
        # Locked so the owner check and the write see the same owner
        workspace = await self.identities.workspace(workspace_external_id, for_update=True)
        target = await self.identities.user(target_external_id, label="target user")
        await self.policy.enforce(actor, workspace, Capability.IS_OWNER)

        row = await self.memberships.change_role(workspace, target, data.role)
        await commit(self.db)

        logger.info(
            f"Role of {target.external_id} in workspace {workspace.external_id} "
            f"changed to {row.role.value}"
        )
        return member_out(row)

    async def remove_member(
        self, actor_external_id: str, workspace_external_id: str, target_external_id: str,
    ) -> None:
        actor = await self.identities.user(actor_external_id)
        workspace = await self.identities.workspace(workspace_external_id, for_update=True)
        target = await self.identities.user(target_external_id, label="target user")
        await self.policy.enforce(actor, workspace, Capability.IS_OWNER_OR_ADMIN)

        await self.memberships.remove_member(workspace, target)
        await commit(self.db)
        logger.info(f"User {target.external_id} removed from workspace {workspace.external_id}")
