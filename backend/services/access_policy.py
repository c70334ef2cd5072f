# services/access_policy.py — Hierarchical access decisions
# Every permission check in the service layer goes through AccessPolicy.
# Roles only exist on workspaces; boards and tasks inherit the role of their
# governing workspace (task → board → workspace).
import logging
from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from errors import InvalidArgumentError, NotFoundError, UnauthorizedError
from models import User, Workspace, Board, Task, MemberRole
from services.identity import IdentityResolver
from services.membership import MembershipTable

logger = logging.getLogger("nexboard.access")


class Capability(str, PyEnum):
    IS_MEMBER = "is_member"
    IS_OWNER_OR_ADMIN = "is_owner_or_admin"
    IS_OWNER = "is_owner"


class ResourceKind(str, PyEnum):
    WORKSPACE = "workspace"
    BOARD = "board"
    TASK = "task"


@dataclass(frozen=True)
class ResourceRef:
    kind: ResourceKind
    external_id: str

    @classmethod
    def workspace(cls, external_id: str) -> "ResourceRef":
        return cls(ResourceKind.WORKSPACE, external_id)

    @classmethod
    def board(cls, external_id: str) -> "ResourceRef":
        return cls(ResourceKind.BOARD, external_id)

    @classmethod
    def task(cls, external_id: str) -> "ResourceRef":
        return cls(ResourceKind.TASK, external_id)


Resource = Union[Workspace, Board, Task]


@dataclass
class Decision:
    """An allow decision together with the records it was made on."""
    actor: User
    workspace: Workspace
    role: MemberRole
    resource: Resource
    capability: Capability


_ROLE_CAPABILITIES = {
    Capability.IS_MEMBER: {MemberRole.OWNER, MemberRole.ADMIN, MemberRole.MEMBER},
    Capability.IS_OWNER_OR_ADMIN: {MemberRole.OWNER, MemberRole.ADMIN},
}


def governing_workspace(resource: Resource) -> Workspace:
    if isinstance(resource, Workspace):
        return resource
    if isinstance(resource, Board):
        return resource.workspace
    if isinstance(resource, Task):
        return resource.board.workspace
    raise TypeError(f"unsupported resource type: {type(resource).__name__}")


class AccessPolicy:
    def __init__(
        self,
        db: AsyncSession,
        identities: Optional[IdentityResolver] = None,
        memberships: Optional[MembershipTable] = None,
    ):
        self.identities = identities or IdentityResolver(db)
        self.memberships = memberships or MembershipTable(db)

    async def resolve(self, ref: ResourceRef) -> Resource:
        if ref.kind == ResourceKind.WORKSPACE:
            return await self.identities.workspace(ref.external_id)
        if ref.kind == ResourceKind.BOARD:
            return await self.identities.board(ref.external_id)
        if ref.kind == ResourceKind.TASK:
            return await self.identities.task(ref.external_id)
        raise InvalidArgumentError(f"unsupported resource kind: {ref.kind}")

    async def authorize(
        self, actor_external_id: str, ref: ResourceRef, capability: Capability,
    ) -> Decision:
        """Resolve actor and resource, then decide.

        Resolution failures surface as ``NotFoundError`` before any
        membership lookup happens; only a resolved actor on a resolved
        resource can be ``UnauthorizedError``.
        """
        actor = await self.identities.user(actor_external_id)
        resource = await self.resolve(ref)
        return await self.enforce(actor, resource, capability)

    async def enforce(self, actor: User, resource: Resource, capability: Capability) -> Decision:
        workspace = governing_workspace(resource)
        try:
            role = await self.memberships.role_of(workspace, actor)
        except NotFoundError:
            logger.warning(
                f"Denied {capability.value} on workspace {workspace.external_id} "
                f"for {actor.external_id}: not a member"
            )
            raise UnauthorizedError("not a member of this workspace")

        if capability == Capability.IS_OWNER:
            # Checked against the canonical owner field, not the role
            allowed = actor.id == workspace.owner_id
        else:
            allowed = role in _ROLE_CAPABILITIES[capability]

        if not allowed:
            logger.warning(
                f"Denied {capability.value} on workspace {workspace.external_id} "
                f"for {actor.external_id} (role={role.value})"
            )
            raise UnauthorizedError(_denial_message(capability))

        return Decision(
            actor=actor, workspace=workspace, role=role,
            resource=resource, capability=capability,
        )

    async def ensure_member(self, workspace: Workspace, user: User) -> MemberRole:
        """IsMember check for a user other than the actor (e.g. an assignee)."""
        try:
            return await self.memberships.role_of(workspace, user)
        except NotFoundError:
            raise InvalidArgumentError("cannot assign task to a non-member of the workspace")


def _denial_message(capability: Capability) -> str:
    if capability == Capability.IS_OWNER:
        return "only the workspace owner can perform this action"
    if capability == Capability.IS_OWNER_OR_ADMIN:
        return "only the workspace owner or an admin can perform this action"
    return "not a member of this workspace"
