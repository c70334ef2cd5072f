# tests/test_membership.py — Owner invariant across membership operations
import pytest
from sqlalchemy import select

from errors import InvalidArgumentError, NotFoundError
from models import WorkspaceMember, MemberRole
from schemas import WorkspaceRequest, InviteMemberRequest, UpdateMemberRoleRequest
from services.membership import MembershipTable, parse_role
from services.workspaces import WorkspaceService


async def assert_single_owner(db_session, workspace_external_id):
    service = WorkspaceService(db_session)
    ws = await service.identities.workspace(workspace_external_id)
    result = await db_session.execute(
        select(WorkspaceMember).where(
            WorkspaceMember.workspace_id == ws.id,
            WorkspaceMember.role == MemberRole.OWNER,
        )
    )
    owners = result.scalars().unique().all()
    assert len(owners) == 1
    assert owners[0].user_id == ws.owner_id


def test_parse_role():
    assert parse_role("admin") == MemberRole.ADMIN
    with pytest.raises(InvalidArgumentError):
        parse_role("root")


@pytest.mark.asyncio
async def test_owner_invariant_survives_operations(db_session, alice, bob, carol):
    service = WorkspaceService(db_session)
    ws = await service.create(alice.external_id, WorkspaceRequest(name="Inv"))
    await assert_single_owner(db_session, ws.external_id)

    await service.invite(alice.external_id, ws.external_id, InviteMemberRequest(user_external_id=bob.external_id))
    await service.invite(alice.external_id, ws.external_id, InviteMemberRequest(user_external_id=carol.external_id, role="admin"))
    await service.change_role(alice.external_id, ws.external_id, bob.external_id, UpdateMemberRoleRequest(role="admin"))
    await service.remove_member(carol.external_id, ws.external_id, bob.external_id)
    await assert_single_owner(db_session, ws.external_id)

    for op in (
        service.change_role(alice.external_id, ws.external_id, alice.external_id, UpdateMemberRoleRequest(role="admin")),
        service.remove_member(alice.external_id, ws.external_id, alice.external_id),
        service.change_role(alice.external_id, ws.external_id, carol.external_id, UpdateMemberRoleRequest(role="owner")),
    ):
        with pytest.raises(InvalidArgumentError):
            await op
    await assert_single_owner(db_session, ws.external_id)


@pytest.mark.asyncio
async def test_role_of_non_member(db_session, alice, bob):
    service = WorkspaceService(db_session)
    ws = await service.create(alice.external_id, WorkspaceRequest(name="Solo"))
    workspace = await service.identities.workspace(ws.external_id)
    with pytest.raises(NotFoundError):
        await MembershipTable(db_session).role_of(workspace, bob)
