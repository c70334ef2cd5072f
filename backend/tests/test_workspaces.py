# tests/test_workspaces.py — Workspace CRUD and ownership
import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from models import WorkspaceMember, Workspace, MemberRole
from tests.conftest import get_auth_headers, create_workspace, invite


async def owner_rows(session_factory, workspace_external_id: str):
    async with session_factory() as session:
        result = await session.execute(
            select(WorkspaceMember.user_id, Workspace.owner_id)
            .join(Workspace, Workspace.id == WorkspaceMember.workspace_id)
            .where(
                Workspace.external_id == workspace_external_id,
                WorkspaceMember.role == MemberRole.OWNER,
            )
        )
        return result.all()


@pytest.mark.asyncio
class TestWorkspaceCrud:
    async def test_create_makes_creator_owner(self, client: AsyncClient, alice, session_factory):
        ws = await create_workspace(client, alice)
        assert ws["owner_external_id"] == alice.external_id
        assert ws["name"] == "Team Space"

        rows = await owner_rows(session_factory, ws["external_id"])
        assert len(rows) == 1
        user_id, owner_id = rows[0]
        assert user_id == owner_id == alice.id

    async def test_list_only_my_workspaces(self, client: AsyncClient, alice, bob):
        await create_workspace(client, alice, "Alice's")
        await create_workspace(client, bob, "Bob's")

        res = await client.get("/api/v1/workspaces", headers=get_auth_headers(alice))
        assert res.status_code == 200
        names = [w["name"] for w in res.json()]
        assert names == ["Alice's"]

    async def test_list_includes_invited_workspaces(self, client: AsyncClient, alice, bob):
        ws = await create_workspace(client, alice)
        await invite(client, alice, ws["external_id"], bob)

        res = await client.get("/api/v1/workspaces", headers=get_auth_headers(bob))
        assert [w["external_id"] for w in res.json()] == [ws["external_id"]]

    async def test_get_requires_membership(self, client: AsyncClient, alice, bob):
        ws = await create_workspace(client, alice)
        res = await client.get(f"/api/v1/workspaces/{ws['external_id']}", headers=get_auth_headers(bob))
        assert res.status_code == 403
        assert res.json()["error"] == "unauthorized"

    async def test_get_unknown_workspace(self, client: AsyncClient, alice):
        res = await client.get("/api/v1/workspaces/does-not-exist", headers=get_auth_headers(alice))
        assert res.status_code == 404
        body = res.json()
        assert body["error"] == "not_found"
        assert body["detail"] == "workspace not found"
        assert "request_id" in body

    async def test_update_by_owner(self, client: AsyncClient, alice):
        ws = await create_workspace(client, alice)
        res = await client.put(
            f"/api/v1/workspaces/{ws['external_id']}",
            json={"name": "Renamed", "description": None},
            headers=get_auth_headers(alice),
        )
        assert res.status_code == 200
        assert res.json()["name"] == "Renamed"
        assert res.json()["modified_at"] is not None

    async def test_update_by_admin_is_denied(self, client: AsyncClient, alice, bob):
        ws = await create_workspace(client, alice)
        await invite(client, alice, ws["external_id"], bob, role="admin")
        res = await client.put(
            f"/api/v1/workspaces/{ws['external_id']}",
            json={"name": "Hijacked"},
            headers=get_auth_headers(bob),
        )
        assert res.status_code == 403

    async def test_empty_name_rejected(self, client: AsyncClient, alice):
        res = await client.post(
            "/api/v1/workspaces", json={"name": ""}, headers=get_auth_headers(alice),
        )
        assert res.status_code == 422


@pytest.mark.asyncio
class TestWorkspaceDeletion:
    async def test_member_cannot_delete_owner_can(self, client: AsyncClient, alice, bob):
        ws = await create_workspace(client, alice)
        ws_id = ws["external_id"]
        res = await invite(client, alice, ws_id, bob, role="member")
        assert res.status_code == 201

        denied = await client.delete(f"/api/v1/workspaces/{ws_id}", headers=get_auth_headers(bob))
        assert denied.status_code == 403
        assert denied.json()["error"] == "unauthorized"

        ok = await client.delete(f"/api/v1/workspaces/{ws_id}", headers=get_auth_headers(alice))
        assert ok.status_code == 200
        assert "message" in ok.json()

        gone = await client.get(f"/api/v1/workspaces/{ws_id}", headers=get_auth_headers(alice))
        assert gone.status_code == 404

    async def test_delete_cascades_boards_and_tasks(
        self, client: AsyncClient, alice, todo_status, session_factory,
    ):
        ws = await create_workspace(client, alice)
        headers = get_auth_headers(alice)
        board = (await client.post(
            f"/api/v1/workspaces/{ws['external_id']}/boards",
            json={"name": "Sprint"}, headers=headers,
        )).json()
        task = (await client.post(
            f"/api/v1/boards/{board['external_id']}/tasks",
            json={"title": "t", "status_external_id": todo_status.external_id},
            headers=headers,
        )).json()

        res = await client.delete(f"/api/v1/workspaces/{ws['external_id']}", headers=headers)
        assert res.status_code == 200

        assert (await client.get(f"/api/v1/boards/{board['external_id']}", headers=headers)).status_code == 404
        assert (await client.get(f"/api/v1/tasks/{task['external_id']}", headers=headers)).status_code == 404
        async with session_factory() as session:
            count = await session.scalar(select(func.count()).select_from(WorkspaceMember))
            assert count == 0
