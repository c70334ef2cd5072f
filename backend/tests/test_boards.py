# tests/test_boards.py — Board router tests
import pytest
from httpx import AsyncClient

from tests.conftest import (
    get_auth_headers, create_workspace, create_board, create_task, invite,
)


@pytest.mark.asyncio
async def test_create_board(client: AsyncClient, alice):
    """Any member of the workspace can create a board"""
    ws = await create_workspace(client, alice)
    board = await create_board(client, alice, ws["external_id"], "Sprint Board")
    assert board["name"] == "Sprint Board"
    assert board["workspace_external_id"] == ws["external_id"]


@pytest.mark.asyncio
async def test_plain_member_can_create_board(client: AsyncClient, alice, bob):
    ws = await create_workspace(client, alice)
    await invite(client, alice, ws["external_id"], bob)
    board = await create_board(client, bob, ws["external_id"])
    assert board["external_id"]


@pytest.mark.asyncio
async def test_outsider_cannot_create_board(client: AsyncClient, alice, bob):
    ws = await create_workspace(client, alice)
    res = await client.post(
        f"/api/v1/workspaces/{ws['external_id']}/boards",
        json={"name": "Sneaky"},
        headers=get_auth_headers(bob),
    )
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_create_board_unknown_workspace(client: AsyncClient, alice):
    res = await client.post(
        "/api/v1/workspaces/missing/boards",
        json={"name": "Orphan"},
        headers=get_auth_headers(alice),
    )
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_list_boards(client: AsyncClient, alice):
    ws = await create_workspace(client, alice)
    await create_board(client, alice, ws["external_id"], "One")
    await create_board(client, alice, ws["external_id"], "Two")

    res = await client.get(
        f"/api/v1/workspaces/{ws['external_id']}/boards", headers=get_auth_headers(alice),
    )
    assert res.status_code == 200
    assert [b["name"] for b in res.json()] == ["One", "Two"]


@pytest.mark.asyncio
async def test_get_and_update_board(client: AsyncClient, alice, bob):
    ws = await create_workspace(client, alice)
    await invite(client, alice, ws["external_id"], bob)
    board = await create_board(client, alice, ws["external_id"])
    url = f"/api/v1/boards/{board['external_id']}"

    res = await client.get(url, headers=get_auth_headers(bob))
    assert res.status_code == 200
    assert res.json()["name"] == "Sprint"

    res = await client.put(
        url, json={"name": "Sprint 2", "description": "next"}, headers=get_auth_headers(bob),
    )
    assert res.status_code == 200
    assert res.json()["name"] == "Sprint 2"
    assert res.json()["description"] == "next"


@pytest.mark.asyncio
async def test_outsider_cannot_read_board(client: AsyncClient, alice, carol):
    ws = await create_workspace(client, alice)
    board = await create_board(client, alice, ws["external_id"])
    res = await client.get(f"/api/v1/boards/{board['external_id']}", headers=get_auth_headers(carol))
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_member_deletes_board_with_tasks(client: AsyncClient, alice, bob, todo_status):
    """Board deletion only needs membership and removes the board's tasks"""
    ws = await create_workspace(client, alice)
    await invite(client, alice, ws["external_id"], bob)
    board = await create_board(client, alice, ws["external_id"])
    task = (await create_task(client, alice, board["external_id"], todo_status)).json()

    res = await client.delete(f"/api/v1/boards/{board['external_id']}", headers=get_auth_headers(bob))
    assert res.status_code == 200

    headers = get_auth_headers(alice)
    assert (await client.get(f"/api/v1/boards/{board['external_id']}", headers=headers)).status_code == 404
    assert (await client.get(f"/api/v1/tasks/{task['external_id']}", headers=headers)).status_code == 404
