# tests/test_referential_guard.py — Status deletion precondition
import pytest

from errors import ConflictError, InvalidArgumentError
from models import Board, Task, Lifecycle, Workspace
from services.referential_guard import ReferentialGuard


async def add_task(db_session, owner, status):
    workspace = Workspace(name="W", owner=owner)
    board = Board(workspace=workspace, name="B")
    task = Task(board=board, status=status, creator=owner, title="T")
    db_session.add_all([workspace, board, task])
    await db_session.commit()
    return task


@pytest.mark.asyncio
async def test_unused_status_can_be_deleted(db_session, todo_status):
    guard = ReferentialGuard(db_session)
    assert await guard.dependents("status", todo_status.id) == 0
    assert await guard.can_delete("status", todo_status.id)
    await guard.ensure_can_delete("status", todo_status.id)


@pytest.mark.asyncio
async def test_active_task_blocks_delete(db_session, alice, todo_status):
    await add_task(db_session, alice, todo_status)
    guard = ReferentialGuard(db_session)
    assert await guard.dependents("status", todo_status.id) == 1
    with pytest.raises(ConflictError):
        await guard.ensure_can_delete("status", todo_status.id)


@pytest.mark.asyncio
async def test_inactive_tasks_are_not_dependents(db_session, alice, todo_status):
    task = await add_task(db_session, alice, todo_status)
    task.lifecycle = Lifecycle.INACTIVE
    await db_session.commit()
    assert await ReferentialGuard(db_session).can_delete("status", todo_status.id)


@pytest.mark.asyncio
async def test_unguarded_kinds(db_session):
    guard = ReferentialGuard(db_session)
    assert await guard.can_delete("board", 1)
    with pytest.raises(InvalidArgumentError):
        await guard.dependents("board", 1)
