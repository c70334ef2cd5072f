# services/identity.py — External id → internal record lookups
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from errors import NotFoundError
from models import User, Workspace, Board, Status, Task, Lifecycle


class IdentityResolver:
    """Resolves external identifiers to ACTIVE rows.

    Pure lookups: nothing here writes, and a row that is missing or no
    longer ACTIVE is reported as ``NotFoundError``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _one(self, stmt, label: str):
        result = await self.db.execute(stmt)
        row = result.scalars().unique().one_or_none()
        if row is None:
            raise NotFoundError(f"{label} not found")
        return row

    async def user(self, external_id: str, label: str = "user") -> User:
        stmt = select(User).where(
            User.external_id == external_id,
            User.lifecycle == Lifecycle.ACTIVE,
        )
        return await self._one(stmt, label)

    async def user_by_email(self, email: str) -> User:
        stmt = select(User).where(
            User.email == email,
            User.lifecycle == Lifecycle.ACTIVE,
        )
        return await self._one(stmt, "user")

    async def workspace(self, external_id: str, for_update: bool = False) -> Workspace:
        stmt = select(Workspace).where(
            Workspace.external_id == external_id,
            Workspace.lifecycle == Lifecycle.ACTIVE,
        )
        if for_update:
            stmt = stmt.with_for_update(of=Workspace)
        return await self._one(stmt, "workspace")

    async def board(self, external_id: str) -> Board:
        stmt = select(Board).join(Board.workspace).where(
            Board.external_id == external_id,
            Board.lifecycle == Lifecycle.ACTIVE,
            Workspace.lifecycle == Lifecycle.ACTIVE,
        )
        return await self._one(stmt, "board")

    async def status(
        self, external_id: str, for_update: bool = False, for_share: bool = False,
    ) -> Status:
        """``for_share`` is for writers that point a task at the status; it
        conflicts with the ``for_update`` lock taken by status deletion.
        """
        stmt = select(Status).where(
            Status.external_id == external_id,
            Status.lifecycle == Lifecycle.ACTIVE,
        )
        if for_update:
            stmt = stmt.with_for_update()
        elif for_share:
            stmt = stmt.with_for_update(read=True)
        return await self._one(stmt, "status")

    async def task(self, external_id: str) -> Task:
        stmt = select(Task).join(Task.board).join(Board.workspace).where(
            Task.external_id == external_id,
            Task.lifecycle == Lifecycle.ACTIVE,
            Board.lifecycle == Lifecycle.ACTIVE,
            Workspace.lifecycle == Lifecycle.ACTIVE,
        )
        return await self._one(stmt, "task")
