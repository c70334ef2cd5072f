# services/referential_guard.py — Blocks deletes that would orphan live rows
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from errors import ConflictError, InvalidArgumentError
from models import Task, Lifecycle

# Kinds with cross-entity references. Workspaces and boards only contain
# their dependents, which are removed with them.
GUARDED_KINDS = ("status",)


class ReferentialGuard:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def dependents(self, kind: str, resource_id: int) -> int:
        if kind != "status":
            raise InvalidArgumentError(f"no referential guard for '{kind}'")
        stmt = select(func.count(Task.id)).where(
            Task.status_id == resource_id,
            Task.lifecycle == Lifecycle.ACTIVE,
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def can_delete(self, kind: str, resource_id: int) -> bool:
        if kind not in GUARDED_KINDS:
            return True
        return await self.dependents(kind, resource_id) == 0

    async def ensure_can_delete(self, kind: str, resource_id: int) -> None:
        if not await self.can_delete(kind, resource_id):
            raise ConflictError(
                f"{kind} is in use by one or more tasks and cannot be deleted; "
                "move those tasks to another status first"
            )
