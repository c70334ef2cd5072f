# services/statuses.py — Global status vocabulary
import logging
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from errors import ConflictError
from models import Status, Lifecycle
from schemas import StatusRequest, StatusOut, status_out
from services.common import commit
from services.identity import IdentityResolver
from services.referential_guard import ReferentialGuard

logger = logging.getLogger("nexboard.statuses")

DEFAULT_STATUSES = ("To Do", "In Progress", "Done")


class StatusService:
    """CRUD for statuses shared by every workspace.

    Any authenticated user may manage statuses. Names are unique among
    active statuses; the check and the write share one transaction and the
    partial unique index on ``statuses.name`` settles concurrent writers.
    Deleting a status that active tasks still use is refused.
    """

    def __init__(
        self,
        db: AsyncSession,
        identities: Optional[IdentityResolver] = None,
        guard: Optional[ReferentialGuard] = None,
    ):
        self.db = db
        self.identities = identities or IdentityResolver(db)
        self.guard = guard or ReferentialGuard(db)

    async def _ensure_name_free(self, name: str, exclude_id: Optional[int] = None) -> None:
        stmt = select(Status.id).where(
            Status.name == name,
            Status.lifecycle == Lifecycle.ACTIVE,
        )
        if exclude_id is not None:
            stmt = stmt.where(Status.id != exclude_id)
        result = await self.db.execute(stmt)
        if result.first() is not None:
            raise ConflictError(f"a status named '{name}' already exists")

    async def create(self, actor_external_id: str, data: StatusRequest) -> StatusOut:
        await self.identities.user(actor_external_id)
        await self._ensure_name_free(data.name)

        status = Status(
            name=data.name,
            color=data.color,
            position=data.position if data.position is not None else 0,
        )
        self.db.add(status)
        await commit(self.db, f"a status named '{data.name}' already exists")
        return status_out(status)

    async def list(self, actor_external_id: str) -> List[StatusOut]:
        await self.identities.user(actor_external_id)
        stmt = (
            select(Status)
            .where(Status.lifecycle == Lifecycle.ACTIVE)
            .order_by(Status.position.asc(), Status.id.asc())
        )
        result = await self.db.execute(stmt)
        return [status_out(s) for s in result.scalars().all()]

    async def get(self, actor_external_id: str, status_external_id: str) -> StatusOut:
        await self.identities.user(actor_external_id)
        status = await self.identities.status(status_external_id)
        return status_out(status)

    async def update(
        self, actor_external_id: str, status_external_id: str, data: StatusRequest,
    ) -> StatusOut:
        await self.identities.user(actor_external_id)
        status = await self.identities.status(status_external_id, for_update=True)

        if status.name != data.name:
            await self._ensure_name_free(data.name, exclude_id=status.id)

        status.name = data.name
        status.color = data.color
        if data.position is not None:
            status.position = data.position
        await commit(self.db, f"a status named '{data.name}' already exists")
        return status_out(status)

    async def delete(self, actor_external_id: str, status_external_id: str) -> None:
        await self.identities.user(actor_external_id)
        # Waits for task writers holding a share lock on this row, so the
        # guard count below sees their committed tasks
        status = await self.identities.status(status_external_id, for_update=True)
        await self.guard.ensure_can_delete("status", status.id)

        status.lifecycle = Lifecycle.INACTIVE
        await commit(self.db)
        logger.info(f"Status {status_external_id} ({status.name}) deleted by {actor_external_id}")

    async def seed_defaults(self, names: Sequence[str] = DEFAULT_STATUSES) -> List[StatusOut]:
        """Create any of ``names`` not already active, positioned in order.

        Used by the seed script on an empty database; commits once.
        """
        result = await self.db.execute(
            select(Status.name).where(Status.lifecycle == Lifecycle.ACTIVE)
        )
        existing = set(result.scalars().all())

        created = []
        for position, name in enumerate(names):
            if name in existing:
                continue
            existing.add(name)
            status = Status(name=name, position=position)
            self.db.add(status)
            created.append(status)
        await commit(self.db)
        if created:
            logger.info(f"Seeded statuses: {', '.join(s.name for s in created)}")
        return [status_out(s) for s in created]
