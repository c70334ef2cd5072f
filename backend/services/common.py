# services/common.py — Commit helper shared by the orchestrators
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import ConflictError


async def commit(db: AsyncSession, conflict_message: Optional[str] = None) -> None:
    """Commit the request's unit of work.

    A uniqueness violation caught by the database (a concurrent writer won
    the race after our own check passed) is reported as ``ConflictError``.
    """
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(conflict_message or "conflicting write, please retry")
