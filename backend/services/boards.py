# services/boards.py — Board orchestration
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Board, Lifecycle
from schemas import BoardRequest, BoardOut, board_out
from services.access_policy import AccessPolicy, Capability, ResourceRef
from services.common import commit
from services.identity import IdentityResolver

logger = logging.getLogger("nexboard.boards")


class BoardService:
    """Boards inherit access from their workspace.

    Every board operation, deletion included, only needs IsMember on the
    parent workspace.
    """

    def __init__(
        self,
        db: AsyncSession,
        identities: Optional[IdentityResolver] = None,
        policy: Optional[AccessPolicy] = None,
    ):
        self.db = db
        self.identities = identities or IdentityResolver(db)
        self.policy = policy or AccessPolicy(db, self.identities)

    async def create(
        self, actor_external_id: str, workspace_external_id: str, data: BoardRequest,
    ) -> BoardOut:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.workspace(workspace_external_id), Capability.IS_MEMBER,
        )
        board = Board(
            workspace=decision.workspace,
            created_by_id=decision.actor.id,
            name=data.name,
            description=data.description,
        )
        self.db.add(board)
        await commit(self.db)
        return board_out(board)

    async def list_for_workspace(
        self, actor_external_id: str, workspace_external_id: str,
    ) -> List[BoardOut]:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.workspace(workspace_external_id), Capability.IS_MEMBER,
        )
        stmt = (
            select(Board)
            .where(
                Board.workspace_id == decision.workspace.id,
                Board.lifecycle == Lifecycle.ACTIVE,
            )
            .order_by(Board.created_at.asc(), Board.id.asc())
        )
        result = await self.db.execute(stmt)
        return [board_out(b) for b in result.scalars().unique().all()]

    async def get(self, actor_external_id: str, board_external_id: str) -> BoardOut:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.board(board_external_id), Capability.IS_MEMBER,
        )
        return board_out(decision.resource)

    async def update(
        self, actor_external_id: str, board_external_id: str, data: BoardRequest,
    ) -> BoardOut:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.board(board_external_id), Capability.IS_MEMBER,
        )
        board = decision.resource
        board.name = data.name
        board.description = data.description
        await commit(self.db)
        return board_out(board)

    async def delete(self, actor_external_id: str, board_external_id: str) -> None:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.board(board_external_id), Capability.IS_MEMBER,
        )
        await self.db.delete(decision.resource)
        await commit(self.db)
        logger.info(f"Board {board_external_id} deleted by {actor_external_id}")
