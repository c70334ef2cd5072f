# services/tasks.py — Task orchestration
import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from errors import InvalidArgumentError
from models import Task, Status, Board, User, TaskPriority, Lifecycle
from schemas import (
    TaskRequest, TaskOut, MoveTaskStatusRequest, AssignTaskRequest, task_out,
)
from services.access_policy import AccessPolicy, Capability, ResourceRef
from services.common import commit
from services.identity import IdentityResolver

logger = logging.getLogger("nexboard.tasks")


def parse_priority(value: Optional[str], default: TaskPriority) -> TaskPriority:
    if value is None or value == "":
        return default
    try:
        return TaskPriority(value)
    except ValueError:
        allowed = ", ".join(p.value for p in TaskPriority)
        raise InvalidArgumentError(f"invalid priority '{value}', expected one of: {allowed}")


class TaskService:
    """Tasks inherit access from board → workspace.

    Creating, listing and reading need IsMember on the governing workspace.
    Update, move, assign and delete only require the actor and task to
    resolve. Any assignee must be a member of the task's workspace at the
    time of assignment.
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

    async def _resolve_assignee(self, external_id: Optional[str]) -> Optional[User]:
        if external_id is None:
            return None
        return await self.identities.user(external_id, label="assignee")

    async def _next_position(self, board: Board) -> int:
        stmt = select(func.max(Task.position)).where(
            Task.board_id == board.id,
            Task.lifecycle == Lifecycle.ACTIVE,
        )
        result = await self.db.execute(stmt)
        max_pos = result.scalar()
        return 0 if max_pos is None else max_pos + 1

    async def create(
        self, actor_external_id: str, board_external_id: str, data: TaskRequest,
    ) -> TaskOut:
        actor = await self.identities.user(actor_external_id)
        board = await self.identities.board(board_external_id)
        status = await self.identities.status(data.status_external_id, for_share=True)
        assignee = await self._resolve_assignee(data.assigned_to_external_id)
        priority = parse_priority(data.priority, TaskPriority.LOW)

        decision = await self.policy.enforce(actor, board, Capability.IS_MEMBER)
        if assignee is not None:
            await self.policy.ensure_member(decision.workspace, assignee)

        task = Task(
            board=board,
            status=status,
            assignee=assignee,
            creator=actor,
            title=data.title,
            description=data.description,
            priority=priority,
            due_date=data.due_date,
            position=await self._next_position(board),
        )
        self.db.add(task)
        await commit(self.db)
        return task_out(task)

    async def list_for_board(self, actor_external_id: str, board_external_id: str) -> List[TaskOut]:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.board(board_external_id), Capability.IS_MEMBER,
        )
        stmt = (
            select(Task)
            .join(Status, Task.status_id == Status.id)
            .where(
                Task.board_id == decision.resource.id,
                Task.lifecycle == Lifecycle.ACTIVE,
            )
            .order_by(Status.position.asc(), Task.position.asc(), Task.id.asc())
        )
        result = await self.db.execute(stmt)
        return [task_out(t) for t in result.scalars().unique().all()]

    async def get(self, actor_external_id: str, task_external_id: str) -> TaskOut:
        decision = await self.policy.authorize(
            actor_external_id, ResourceRef.task(task_external_id), Capability.IS_MEMBER,
        )
        return task_out(decision.resource)

    async def update(
        self, actor_external_id: str, task_external_id: str, data: TaskRequest,
    ) -> TaskOut:
        await self.identities.user(actor_external_id)
        task = await self.identities.task(task_external_id)
        status = await self.identities.status(data.status_external_id, for_share=True)
        assignee = await self._resolve_assignee(data.assigned_to_external_id)
        priority = parse_priority(data.priority, TaskPriority(task.priority))

        # An unchanged assignee is not re-validated
        if assignee is not None and assignee.id != task.assigned_to_id:
            await self.policy.ensure_member(task.board.workspace, assignee)

        task.title = data.title
        task.description = data.description
        task.priority = priority
        task.due_date = data.due_date
        task.status = status
        task.assignee = assignee
        await commit(self.db)
        return task_out(task)

    async def move(
        self, actor_external_id: str, task_external_id: str, data: MoveTaskStatusRequest,
    ) -> TaskOut:
        await self.identities.user(actor_external_id)
        task = await self.identities.task(task_external_id)
        status = await self.identities.status(data.status_external_id, for_share=True)

        task.status = status
        await commit(self.db)
        return task_out(task)

    async def assign(
        self, actor_external_id: str, task_external_id: str, data: AssignTaskRequest,
    ) -> TaskOut:
        await self.identities.user(actor_external_id)
        task = await self.identities.task(task_external_id)
        assignee = await self._resolve_assignee(data.assigned_to_external_id)

        if assignee is not None:
            await self.policy.ensure_member(task.board.workspace, assignee)

        task.assignee = assignee
        await commit(self.db)
        return task_out(task)

    async def delete(self, actor_external_id: str, task_external_id: str) -> None:
        await self.identities.user(actor_external_id)
        task = await self.identities.task(task_external_id)
        await self.db.delete(task)
        await commit(self.db)
        logger.info(f"Task {task_external_id} deleted by {actor_external_id}")
