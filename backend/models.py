# models.py — Database models for NexBoard
# - Integer internal ids, UUID external ids (the only ids ever exposed)
# - Workspace-scoped membership roles (owner, admin, member)
# - Global status vocabulary shared by every workspace
# - Lifecycle flag on every entity; queries only see ACTIVE rows

import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum
from sqlalchemy import (
    Column, String, DateTime, Integer, Enum as SQLEnum, ForeignKey, Text, Index,
    PrimaryKeyConstraint, text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow():
    return datetime.now(timezone.utc)


def new_uuid():
    return str(uuid.uuid4())


# ============================================================
# ENUMS
# ============================================================

class Lifecycle(str, PyEnum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class MemberRole(str, PyEnum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class TaskPriority(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ============================================================
# USERS
# ============================================================

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String, unique=True, nullable=False, default=new_uuid)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    avatar_url = Column(String, nullable=True)
    lifecycle = Column(SQLEnum(Lifecycle), default=Lifecycle.ACTIVE, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    modified_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    memberships = relationship("WorkspaceMember", back_populates="user")

    __table_args__ = (
        Index(
            "uq_users_active_email", "email", unique=True,
            postgresql_where=text("lifecycle = 'ACTIVE'"),
            sqlite_where=text("lifecycle = 'ACTIVE'"),
        ),
    )


# ============================================================
# WORKSPACES & MEMBERSHIP
# ============================================================

class Workspace(Base):
    __tablename__ = "workspaces"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String, unique=True, nullable=False, default=new_uuid)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    lifecycle = Column(SQLEnum(Lifecycle), default=Lifecycle.ACTIVE, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    modified_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    owner = relationship("User", foreign_keys=[owner_id], lazy="joined", innerjoin=True)
    members = relationship(
        "WorkspaceMember", back_populates="workspace",
        cascade="all, delete-orphan",
    )
    boards = relationship(
        "Board", back_populates="workspace",
        cascade="all, delete-orphan",
    )


class WorkspaceMember(Base):
    """Binding of a user to a workspace with exactly one role.

    The workspace owner always holds the single ``owner`` row; the composite
    primary key keeps a user from appearing twice in the same workspace.
    """
    __tablename__ = "workspace_members"

    workspace_id = Column(Integer, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(SQLEnum(MemberRole), nullable=False, default=MemberRole.MEMBER)
    joined_at = Column(DateTime(timezone=True), default=utcnow)
    modified_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    workspace = relationship("Workspace", back_populates="members")
    user = relationship("User", back_populates="memberships", lazy="joined")

    __table_args__ = (
        PrimaryKeyConstraint("workspace_id", "user_id", name="pk_workspace_members"),
    )


# ============================================================
# BOARDS
# ============================================================

class Board(Base):
    __tablename__ = "boards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String, unique=True, nullable=False, default=new_uuid)
    workspace_id = Column(Integer, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    lifecycle = Column(SQLEnum(Lifecycle), default=Lifecycle.ACTIVE, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    modified_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    workspace = relationship("Workspace", back_populates="boards", lazy="joined", innerjoin=True)
    tasks = relationship(
        "Task", back_populates="board",
        cascade="all, delete-orphan",
    )


# ============================================================
# STATUSES (global vocabulary)
# ============================================================

class Status(Base):
    __tablename__ = "statuses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String, unique=True, nullable=False, default=new_uuid)
    name = Column(String, nullable=False)
    color = Column(String, nullable=True)
    position = Column(Integer, nullable=False, default=0)
    lifecycle = Column(SQLEnum(Lifecycle), default=Lifecycle.ACTIVE, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    modified_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    __table_args__ = (
        # Names are unique among active statuses only
        Index(
            "uq_statuses_active_name", "name", unique=True,
            postgresql_where=text("lifecycle = 'ACTIVE'"),
            sqlite_where=text("lifecycle = 'ACTIVE'"),
        ),
        Index("idx_status_position", "position"),
    )


# ============================================================
# TASKS
# ============================================================

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String, unique=True, nullable=False, default=new_uuid)
    board_id = Column(Integer, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    status_id = Column(Integer, ForeignKey("statuses.id"), nullable=False, index=True)
    assigned_to_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(SQLEnum(TaskPriority), default=TaskPriority.LOW, nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=True)
    position = Column(Integer, nullable=False, default=0)
    lifecycle = Column(SQLEnum(Lifecycle), default=Lifecycle.ACTIVE, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    modified_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    board = relationship("Board", back_populates="tasks", lazy="joined", innerjoin=True)
    status = relationship("Status", lazy="joined", innerjoin=True)
    assignee = relationship("User", foreign_keys=[assigned_to_id], lazy="joined")
    creator = relationship("User", foreign_keys=[created_by_id], lazy="joined", innerjoin=True)

    __table_args__ = (
        Index("idx_task_board_position", "board_id", "position"),
        Index("idx_task_status_lifecycle", "status_id", "lifecycle"),
    )
