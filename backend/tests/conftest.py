# tests/conftest.py — Shared test fixtures
import os

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Use SQLite for tests
TEST_DB_URL = "sqlite+aiosqlite:///./test.db"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-unit-tests-only-min-32-chars"
os.environ["ENVIRONMENT"] = "test"

from models import Base, User, Status
from auth import AuthService
from database import get_db_session
from main import app

TEST_PASSWORD = "TestPassword123!"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    engine = create_async_engine(TEST_DB_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    """HTTP test client with overridden DB dependency"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_user(db_session, name: str, email: str) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=AuthService.hash_password(TEST_PASSWORD),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def alice(db_session):
    """Creates workspaces in most tests"""
    return await make_user(db_session, "Alice", "alice@nexboard.dev")


@pytest_asyncio.fixture
async def bob(db_session):
    return await make_user(db_session, "Bob", "bob@nexboard.dev")


@pytest_asyncio.fixture
async def carol(db_session):
    return await make_user(db_session, "Carol", "carol@nexboard.dev")


@pytest_asyncio.fixture
async def todo_status(db_session):
    status = Status(name="To Do", color="#cccccc", position=0)
    db_session.add(status)
    await db_session.commit()
    await db_session.refresh(status)
    return status


@pytest_asyncio.fixture
async def done_status(db_session):
    status = Status(name="Done", color="#00aa00", position=2)
    db_session.add(status)
    await db_session.commit()
    await db_session.refresh(status)
    return status


def get_auth_headers(user: User) -> dict:
    """Generate auth headers for a user"""
    token = AuthService.token_for(user.external_id, user.email)
    return {"Authorization": f"Bearer {token}"}


# ============================================================
# HTTP HELPERS
# ============================================================

async def create_workspace(client: AsyncClient, owner: User, name: str = "Team Space") -> dict:
    resp = await client.post(
        "/api/v1/workspaces",
        json={"name": name, "description": "Shared planning"},
        headers=get_auth_headers(owner),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def invite(client: AsyncClient, actor: User, workspace_id: str, user: User, role: str = "member"):
    return await client.post(
        f"/api/v1/workspaces/{workspace_id}/members",
        json={"user_external_id": user.external_id, "role": role},
        headers=get_auth_headers(actor),
    )


async def create_board(client: AsyncClient, actor: User, workspace_id: str, name: str = "Sprint") -> dict:
    resp = await client.post(
        f"/api/v1/workspaces/{workspace_id}/boards",
        json={"name": name},
        headers=get_auth_headers(actor),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_task(client: AsyncClient, actor: User, board_id: str, status: Status, **fields):
    body = {"title": "Write tests", "status_external_id": status.external_id}
    body.update(fields)
    return await client.post(
        f"/api/v1/boards/{board_id}/tasks",
        json=body,
        headers=get_auth_headers(actor),
    )
