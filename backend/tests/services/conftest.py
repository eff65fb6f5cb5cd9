"""Service test fixtures — async DB + FastAPI test client + seeded users.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so readiness probes hit the test engine
    - Users are seeded through the ORM; requests authenticate with X-User-Id

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Timestamps seeded explicitly where ordering is asserted
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.models.user import User
import app.infrastructure.database as db_module
import app.models  # noqa: F401  (register every table on Base.metadata)
from app.main import app

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _add_user(db, name, email, role, offset_minutes, is_active=True):
    stamp = BASE_TIME + timedelta(minutes=offset_minutes)
    user = User(
        name=name, email=email, role=role, is_active=is_active,
        created_at=stamp, updated_at=stamp,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def admin(test_db):
    return await _add_user(test_db, "Ada Admin", "ada@example.com", "admin", 0)


@pytest.fixture
async def alice(test_db):
    return await _add_user(test_db, "Alice", "alice@example.com", "member", 1)


@pytest.fixture
async def bob(test_db):
    return await _add_user(test_db, "Bob", "bob@example.com", "member", 2)


@pytest.fixture
async def inactive_user(test_db):
    return await _add_user(
        test_db, "Ivan Inactive", "ivan@example.com", "member", 3, is_active=False,
    )


@pytest.fixture
def as_user():
    """Header factory: as_user(alice) -> {"X-User-Id": ...}."""
    def _headers(user) -> dict:
        return {"X-User-Id": str(user.id)}
    return _headers


@pytest.fixture
def create_project(client, as_user):
    """POST a project as `owner` and return its JSON data."""
    async def _create(owner, title="Launch Week", **fields) -> dict:
        res = await client.post(
            "/api/projects", json={"title": title, **fields},
            headers=as_user(owner),
        )
        assert res.status_code == 201, res.text
        return res.json()["data"]
    return _create


@pytest.fixture
def create_task(client, as_user):
    """POST a task into `project_id` as `creator` and return its JSON data."""
    async def _create(creator, project_id, title="Write copy", **fields) -> dict:
        res = await client.post(
            "/api/tasks", json={"title": title, "project": project_id, **fields},
            headers=as_user(creator),
        )
        assert res.status_code == 201, res.text
        return res.json()["data"]
    return _create
