"""Database Manager — init-once lifecycle and session error mapping."""

import pytest
from sqlalchemy.exc import OperationalError

import app.infrastructure.database as db_module
from app.core.errors import DatabaseError
from app.infrastructure.database import (
    DatabaseSessionManager, close_db, get_db_manager, init_db,
)

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def no_manager(monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)


def test_get_db_manager_before_init_raises():
    with pytest.raises(RuntimeError):
        get_db_manager()


async def test_init_db_is_idempotent():
    first = init_db(SQLITE_URL)
    second = init_db("postgresql+asyncpg://ignored/ignored")
    assert first is second
    assert get_db_manager() is first
    await close_db()


async def test_close_db_resets_manager():
    init_db(SQLITE_URL)
    await close_db()
    with pytest.raises(RuntimeError):
        get_db_manager()


async def test_close_db_without_manager_is_noop():
    await close_db()


async def test_health_check_on_sqlite():
    manager = DatabaseSessionManager(SQLITE_URL)
    assert await manager.health_check() is True
    await manager.close()


async def test_sqlalchemy_errors_become_database_error():
    manager = DatabaseSessionManager(SQLITE_URL)
    with pytest.raises(DatabaseError) as exc:
        async with manager.session():
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))
    assert exc.value.http_status == 500
    assert exc.value.operation == "execute"
    await manager.close()
