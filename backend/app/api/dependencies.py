"""Request Dependencies — principal resolution and per-request service wiring.

Invariants:
    - The principal is resolved once per request from the X-User-Id header
    - The stored user's role is authoritative; clients never assert their role
    - Missing header, malformed id, unknown or inactive user → AuthenticationError (401)
    - Every service shares the request's AsyncSession (one unit of work per request)

Design Decisions:
    - Header identity stands in for the upstream identity provider: token
      verification happens before requests reach this service
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import Principal, UserRole
from app.core.errors import AuthenticationError
from app.infrastructure.database import get_db
from app.repositories.users import SqlUserRepository
from app.services.activity_reporter import ActivityReporter
from app.services.project_lifecycle import ProjectLifecycle
from app.services.task_lifecycle import TaskLifecycle
from app.services.user_directory import UserDirectory

PRINCIPAL_HEADER = "X-User-Id"


async def get_principal(
    x_user_id: str | None = Header(None, alias=PRINCIPAL_HEADER),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    if not x_user_id:
        raise AuthenticationError()
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise AuthenticationError("Invalid user identity")
    user = await SqlUserRepository(db).get_active(user_id)
    if user is None:
        raise AuthenticationError("User not found or inactive")
    return Principal(id=user.id, role=UserRole(user.role))


def get_project_lifecycle(db: AsyncSession = Depends(get_db)) -> ProjectLifecycle:
    return ProjectLifecycle(db)


def get_task_lifecycle(db: AsyncSession = Depends(get_db)) -> TaskLifecycle:
    return TaskLifecycle(db)


def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)


def get_activity_reporter(db: AsyncSession = Depends(get_db)) -> ActivityReporter:
    return ActivityReporter(db)
