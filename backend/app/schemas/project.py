"""Project Schemas — create/update commands and ProjectView output.

Invariants:
    - ProjectCreate.title: 1-100 chars after strip; description <= 1000
    - ProjectUpdate has no owner/members field: unknown fields are rejected (400)
    - Embedded task drafts follow the same limits as TaskCreate, but are
      validated one by one at creation time: a bad draft fails alone
"""

from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID

from pydantic import Field

from app.core.domain_types import Priority, ProjectStatus
from app.schemas.common import ApiModel, CreateCommand, UpdateCommand
from app.schemas.user import UserSummaryOut

HEX_COLOR = r"^#[0-9A-Fa-f]{3}([0-9A-Fa-f]{3})?$"


class ProjectTaskDraft(CreateCommand):
    """Task embedded in a project creation payload."""
    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    priority: Priority = Priority.MEDIUM
    status: str | None = None
    due_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)


class ProjectCreate(CreateCommand):
    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    status: ProjectStatus = ProjectStatus.ACTIVE
    priority: Priority = Priority.MEDIUM
    deadline: datetime | None = None
    color: str | None = Field(None, pattern=HEX_COLOR)
    tasks: list[dict[str, Any]] = Field(default_factory=list)


class ProjectUpdate(UpdateCommand):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset(
        {"title", "status", "priority", "color"},
    )

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    status: ProjectStatus | None = None
    priority: Priority | None = None
    deadline: datetime | None = None
    color: str | None = Field(None, pattern=HEX_COLOR)


class MemberAdd(CreateCommand):
    user_id: UUID


class OwnershipTransfer(CreateCommand):
    user_id: UUID


class ProjectOut(ApiModel):
    id: UUID
    title: str
    description: str | None
    owner_id: UUID
    owner: UserSummaryOut | None
    members: list[UserSummaryOut]
    status: str
    priority: str
    deadline: datetime | None
    color: str
    task_count: int
    created_at: datetime
    updated_at: datetime
