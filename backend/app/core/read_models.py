"""Read Models — composed views returned by repositories with references resolved.

Invariants:
    - Plain frozen dataclasses: no ORM objects cross the core boundary
    - A dangling weak reference resolves to None, never raises
    - ProjectView.members preserves insertion order

Design Decisions:
    - Explicit composition over ORM lazy loading: storage joins stay in the
      repositories, the core only sees finished views (ADR: replace populate())
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class UserSummary:
    id: UUID
    name: str
    email: str
    avatar: str | None = None
    role: str | None = None


@dataclass(frozen=True)
class UserView:
    id: UUID
    name: str
    email: str
    role: str
    is_active: bool
    avatar: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProjectSummary:
    id: UUID
    title: str
    description: str | None = None


@dataclass(frozen=True)
class ProjectView:
    """Project with owner and members resolved plus its live task count."""
    id: UUID
    title: str
    description: str | None
    owner_id: UUID
    owner: UserSummary | None
    members: list[UserSummary]
    status: str
    priority: str
    deadline: datetime | None
    color: str
    created_at: datetime
    updated_at: datetime
    task_count: int = 0
    member_ids: list[UUID] = field(default_factory=list)


@dataclass(frozen=True)
class TaskView:
    """Task with project, assignee and creator resolved."""
    id: UUID
    title: str
    description: str | None
    project_id: UUID | None
    project: ProjectSummary | None
    assigned_to_id: UUID | None
    assigned_to: UserSummary | None
    created_by_id: UUID | None
    created_by: UserSummary | None
    status: str
    stage: str
    priority: str
    due_date: datetime | None
    tags: list[str]
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TaskRef:
    id: UUID
    title: str
    status: str


@dataclass(frozen=True)
class ActivityEntryView:
    id: UUID
    action: str
    user: UserSummary | None
    project: ProjectSummary | None
    task: TaskRef | None
    timestamp: datetime
