"""Task Schemas — create/update/status/assign commands and TaskView output.

Invariants:
    - TaskCreate requires project; legacy "projectId" is accepted and folded
      into project ("project" wins when both are sent)
    - stage, createdBy, completedAt are never client-writable on create
    - status stays a raw string here: core/task_rules.py is the one validator
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID

from pydantic import Field, model_validator

from app.core.domain_types import Priority, TaskStage
from app.schemas.common import ApiModel, CreateCommand, UpdateCommand
from app.schemas.user import UserSummaryOut


class TaskCreate(CreateCommand):
    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    project: UUID
    assigned_to: UUID | None = None
    status: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_project_id(cls, data):
        if isinstance(data, dict) and "projectId" in data:
            data = dict(data)
            legacy = data.pop("projectId")
            if data.get("project") is None:
                data["project"] = legacy
        return data


class TaskUpdate(UpdateCommand):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset(
        {"title", "project", "status", "stage", "priority", "tags"},
    )

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    project: UUID | None = None
    assigned_to: UUID | None = None
    status: str | None = None
    stage: TaskStage | None = None
    priority: Priority | None = None
    due_date: datetime | None = None
    tags: list[str] | None = None


class TaskStatusUpdate(CreateCommand):
    status: str


class TaskAssign(CreateCommand):
    user_id: UUID


class ProjectSummaryOut(ApiModel):
    id: UUID
    title: str
    description: str | None = None


class TaskOut(ApiModel):
    id: UUID
    title: str
    description: str | None
    project_id: UUID | None
    project: ProjectSummaryOut | None
    assigned_to_id: UUID | None
    assigned_to: UserSummaryOut | None
    created_by_id: UUID | None
    created_by: UserSummaryOut | None
    status: str
    stage: str
    priority: str
    due_date: datetime | None
    tags: list[str]
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime
