"""Activity Schemas — audit entry input and resolved output."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.schemas.common import ApiModel, CreateCommand
from app.schemas.user import UserSummaryOut


class ActivityCreate(CreateCommand):
    action: str = Field(min_length=1, max_length=200)
    project: UUID | None = None
    task: UUID | None = None


class ActivityProjectOut(ApiModel):
    id: UUID
    title: str


class ActivityTaskOut(ApiModel):
    id: UUID
    title: str
    status: str


class ActivityOut(ApiModel):
    id: UUID
    action: str
    user: UserSummaryOut | None
    project: ActivityProjectOut | None
    task: ActivityTaskOut | None
    timestamp: datetime
