"""User Schemas — profile update command and user outputs.

Invariants:
    - UserUpdate carries role/isActive; who may write them is decided in
      core/authorization.py, not here
    - Email stored lowercased
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID

from pydantic import Field, field_validator

from app.core.domain_types import UserRole
from app.schemas.common import ApiModel, UpdateCommand

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserSummaryOut(ApiModel):
    id: UUID
    name: str
    email: str
    avatar: str | None = None
    role: str | None = None


class UserOut(ApiModel):
    id: UUID
    name: str
    email: str
    role: str
    is_active: bool
    avatar: str | None
    created_at: datetime
    updated_at: datetime


class UserUpdate(UpdateCommand):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset(
        {"name", "email", "role", "is_active"},
    )

    name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    avatar: str | None = Field(None, max_length=500)
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v
