"""Project ORM — the aggregate root that owns its members and, by cascade, its tasks.

Invariants:
    - owner_id is required and only changes through ownership transfer
    - members are unique per project (composite primary key) and ordered by position
    - status in ProjectStatus, priority in Priority
    - Tasks are NOT an ORM relationship: the lifecycle service cascades explicitly

Design Decisions:
    - owner_id is a weak reference (no FK): users are referenced, never owned
    - ProjectMember rows cascade with the project (delete-orphan)
    - selectin loading for members: avoids async lazy-load on attribute access
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base

DEFAULT_COLOR = "#3B82F6"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_owner_status", "owner_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(1000), nullable=True,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active",
    )
    priority: Mapped[str] = mapped_column(
        String(10), nullable=False, default="medium",
    )
    deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    color: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_COLOR,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now,
    )

    member_links: Mapped[list["ProjectMember"]] = relationship(
        "ProjectMember", back_populates="project",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="ProjectMember.position",
    )

    @property
    def member_ids(self) -> list[uuid.UUID]:
        return [link.user_id for link in self.member_links]

    def set_members(self, member_ids: list[uuid.UUID]) -> None:
        """Sync links to member_ids, keeping surviving links and their order."""
        existing = {link.user_id: link for link in self.member_links}
        next_position = max(
            (link.position for link in self.member_links), default=-1,
        ) + 1
        links = []
        for user_id in member_ids:
            link = existing.get(user_id)
            if link is None:
                link = ProjectMember(user_id=user_id, position=next_position)
                next_position += 1
            links.append(link)
        self.member_links = links


class ProjectMember(Base):
    """Membership row — one per (project, user)."""
    __tablename__ = "project_members"

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )

    project: Mapped["Project"] = relationship(
        "Project", back_populates="member_links",
    )
