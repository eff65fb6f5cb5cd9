"""Boundary Protocols — contracts between the lifecycle services and the store.

Invariants:
    - Services depend on these shapes, never on query construction
    - Write paths work on ORM rows; read paths return composed read models
    - Repositories never commit: the service owns the unit of work

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the pure rules in core/ are
      called by services around these awaits, never from inside them
"""

from typing import Any, Protocol
from uuid import UUID

from app.core.project_rules import SortKey
from app.core.read_models import (
    ActivityEntryView, ProjectView, TaskView, UserSummary,
)


class UserRepository(Protocol):
    async def get(self, user_id: UUID) -> Any | None: ...
    async def get_active(self, user_id: UUID) -> Any | None: ...
    async def email_taken(self, email: str, exclude_id: UUID | None = None) -> bool: ...
    async def list_active(self) -> list[Any]: ...
    async def summaries(self, user_ids: set[UUID]) -> dict[UUID, UserSummary]: ...
    async def stats(self) -> dict[str, int]: ...
    async def delete(self, user: Any) -> None: ...


class ProjectRepository(Protocol):
    async def get(self, project_id: UUID) -> Any | None: ...
    async def exists(self, project_id: UUID) -> bool: ...
    def add(self, project: Any) -> None: ...
    async def delete(self, project: Any) -> None: ...
    async def list_page(
        self, filters: dict, search: str | None, sort: list[SortKey],
        offset: int, limit: int,
    ) -> tuple[list[Any], int]: ...
    async def list_visible_to(self, user_id: UUID) -> list[Any]: ...
    async def count_by_status(self) -> dict[str, int]: ...
    async def count_owned_by(self, user_id: UUID) -> int: ...
    async def remove_memberships_of(self, user_id: UUID) -> None: ...
    async def task_counts(self, project_ids: list[UUID]) -> dict[UUID, int]: ...
    async def views(self, projects: list[Any]) -> list[ProjectView]: ...
    async def view(self, project: Any) -> ProjectView: ...


class TaskRepository(Protocol):
    async def get(self, task_id: UUID) -> Any | None: ...
    def add(self, task: Any) -> None: ...
    async def delete(self, task: Any) -> None: ...
    async def delete_by_project(self, project_id: UUID) -> int: ...
    async def find(self, filters: dict) -> list[Any]: ...
    async def count_all(self) -> int: ...
    async def count_by_status(self) -> dict[str, int]: ...
    async def purge_orphans(self) -> tuple[int, int, int]: ...
    async def views(self, tasks: list[Any]) -> list[TaskView]: ...
    async def view(self, task: Any) -> TaskView: ...


class ActivityLogRepository(Protocol):
    def add(self, entry: Any) -> None: ...
    async def recent(self, limit: int) -> list[ActivityEntryView]: ...
    async def view(self, entry: Any) -> ActivityEntryView: ...
