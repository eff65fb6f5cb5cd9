"""Task Repository — filtered listing, cascade/orphan deletes and TaskView composition.

Invariants:
    - find() is newest-first
    - delete_by_project() and purge_orphans() are single bulk statements and
      return the number of rows removed
    - An orphan is a task whose project_id is NULL or names no existing project
"""

from uuid import UUID

from sqlalchemy import select, func, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.read_models import ProjectSummary, TaskView
from app.models.project import Project
from app.models.task import Task
from app.repositories.users import SqlUserRepository

_FILTER_COLUMNS = {
    "project_id": Task.project_id,
    "status": Task.status,
    "priority": Task.priority,
    "assigned_to_id": Task.assigned_to_id,
}


def _orphan_condition():
    return or_(
        Task.project_id.is_(None),
        Task.project_id.not_in(select(Project.id)),
    )


class SqlTaskRepository:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = SqlUserRepository(db)

    async def get(self, task_id: UUID) -> Task | None:
        return await self.db.get(Task, task_id)

    def add(self, task: Task) -> None:
        self.db.add(task)

    async def delete(self, task: Task) -> None:
        await self.db.delete(task)

    async def delete_by_project(self, project_id: UUID) -> int:
        result = await self.db.execute(
            delete(Task)
            .where(Task.project_id == project_id)
            .execution_options(synchronize_session=False),
        )
        return result.rowcount or 0

    async def find(self, filters: dict) -> list[Task]:
        query = select(Task)
        for key, column in _FILTER_COLUMNS.items():
            value = filters.get(key)
            if value is not None:
                query = query.where(column == value)
        result = await self.db.execute(
            query.order_by(Task.created_at.desc(), Task.id.asc()),
        )
        return list(result.scalars().all())

    async def count_all(self) -> int:
        return await self.db.scalar(select(func.count(Task.id))) or 0

    async def count_by_status(self) -> dict[str, int]:
        result = await self.db.execute(
            select(Task.status, func.count(Task.id)).group_by(Task.status),
        )
        return {status: count for status, count in result.all()}

    async def purge_orphans(self) -> tuple[int, int, int]:
        """Returns (total tasks before, orphans found, rows deleted)."""
        total = await self.count_all()
        orphans = await self.db.scalar(
            select(func.count(Task.id)).where(_orphan_condition()),
        ) or 0
        result = await self.db.execute(
            delete(Task)
            .where(_orphan_condition())
            .execution_options(synchronize_session=False),
        )
        return total, orphans, result.rowcount or 0

    async def project_summaries(
        self, project_ids: set[UUID],
    ) -> dict[UUID, ProjectSummary]:
        ids = {i for i in project_ids if i is not None}
        if not ids:
            return {}
        result = await self.db.execute(
            select(Project.id, Project.title, Project.description)
            .where(Project.id.in_(ids)),
        )
        return {
            pid: ProjectSummary(id=pid, title=title, description=description)
            for pid, title, description in result.all()
        }

    async def views(self, tasks: list[Task]) -> list[TaskView]:
        projects = await self.project_summaries({t.project_id for t in tasks})
        users = await self.users.summaries(
            {t.assigned_to_id for t in tasks} | {t.created_by_id for t in tasks},
        )
        return [
            TaskView(
                id=t.id,
                title=t.title,
                description=t.description,
                project_id=t.project_id,
                project=projects.get(t.project_id),
                assigned_to_id=t.assigned_to_id,
                assigned_to=users.get(t.assigned_to_id),
                created_by_id=t.created_by_id,
                created_by=users.get(t.created_by_id),
                status=t.status,
                stage=t.stage,
                priority=t.priority,
                due_date=t.due_date,
                tags=list(t.tags or []),
                completed_at=t.completed_at,
                created_at=t.created_at,
                updated_at=t.updated_at,
            )
            for t in tasks
        ]

    async def view(self, task: Task) -> TaskView:
        return (await self.views([task]))[0]
