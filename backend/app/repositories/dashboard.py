"""Dashboard Queries — read-only aggregates over projects and tasks."""

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.project import Project
from app.models.task import Task


class SqlDashboardQueries:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_projects(self) -> int:
        return await self.db.scalar(select(func.count(Project.id))) or 0

    async def top_projects_by_task_count(self, limit: int) -> list[tuple]:
        """(project_id, title, task_count), most tasks first."""
        task_count = func.count(Task.id)
        result = await self.db.execute(
            select(Project.id, Project.title, task_count)
            .outerjoin(Task, Task.project_id == Project.id)
            .group_by(Project.id, Project.title)
            .order_by(task_count.desc(), Project.title.asc())
            .limit(limit),
        )
        return [tuple(row) for row in result.all()]

    async def status_counts_for_recent_projects(self, limit: int) -> list[tuple]:
        """(project_id, title, status, count) for the newest `limit` projects.

        Projects without tasks yield one row with status None and count 0.
        """
        recent = (
            select(Project.id, Project.title, Project.created_at)
            .order_by(Project.created_at.desc(), Project.id.asc())
            .limit(limit)
            .subquery()
        )
        result = await self.db.execute(
            select(recent.c.id, recent.c.title, Task.status, func.count(Task.id))
            .outerjoin(Task, Task.project_id == recent.c.id)
            .group_by(recent.c.id, recent.c.title, recent.c.created_at, Task.status)
            .order_by(recent.c.created_at.desc(), recent.c.id.asc()),
        )
        return [tuple(row) for row in result.all()]
