"""Activity Log Repository — append and read the audit trail with references resolved."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.read_models import ActivityEntryView, ProjectSummary, TaskRef
from app.models.activity_log import ActivityLog
from app.models.project import Project
from app.models.task import Task
from app.repositories.users import SqlUserRepository


class SqlActivityLogRepository:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = SqlUserRepository(db)

    def add(self, entry: ActivityLog) -> None:
        self.db.add(entry)

    async def recent(self, limit: int) -> list[ActivityEntryView]:
        result = await self.db.execute(
            select(ActivityLog)
            .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.asc())
            .limit(limit),
        )
        return await self._compose(list(result.scalars().all()))

    async def view(self, entry: ActivityLog) -> ActivityEntryView:
        return (await self._compose([entry]))[0]

    async def _compose(self, entries: list[ActivityLog]) -> list[ActivityEntryView]:
        users = await self.users.summaries({e.user_id for e in entries})
        projects = await self._projects({e.project_id for e in entries})
        tasks = await self._tasks({e.task_id for e in entries})
        return [
            ActivityEntryView(
                id=e.id,
                action=e.action,
                user=users.get(e.user_id),
                project=projects.get(e.project_id),
                task=tasks.get(e.task_id),
                timestamp=e.timestamp,
            )
            for e in entries
        ]

    async def _projects(self, ids: set[UUID | None]) -> dict[UUID, ProjectSummary]:
        ids = {i for i in ids if i is not None}
        if not ids:
            return {}
        result = await self.db.execute(
            select(Project.id, Project.title).where(Project.id.in_(ids)),
        )
        return {pid: ProjectSummary(id=pid, title=title) for pid, title in result.all()}

    async def _tasks(self, ids: set[UUID | None]) -> dict[UUID, TaskRef]:
        ids = {i for i in ids if i is not None}
        if not ids:
            return {}
        result = await self.db.execute(
            select(Task.id, Task.title, Task.status).where(Task.id.in_(ids)),
        )
        return {
            tid: TaskRef(id=tid, title=title, status=status)
            for tid, title, status in result.all()
        }
