"""Activity Reporter — audit trail writes/reads and dashboard aggregates.

Invariants:
    - Entries are attributed to the principal, never to a client-supplied user
    - Referenced project/task must exist at write time
    - Every aggregate reflects the store at query time (no caching)
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dashboard_stats import completion_rate, projects_tasks_breakdown
from app.core.domain_types import Principal, TaskStatus
from app.core.errors import ResourceNotFoundError
from app.core.read_models import ActivityEntryView
from app.core.repository_protocols import (
    ActivityLogRepository, ProjectRepository, TaskRepository,
)
from app.models.activity_log import ActivityLog
from app.repositories.activity_logs import SqlActivityLogRepository
from app.repositories.dashboard import SqlDashboardQueries
from app.repositories.projects import SqlProjectRepository
from app.repositories.tasks import SqlTaskRepository

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_COUNT = 5


class ActivityReporter:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity: ActivityLogRepository = SqlActivityLogRepository(db)
        self.projects: ProjectRepository = SqlProjectRepository(db)
        self.tasks: TaskRepository = SqlTaskRepository(db)
        self.dashboard = SqlDashboardQueries(db)

    async def record(
        self,
        principal: Principal,
        action: str,
        project_id: UUID | None = None,
        task_id: UUID | None = None,
    ) -> ActivityEntryView:
        if project_id is not None and not await self.projects.exists(project_id):
            raise ResourceNotFoundError("Project", str(project_id))
        if task_id is not None and await self.tasks.get(task_id) is None:
            raise ResourceNotFoundError("Task", str(task_id))

        entry = ActivityLog(
            user_id=principal.id, action=action,
            project_id=project_id, task_id=task_id,
        )
        self.activity.add(entry)
        await self.db.commit()
        logger.info(
            f"Activity recorded: {action}",
            extra={"user_id": str(principal.id)},
        )
        return await self.activity.view(entry)

    async def recent(self, limit: int) -> list[ActivityEntryView]:
        return await self.activity.recent(limit)

    async def dashboard_stats(self) -> dict:
        return {
            "totalProjects": await self.dashboard.count_projects(),
            "totalTasks": await self.tasks.count_all(),
            "tasksByStatus": await self.tasks.count_by_status(),
            "recentActivities": await self.activity.recent(RECENT_ACTIVITY_COUNT),
        }

    async def completion_rate(self) -> list[dict]:
        by_status = await self.tasks.count_by_status()
        return completion_rate(
            sum(by_status.values()), by_status.get(TaskStatus.DONE.value, 0),
        )

    async def top_projects(self, limit: int = 5) -> list[dict]:
        rows = await self.dashboard.top_projects_by_task_count(limit)
        return [
            {"id": str(project_id), "name": title, "value": count}
            for project_id, title, count in rows
        ]

    async def projects_tasks(self, limit: int = 5) -> list[dict]:
        rows = await self.dashboard.status_counts_for_recent_projects(limit)
        return projects_tasks_breakdown(rows)
