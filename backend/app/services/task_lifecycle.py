"""Task Lifecycle — create, update, board moves, assignment and deletion of Tasks.

Invariants:
    - completed_at is non-null iff status == done after EVERY write (create,
      update, update_status) — all three go through core/task_rules.transition_status
    - stage is "planning" at creation, whatever the client sent
    - update/assign/delete require can_modify(principal, task.created_by)
    - update_status requires can_change_status (creator, assignee or admin)
    - An invalid status raises before any write: the task is left unchanged
    - Project and assignee references are validated on every write that sets them

Design Decisions:
    - Assignee must be an ACTIVE user: inactive users cannot receive new work
    - purge_orphans is the maintenance sweep for interrupted project deletes;
      it is admin-only and idempotent
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.authorization import (
    can_change_status, require_admin, require_can_modify,
)
from app.core.domain_types import Principal
from app.core.errors import (
    AuthorizationError, DomainValidationError, ResourceNotFoundError,
)
from app.core.read_models import TaskView
from app.core.repository_protocols import (
    ActivityLogRepository, ProjectRepository, TaskRepository, UserRepository,
)
from app.core.task_rules import (
    INITIAL_STAGE, initial_status, normalize_tags, transition_status,
)
from app.models.activity_log import ActivityLog
from app.models.task import Task
from app.repositories.activity_logs import SqlActivityLogRepository
from app.repositories.projects import SqlProjectRepository
from app.repositories.tasks import SqlTaskRepository
from app.repositories.users import SqlUserRepository
from app.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TaskLifecycle:
    """Task use cases. One instance per request (shares the request session)."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tasks: TaskRepository = SqlTaskRepository(db)
        self.projects: ProjectRepository = SqlProjectRepository(db)
        self.users: UserRepository = SqlUserRepository(db)
        self.activity: ActivityLogRepository = SqlActivityLogRepository(db)

    async def get_or_404(self, task_id: UUID) -> Task:
        task = await self.tasks.get(task_id)
        if task is None:
            raise ResourceNotFoundError("Task", str(task_id))
        return task

    async def _require_project(self, project_id: UUID) -> None:
        if not await self.projects.exists(project_id):
            raise ResourceNotFoundError("Project", str(project_id))

    async def _require_assignable(self, user_id: UUID, field: str) -> None:
        if await self.users.get_active(user_id) is None:
            raise DomainValidationError(
                "Assigned user does not exist or is inactive", field,
            )

    # ─── Create ──────────────────────────────────────────────────

    async def create(self, principal: Principal, command: TaskCreate) -> TaskView:
        transition = initial_status(command.status, _now())
        await self._require_project(command.project)
        if command.assigned_to is not None:
            await self._require_assignable(command.assigned_to, "assignedTo")

        task = Task(
            title=command.title,
            description=command.description,
            project_id=command.project,
            assigned_to_id=command.assigned_to,
            created_by_id=principal.id,
            status=transition.status.value,
            completed_at=transition.completed_at,
            stage=INITIAL_STAGE.value,
            priority=command.priority,
            due_date=command.due_date,
            tags=normalize_tags(command.tags),
        )
        self.tasks.add(task)
        await self.db.flush()
        self.activity.add(ActivityLog(
            user_id=principal.id, action="Created Task",
            project_id=task.project_id, task_id=task.id,
        ))
        await self.db.commit()
        logger.info(
            f"Task created: {task.title}",
            extra={"task_id": str(task.id), "project_id": str(task.project_id)},
        )
        return await self.tasks.view(task)

    # ─── Read ────────────────────────────────────────────────────

    async def get(self, task_id: UUID) -> TaskView:
        return await self.tasks.view(await self.get_or_404(task_id))

    async def list_tasks(
        self,
        *,
        project: UUID | None = None,
        status: str | None = None,
        priority: str | None = None,
        assigned_to: UUID | None = None,
    ) -> list[TaskView]:
        rows = await self.tasks.find({
            "project_id": project,
            "status": status,
            "priority": priority,
            "assigned_to_id": assigned_to,
        })
        return await self.tasks.views(rows)

    async def my_tasks(self, principal: Principal) -> list[TaskView]:
        rows = await self.tasks.find({"assigned_to_id": principal.id})
        return await self.tasks.views(rows)

    # ─── Update ──────────────────────────────────────────────────

    async def update(
        self, principal: Principal, task_id: UUID, command: TaskUpdate,
    ) -> TaskView:
        task = await self.get_or_404(task_id)
        require_can_modify(principal, task.created_by_id, "update", "task")

        changes = command.changes()
        transition = None
        if "status" in changes:
            transition = transition_status(changes.pop("status"), _now())
        if "project" in changes:
            changes["project_id"] = changes.pop("project")
            if changes["project_id"] != task.project_id:
                await self._require_project(changes["project_id"])
        if "assigned_to" in changes:
            changes["assigned_to_id"] = changes.pop("assigned_to")
            assignee = changes["assigned_to_id"]
            if assignee is not None and assignee != task.assigned_to_id:
                await self._require_assignable(assignee, "assignedTo")
        if "tags" in changes:
            changes["tags"] = normalize_tags(changes["tags"])

        for field, value in changes.items():
            setattr(task, field, value)
        if transition is not None and transition.status.value != task.status:
            task.status = transition.status.value
            task.completed_at = transition.completed_at

        await self.db.commit()
        logger.info(
            "Task updated",
            extra={"task_id": str(task.id), "user_id": str(principal.id)},
        )
        return await self.tasks.view(task)

    async def update_status(
        self, principal: Principal, task_id: UUID, new_status: str,
    ) -> TaskView:
        """Board move. Any status may go to any status; done stamps completed_at."""
        transition = transition_status(new_status, _now())
        task = await self.get_or_404(task_id)
        if not can_change_status(principal, task.created_by_id, task.assigned_to_id):
            raise AuthorizationError("change the status of", "task")

        task.status = transition.status.value
        task.completed_at = transition.completed_at
        self.activity.add(ActivityLog(
            user_id=principal.id, action="Updated Task Status",
            project_id=task.project_id, task_id=task.id,
        ))
        await self.db.commit()
        logger.info(
            f"Task status updated: {task.title} -> {task.status}",
            extra={"task_id": str(task.id), "user_id": str(principal.id)},
        )
        return await self.tasks.view(task)

    async def assign(
        self, principal: Principal, task_id: UUID, user_id: UUID,
    ) -> TaskView:
        task = await self.get_or_404(task_id)
        require_can_modify(principal, task.created_by_id, "assign", "task")
        await self._require_assignable(user_id, "userId")

        task.assigned_to_id = user_id
        self.activity.add(ActivityLog(
            user_id=principal.id, action="Assigned Task",
            project_id=task.project_id, task_id=task.id,
        ))
        await self.db.commit()
        logger.info(
            "Task assigned",
            extra={"task_id": str(task.id), "user_id": str(user_id)},
        )
        return await self.tasks.view(task)

    # ─── Delete ──────────────────────────────────────────────────

    async def delete(self, principal: Principal, task_id: UUID) -> None:
        task = await self.get_or_404(task_id)
        require_can_modify(principal, task.created_by_id, "delete", "task")
        await self.tasks.delete(task)
        await self.db.commit()
        logger.info(
            "Task deleted",
            extra={"task_id": str(task_id), "user_id": str(principal.id)},
        )

    async def purge_orphans(self, principal: Principal) -> dict:
        require_admin(principal, "purge", "tasks")
        total, orphans, deleted = await self.tasks.purge_orphans()
        await self.db.commit()
        logger.info(f"Orphan sweep deleted {deleted} of {total} tasks")
        return {
            "totalTasks": total,
            "orphanTasks": orphans,
            "deletedCount": deleted,
        }
