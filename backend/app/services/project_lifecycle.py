"""Project Lifecycle — create, read, update, delete and membership for Projects.

Invariants:
    - owner is set from the principal at creation and changes only through
      transfer_ownership (admin-only)
    - update/delete/membership changes require can_modify(principal, owner)
    - delete cascades: tasks of the project first, then the project (two commits)
    - Embedded tasks are created best effort AFTER the project is committed;
      a failed task never rolls back the project or earlier tasks

Design Decisions:
    - Pure rules (membership, sort, pagination) live in core/project_rules.py;
      this class only orchestrates IO around them (ADR: functional core)
    - Cascade is not wrapped in a transaction: an interrupted delete leaves
      orphan tasks that TaskLifecycle.purge_orphans reconciles
    - Per-task commit instead of concurrent dispatch: one AsyncSession cannot
      run statements concurrently, per-item commits keep the same semantics
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import project_rules
from app.core.authorization import require_admin, require_can_modify
from app.core.domain_types import Principal, TaskStage
from app.core.errors import DomainValidationError, ResourceNotFoundError
from app.core.read_models import ProjectView
from app.core.repository_protocols import (
    ActivityLogRepository, ProjectRepository, TaskRepository, UserRepository,
)
from app.core.task_rules import initial_status, normalize_tags
from app.models.activity_log import ActivityLog
from app.models.project import Project, DEFAULT_COLOR
from app.models.task import Task
from app.repositories.activity_logs import SqlActivityLogRepository
from app.repositories.projects import SqlProjectRepository
from app.repositories.tasks import SqlTaskRepository
from app.repositories.users import SqlUserRepository
from app.schemas.project import ProjectCreate, ProjectTaskDraft, ProjectUpdate

logger = logging.getLogger(__name__)


class ProjectLifecycle:
    """Project use cases. One instance per request (shares the request session)."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.projects: ProjectRepository = SqlProjectRepository(db)
        self.tasks: TaskRepository = SqlTaskRepository(db)
        self.users: UserRepository = SqlUserRepository(db)
        self.activity: ActivityLogRepository = SqlActivityLogRepository(db)

    async def get_or_404(self, project_id: UUID) -> Project:
        project = await self.projects.get(project_id)
        if project is None:
            raise ResourceNotFoundError("Project", str(project_id))
        return project

    # ─── Create ──────────────────────────────────────────────────

    async def create(
        self, principal: Principal, command: ProjectCreate,
    ) -> tuple[ProjectView, int, int]:
        """Returns (project view, tasks created, tasks failed)."""
        project = Project(
            title=command.title,
            description=command.description,
            owner_id=principal.id,
            status=command.status,
            priority=command.priority,
            deadline=command.deadline,
            color=command.color or DEFAULT_COLOR,
            member_links=[],
        )
        self.projects.add(project)
        await self.db.flush()
        self.activity.add(ActivityLog(
            user_id=principal.id, action="Created Project", project_id=project.id,
        ))
        await self.db.commit()
        logger.info(
            f"Project created: {project.title}",
            extra={"project_id": str(project.id), "user_id": str(principal.id)},
        )

        created, failed = await self._create_embedded_tasks(
            principal, project.id, command.tasks,
        )
        if failed:
            # a store failure rolled back and expired the project row
            await self.db.refresh(project)
        if command.tasks:
            logger.info(
                f"Created {created}/{len(command.tasks)} tasks for project: {project.title}",
                extra={"project_id": str(project.id)},
            )
        return await self.projects.view(project), created, failed

    async def _create_embedded_tasks(
        self, principal: Principal, project_id: UUID,
        drafts: list[dict],
    ) -> tuple[int, int]:
        created = failed = 0
        for position, raw in enumerate(drafts):
            try:
                draft = ProjectTaskDraft.model_validate(raw)
                transition = initial_status(draft.status, datetime.now(timezone.utc))
            except (ValidationError, DomainValidationError) as e:
                failed += 1
                logger.warning(
                    f"Embedded task #{position} rejected: {e}",
                    extra={"project_id": str(project_id)},
                )
                continue
            self.tasks.add(Task(
                title=draft.title,
                description=draft.description or "",
                project_id=project_id,
                created_by_id=principal.id,
                status=transition.status.value,
                completed_at=transition.completed_at,
                stage=TaskStage.PLANNING.value,
                priority=draft.priority,
                due_date=draft.due_date,
                tags=normalize_tags(draft.tags),
            ))
            try:
                await self.db.commit()
                created += 1
            except SQLAlchemyError as e:
                await self.db.rollback()
                failed += 1
                logger.warning(
                    f"Embedded task '{draft.title}' not created: {e}",
                    extra={"project_id": str(project_id)},
                )
        return created, failed

    # ─── Read ────────────────────────────────────────────────────

    async def get(self, project_id: UUID) -> ProjectView:
        return await self.projects.view(await self.get_or_404(project_id))

    async def list_projects(
        self,
        *,
        status: str | None = None,
        owner: UUID | None = None,
        priority: str | None = None,
        search: str | None = None,
        sort: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[ProjectView], project_rules.Pagination]:
        sort_keys = project_rules.parse_sort(sort)
        window = project_rules.paginate(0, page, limit)  # validate before querying
        rows, total = await self.projects.list_page(
            {"status": status, "owner_id": owner, "priority": priority},
            search.strip() if search else None,
            sort_keys,
            offset=window.offset,
            limit=limit,
        )
        return (
            await self.projects.views(rows),
            project_rules.paginate(total, page, limit),
        )

    async def my_projects(self, principal: Principal) -> list[ProjectView]:
        rows = await self.projects.list_visible_to(principal.id)
        return await self.projects.views(rows)

    async def stats(self) -> dict:
        return project_rules.summarize_by_status(
            await self.projects.count_by_status(),
        )

    # ─── Update ──────────────────────────────────────────────────

    async def update(
        self, principal: Principal, project_id: UUID, command: ProjectUpdate,
    ) -> ProjectView:
        project = await self.get_or_404(project_id)
        require_can_modify(principal, project.owner_id, "update", "project")

        for field, value in command.changes().items():
            setattr(project, field, value)
        self.activity.add(ActivityLog(
            user_id=principal.id, action="Updated Project", project_id=project.id,
        ))
        await self.db.commit()
        logger.info(
            "Project updated",
            extra={"project_id": str(project.id), "user_id": str(principal.id)},
        )
        return await self.projects.view(project)

    async def transfer_ownership(
        self, principal: Principal, project_id: UUID, new_owner_id: UUID,
    ) -> ProjectView:
        require_admin(principal, "transfer ownership of", "project")
        project = await self.get_or_404(project_id)
        if await self.users.get_active(new_owner_id) is None:
            raise ResourceNotFoundError("User", str(new_owner_id))

        previous_owner = project.owner_id
        project.owner_id = new_owner_id
        self.activity.add(ActivityLog(
            user_id=principal.id, action="Transferred Project Ownership",
            project_id=project.id,
        ))
        await self.db.commit()
        logger.info(
            f"Project ownership transferred from {previous_owner} to {new_owner_id}",
            extra={"project_id": str(project.id), "user_id": str(principal.id)},
        )
        return await self.projects.view(project)

    # ─── Delete ──────────────────────────────────────────────────

    async def delete(self, principal: Principal, project_id: UUID) -> int:
        """Cascade delete. Returns number of tasks removed."""
        project = await self.get_or_404(project_id)
        require_can_modify(principal, project.owner_id, "delete", "project")

        deleted_tasks = await self.tasks.delete_by_project(project.id)
        await self.db.commit()
        logger.info(
            f"Deleted {deleted_tasks} tasks for project: {project.title}",
            extra={"project_id": str(project.id)},
        )

        await self.projects.delete(project)
        await self.db.commit()
        logger.info(
            "Project deleted",
            extra={"project_id": str(project_id), "user_id": str(principal.id)},
        )
        return deleted_tasks

    # ─── Membership ──────────────────────────────────────────────

    async def add_member(
        self, principal: Principal, project_id: UUID, user_id: UUID,
    ) -> ProjectView:
        project = await self.get_or_404(project_id)
        require_can_modify(principal, project.owner_id, "manage members of", "project")
        members = project_rules.add_member(project.member_ids, user_id)
        if await self.users.get_active(user_id) is None:
            raise ResourceNotFoundError("User", str(user_id))

        project.set_members(members)
        await self.db.commit()
        logger.info(
            "Member added",
            extra={"project_id": str(project.id), "user_id": str(user_id)},
        )
        return await self.projects.view(project)

    async def remove_member(
        self, principal: Principal, project_id: UUID, user_id: UUID,
    ) -> ProjectView:
        project = await self.get_or_404(project_id)
        require_can_modify(principal, project.owner_id, "manage members of", "project")

        remaining = project_rules.remove_member(project.member_ids, user_id)
        if remaining != project.member_ids:
            project.set_members(remaining)
            await self.db.commit()
            logger.info(
                "Member removed",
                extra={"project_id": str(project.id), "user_id": str(user_id)},
            )
        return await self.projects.view(project)
