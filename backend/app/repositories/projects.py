"""Project Repository — filtered/paginated listing and ProjectView composition.

Invariants:
    - views() resolves owner + members with ONE user query and task counts with
      ONE grouped query per call, whatever the page size
    - search is a literal, case-insensitive substring match on title OR description
    - Sort always ends with id as tiebreaker so pages are stable
"""

from uuid import UUID

from sqlalchemy import select, func, or_, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.project_rules import SortKey, escape_like
from app.core.read_models import ProjectView
from app.models.project import Project, ProjectMember
from app.models.task import Task
from app.repositories.users import SqlUserRepository


class SqlProjectRepository:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = SqlUserRepository(db)

    async def get(self, project_id: UUID) -> Project | None:
        return await self.db.get(Project, project_id)

    async def exists(self, project_id: UUID) -> bool:
        result = await self.db.execute(
            select(Project.id).where(Project.id == project_id),
        )
        return result.scalar_one_or_none() is not None

    def add(self, project: Project) -> None:
        self.db.add(project)

    async def delete(self, project: Project) -> None:
        await self.db.delete(project)

    async def list_page(
        self,
        filters: dict,
        search: str | None,
        sort: list[SortKey],
        offset: int,
        limit: int,
    ) -> tuple[list[Project], int]:
        conditions = []
        if filters.get("status"):
            conditions.append(Project.status == filters["status"])
        if filters.get("owner_id"):
            conditions.append(Project.owner_id == filters["owner_id"])
        if filters.get("priority"):
            conditions.append(Project.priority == filters["priority"])
        if search:
            pattern = f"%{escape_like(search)}%"
            conditions.append(or_(
                Project.title.ilike(pattern, escape="\\"),
                Project.description.ilike(pattern, escape="\\"),
            ))

        total = await self.db.scalar(
            select(func.count(Project.id)).where(*conditions),
        )

        order_by = [
            getattr(Project, key.attribute).desc() if key.descending
            else getattr(Project, key.attribute).asc()
            for key in sort
        ]
        order_by.append(Project.id.asc())
        result = await self.db.execute(
            select(Project).where(*conditions)
            .order_by(*order_by).offset(offset).limit(limit),
        )
        return list(result.scalars().all()), total or 0

    async def list_visible_to(self, user_id: UUID) -> list[Project]:
        member_of = select(ProjectMember.project_id).where(
            ProjectMember.user_id == user_id,
        )
        result = await self.db.execute(
            select(Project)
            .where(or_(Project.owner_id == user_id, Project.id.in_(member_of)))
            .order_by(Project.created_at.desc(), Project.id.asc()),
        )
        return list(result.scalars().all())

    async def count_by_status(self) -> dict[str, int]:
        result = await self.db.execute(
            select(Project.status, func.count(Project.id))
            .group_by(Project.status),
        )
        return {status: count for status, count in result.all()}

    async def count_owned_by(self, user_id: UUID) -> int:
        return await self.db.scalar(
            select(func.count(Project.id)).where(Project.owner_id == user_id),
        ) or 0

    async def remove_memberships_of(self, user_id: UUID) -> None:
        await self.db.execute(
            delete(ProjectMember)
            .where(ProjectMember.user_id == user_id)
            .execution_options(synchronize_session=False),
        )

    async def task_counts(self, project_ids: list[UUID]) -> dict[UUID, int]:
        if not project_ids:
            return {}
        result = await self.db.execute(
            select(Task.project_id, func.count(Task.id))
            .where(Task.project_id.in_(project_ids))
            .group_by(Task.project_id),
        )
        return {project_id: count for project_id, count in result.all()}

    async def views(self, projects: list[Project]) -> list[ProjectView]:
        user_ids: set[UUID] = set()
        for p in projects:
            user_ids.add(p.owner_id)
            user_ids.update(p.member_ids)
        users = await self.users.summaries(user_ids)
        counts = await self.task_counts([p.id for p in projects])
        return [
            ProjectView(
                id=p.id,
                title=p.title,
                description=p.description,
                owner_id=p.owner_id,
                owner=users.get(p.owner_id),
                members=[users[m] for m in p.member_ids if m in users],
                member_ids=p.member_ids,
                status=p.status,
                priority=p.priority,
                deadline=p.deadline,
                color=p.color,
                created_at=p.created_at,
                updated_at=p.updated_at,
                task_count=counts.get(p.id, 0),
            )
            for p in projects
        ]

    async def view(self, project: Project) -> ProjectView:
        return (await self.views([project]))[0]
