"""Project Routes — HTTP surface of ProjectLifecycle.

Invariants:
    - Every route requires a principal (401 without one)
    - Static paths (/stats, /my-projects) are declared before /{project_id}
    - Routes hold no business rules: validation, authorization and cascade
      live in services/project_lifecycle.py and core/
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_principal, get_project_lifecycle
from app.config import get_settings
from app.core.domain_types import Principal, Priority, ProjectStatus
from app.schemas.common import envelope
from app.schemas.project import (
    MemberAdd, OwnershipTransfer, ProjectCreate, ProjectOut, ProjectUpdate,
)
from app.services.project_lifecycle import ProjectLifecycle

router = APIRouter(prefix="/api/projects", tags=["projects"])

_settings = get_settings()


def _out(view) -> dict:
    return ProjectOut.model_validate(view).to_json()


@router.get("")
async def list_projects(
    status_filter: ProjectStatus | None = Query(None, alias="status"),
    owner: UUID | None = None,
    priority: Priority | None = None,
    search: str | None = Query(None, max_length=100),
    sort: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(
        _settings.default_page_size, ge=1, le=_settings.max_page_size,
    ),
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    """Filtered, sorted, paginated project listing."""
    views, pagination = await projects.list_projects(
        status=status_filter.value if status_filter else None,
        owner=owner,
        priority=priority.value if priority else None,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )
    return envelope(
        [_out(v) for v in views],
        count=len(views),
        pagination=pagination.to_response(),
    )


@router.get("/stats")
async def project_stats(
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    return envelope(await projects.stats())


@router.get("/my-projects")
async def my_projects(
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    """Projects the caller owns or is a member of."""
    views = await projects.my_projects(principal)
    return envelope([_out(v) for v in views], count=len(views))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    """Create a project (and its embedded tasks, best effort)."""
    view, created, failed = await projects.create(principal, body)
    return envelope(_out(view), tasksCreated=created, tasksFailed=failed)


@router.get("/{project_id}")
async def get_project(
    project_id: UUID,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    return envelope(_out(await projects.get(project_id)))


@router.put("/{project_id}")
async def update_project(
    project_id: UUID,
    body: ProjectUpdate,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    return envelope(_out(await projects.update(principal, project_id, body)))


@router.patch("/{project_id}/owner")
async def transfer_ownership(
    project_id: UUID,
    body: OwnershipTransfer,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    """Admin-only ownership transfer."""
    view = await projects.transfer_ownership(principal, project_id, body.user_id)
    return envelope(_out(view))


@router.delete("/{project_id}")
async def delete_project(
    project_id: UUID,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    """Delete a project and every task that belongs to it."""
    deleted_tasks = await projects.delete(principal, project_id)
    return envelope(
        {},
        message=f"Project and {deleted_tasks} related task(s) deleted",
        deletedTasks=deleted_tasks,
    )


@router.post("/{project_id}/members")
async def add_member(
    project_id: UUID,
    body: MemberAdd,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    view = await projects.add_member(principal, project_id, body.user_id)
    return envelope(_out(view))


@router.delete("/{project_id}/members/{user_id}")
async def remove_member(
    project_id: UUID,
    user_id: UUID,
    principal: Principal = Depends(get_principal),
    projects: ProjectLifecycle = Depends(get_project_lifecycle),
):
    view = await projects.remove_member(principal, project_id, user_id)
    return envelope(_out(view))
