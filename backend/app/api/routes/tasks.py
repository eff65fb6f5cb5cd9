"""Task Routes — HTTP surface of TaskLifecycle.

Invariants:
    - Every route requires a principal (401 without one)
    - Static paths (/my-tasks, /maintenance/...) are declared before /{task_id}
    - The status filter accepts the legacy "inprogress" spelling
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_principal, get_task_lifecycle
from app.core.domain_types import Principal, Priority
from app.core.task_rules import require_valid_status
from app.schemas.common import envelope
from app.schemas.task import (
    TaskAssign, TaskCreate, TaskOut, TaskStatusUpdate, TaskUpdate,
)
from app.services.task_lifecycle import TaskLifecycle

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _out(view) -> dict:
    return TaskOut.model_validate(view).to_json()


@router.get("")
async def list_tasks(
    project: UUID | None = None,
    status_filter: str | None = Query(None, alias="status"),
    priority: Priority | None = None,
    assigned_to: UUID | None = Query(None, alias="assignedTo"),
    principal: Principal = Depends(get_principal),
    tasks: TaskLifecycle = Depends(get_task_lifecycle),
):
    views = await tasks.list_tasks(
        project=project,
        status=require_valid_status(status_filter).value if status_filter else None,
        priority=priority.value if priority else None,
        assigned_to=assigned_to,
    )
    return envelope([_out(v) for v in views], count=len(views))


@router.get("/my-tasks")
async def my_tasks(
    principal: Principal = Depends(get_principal),
    tasks: TaskLifecycle = Depends(get_task_lifecycle),
):
    """Tasks assigned to the caller."""
    views = await tasks.my_tasks(principal)
    return envelope([_out(v) for v in views], count=len(views))


@router.post("/maintenance/purge-orphans")
async def purge_orphans(
    principal: Principal = Depends(get_principal),
    tasks: TaskLifecycle = Depends(get_task_lifecycle),
):
    """Admin sweep: delete tasks whose project no longer exists."""
    result = await tasks.purge_orphans(principal)
    return envelope(
        result, message=f"Deleted {result['deletedCount']} orphan task(s)",
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    body: TaskCreate,
    principal: Principal = Depends(get_principal),
    tasks: TaskLifecycle = Depends(get_task_lifecycle),
):
    return envelope(_out(await tasks.create(principal, body)))


@router.get("/{task_id}")
async def get_task(
    task_id: UUID,
    principal: Principal = Depends(get_principal),
    tasks: TaskLifecycle = Depends(get_task_lifecycle),
):
    return envelope(_out(await tasks.get(task_id)))


@router.put("/{task_id}")
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    principal: Principal = Depends(get_principal),
    tasks: TaskLifecycle = Depends(get_task_lifecycle),
):
    return envelope(_out(await tasks.update(principal, task_id, body)))


@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: UUID,
    body: TaskStatusUpdate,
    principal: Principal = Depends(get_principal),
    tasks: TaskLifecycle = Depends(get_task_lifecycle),
):
    """Board move between status columns."""
    view = await tasks.update_status(principal, task_id, body.status)
    return envelope(_out(view))


@router.patch("/{task_id}/assign")
async def assign_task(
    task_id: UUID,
    body: TaskAssign,
    principal: Principal = Depends(get_principal),
    tasks: TaskLifecycle = Depends(get_task_lifecycle),
):
    return envelope(_out(await tasks.assign(principal, task_id, body.user_id)))


@router.delete("/{task_id}")
async def delete_task(
    task_id: UUID,
    principal: Principal = Depends(get_principal),
    tasks: TaskLifecycle = Depends(get_task_lifecycle),
):
    await tasks.delete(principal, task_id)
    return envelope({}, message="Task deleted successfully")
