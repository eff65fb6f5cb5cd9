"""Dashboard Routes — aggregate views computed live from the store.

Invariants:
    - No caching: every call reflects the store at query time
"""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_activity_reporter, get_principal
from app.core.domain_types import Principal
from app.schemas.activity import ActivityOut
from app.schemas.common import envelope
from app.services.activity_reporter import ActivityReporter

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats")
async def dashboard_stats(
    principal: Principal = Depends(get_principal),
    activity: ActivityReporter = Depends(get_activity_reporter),
):
    stats = await activity.dashboard_stats()
    stats["recentActivities"] = [
        ActivityOut.model_validate(e).to_json()
        for e in stats["recentActivities"]
    ]
    return envelope(stats)


@router.get("/completion-rate")
async def completion_rate(
    principal: Principal = Depends(get_principal),
    activity: ActivityReporter = Depends(get_activity_reporter),
):
    """Done vs. remaining share of all tasks, in percent."""
    return envelope(await activity.completion_rate())


@router.get("/top-projects")
async def top_projects(
    limit: int = Query(5, ge=1, le=50),
    principal: Principal = Depends(get_principal),
    activity: ActivityReporter = Depends(get_activity_reporter),
):
    return envelope(await activity.top_projects(limit))


@router.get("/projects-tasks")
async def projects_tasks(
    limit: int = Query(5, ge=1, le=50),
    principal: Principal = Depends(get_principal),
    activity: ActivityReporter = Depends(get_activity_reporter),
):
    """Completed vs. open task counts for the most recent projects."""
    return envelope(await activity.projects_tasks(limit))
