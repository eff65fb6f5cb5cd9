"""Activity Log Routes — audit feed read and manual entries."""

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_activity_reporter, get_principal
from app.config import get_settings
from app.core.domain_types import Principal
from app.schemas.activity import ActivityCreate, ActivityOut
from app.schemas.common import envelope
from app.services.activity_reporter import ActivityReporter

router = APIRouter(prefix="/api/activity-logs", tags=["activity"])

DEFAULT_FEED_SIZE = 50


@router.get("")
async def list_activity(
    limit: int = Query(
        DEFAULT_FEED_SIZE, ge=1, le=get_settings().activity_feed_limit,
    ),
    principal: Principal = Depends(get_principal),
    activity: ActivityReporter = Depends(get_activity_reporter),
):
    """Newest entries first."""
    entries = await activity.recent(limit)
    return envelope(
        [ActivityOut.model_validate(e).to_json() for e in entries],
        count=len(entries),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_activity(
    body: ActivityCreate,
    principal: Principal = Depends(get_principal),
    activity: ActivityReporter = Depends(get_activity_reporter),
):
    """Append an entry attributed to the caller."""
    entry = await activity.record(principal, body.action, body.project, body.task)
    return envelope(ActivityOut.model_validate(entry).to_json())
