"""Task Rules — pure status transition and payload normalization for Tasks.

Invariants:
    - All functions are PURE: no IO, no async, no DB (the clock is a parameter)
    - completed_at is non-null iff status == DONE, on every write path
    - Any status may transition to any other status; the only gate is enum membership
    - Tasks always start in TaskStage.PLANNING

Design Decisions:
    - One transition function shared by create, update and status update:
      the completed_at invariant is stated once (ADR: single source of truth)
    - Raise DomainValidationError on bad input: services propagate, handler maps to 400
"""

from dataclasses import dataclass
from datetime import datetime

from app.core.domain_types import TaskStage, TaskStatus, parse_task_status
from app.core.errors import DomainValidationError

DEFAULT_STATUS = TaskStatus.TODO
INITIAL_STAGE = TaskStage.PLANNING


@dataclass(frozen=True)
class StatusTransition:
    """Result of T(task, new_status)."""
    status: TaskStatus
    completed_at: datetime | None


def require_valid_status(raw: str | TaskStatus | None) -> TaskStatus:
    """Parse a requested status or raise naming the allowed values."""
    status = parse_task_status(raw) if raw is not None else None
    if status is None:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise DomainValidationError(
            f"Invalid status. Must be one of: {allowed}", "status",
        )
    return status


def transition_status(new_status: str | TaskStatus, now: datetime) -> StatusTransition:
    """T(task, s): status = s, completed_at = now if s is DONE else None."""
    status = require_valid_status(new_status)
    return StatusTransition(
        status=status,
        completed_at=now if status == TaskStatus.DONE else None,
    )


def initial_status(raw: str | TaskStatus | None, now: datetime) -> StatusTransition:
    """Status for a new task: defaults to TODO, same transition rule otherwise."""
    return transition_status(raw if raw is not None else DEFAULT_STATUS, now)


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Trim each tag and drop empties. Order preserved, duplicates kept."""
    if not tags:
        return []
    return [t.strip() for t in tags if t and t.strip()]
