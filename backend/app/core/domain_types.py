"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ProjectId, TaskId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching
    - TaskStatus is the single status vocabulary for every write path

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Legacy "inprogress" spelling normalized once here (ADR: unified status enum)
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ProjectId = NewType("ProjectId", UUID)
TaskId = NewType("TaskId", UUID)
ActivityId = NewType("ActivityId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    """Kanban columns. Any status may move to any other status."""
    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskStage(str, Enum):
    """Delivery stage — every task starts in PLANNING."""
    PLANNING = "planning"
    DESIGN = "design"
    DEVELOPMENT = "development"
    TESTING = "testing"
    DONE = "done"


# Older board clients send the column id without the hyphen
LEGACY_STATUS_ALIASES: dict[str, TaskStatus] = {
    "inprogress": TaskStatus.IN_PROGRESS,
}


def parse_task_status(value: str) -> TaskStatus | None:
    """Map raw input to TaskStatus, honoring legacy aliases. None if unknown."""
    if isinstance(value, TaskStatus):
        return value
    if not isinstance(value, str):
        return None
    if value in LEGACY_STATUS_ALIASES:
        return LEGACY_STATUS_ALIASES[value]
    try:
        return TaskStatus(value)
    except ValueError:
        return None


# ─── Principal ───────────────────────────────────────────────────

@dataclass(frozen=True)
class Principal:
    """Verified caller identity handed to the core by the resolver."""
    id: UserId
    role: UserRole
