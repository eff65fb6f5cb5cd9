"""Project Rules — pure membership, listing and pagination logic for Projects.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Membership is an ordered set: add rejects duplicates, remove is idempotent
    - Sort fields come from an allow-list; unknown fields are a validation error
    - total_pages = ceil(total / limit); an empty result has 0 pages

Design Decisions:
    - Membership helpers return new lists: the caller decides when to persist
    - Sort parameter keeps the "-field" convention clients already send
"""

import math
from dataclasses import dataclass

from app.core.errors import ConflictError, DomainValidationError

DEFAULT_SORT = "-createdAt"

# API field name -> storage attribute name
SORTABLE_FIELDS: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "status": "status",
    "priority": "priority",
    "deadline": "deadline",
}


@dataclass(frozen=True)
class SortKey:
    attribute: str
    descending: bool


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.limit

    def to_response(self, total_key: str = "totalProjects") -> dict:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            total_key: self.total,
            "limit": self.limit,
        }


def add_member(members: list, user_id) -> list:
    """Append user_id, or raise ConflictError if already present."""
    if user_id in members:
        raise ConflictError("User is already a member of this project")
    return [*members, user_id]


def remove_member(members: list, user_id) -> list:
    """Filter user_id out. No-op when absent."""
    return [m for m in members if m != user_id]


def parse_sort(sort: str | None) -> list[SortKey]:
    """Parse "a,-b" into SortKeys. Blank input falls back to newest first."""
    raw = (sort or "").strip() or DEFAULT_SORT
    keys: list[SortKey] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        descending = part.startswith("-")
        name = part.lstrip("-+")
        if name not in SORTABLE_FIELDS:
            allowed = ", ".join(SORTABLE_FIELDS)
            raise DomainValidationError(
                f"Cannot sort by '{name}'. Sortable fields: {allowed}", "sort",
            )
        keys.append(SortKey(SORTABLE_FIELDS[name], descending))
    return keys or parse_sort(DEFAULT_SORT)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so search is a literal substring match."""
    return (
        term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )


def paginate(total: int, page: int, limit: int) -> Pagination:
    if page < 1:
        raise DomainValidationError("page must be >= 1", "page")
    if limit < 1:
        raise DomainValidationError("limit must be >= 1", "limit")
    return Pagination(
        current_page=page,
        total_pages=math.ceil(total / limit),
        total=total,
        limit=limit,
    )


def summarize_by_status(counts: dict[str, int]) -> dict:
    """Project stats envelope: total plus per-status counts."""
    return {"total": sum(counts.values()), "byStatus": dict(counts)}
