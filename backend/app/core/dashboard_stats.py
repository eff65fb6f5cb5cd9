"""Dashboard Stats — pure aggregation of raw counts into dashboard payloads.

Invariants:
    - All functions are PURE: inputs are counts already read from the store
    - Percentages round to one decimal and sum to 100 when there is any task
    - Empty store yields zeros, never a division error
"""

from app.core.domain_types import TaskStatus


def completion_rate(total_tasks: int, done_tasks: int) -> list[dict]:
    if total_tasks <= 0:
        return [
            {"name": "Completed", "value": 0},
            {"name": "Remaining", "value": 0},
        ]
    completed = round(done_tasks * 100 / total_tasks, 1)
    return [
        {"name": "Completed", "value": completed},
        {"name": "Remaining", "value": round(100 - completed, 1)},
    ]


def projects_tasks_breakdown(rows: list[tuple]) -> list[dict]:
    """rows: (project_id, title, status, count) -> per-project Completed/Assigned."""
    by_project: dict = {}
    for project_id, title, status, count in rows:
        entry = by_project.setdefault(
            project_id,
            {"id": str(project_id), "name": title, "Completed": 0, "Assigned": 0},
        )
        if status == TaskStatus.DONE.value:
            entry["Completed"] += count
        else:
            entry["Assigned"] += count
    return list(by_project.values())
