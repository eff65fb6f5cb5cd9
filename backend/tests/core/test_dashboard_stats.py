"""Dashboard Stats — pure aggregation of counts."""

from uuid import uuid4

from app.core.dashboard_stats import completion_rate, projects_tasks_breakdown


def test_completion_rate_empty_store_is_zeros():
    assert completion_rate(0, 0) == [
        {"name": "Completed", "value": 0},
        {"name": "Remaining", "value": 0},
    ]


def test_completion_rate_rounds_to_one_decimal():
    rate = completion_rate(3, 1)
    assert rate[0] == {"name": "Completed", "value": 33.3}
    assert rate[1] == {"name": "Remaining", "value": 66.7}


def test_completion_rate_all_done():
    assert completion_rate(4, 4)[0]["value"] == 100.0
    assert completion_rate(4, 4)[1]["value"] == 0.0


def test_breakdown_splits_done_from_open():
    pid = uuid4()
    rows = [
        (pid, "Launch", "done", 2),
        (pid, "Launch", "todo", 3),
        (pid, "Launch", "in-progress", 1),
    ]
    assert projects_tasks_breakdown(rows) == [
        {"id": str(pid), "name": "Launch", "Completed": 2, "Assigned": 4},
    ]


def test_breakdown_keeps_empty_projects_and_order():
    first, second = uuid4(), uuid4()
    rows = [(first, "A", None, 0), (second, "B", "done", 1)]
    result = projects_tasks_breakdown(rows)
    assert [r["name"] for r in result] == ["A", "B"]
    assert result[0]["Completed"] == 0 and result[0]["Assigned"] == 0
