"""Task Rules — status transition and tag normalization."""

from datetime import datetime, timezone

import pytest

from app.core.domain_types import TaskStatus
from app.core.errors import DomainValidationError
from app.core.task_rules import (
    DEFAULT_STATUS, INITIAL_STAGE, initial_status, normalize_tags,
    require_valid_status, transition_status,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_done_stamps_completed_at():
    t = transition_status("done", NOW)
    assert t.status == TaskStatus.DONE
    assert t.completed_at == NOW


@pytest.mark.parametrize("status", ["backlog", "todo", "in-progress"])
def test_non_done_clears_completed_at(status):
    t = transition_status(status, NOW)
    assert t.status.value == status
    assert t.completed_at is None


def test_legacy_inprogress_alias_accepted():
    assert transition_status("inprogress", NOW).status == TaskStatus.IN_PROGRESS


@pytest.mark.parametrize("raw", ["finished", "", "DONE", None, 3])
def test_invalid_status_raises_validation_error(raw):
    with pytest.raises(DomainValidationError) as exc:
        require_valid_status(raw)
    assert exc.value.field == "status"
    assert exc.value.http_status == 400
    assert "backlog, todo, in-progress, done" in exc.value.message


def test_initial_status_defaults_to_todo():
    t = initial_status(None, NOW)
    assert t.status == DEFAULT_STATUS == TaskStatus.TODO
    assert t.completed_at is None


def test_initial_status_done_is_completed():
    assert initial_status("done", NOW).completed_at == NOW


def test_initial_stage_is_planning():
    assert INITIAL_STAGE.value == "planning"


def test_normalize_tags_trims_and_drops_empty():
    assert normalize_tags([" ui ", "", "  ", "api"]) == ["ui", "api"]


def test_normalize_tags_none_is_empty_list():
    assert normalize_tags(None) == []
