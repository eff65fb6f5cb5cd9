"""Command Schemas — allow-listed updates, null rejection, legacy projectId."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from app.schemas.project import ProjectCreate, ProjectTaskDraft, ProjectUpdate
from app.schemas.task import TaskCreate, TaskUpdate
from app.schemas.user import UserUpdate


def test_project_update_rejects_owner_field():
    with pytest.raises(ValidationError):
        ProjectUpdate.model_validate({"owner": str(uuid4())})


def test_project_update_rejects_members_field():
    with pytest.raises(ValidationError):
        ProjectUpdate.model_validate({"members": []})


def test_project_update_rejects_null_title():
    with pytest.raises(ValidationError):
        ProjectUpdate.model_validate({"title": None})


def test_project_update_allows_null_deadline():
    command = ProjectUpdate.model_validate({"deadline": None})
    assert command.changes() == {"deadline": None}


def test_update_changes_only_contains_sent_fields():
    command = ProjectUpdate.model_validate({"title": "  Renamed  ", "status": "on-hold"})
    assert command.changes() == {"title": "Renamed", "status": "on-hold"}


def test_project_create_ignores_server_controlled_fields():
    command = ProjectCreate.model_validate({
        "title": "Launch Week", "owner": str(uuid4()), "members": ["x"],
    })
    assert not hasattr(command, "owner")
    assert command.status == "active"


def test_project_create_requires_title():
    with pytest.raises(ValidationError):
        ProjectCreate.model_validate({"title": "   "})


def test_project_create_rejects_long_title():
    with pytest.raises(ValidationError):
        ProjectCreate.model_validate({"title": "x" * 101})


def test_project_create_defers_draft_validation():
    command = ProjectCreate.model_validate({
        "title": "Launch Week", "tasks": [{"title": "ok"}, {"priority": "urgent"}],
    })
    assert len(command.tasks) == 2
    with pytest.raises(ValidationError):
        ProjectTaskDraft.model_validate(command.tasks[1])


def test_task_create_accepts_legacy_project_id():
    pid = uuid4()
    command = TaskCreate.model_validate({"title": "t", "projectId": str(pid)})
    assert command.project == pid


def test_task_create_project_wins_over_project_id():
    pid, legacy = uuid4(), uuid4()
    command = TaskCreate.model_validate({
        "title": "t", "project": str(pid), "projectId": str(legacy),
    })
    assert command.project == pid


def test_task_create_ignores_stage_and_created_by():
    command = TaskCreate.model_validate({
        "title": "t", "project": str(uuid4()),
        "stage": "testing", "createdBy": str(uuid4()),
    })
    assert not hasattr(command, "stage")
    assert not hasattr(command, "created_by")


def test_task_update_camel_case_keys_map_to_attributes():
    assignee = uuid4()
    command = TaskUpdate.model_validate({"assignedTo": str(assignee)})
    assert command.changes() == {"assigned_to": assignee}


def test_task_update_rejects_unknown_field():
    with pytest.raises(ValidationError):
        TaskUpdate.model_validate({"completedAt": None})


def test_user_update_lowercases_email():
    command = UserUpdate.model_validate({"email": "Ada@Example.COM"})
    assert command.changes() == {"email": "ada@example.com"}


def test_user_update_rejects_malformed_email():
    with pytest.raises(ValidationError):
        UserUpdate.model_validate({"email": "not-an-email"})
