"""Error Hierarchy — codes, statuses and the failure envelope."""

from app.core.errors import (
    AuthenticationError, AuthorizationError, ConflictError, DatabaseError,
    DomainValidationError, ResourceNotFoundError,
)


def test_validation_error_envelope_carries_field():
    body = DomainValidationError("Title is required", "title").to_response()
    assert body["success"] is False
    assert body["message"] == "Title is required"
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["category"] == "validation"
    assert body["error"]["details"] == {"field": "title"}
    assert "timestamp" in body["error"]


def test_status_codes_per_error_kind():
    assert AuthenticationError().http_status == 401
    assert AuthorizationError("update", "project").http_status == 403
    assert ResourceNotFoundError("Task", "x").http_status == 404
    assert ConflictError("dup").http_status == 409
    assert DatabaseError("boom", "commit").http_status == 500


def test_not_found_message_names_resource():
    err = ResourceNotFoundError("Project", "abc")
    assert err.message == "Project 'abc' not found"
    assert "details" not in err.to_response()["error"]


def test_database_error_is_critical():
    err = DatabaseError("Connection refused", "execute")
    assert err.severity.value == "critical"
    assert err.message == "Database execute failed: Connection refused"
