"""Authorization Engine — pure predicates and guards, no IO."""

from uuid import uuid4

import pytest

from app.core.authorization import (
    can_change_status, can_modify, filter_user_update, is_admin,
    require_admin, require_can_modify,
)
from app.core.domain_types import Principal, UserRole
from app.core.errors import AuthorizationError


def _principal(role=UserRole.MEMBER):
    return Principal(id=uuid4(), role=role)


def test_admin_can_modify_anything():
    admin = _principal(UserRole.ADMIN)
    assert is_admin(admin)
    assert can_modify(admin, uuid4())
    assert can_modify(admin, None)


def test_owner_can_modify_own_resource():
    owner = _principal()
    assert can_modify(owner, owner.id)


def test_member_cannot_modify_someone_elses_resource():
    assert not can_modify(_principal(), uuid4())


def test_missing_owner_only_modifiable_by_admin():
    assert not can_modify(_principal(), None)


def test_assignee_can_change_status_but_not_modify():
    assignee = _principal()
    creator = uuid4()
    assert can_change_status(assignee, creator, assignee.id)
    assert not can_modify(assignee, creator)


def test_unrelated_member_cannot_change_status():
    assert not can_change_status(_principal(), uuid4(), uuid4())


def test_require_admin_raises_for_member():
    with pytest.raises(AuthorizationError) as exc:
        require_admin(_principal(), "purge", "tasks")
    assert exc.value.http_status == 403
    assert exc.value.message == "Not authorized to purge this tasks"


def test_require_can_modify_passes_for_owner():
    owner = _principal()
    require_can_modify(owner, owner.id, "update", "project")


def test_require_can_modify_raises_for_non_owner():
    with pytest.raises(AuthorizationError):
        require_can_modify(_principal(), uuid4(), "delete", "task")


# ─── filter_user_update ───────────────────────────────────────────

def test_admin_update_passes_all_fields():
    admin = _principal(UserRole.ADMIN)
    fields = {"name": "N", "role": "admin", "is_active": False}
    assert filter_user_update(admin, uuid4(), UserRole.MEMBER, fields) == fields


def test_member_cannot_update_another_user():
    with pytest.raises(AuthorizationError):
        filter_user_update(_principal(), uuid4(), UserRole.MEMBER, {"name": "x"})


def test_member_cannot_promote_self():
    me = _principal()
    with pytest.raises(AuthorizationError) as exc:
        filter_user_update(me, me.id, UserRole.MEMBER, {"role": "admin"})
    assert exc.value.message == "You cannot change your own role"


def test_member_unchanged_role_and_is_active_are_dropped():
    me = _principal()
    result = filter_user_update(
        me, me.id, UserRole.MEMBER,
        {"name": "New", "role": "member", "is_active": False},
    )
    assert result == {"name": "New"}


def test_filter_does_not_mutate_input():
    me = _principal()
    fields = {"name": "New", "is_active": True}
    filter_user_update(me, me.id, UserRole.MEMBER, fields)
    assert fields == {"name": "New", "is_active": True}
