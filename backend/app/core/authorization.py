"""Authorization Engine — pure decisions over a Principal and resource ownership facts.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - can_modify(p, owner) is true iff p is admin OR p.id == owner
    - require_* functions raise AuthorizationError, never return False
    - Only admins may write a User's role or isActive

Design Decisions:
    - Predicates (bool) and guards (raise) side by side: services read as
      "require_can_modify(...)" while tests assert the predicate directly
    - filter_user_update returns a new dict: caller's payload never mutated
"""

from typing import Any
from uuid import UUID

from app.core.domain_types import Principal, UserRole
from app.core.errors import AuthorizationError


ADMIN_ONLY_USER_FIELDS = frozenset({"role", "is_active"})


def is_admin(principal: Principal) -> bool:
    return principal.role == UserRole.ADMIN


def is_owner(principal: Principal, owner_id: UUID | None) -> bool:
    return owner_id is not None and principal.id == owner_id


def can_modify(principal: Principal, owner_id: UUID | None) -> bool:
    """Owner or admin."""
    return is_admin(principal) or is_owner(principal, owner_id)


def can_change_status(
    principal: Principal, created_by: UUID | None, assigned_to: UUID | None,
) -> bool:
    """Board moves: creator, current assignee, or admin."""
    return can_modify(principal, created_by) or is_owner(principal, assigned_to)


def require_admin(principal: Principal, action: str, resource: str) -> None:
    if not is_admin(principal):
        raise AuthorizationError(action, resource)


def require_can_modify(
    principal: Principal, owner_id: UUID | None, action: str, resource: str,
) -> None:
    if not can_modify(principal, owner_id):
        raise AuthorizationError(action, resource)


def filter_user_update(
    principal: Principal,
    target_id: UUID,
    current_role: UserRole,
    fields: dict[str, Any],
) -> dict[str, Any]:
    """Drop or reject fields the principal may not write on a User.

    Non-admins may only edit themselves. A non-admin sending a role different
    from the stored one is rejected outright; an unchanged role and any
    isActive value are dropped.
    """
    if is_admin(principal):
        return dict(fields)
    if principal.id != target_id:
        raise AuthorizationError("update", "user")

    requested_role = fields.get("role")
    if requested_role is not None and UserRole(requested_role) != current_role:
        raise AuthorizationError(
            "update", "user", message="You cannot change your own role",
        )
    return {
        key: value for key, value in fields.items()
        if key not in ADMIN_ONLY_USER_FIELDS
    }
