"""User Routes — team directory, profile updates and admin user removal.

Invariants:
    - /stats is declared before /{user_id}
    - DELETE /{user_id} deactivates; DELETE /{user_id}/permanent removes the row
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.dependencies import get_principal, get_user_directory
from app.core.domain_types import Principal
from app.schemas.common import envelope
from app.schemas.user import UserOut, UserUpdate
from app.services.user_directory import UserDirectory

router = APIRouter(prefix="/api/users", tags=["users"])


def _out(view) -> dict:
    return UserOut.model_validate(view).to_json()


@router.get("")
async def list_users(
    principal: Principal = Depends(get_principal),
    users: UserDirectory = Depends(get_user_directory),
):
    """Active users, newest first."""
    views = await users.list_active()
    return envelope([_out(v) for v in views], count=len(views))


@router.get("/stats")
async def user_stats(
    principal: Principal = Depends(get_principal),
    users: UserDirectory = Depends(get_user_directory),
):
    return envelope(await users.stats(principal))


@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    principal: Principal = Depends(get_principal),
    users: UserDirectory = Depends(get_user_directory),
):
    return envelope(_out(await users.get(user_id)))


@router.put("/{user_id}")
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    principal: Principal = Depends(get_principal),
    users: UserDirectory = Depends(get_user_directory),
):
    return envelope(_out(await users.update(principal, user_id, body)))


@router.delete("/{user_id}")
async def deactivate_user(
    user_id: UUID,
    principal: Principal = Depends(get_principal),
    users: UserDirectory = Depends(get_user_directory),
):
    """Soft delete: the user can no longer authenticate."""
    await users.deactivate(principal, user_id)
    return envelope({}, message="User deactivated successfully")


@router.delete("/{user_id}/permanent")
async def delete_user_permanently(
    user_id: UUID,
    principal: Principal = Depends(get_principal),
    users: UserDirectory = Depends(get_user_directory),
):
    await users.delete_permanently(principal, user_id)
    return envelope({}, message="User permanently deleted")
