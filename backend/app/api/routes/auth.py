"""Auth Routes — the caller's own identity.

Invariants:
    - GET /api/auth/me returns the stored user behind X-User-Id, never the header echo
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_principal, get_user_directory
from app.core.domain_types import Principal
from app.schemas.common import envelope
from app.schemas.user import UserOut
from app.services.user_directory import UserDirectory

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me")
async def me(
    principal: Principal = Depends(get_principal),
    users: UserDirectory = Depends(get_user_directory),
):
    """Profile of the authenticated caller."""
    view = await users.me(principal)
    return envelope(UserOut.model_validate(view).to_json())
