"""User Directory — team listing, profile updates and user removal.

Invariants:
    - Non-admins may update only themselves; role/isActive writes are admin-only
      (decided by core/authorization.filter_user_update)
    - Email stays unique: a taken email is a ConflictError, checked before writing
      and again by the unique index on commit
    - An admin cannot deactivate themselves, through update or deactivate
    - Deactivate/delete are admin-only and never target the caller
    - A user who still owns projects cannot be hard-deleted
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.authorization import filter_user_update, require_admin
from app.core.domain_types import Principal, UserRole
from app.core.errors import (
    ConflictError, DomainValidationError, ResourceNotFoundError,
)
from app.core.read_models import UserView
from app.core.repository_protocols import ProjectRepository, UserRepository
from app.models.user import User
from app.repositories.projects import SqlProjectRepository
from app.repositories.users import SqlUserRepository, to_user_view
from app.schemas.user import UserUpdate

logger = logging.getLogger(__name__)


class UserDirectory:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users: UserRepository = SqlUserRepository(db)
        self.projects: ProjectRepository = SqlProjectRepository(db)

    async def get_or_404(self, user_id: UUID) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def list_active(self) -> list[UserView]:
        return [to_user_view(u) for u in await self.users.list_active()]

    async def get(self, user_id: UUID) -> UserView:
        return to_user_view(await self.get_or_404(user_id))

    async def me(self, principal: Principal) -> UserView:
        return await self.get(principal.id)

    async def update(
        self, principal: Principal, user_id: UUID, command: UserUpdate,
    ) -> UserView:
        user = await self.get_or_404(user_id)
        fields = filter_user_update(
            principal, user.id, UserRole(user.role), command.changes(),
        )
        if user.id == principal.id and fields.get("is_active") is False:
            raise DomainValidationError(
                "You cannot deactivate your own account", "isActive",
            )
        email = fields.get("email")
        if email and email != user.email and await self.users.email_taken(email, user.id):
            raise ConflictError("Email already exists")

        for field, value in fields.items():
            setattr(user, field, value)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # lost a race on the unique email index
            await self.db.rollback()
            raise ConflictError("Email already exists") from e
        logger.info(
            "User updated",
            extra={"user_id": str(user.id)},
        )
        return to_user_view(user)

    async def deactivate(self, principal: Principal, user_id: UUID) -> UUID:
        require_admin(principal, "deactivate", "user")
        user = await self.get_or_404(user_id)
        if user.id == principal.id:
            raise DomainValidationError("You cannot delete your own account", "id")
        user.is_active = False
        await self.db.commit()
        logger.info("User deactivated", extra={"user_id": str(user.id)})
        return user.id

    async def delete_permanently(self, principal: Principal, user_id: UUID) -> UUID:
        require_admin(principal, "delete", "user")
        user = await self.get_or_404(user_id)
        if user.id == principal.id:
            raise DomainValidationError("You cannot delete your own account", "id")
        owned = await self.projects.count_owned_by(user.id)
        if owned:
            raise ConflictError(
                f"User still owns {owned} project(s); transfer ownership first",
            )
        await self.projects.remove_memberships_of(user.id)
        await self.users.delete(user)
        await self.db.commit()
        logger.info("User permanently deleted", extra={"user_id": str(user_id)})
        return user_id

    async def stats(self, principal: Principal) -> dict[str, int]:
        require_admin(principal, "view statistics of", "users")
        return await self.users.stats()
