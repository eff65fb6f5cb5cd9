"""User Repository — lookups, batched summaries and role/activity counts."""

from uuid import UUID

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.read_models import UserSummary, UserView
from app.models.user import User


def to_user_view(user: User) -> UserView:
    return UserView(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        is_active=user.is_active,
        avatar=user.avatar,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def to_user_summary(user: User) -> UserSummary:
    return UserSummary(
        id=user.id, name=user.name, email=user.email,
        avatar=user.avatar, role=user.role,
    )


class SqlUserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def get_active(self, user_id: UUID) -> User | None:
        user = await self.get(user_id)
        if user is None or not user.is_active:
            return None
        return user

    async def email_taken(
        self, email: str, exclude_id: UUID | None = None,
    ) -> bool:
        query = select(User.id).where(User.email == email.lower())
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_active(self) -> list[User]:
        result = await self.db.execute(
            select(User)
            .where(User.is_active.is_(True))
            .order_by(User.created_at.desc()),
        )
        return list(result.scalars().all())

    async def summaries(self, user_ids: set[UUID]) -> dict[UUID, UserSummary]:
        ids = {i for i in user_ids if i is not None}
        if not ids:
            return {}
        result = await self.db.execute(select(User).where(User.id.in_(ids)))
        return {u.id: to_user_summary(u) for u in result.scalars().all()}

    async def stats(self) -> dict[str, int]:
        active = User.is_active.is_(True)
        result = await self.db.execute(
            select(
                func.count(User.id),
                func.sum(case((active, 1), else_=0)),
                func.sum(case((active & (User.role == "admin"), 1), else_=0)),
                func.sum(case((active & (User.role == "member"), 1), else_=0)),
            ),
        )
        total, active_count, admins, members = result.one()
        active_count = active_count or 0
        return {
            "total": total,
            "active": active_count,
            "inactive": total - active_count,
            "admins": admins or 0,
            "members": members or 0,
        }

    async def delete(self, user: User) -> None:
        await self.db.delete(user)
