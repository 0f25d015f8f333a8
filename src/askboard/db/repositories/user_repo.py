"""User repository - shadow records of identity provider profiles."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from askboard.db.upsert import conflict_insert
from askboard.models import User

PROFILE_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


class UserRepository:
    """Repository for User model."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        result = await self.session.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def exists(self, user_id: str) -> bool:
        """Check whether a user row exists."""
        result = await self.session.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None

    async def upsert(self, user_id: str, **profile) -> User:
        """
        Insert a user or refresh its profile fields in one statement.

        Only fields passed with a non-None value overwrite stored data.
        """
        values = {k: v for k, v in profile.items() if k in PROFILE_FIELDS and v is not None}
        stmt = conflict_insert(self.session, User).values(id=user_id, **values)
        update_set = {k: stmt.excluded[k] for k in values}
        update_set["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(index_elements=["id"], set_=update_set)

        result = await self.session.execute(
            stmt.returning(User),
            execution_options={"populate_existing": True},
        )
        return result.scalar_one()

    async def ensure_exists(self, user_id: str) -> None:
        """Create an empty shadow record unless the user already exists."""
        stmt = conflict_insert(self.session, User).values(id=user_id)
        stmt = stmt.on_conflict_do_nothing(index_elements=["id"])
        await self.session.execute(stmt)
