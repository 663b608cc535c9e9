from __future__ import annotations

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db_handlers.base import BaseDBHandler, check_local_db
from taskhub.models.user import User
from taskhub.utils.logger import setup_logger

logger = setup_logger("db_handlers.user")


class UserDBHandler(BaseDBHandler[User]):
    def __init__(self):
        super().__init__(User)

    @check_local_db
    async def get_user_by_email(
        self, email: str, *, db: AsyncSession = None
    ) -> User | None:
        """Get a user by email."""
        try:
            return await self.get_by_attributes(db=db, email=email.strip())
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user by email '{email}': {e}")
            raise

    @check_local_db
    async def find_conflicting_user(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        exclude_id: UUID | None = None,
        db: AsyncSession = None,
    ) -> User | None:
        """Return a user already holding ``username`` or ``email``, if any."""
        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email)
        if not conditions:
            return None

        stmt = select(User).where(or_(*conditions))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await db.execute(stmt.limit(1))
        return result.scalars().first()

    @check_local_db
    async def list_users(self, *, db: AsyncSession = None) -> list[User]:
        return await self.get_multi_by_attributes(db=db, order_by=User.created_at)
