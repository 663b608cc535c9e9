from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db_handlers.base import BaseDBHandler, check_local_db
from taskhub.models.notification import Notification


class NotificationDBHandler(BaseDBHandler[Notification]):
    def __init__(self):
        super().__init__(Notification)

    @check_local_db
    async def create_notification(
        self,
        user_id: uuid.UUID,
        message: str,
        *,
        db: AsyncSession = None,
        commit: bool = True,
    ) -> Notification:
        return await self.create(
            {"user_id": user_id, "message": message}, db=db, commit=commit
        )

    @check_local_db
    async def get_for_user(
        self, user_id: uuid.UUID, *, db: AsyncSession = None
    ) -> list[Notification]:
        """Notifications of one user, newest first."""
        return await self.get_multi_by_attributes(
            db=db,
            user_id=user_id,
            order_by=[Notification.created_at.desc(), Notification.id],
        )
