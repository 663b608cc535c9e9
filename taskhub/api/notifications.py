"""
Notification API Routes - the authenticated user's inbox.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db import get_app_db
from taskhub.db_handlers import NotificationDBHandler
from taskhub.dependencies.auth import AuthenticatedUser, get_current_user
from taskhub.errors import NotFoundError
from taskhub.schemas import (
    NotificationEnvelope,
    NotificationListResponse,
    NotificationResponse,
)
from taskhub.utils.ids import parse_id

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def get_my_notifications(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    notification_db_handler: NotificationDBHandler = Depends(),
):
    notifications = await notification_db_handler.get_for_user(current_user.id, db=db)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        amount=len(notifications),
    )


@router.patch("/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_notification_read(
    notification_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    notification_db_handler: NotificationDBHandler = Depends(),
):
    """Mark one notification as read. Other users' notifications are invisible."""
    notification_uuid = parse_id(notification_id)
    notification = None
    if notification_uuid is not None:
        notification = await notification_db_handler.get(notification_uuid, db=db)
    if notification is None or notification.user_id != current_user.id:
        raise NotFoundError.for_entity("notification", notification_id)

    notification = await notification_db_handler.update(
        notification, {"read": True}, db=db
    )
    notification = await notification_db_handler.get(notification.id, db=db)
    return NotificationEnvelope(
        notification=NotificationResponse.model_validate(notification)
    )
