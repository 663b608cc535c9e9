"""
User Management API Routes - profile operations for the authenticated user
and account administration for admins.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db import get_app_db
from taskhub.db_handlers import UserDBHandler
from taskhub.dependencies.auth import AuthenticatedUser, get_current_user, require_admin
from taskhub.errors import NotFoundError, ValidationError
from taskhub.models import User
from taskhub.schemas import UserEnvelope, UserListResponse, UserResponse
from taskhub.utils.ids import parse_id
from taskhub.utils.logger import setup_logger
from taskhub.validation import changed_fields, validate_user_update

logger = setup_logger("api.users")

router = APIRouter(prefix="/api/v1/users", tags=["User Management"])


async def _get_user_or_404(user_id, db: AsyncSession) -> User:
    user_uuid = parse_id(user_id)
    user = None
    if user_uuid is not None:
        user = await UserDBHandler().get(user_uuid, db=db)
    if user is None:
        raise NotFoundError.for_entity("user", user_id)
    return user


@router.get("/me", response_model=UserEnvelope)
async def get_me(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
):
    user = await _get_user_or_404(current_user.id, db)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.patch("/me", response_model=UserEnvelope)
async def update_me(
    body: Any = Body(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    user_db_handler: UserDBHandler = Depends(),
):
    """Update username and/or email of the current user."""
    payload = validate_user_update(body).unwrap()
    changes = changed_fields(payload)

    user = await _get_user_or_404(current_user.id, db)
    conflict = await user_db_handler.find_conflicting_user(
        username=changes.get("username"),
        email=changes.get("email"),
        exclude_id=user.id,
        db=db,
    )
    if conflict:
        raise ValidationError("Username or email already in use.")

    await user_db_handler.update(user, changes, db=db)
    user = await user_db_handler.get(user.id, db=db)
    logger.info(f"Updated profile of user {user.id}: {sorted(changes)}")
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.delete("/me", response_model=str)
async def delete_me(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    user_db_handler: UserDBHandler = Depends(),
):
    user = await _get_user_or_404(current_user.id, db)
    await user_db_handler.remove(user.id, db=db)
    logger.info(f"User {user.id} deleted their account")
    return "User deleted successfully"


@router.get("", response_model=UserListResponse)
async def get_all_users(
    admin: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_app_db),
    user_db_handler: UserDBHandler = Depends(),
):
    users = await user_db_handler.list_users(db=db)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users], amount=len(users)
    )


@router.delete("/{user_id}", response_model=str)
async def delete_user(
    user_id: str,
    admin: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_app_db),
    user_db_handler: UserDBHandler = Depends(),
):
    user = await _get_user_or_404(user_id, db)
    await user_db_handler.remove(user.id, db=db)
    logger.info(f"Admin {admin.id} deleted user {user.id}")
    return "User deleted successfully"
