# Authentication API routes for user registration and login

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.config import Settings
from taskhub.db import get_app_db
from taskhub.db_handlers import UserDBHandler
from taskhub.dependencies.auth import get_settings
from taskhub.errors import ValidationError
from taskhub.schemas import RegisterResponse, TokenResponse, UserResponse
from taskhub.utils.auth import generate_auth_token, get_password_hash, verify_password
from taskhub.utils.logger import setup_logger
from taskhub.validation import validate_login, validate_user

logger = setup_logger("api.auth")

router = APIRouter(prefix="/api/v1/users", tags=["Authentication"])


def issue_token(user, settings: Settings) -> str:
    return generate_auth_token(
        user.id,
        user.role,
        settings.jwt_secret,
        settings.access_token_expire_minutes,
        settings.jwt_algorithm,
    )


@router.post(
    "/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED
)
async def register_user(
    body: Any = Body(None),
    db: AsyncSession = Depends(get_app_db),
    settings: Settings = Depends(get_settings),
    user_db_handler: UserDBHandler = Depends(),
):
    """Register a new account and return it with a fresh access token."""
    payload = validate_user(body).unwrap()

    existing_user = await user_db_handler.find_conflicting_user(
        username=payload.username, email=payload.email, db=db
    )
    if existing_user:
        raise ValidationError("User already registered.")

    # Password is hashed with bcrypt before storage
    user = await user_db_handler.create(
        {
            "username": payload.username,
            "email": payload.email,
            "hashed_password": get_password_hash(payload.password),
        },
        db=db,
    )
    user = await user_db_handler.get(user.id, db=db)
    logger.info(f"Registered user {user.id} ({user.username})")

    return RegisterResponse(
        user=UserResponse.model_validate(user), token=issue_token(user, settings)
    )


@router.post("/login", response_model=TokenResponse)
async def login_user(
    body: Any = Body(None),
    db: AsyncSession = Depends(get_app_db),
    settings: Settings = Depends(get_settings),
    user_db_handler: UserDBHandler = Depends(),
):
    """Authenticate with email and password and return an access token."""
    payload = validate_login(body).unwrap()

    user = await user_db_handler.get_user_by_email(payload.email, db=db)
    if not user or not verify_password(payload.password, user.hashed_password):
        raise ValidationError("Invalid email or password.")

    return TokenResponse(token=issue_token(user, settings))
