"""
Authentication dependencies for FastAPI route protection.
"""

from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from taskhub.config import Settings
from taskhub.errors import AuthError, ForbiddenError
from taskhub.utils.auth import InvalidTokenError, TokenExpiredError, decode_access_token
from taskhub.utils.ids import parse_id
from taskhub.utils.logger import setup_logger

logger = setup_logger("auth")

# Missing credentials are reported by get_current_user, not by HTTPBearer
security = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    """Identity attached to a request by a verified token."""

    id: UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> AuthenticatedUser:
    """
    Dependency to get the current identity from the bearer token.

    The handler is not invoked when the token is missing, malformed, expired
    or signed with another secret.
    """
    if credentials is None:
        raise AuthError("Access denied. No token provided.")

    try:
        payload = decode_access_token(
            credentials.credentials, settings.jwt_secret, settings.jwt_algorithm
        )
    except TokenExpiredError as e:
        raise AuthError("Token expired.") from e
    except InvalidTokenError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise AuthError("Invalid token.") from e

    user_id = parse_id(payload.get("id"))
    role = payload.get("role")
    if user_id is None or not isinstance(role, str):
        raise AuthError("Invalid token.")

    return AuthenticatedUser(id=user_id, role=role)


async def require_admin(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    if not current_user.is_admin:
        raise ForbiddenError("Admin privileges required.")
    return current_user
