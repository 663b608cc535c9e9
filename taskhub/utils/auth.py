"""
Authentication utilities with JWT tokens and bcrypt password hashing.

- bcrypt with salt for password hashing
- HS256 signed access tokens carrying the user id and role
- Absolute expiry, no refresh or revocation
- UTC timezone consistency
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class TokenExpiredError(Exception):
    pass


class InvalidTokenError(Exception):
    pass


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    return bcrypt.checkpw(
        _password_bytes(plain_password), hashed_password.encode("utf-8")
    )


def get_password_hash(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password=_password_bytes(password), salt=salt)
    return hashed_password.decode("utf-8")


def create_access_token(
    data: dict[str, Any],
    secret: str,
    expires_delta: timedelta | None = None,
    algorithm: str = ALGORITHM,
) -> str:
    """Create a signed JWT access token with the given claims."""
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": datetime.now(UTC) + expires_delta})
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_access_token(
    token: str, secret: str, algorithm: str = ALGORITHM
) -> dict[str, Any]:
    """
    Decode and verify a JWT access token.

    Raises TokenExpiredError once ``exp`` has passed and InvalidTokenError for
    any other signature or format problem.
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e


def generate_auth_token(
    user_id: Any, role: str, secret: str, expires_minutes: int, algorithm: str = ALGORITHM
) -> str:
    """Issue the ``{id, role}`` token handed out at registration and login."""
    return create_access_token(
        {"id": str(user_id), "role": role},
        secret,
        expires_delta=timedelta(minutes=expires_minutes),
        algorithm=algorithm,
    )
