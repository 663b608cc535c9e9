"""
Common utilities package for the task manager API: authentication helpers,
logging setup and id parsing.
"""

from taskhub.utils.auth import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    generate_auth_token,
    get_password_hash,
    verify_password,
)
from taskhub.utils.ids import parse_id
from taskhub.utils.logger import RequestTimer, setup_logger

__all__ = [
    # Authentication utilities
    "create_access_token",
    "decode_access_token",
    "generate_auth_token",
    "get_password_hash",
    "verify_password",
    "InvalidTokenError",
    "TokenExpiredError",
    # Identifiers
    "parse_id",
    # Logging utilities
    "RequestTimer",
    "setup_logger",
]
