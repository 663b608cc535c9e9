"""
Application error taxonomy.

Every error carries the HTTP status it maps to; the exception handlers
registered in ``main.create_app`` render them as ``{"msg": message}``.
"""

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Request body failed validation; carries the first violation."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """Missing, malformed, expired or forged bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND

    @classmethod
    def for_entity(cls, entity: str, entity_id: object) -> "NotFoundError":
        return cls(f"No {entity} with id: {entity_id}")
