"""
Base configurations and mixins for database models.

Provides the declarative base shared by every model and the id / timestamp
mixins. Column types are portable so the same models run on PostgreSQL in
production and SQLite in tests.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.functions import now as db_now


Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    Adds ``created_at`` and ``updated_at`` columns, stamped in UTC by the
    application with the database clock as a fallback default.
    """

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the record was created",
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=db_now(),
        onupdate=utcnow,
        nullable=False,
        comment="Timestamp when the record was last updated",
    )


class UUIDMixin:
    """
    Adds a UUID4 primary key generated on the client side.
    """

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Primary key using UUID4 format",
    )


__all__ = ["Base", "TimestampMixin", "UUIDMixin"]
