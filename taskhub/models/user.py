"""
User model for authentication, task assignment and project membership.

Architecture:
    User → owns Projects, belongs to Projects, is assigned Tasks,
    receives Notifications

Key Features:
    - bcrypt password hashing (only the hash is stored)
    - Unique username and email
    - Role restricted to ``user`` and ``admin``
"""

from sqlalchemy import Column, Index, String
from sqlalchemy.orm import relationship, validates

from taskhub.errors import ValidationError
from taskhub.models.base import Base, TimestampMixin, UUIDMixin

USER_ROLES = ("user", "admin")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20


class User(Base, UUIDMixin, TimestampMixin):
    """
    Registered account. Tasks and projects only hold weak references to it.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_username", "username", unique=True),
        Index("ix_users_email", "email", unique=True),
    )

    username = Column(
        String(USERNAME_MAX_LENGTH),
        nullable=False,
        comment="Unique display name, 3-20 characters",
    )

    email = Column(
        String(255),
        nullable=False,
        comment="Unique login email",
    )

    hashed_password = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password",
    )

    role = Column(
        String(20),
        nullable=False,
        default="user",
        server_default="user",
        comment="Authorization role: user or admin",
    )

    owned_projects = relationship(
        "Project",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    projects = relationship(
        "Project",
        secondary="project_members",
        back_populates="members",
        passive_deletes=True,
    )

    assigned_tasks = relationship(
        "Task",
        back_populates="assignee",
        passive_deletes=True,
    )

    notifications = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("username")
    def validate_username(self, key, value):
        value = (value or "").strip()
        if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
            raise ValidationError(
                f"username must be between {USERNAME_MIN_LENGTH} and "
                f"{USERNAME_MAX_LENGTH} characters"
            )
        return value

    @validates("email")
    def validate_email(self, key, value):
        return (value or "").strip()

    @validates("role")
    def validate_role(self, key, value):
        if value not in USER_ROLES:
            raise ValidationError(f"Invalid role: {value}")
        return value

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
