"""
Project model: a named container of tasks with an owner and members.

Architecture:
    User (owner) → Project → Tasks
    Users ↔ Projects through the ``project_members`` association table
"""

from sqlalchemy import Column, ForeignKey, Index, String, Table, Text, Uuid
from sqlalchemy.orm import relationship, validates

from taskhub.errors import ValidationError
from taskhub.models.base import Base, TimestampMixin, UUIDMixin

project_members = Table(
    "project_members",
    Base.metadata,
    Column(
        "project_id",
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Project(Base, UUIDMixin, TimestampMixin):
    """
    Container entity. Deleting a project deletes its tasks; members are weak
    references and survive it.
    """

    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_owner_id", "owner_id"),)

    name = Column(String(50), nullable=False, comment="Project display name")

    description = Column(Text, nullable=True, comment="Free-form description")

    owner_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User who created the project",
    )

    owner = relationship("User", back_populates="owned_projects")

    members = relationship(
        "User",
        secondary=project_members,
        back_populates="projects",
        passive_deletes=True,
        order_by="User.username",
    )

    tasks = relationship(
        "Task",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("name")
    def validate_name(self, key, value):
        value = (value or "").strip()
        if not value:
            raise ValidationError("Project name cannot be empty")
        return value

    def has_member(self, user_id) -> bool:
        return any(member.id == user_id for member in self.members)

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}')>"
