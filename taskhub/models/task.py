"""
Task model: a unit of work, optionally nested under a project and optionally
assigned to a user.

Lifecycle:
    1. Created via POST (globally or under a project)
    2. Status: pending → in-progress → completed
    3. Writing a task that has an assignee notifies that assignee
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship, validates

from taskhub.errors import ValidationError
from taskhub.models.base import Base, TimestampMixin, UUIDMixin

TASK_STATUSES = ("pending", "in-progress", "completed")
TASK_TITLE_MAX_LENGTH = 100


class Task(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_status", "status"),
        Index("ix_tasks_assigned_to", "assigned_to"),
        Index("ix_tasks_project_id", "project_id"),
    )

    title = Column(
        String(TASK_TITLE_MAX_LENGTH),
        nullable=False,
        comment="Short task title",
    )

    description = Column(Text, nullable=True, comment="Optional details")

    status = Column(
        String(20),
        nullable=False,
        default="pending",
        server_default="pending",
        comment="pending, in-progress or completed",
    )

    due_date = Column(DateTime(timezone=True), nullable=True, comment="Optional deadline")

    assigned_to = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="Weak reference to the assignee",
    )

    project_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
        comment="Owning project, if the task was created under one",
    )

    assignee = relationship("User", back_populates="assigned_tasks")

    project = relationship("Project", back_populates="tasks")

    @validates("title")
    def validate_title(self, key, value):
        value = (value or "").strip()
        if not value:
            raise ValidationError("Task title cannot be empty")
        if len(value) > TASK_TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Task title cannot exceed {TASK_TITLE_MAX_LENGTH} characters"
            )
        return value

    @validates("status")
    def validate_status(self, key, value):
        if value not in TASK_STATUSES:
            raise ValidationError(f"Invalid task status: {value}")
        return value

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status='{self.status}')>"
