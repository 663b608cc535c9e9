"""
Notification model: a message addressed to one user, written as a side
effect of task creation and update.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Uuid, false
from sqlalchemy.orm import relationship

from taskhub.models.base import Base, TimestampMixin, UUIDMixin


class Notification(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_id", "user_id"),)

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Recipient",
    )

    message = Column(String(500), nullable=False, comment="Human readable text")

    read = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Whether the recipient marked it as read",
    )

    user = relationship("User", back_populates="notifications")

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, read={self.read})>"
