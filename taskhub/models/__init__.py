"""
Database models for the task manager API.

Architecture: User → Project → Task, with Notifications addressed to Users.
"""

from taskhub.models.notification import Notification
from taskhub.models.project import Project, project_members
from taskhub.models.task import TASK_STATUSES, Task
from taskhub.models.user import USER_ROLES, User

__all__ = [
    "User",
    "Project",
    "Task",
    "Notification",
    "project_members",
    "TASK_STATUSES",
    "USER_ROLES",
]
