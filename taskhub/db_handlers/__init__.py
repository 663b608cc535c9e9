from taskhub.db_handlers.base import BaseDBHandler, check_local_db
from taskhub.db_handlers.notification import NotificationDBHandler
from taskhub.db_handlers.project import ProjectDBHandler
from taskhub.db_handlers.task import TaskDBHandler
from taskhub.db_handlers.user import UserDBHandler

__all__ = [
    "BaseDBHandler",
    "check_local_db",
    "NotificationDBHandler",
    "ProjectDBHandler",
    "TaskDBHandler",
    "UserDBHandler",
]
