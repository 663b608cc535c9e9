"""
Service layer for operations that span several database handlers.
"""

from taskhub.services.task_service import (
    NEW_TASK_MESSAGE,
    UPDATED_TASK_MESSAGE,
    TaskService,
)

__all__ = ["TaskService", "NEW_TASK_MESSAGE", "UPDATED_TASK_MESSAGE"]
