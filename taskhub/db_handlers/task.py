from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskhub.db_handlers.base import BaseDBHandler, check_local_db
from taskhub.models.task import Task
from taskhub.utils.logger import setup_logger

logger = setup_logger("task_db_handler")


class TaskDBHandler(BaseDBHandler[Task]):
    def __init__(self):
        super().__init__(Task)

    @check_local_db
    async def get_tasks(
        self, *, project_id: uuid.UUID | None = None, db: AsyncSession = None
    ) -> list[Task]:
        """All tasks (optionally of one project) with their assignee loaded."""
        filters: dict[str, Any] = {}
        if project_id is not None:
            filters["project_id"] = project_id
        return await self.get_multi_by_attributes(
            db=db,
            options=[selectinload(Task.assignee)],
            order_by=Task.created_at,
            **filters,
        )

    @check_local_db
    async def get_task_with_assignee(
        self,
        task_id: uuid.UUID,
        *,
        project_id: uuid.UUID | None = None,
        db: AsyncSession = None,
    ) -> Task | None:
        """
        Fetch one task with its assignee loaded. When ``project_id`` is given,
        a task belonging to another project is treated as absent.
        """
        task = await self.get(task_id, db=db, options=[selectinload(Task.assignee)])
        if task is None:
            return None
        if project_id is not None and task.project_id != project_id:
            logger.debug(f"Task {task_id} is not part of project {project_id}")
            return None
        return task
