"""
Task operations shared by the global ``/tasks`` routes and the
project-scoped ``/projects/{project_id}/tasks`` routes.

Writing a task that ends up with an assignee also writes a notification for
that assignee. Both rows are committed in one transaction, so a failed
notification rolls the task write back and the request fails as a whole.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db_handlers import NotificationDBHandler, TaskDBHandler, UserDBHandler
from taskhub.errors import NotFoundError, ValidationError
from taskhub.models import Task
from taskhub.schemas import TaskCreate, TaskUpdate
from taskhub.utils.ids import parse_id
from taskhub.utils.logger import setup_logger
from taskhub.validation import changed_fields

logger = setup_logger("task_service")

NEW_TASK_MESSAGE = "You have been assigned a new task: {title}"
UPDATED_TASK_MESSAGE = "Task: {title} has been updated"


class TaskService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.tasks = TaskDBHandler()
        self.notifications = NotificationDBHandler()
        self.users = UserDBHandler()

    async def _ensure_assignee_exists(self, user_id: uuid.UUID):
        if await self.users.get(user_id, db=self.db) is None:
            raise ValidationError('"assignedTo" must reference an existing user')

    async def _notify_assignee(self, task: Task, template: str):
        await self.notifications.create_notification(
            task.assigned_to,
            template.format(title=task.title),
            db=self.db,
            commit=False,
        )
        logger.info(f"Notified user {task.assigned_to} about task {task.id}")

    async def _get_or_404(self, task_id: str, project_id: uuid.UUID | None) -> Task:
        task_uuid = parse_id(task_id)
        task = None
        if task_uuid is not None:
            task = await self.tasks.get_task_with_assignee(
                task_uuid, project_id=project_id, db=self.db
            )
        if task is None:
            raise NotFoundError.for_entity("task", task_id)
        return task

    async def list_tasks(self, project_id: uuid.UUID | None = None) -> list[Task]:
        return await self.tasks.get_tasks(project_id=project_id, db=self.db)

    async def get_task(self, task_id: str, project_id: uuid.UUID | None = None) -> Task:
        return await self._get_or_404(task_id, project_id)

    async def create_task(
        self, payload: TaskCreate, project_id: uuid.UUID | None = None
    ) -> Task:
        if payload.assigned_to is not None:
            await self._ensure_assignee_exists(payload.assigned_to)

        data = payload.model_dump()
        data["project_id"] = project_id
        task = await self.tasks.create(data, db=self.db, commit=False)
        if task.assigned_to is not None:
            await self._notify_assignee(task, NEW_TASK_MESSAGE)
        await self.db.commit()

        logger.info(f"Created task {task.id} (project: {project_id})")
        return await self.tasks.get(task.id, db=self.db)

    async def update_task(
        self,
        task_id: str,
        payload: TaskUpdate,
        project_id: uuid.UUID | None = None,
    ) -> Task:
        task = await self._get_or_404(task_id, project_id)

        changes = changed_fields(payload)
        if changes.get("assigned_to") is not None:
            await self._ensure_assignee_exists(changes["assigned_to"])

        task = await self.tasks.update(task, changes, db=self.db, commit=False)
        if task.assigned_to is not None:
            await self._notify_assignee(task, UPDATED_TASK_MESSAGE)
        await self.db.commit()

        logger.info(f"Updated task {task.id}: {sorted(changes)}")
        return await self._get_or_404(str(task.id), project_id)

    async def delete_task(self, task_id: str, project_id: uuid.UUID | None = None):
        task = await self._get_or_404(task_id, project_id)
        await self.tasks.remove(task.id, db=self.db)
        logger.info(f"Deleted task {task.id}")
