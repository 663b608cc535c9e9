"""
Task API Routes - CRUD endpoints for tasks that are not scoped to a project.

Reads, updates and deletes are public; creation requires a bearer token.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db import get_app_db
from taskhub.dependencies.auth import AuthenticatedUser, get_current_user
from taskhub.schemas import (
    PopulatedTaskEnvelope,
    PopulatedTaskResponse,
    TaskEnvelope,
    TaskListResponse,
    TaskResponse,
)
from taskhub.services.task_service import TaskService
from taskhub.utils.logger import setup_logger
from taskhub.validation import validate_task, validate_task_update

logger = setup_logger("api.tasks")

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


@router.get("", response_model=TaskListResponse)
async def get_all_tasks(db: AsyncSession = Depends(get_app_db)):
    """List every task with its assignee expanded to ``{id, username, email}``."""
    tasks = await TaskService(db).list_tasks()
    return TaskListResponse(
        tasks=[PopulatedTaskResponse.model_validate(task) for task in tasks],
        amount=len(tasks),
    )


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
async def create_task(
    body: Any = Body(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
):
    """Create a task; an assignee receives a notification."""
    payload = validate_task(body).unwrap()
    task = await TaskService(db).create_task(payload)
    logger.debug(f"Task {task.id} created by user {current_user.id}")
    return TaskEnvelope(task=TaskResponse.model_validate(task))


@router.get("/{task_id}", response_model=PopulatedTaskEnvelope)
async def get_task(task_id: str, db: AsyncSession = Depends(get_app_db)):
    task = await TaskService(db).get_task(task_id)
    return PopulatedTaskEnvelope(task=PopulatedTaskResponse.model_validate(task))


@router.patch("/{task_id}", response_model=PopulatedTaskEnvelope)
async def update_task(
    task_id: str,
    body: Any = Body(None),
    db: AsyncSession = Depends(get_app_db),
):
    """Apply a partial update; a task that still has an assignee notifies them."""
    payload = validate_task_update(body).unwrap()
    task = await TaskService(db).update_task(task_id, payload)
    return PopulatedTaskEnvelope(task=PopulatedTaskResponse.model_validate(task))


@router.delete("/{task_id}", response_model=str)
async def delete_task(task_id: str, db: AsyncSession = Depends(get_app_db)):
    await TaskService(db).delete_task(task_id)
    return "Task deleted successfully"
