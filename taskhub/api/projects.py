"""
Project API Routes - projects, their members and their tasks.

Every route requires authentication. Reading a project needs membership;
changing the project or its membership needs ownership (or the admin role).
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db import get_app_db
from taskhub.db_handlers import ProjectDBHandler, UserDBHandler
from taskhub.dependencies.auth import AuthenticatedUser, get_current_user
from taskhub.dependencies.projects import get_owned_project, get_project_with_authorization
from taskhub.errors import NotFoundError, ValidationError
from taskhub.models import Project
from taskhub.schemas import (
    MemberListResponse,
    PopulatedTaskEnvelope,
    PopulatedTaskResponse,
    ProjectEnvelope,
    ProjectListResponse,
    ProjectResponse,
    TaskEnvelope,
    TaskListResponse,
    TaskResponse,
    UserSummary,
)
from taskhub.services.task_service import TaskService
from taskhub.utils.logger import setup_logger
from taskhub.validation import (
    changed_fields,
    validate_member,
    validate_project,
    validate_project_update,
    validate_task,
    validate_task_update,
)

logger = setup_logger("api.projects")

router = APIRouter(prefix="/api/v1/projects", tags=["Projects"])


async def _reload(project: Project, db: AsyncSession) -> ProjectEnvelope:
    project = await ProjectDBHandler().get_project_with_members(project.id, db=db)
    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


# ===== Projects =====


@router.get("", response_model=ProjectListResponse)
async def get_all_projects(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    project_db_handler: ProjectDBHandler = Depends(),
):
    """Projects the caller owns or belongs to; admins see every project."""
    scope = None if current_user.is_admin else current_user.id
    projects = await project_db_handler.get_projects_for_user(scope, db=db)
    return ProjectListResponse(
        projects=[ProjectResponse.model_validate(p) for p in projects],
        amount=len(projects),
    )


@router.post("", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: Any = Body(None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_app_db),
    project_db_handler: ProjectDBHandler = Depends(),
    user_db_handler: UserDBHandler = Depends(),
):
    """Create a project owned by the caller, who also becomes its first member."""
    payload = validate_project(body).unwrap()

    owner = await user_db_handler.get(current_user.id, db=db)
    if owner is None:
        raise NotFoundError.for_entity("user", current_user.id)

    project = await project_db_handler.create(
        {**payload.model_dump(), "owner_id": owner.id, "members": [owner]}, db=db
    )
    logger.info(f"Created project {project.id} owned by {owner.id}")
    return await _reload(project, db)


@router.get("/{project_id}", response_model=ProjectEnvelope)
async def get_project(project: Project = Depends(get_project_with_authorization)):
    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


@router.patch("/{project_id}", response_model=ProjectEnvelope)
async def update_project(
    body: Any = Body(None),
    project: Project = Depends(get_owned_project),
    db: AsyncSession = Depends(get_app_db),
    project_db_handler: ProjectDBHandler = Depends(),
):
    payload = validate_project_update(body).unwrap()
    project = await project_db_handler.update(project, changed_fields(payload), db=db)
    logger.info(f"Updated project {project.id}")
    return await _reload(project, db)


@router.delete("/{project_id}", response_model=str)
async def delete_project(
    project: Project = Depends(get_owned_project),
    db: AsyncSession = Depends(get_app_db),
    project_db_handler: ProjectDBHandler = Depends(),
):
    """Delete a project together with its tasks."""
    await project_db_handler.remove(project.id, db=db)
    logger.info(f"Deleted project {project.id}")
    return "Project deleted successfully"


# ===== Members =====


@router.get("/{project_id}/members", response_model=MemberListResponse)
async def get_project_members(
    project: Project = Depends(get_project_with_authorization),
):
    return MemberListResponse(
        members=[UserSummary.model_validate(m) for m in project.members],
        amount=len(project.members),
    )


@router.post("/{project_id}/members", response_model=ProjectEnvelope)
async def add_member_to_project(
    body: Any = Body(None),
    project: Project = Depends(get_owned_project),
    db: AsyncSession = Depends(get_app_db),
    project_db_handler: ProjectDBHandler = Depends(),
    user_db_handler: UserDBHandler = Depends(),
):
    payload = validate_member(body).unwrap()
    user = await user_db_handler.get(payload.user_id, db=db)
    if user is None:
        raise NotFoundError.for_entity("user", payload.user_id)

    project = await project_db_handler.add_member(project, user, db=db)
    logger.info(f"Added user {user.id} to project {project.id}")
    return await _reload(project, db)


@router.delete("/{project_id}/members", response_model=ProjectEnvelope)
async def remove_member_from_project(
    body: Any = Body(None),
    project: Project = Depends(get_owned_project),
    db: AsyncSession = Depends(get_app_db),
    project_db_handler: ProjectDBHandler = Depends(),
):
    payload = validate_member(body).unwrap()
    if payload.user_id == project.owner_id:
        raise ValidationError("Project owner cannot be removed from members")

    removed = await project_db_handler.remove_member(project, payload.user_id, db=db)
    if not removed:
        raise NotFoundError(f"User {payload.user_id} is not a member of this project")
    logger.info(f"Removed user {payload.user_id} from project {project.id}")
    return await _reload(project, db)


# ===== Project tasks =====


@router.get("/{project_id}/tasks", response_model=TaskListResponse)
async def get_project_tasks(
    project: Project = Depends(get_project_with_authorization),
    db: AsyncSession = Depends(get_app_db),
):
    tasks = await TaskService(db).list_tasks(project_id=project.id)
    return TaskListResponse(
        tasks=[PopulatedTaskResponse.model_validate(task) for task in tasks],
        amount=len(tasks),
    )


@router.post(
    "/{project_id}/tasks",
    response_model=TaskEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_project_task(
    body: Any = Body(None),
    project: Project = Depends(get_project_with_authorization),
    db: AsyncSession = Depends(get_app_db),
):
    payload = validate_task(body).unwrap()
    task = await TaskService(db).create_task(payload, project_id=project.id)
    return TaskEnvelope(task=TaskResponse.model_validate(task))


@router.get("/{project_id}/tasks/{task_id}", response_model=PopulatedTaskEnvelope)
async def get_project_task(
    task_id: str,
    project: Project = Depends(get_project_with_authorization),
    db: AsyncSession = Depends(get_app_db),
):
    task = await TaskService(db).get_task(task_id, project_id=project.id)
    return PopulatedTaskEnvelope(task=PopulatedTaskResponse.model_validate(task))


@router.patch("/{project_id}/tasks/{task_id}", response_model=PopulatedTaskEnvelope)
async def update_project_task(
    task_id: str,
    body: Any = Body(None),
    project: Project = Depends(get_project_with_authorization),
    db: AsyncSession = Depends(get_app_db),
):
    payload = validate_task_update(body).unwrap()
    task = await TaskService(db).update_task(task_id, payload, project_id=project.id)
    return PopulatedTaskEnvelope(task=PopulatedTaskResponse.model_validate(task))


@router.delete("/{project_id}/tasks/{task_id}", response_model=str)
async def delete_project_task(
    task_id: str,
    project: Project = Depends(get_project_with_authorization),
    db: AsyncSession = Depends(get_app_db),
):
    await TaskService(db).delete_task(task_id, project_id=project.id)
    return "Task deleted successfully"
