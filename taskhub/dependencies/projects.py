from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db import get_app_db
from taskhub.db_handlers.project import ProjectDBHandler
from taskhub.dependencies.auth import AuthenticatedUser, get_current_user
from taskhub.errors import ForbiddenError, NotFoundError
from taskhub.models import Project
from taskhub.utils.ids import parse_id


async def get_project_with_authorization(
    project_id: str = Path(..., description="The ID of the project"),
    db: AsyncSession = Depends(get_app_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> Project:
    """
    Dependency to get a project the current user may read.

    Permission is granted to the owner, to members and to admins.

    Raises NotFoundError if the project does not exist.
    Raises ForbiddenError if the user is not authorized.
    """
    project_uuid = parse_id(project_id)
    project = None
    if project_uuid is not None:
        project = await ProjectDBHandler().get_project_with_members(project_uuid, db=db)
    if project is None:
        raise NotFoundError.for_entity("project", project_id)

    is_owner = project.owner_id == current_user.id
    if not (is_owner or current_user.is_admin or project.has_member(current_user.id)):
        raise ForbiddenError("Not authorized to access this project")

    return project


async def get_owned_project(
    project: Project = Depends(get_project_with_authorization),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> Project:
    """
    Stricter check for operations that change the project itself or its
    membership: only the owner or an admin may perform them.
    """
    if project.owner_id != current_user.id and not current_user.is_admin:
        raise ForbiddenError("Only the project owner can modify this project")
    return project
