from __future__ import annotations

import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskhub.db_handlers.base import BaseDBHandler, check_local_db
from taskhub.models.project import Project, project_members
from taskhub.models.user import User
from taskhub.utils.logger import setup_logger

logger = setup_logger("db_handlers.project")


class ProjectDBHandler(BaseDBHandler[Project]):
    def __init__(self):
        super().__init__(Project)

    @check_local_db
    async def get_project_with_members(
        self, project_id: uuid.UUID, *, db: AsyncSession = None
    ) -> Project | None:
        return await self.get(
            project_id, db=db, options=[selectinload(Project.members)]
        )

    @check_local_db
    async def get_projects_for_user(
        self, user_id: uuid.UUID | None, *, db: AsyncSession = None
    ) -> list[Project]:
        """
        Projects owned by or shared with ``user_id``; every project when
        ``user_id`` is None.
        """
        stmt = (
            select(Project)
            .options(selectinload(Project.members))
            .order_by(Project.created_at)
        )
        if user_id is not None:
            member_of = select(project_members.c.project_id).where(
                project_members.c.user_id == user_id
            )
            stmt = stmt.where(
                or_(Project.owner_id == user_id, Project.id.in_(member_of))
            )
        result = await db.execute(stmt)
        return list(result.scalars().unique().all())

    @check_local_db
    async def add_member(
        self, project: Project, user: User, *, db: AsyncSession = None
    ) -> Project:
        """Add ``user`` to the members of ``project``; adding twice is a no-op."""
        if project.has_member(user.id):
            logger.debug(f"User {user.id} is already a member of project {project.id}")
            return project
        project.members.append(user)
        await db.commit()
        return project

    @check_local_db
    async def remove_member(
        self, project: Project, user_id: uuid.UUID, *, db: AsyncSession = None
    ) -> bool:
        """Remove a member; returns False when the user was not a member."""
        for member in project.members:
            if member.id == user_id:
                project.members.remove(member)
                await db.commit()
                return True
        return False
