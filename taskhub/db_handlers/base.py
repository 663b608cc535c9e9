from __future__ import annotations

import asyncio
from functools import wraps
from typing import Any, Generic, TypeVar

from asyncpg.exceptions import ConnectionDoesNotExistError
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.db import get_database
from taskhub.models.base import Base
from taskhub.utils.logger import setup_logger

logger = setup_logger("db_handlers")

ModelType = TypeVar("ModelType", bound=Base)

SESSION_ATTEMPTS = 3


def _is_connection_drop(error: DBAPIError) -> bool:
    return isinstance(error.orig, ConnectionDoesNotExistError)


def check_local_db(func):
    """
    Run ``func`` inside a session it owns unless the caller passes ``db``.

    An owned session is committed on success and rolled back on error. Only
    a dropped asyncpg connection is retried, with a growing pause between
    attempts.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        if kwargs.get("db"):
            return await func(*args, **kwargs)

        dropped: DBAPIError | None = None
        for attempt in range(1, SESSION_ATTEMPTS + 1):
            async with get_database().session_maker() as db:
                try:
                    result = await func(*args, **{**kwargs, "db": db})
                    await db.commit()
                    return result
                except DBAPIError as e:
                    await db.rollback()
                    if not _is_connection_drop(e):
                        logger.error(f"{func.__name__} failed: {e}", exc_info=True)
                        raise
                    dropped = e
                    logger.warning(
                        f"{func.__name__} lost its connection "
                        f"({attempt}/{SESSION_ATTEMPTS}), retrying"
                    )
                    await asyncio.sleep(attempt)
                except Exception as e:
                    await db.rollback()
                    logger.error(f"{func.__name__} rolled back: {e}", exc_info=True)
                    raise

        logger.error(f"{func.__name__} gave up after {SESSION_ATTEMPTS} attempts")
        raise dropped

    return wrapper


class BaseDBHandler(Generic[ModelType]):
    """
    CRUD for one model.

    Write methods commit by default; ``commit=False`` only flushes, leaving
    the transaction open for further writes by the caller.
    """

    def __init__(self, model: type[ModelType]):
        self.model = model

    async def _persist(self, db: AsyncSession, commit: bool, action: str):
        try:
            if commit:
                await db.commit()
            else:
                await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Constraint violated on {action} {self.model.__name__}: {e}")
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Could not {action} {self.model.__name__}: {e}", exc_info=True)
            raise

    @check_local_db
    async def create(
        self, obj_dict: dict[str, Any], *, db: AsyncSession = None, commit: bool = True
    ) -> ModelType:
        db_obj = self.model(**obj_dict)
        db.add(db_obj)
        await self._persist(db, commit, "create")
        return db_obj

    @check_local_db
    async def get(
        self, id: Any, *, db: AsyncSession = None, options: list | None = None
    ) -> ModelType | None:
        """Fetch by primary key; an already loaded instance is refreshed."""
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .options(*(options or ()))
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalars().first()

    @check_local_db
    async def get_by_attributes(
        self, *, db: AsyncSession = None, options: list | None = None, **filters
    ) -> ModelType | None:
        stmt = select(self.model).filter_by(**filters).options(*(options or ()))
        return (await db.execute(stmt)).scalars().first()

    @check_local_db
    async def get_multi_by_attributes(
        self,
        *,
        db: AsyncSession = None,
        skip: int = 0,
        limit: int | None = None,
        order_by: Any = None,
        options: list | None = None,
        **filters,
    ) -> list[ModelType]:
        stmt = select(self.model).filter_by(**filters).options(*(options or ()))
        if order_by is not None:
            clauses = order_by if isinstance(order_by, (list, tuple)) else [order_by]
            stmt = stmt.order_by(*clauses)
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list((await db.execute(stmt)).scalars().all())

    @check_local_db
    async def update(
        self,
        db_obj: ModelType,
        update_data: dict[str, Any],
        *,
        db: AsyncSession = None,
        commit: bool = True,
    ) -> ModelType:
        """Assign ``update_data``; the model's ``@validates`` hooks see every value."""
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        await self._persist(db, commit, "update")
        return db_obj

    @check_local_db
    async def remove(
        self, id: Any, *, db: AsyncSession = None, commit: bool = True
    ) -> ModelType | None:
        """Delete by primary key; None when nothing matched."""
        obj = await self.get(id, db=db)
        if obj is None:
            return None
        await db.delete(obj)
        await self._persist(db, commit, "remove")
        return obj
