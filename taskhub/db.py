import argparse
import asyncio
from collections.abc import AsyncGenerator

from sqlalchemy import event, inspect, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from taskhub import models  # noqa: F401
from taskhub.config import Settings, settings
from taskhub.models.base import Base
from taskhub.models.user import User
from taskhub.utils.logger import setup_logger

logger = setup_logger("db")

SUPPORTED_DRIVERS = ("postgresql+asyncpg://", "sqlite+aiosqlite://")


def normalize_database_url(url: str) -> str:
    """Upgrade plain driver URLs to their async driver and reject the rest."""
    if url.startswith(SUPPORTED_DRIVERS):
        return url
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    raise ValueError(f"Unsupported database URL prefix: {url}")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Async engine plus session factory, created once per process."""

    def __init__(self, url: str, echo: bool = False):
        self.url = normalize_database_url(url)
        self.is_sqlite = self.url.startswith("sqlite")

        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        if not self.is_sqlite:
            engine_kwargs.update(
                pool_size=20,
                max_overflow=30,
                pool_timeout=60,
                pool_recycle=300,
                connect_args={"timeout": 30},
            )
        self.engine = create_async_engine(self.url, **engine_kwargs)

        if self.is_sqlite:
            # ondelete rules are ignored by SQLite unless enabled per connection
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_maker = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.debug(f"Database configured: {self.engine.url.render_as_string()}")

    async def init_models(self):
        """Create all tables registered on ``Base.metadata``."""
        if not Base.metadata.tables:
            logger.warning("Base.metadata.tables is EMPTY! No tables will be created.")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(
            f"Database schema initialized: {sorted(Base.metadata.tables.keys())}"
        )

    async def drop_models(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped.")

    async def list_tables(self) -> list[str]:
        async with self.engine.connect() as conn:
            table_names = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )
        logger.debug(f"Tables in database: {table_names}")
        return sorted(table_names)

    async def check_connection(self) -> bool:
        """Performs a simple query to check actual DB connectivity."""
        async with self.session_maker() as session:
            try:
                result = await session.execute(text("SELECT 1"))
                if result.scalar_one() != 1:
                    raise RuntimeError("Test query returned an unexpected result.")
            except Exception as e:
                logger.error(f"Failed to execute test query: {e}", exc_info=True)
                raise RuntimeError("Database connectivity check failed.") from e
        logger.info("Successfully connected to the database and executed a test query.")
        return True

    async def close(self):
        logger.info("Closing database connections.")
        await self.engine.dispose()
        logger.info("Database connections closed.")


_database: Database | None = None


def init_database(config: Settings | None = None) -> Database:
    """Create the process-wide Database from explicit settings."""
    global _database
    config = config or settings
    _database = Database(config.database_url, echo=config.database_echo)
    return _database


def get_database() -> Database:
    if _database is None:
        raise RuntimeError("Database is not initialized; call init_database() first.")
    return _database


async def close_database():
    global _database
    if _database is not None:
        await _database.close()
        _database = None


# --- Dependency for FastAPI ---
async def get_app_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_database().session_maker() as session:
        yield session


async def promote_to_admin(email: str) -> bool:
    """Grant the admin role to the user registered with ``email``."""
    async with get_database().session_maker() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            logger.error(f"No user registered with email '{email}'.")
            return False
        user.role = "admin"
        await session.commit()
    logger.info(f"User '{email}' promoted to admin.")
    return True


async def _run(action: str, email: str | None = None):
    database = init_database()
    try:
        if action == "init":
            await database.init_models()
        elif action == "reset":
            await database.drop_models()
            await database.init_models()
        elif action == "list-tables":
            for name in await database.list_tables():
                print(name)
        elif action == "promote":
            await database.init_models()
            if not await promote_to_admin(email):
                raise SystemExit(1)
    finally:
        await close_database()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Task manager database utility")
    parser.add_argument(
        "action",
        choices=["init", "reset", "list-tables", "promote"],
        help="'init' to create missing tables, "
        "'reset' to drop and recreate every table, "
        "'list-tables' to show existing tables, "
        "'promote' to grant the admin role to the user given by --email.",
    )
    parser.add_argument("--email", type=str, help="Email of the user to promote")
    args = parser.parse_args()

    if args.action == "promote" and not args.email:
        parser.error("--email is required for 'promote'")

    if args.action == "reset":
        confirm = input(
            "WARNING: This will delete all data in the database. Are you sure? (yes/no): "
        )
        if confirm.lower() != "yes":
            logger.info("Database reset cancelled by user.")
            raise SystemExit(0)

    asyncio.run(_run(args.action, args.email))
    logger.info("Database utility script finished.")
