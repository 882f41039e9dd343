"""Async database engine and session management (SQLAlchemy 2.0).

The default store is a SQLite file through ``aiosqlite``; any async
SQLAlchemy URL works. On SQLite, foreign keys are switched on per
connection so that deleting a user cascades to their videos,
subscriptions and watch history.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from vidtube.core.config import Settings, get_settings
from vidtube.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every VidTube table."""


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def sqlite_file(url: str) -> Path | None:
    """Return the database file of a SQLite URL, or None for memory/other backends."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite" or parsed.database in (None, "", ":memory:"):
        return None
    return Path(parsed.database)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """Owns the async engine and the session factory.

    Both are created lazily on first use and live until ``disconnect``.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def _engine_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"echo": self.settings.db_echo}
        if _is_sqlite(self.settings.database_url):
            options["connect_args"] = {"check_same_thread": False}
        else:
            options.update(
                pool_size=self.settings.db_pool_size,
                max_overflow=self.settings.db_max_overflow,
                pool_timeout=self.settings.db_pool_timeout,
                pool_recycle=self.settings.db_pool_recycle,
                pool_pre_ping=True,
            )
        return options

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            url = self.settings.database_url
            self._engine = create_async_engine(url, **self._engine_options())
            if _is_sqlite(url):
                event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    async def create_tables(self) -> None:
        """Create every table registered on ``Base.metadata`` that is missing."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created", tables=sorted(Base.metadata.tables))

    async def disconnect(self) -> None:
        """Dispose of the engine's pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session, rolling back if the block raises.

        Example:
            async with db.session() as session:
                user = await UserRepository(session).get_by_username("alice")
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Run ``SELECT 1``; False if the database cannot be reached."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False
        return True


_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Return the process-wide database manager."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request.

    Yields:
        AsyncSession: SQLAlchemy async session.
    """
    async with get_db_manager().session() as session:
        yield session


async def init_database() -> None:
    """Prepare the database at startup.

    Makes sure the SQLite directory exists, checks connectivity and, in
    development only, creates missing tables.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    # Register every model with Base.metadata before create_all
    from vidtube.infrastructure.persistence import models  # noqa: F401

    db = get_db_manager()

    db_file = sqlite_file(db.settings.database_url)
    if db_file is not None:
        db_file.parent.mkdir(parents=True, exist_ok=True)

    if not await db.check_connection():
        raise RuntimeError("Failed to connect to database")

    if db.settings.is_development:
        await db.create_tables()
    else:
        logger.info("Skipping table creation", environment=db.settings.environment)


async def close_database() -> None:
    """Dispose of the engine on shutdown."""
    await get_db_manager().disconnect()
