"""
Database Infrastructure
=======================

Manages database connections, session lifecycle, and engine configuration.

Uses SQLAlchemy 2.0 with asyncpg for async PostgreSQL operations. SQLite
(via aiosqlite) is supported for local development and tests.
"""

from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncGenerator, Optional
from uuid import UUID

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from cmdb.config import settings
from cmdb.core import RepositoryException


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    SQLAlchemy 2.0 style using DeclarativeBase.
    All models inherit from this class.
    """
    pass


# Global engine and session maker
_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """
    Get the database engine.

    Returns:
        AsyncEngine: SQLAlchemy async engine

    Raises:
        RuntimeError: If engine has not been initialized
    """
    if _engine is None:
        raise RuntimeError("Database engine not initialized. Call init_database() first.")
    return _engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_database(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Initialize the database engine and session maker.

    Should be called during application startup.

    Args:
        database_url: Overrides ``settings.database_url`` (used by tests)

    Returns:
        AsyncEngine: The initialized engine
    """
    global _engine, _session_maker

    url = database_url or settings.database_url
    is_sqlite = url.startswith("sqlite")

    engine_kwargs = {"echo": settings.debug}
    if not is_sqlite:
        # Fix asyncpg SSL: replace sslmode with ssl for asyncpg compatibility
        url = url.replace("sslmode=", "ssl=")
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,  # Verify connections before using
        )

    _engine = create_async_engine(url, **engine_kwargs)

    if is_sqlite:
        # SQLite leaves FK enforcement off unless asked per connection
        event.listen(_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    _session_maker = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Prevent lazy loading after commit
        autoflush=False,
    )

    return _engine


async def close_database() -> None:
    """
    Close the database engine and dispose of connections.

    Should be called during application shutdown.
    """
    global _engine, _session_maker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_maker = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async generator for database sessions.

    For use with FastAPI's Depends() - FastAPI handles the lifecycle.
    The session commits when the request handler returns and rolls back
    if it raises.

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    if _session_maker is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with _session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions.

    An AsyncSession must not be shared between concurrently running
    tasks, so fan-out reads (the dashboard) open one of these per task.

    Usage:
        async with get_session_context() as session:
            result = await session.execute(select(ConfigurationItemModel))

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    if _session_maker is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with _session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def commit(session: AsyncSession) -> None:
    """Commit the unit of work, surfacing failures as RepositoryException."""
    with repository_errors("commit"):
        await session.commit()


async def create_tables() -> None:
    """
    Create all database tables.

    Production deployments are expected to manage schema separately.
    """
    # Register every model on Base.metadata
    import cmdb.identity.infrastructure.models  # noqa: F401
    import cmdb.inventory.infrastructure.models  # noqa: F401
    import cmdb.service_desk.infrastructure.models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    """Drop all database tables. Only used by tests."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ========== Repository helpers ==========

def to_uuid(value: Any) -> Optional[UUID]:
    """Parse an id from a URL or payload; None when it is not a UUID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


@contextmanager
def repository_errors(operation: str):
    """
    Re-raise driver failures inside the block as RepositoryException.

    Usage:
        with repository_errors("insert configuration item"):
            self._session.add(model)
            await self._session.flush()
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise RepositoryException(
            f"Store failure during {operation}: {exc}",
            {"operation": operation},
        ) from exc
