"""
Database connection and session management for AccessWatch.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from accesswatch.config import settings
from accesswatch.models.base import Base


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINT works on (aio)sqlite.

    The pysqlite driver manages transactions on its own and breaks
    nested transactions unless it is told to stay out of the way.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_engine(database_url: str | None = None, **kwargs) -> AsyncEngine:
    """Create an async engine for the configured (or given) database URL."""
    url = database_url or settings.async_database_url
    if url.startswith("sqlite"):
        engine = create_async_engine(url, **kwargs)
        enable_sqlite_savepoints(engine)
        return engine

    return create_async_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        **kwargs,
    )


engine = create_engine(echo=settings.ENVIRONMENT == "development")

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

async_session_maker = AsyncSessionLocal


@asynccontextmanager
async def get_db_context(
    session_maker: async_sessionmaker | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Context manager for database sessions (for background tasks)."""
    session_maker = session_maker or AsyncSessionLocal
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_sync_compatible_session_maker():
    """Create a fresh session maker for Celery task execution.

    Each Celery task runs its own event loop, so it cannot share the
    module-level engine whose connections are bound to another loop.
    """
    task_engine = create_engine()
    return async_sessionmaker(task_engine, class_=AsyncSession, expire_on_commit=False)


async def init_db() -> None:
    """Initialize database tables."""
    from accesswatch.models.page import Page
    from accesswatch.models.audit import Audit, AuditComparison, Issue

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
