"""
Database session management.
Provides the async SQLAlchemy engine, session factory, and a transactional
session scope. The engine is owned by whoever creates it (the durable store);
nothing here is a module-level singleton.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker


def create_engine(database_path: Path, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the SQLite catalog file.
    Does not connect; the first connection opens (or creates) the file.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{database_path}",
        echo=echo,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the given engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a session that is committed on success or rolled back on error.

    Usage:
        async with session_scope(factory) as session:
            await video_db_repository.create(session, record)
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
