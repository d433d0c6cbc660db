"""
Durable video store.

Crash-durable storage for VideoRecord rows in a single SQLite table. Every
public operation runs in its own transaction and translates driver failures
into the storage error taxonomy so callers never see raw SQLAlchemy errors.
"""
import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from vidiary.core.config import Settings
from vidiary.core.exceptions import (
    StorageConstraintError,
    StorageError,
    StorageInitError,
    StorageReadError,
    StorageWriteError,
)
from vidiary.core.logging import operation_logger
from vidiary.database import Base, create_engine, create_session_factory, session_scope
from vidiary.database import models  # noqa: F401  (registers tables on Base.metadata)
from vidiary.models.domain import VideoRecord
from vidiary.repositories import video_db_repository

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures that mean the backing medium misbehaved
_IO_ERRORS = (SQLAlchemyError, sqlite3.Error, OSError, asyncio.TimeoutError)


class DurableVideoStore:
    """Single-table store for catalog records, opened lazily once per instance."""

    def __init__(self, database_path: Path, echo: bool = False, timeout: Optional[float] = None):
        """
        Args:
            database_path: SQLite file, created on first initialize()
            echo: Log emitted SQL
            timeout: Deadline in seconds for each store call, None for no deadline
        """
        self.database_path = Path(database_path)
        self.echo = echo
        self.timeout = timeout
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._init_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "DurableVideoStore":
        return cls(
            database_path=settings.database_path,
            echo=settings.database_echo,
            timeout=settings.store_timeout_seconds,
        )

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    async def _with_deadline(self, awaitable: Awaitable[T]) -> T:
        if self.timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self.timeout)

    async def initialize(self) -> AsyncEngine:
        """
        Open the database and ensure the videos table exists.

        Idempotent: later calls return the same engine without touching disk.

        Raises:
            StorageInitError: If the file cannot be opened or the schema created
        """
        async with self._init_lock:
            if self._engine is not None:
                return self._engine

            engine = None
            try:
                self.database_path.parent.mkdir(parents=True, exist_ok=True)
                engine = create_engine(self.database_path, echo=self.echo)

                async def _create_schema():
                    async with engine.begin() as conn:
                        await conn.run_sync(Base.metadata.create_all)

                await self._with_deadline(_create_schema())
            except _IO_ERRORS as e:
                if engine is not None:
                    await engine.dispose()
                raise StorageInitError(f"{self.database_path}: {e}") from e

            self._engine = engine
            self._session_factory = create_session_factory(engine)
            logger.info(f"Opened video store at {self.database_path}")
            return engine

    async def close(self) -> None:
        """Dispose the engine. The store re-opens lazily on next use."""
        async with self._init_lock:
            if self._engine is not None:
                await self._engine.dispose()
                self._engine = None
                self._session_factory = None
                logger.info(f"Closed video store at {self.database_path}")

    async def _run(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
        error_cls: type,
    ) -> T:
        await self.initialize()

        async def _transaction() -> T:
            async with session_scope(self._session_factory) as session:
                return await work(session)

        try:
            return await self._with_deadline(_transaction())
        except StorageError:
            raise
        except _IO_ERRORS as e:
            raise error_cls(operation, str(e)) from e

    @operation_logger("store_list_all")
    async def list_all(self) -> list[VideoRecord]:
        """
        All records, newest first. Empty list when the table is empty.

        Raises:
            StorageReadError: On I/O failure
        """
        return await self._run("list_all", video_db_repository.list_all, StorageReadError)

    async def get_by_id(self, id: str) -> Optional[VideoRecord]:
        """
        Record with the given id, or None when no row matches.

        Raises:
            StorageReadError: On I/O failure
        """
        return await self._run(
            "get_by_id",
            lambda session: video_db_repository.get_by_id(session, id),
            StorageReadError,
        )

    @operation_logger("store_insert")
    async def insert(self, record: VideoRecord) -> VideoRecord:
        """
        Insert a new record.

        Raises:
            StorageConstraintError: If the id already exists
            StorageWriteError: On other I/O failure
        """
        try:
            return await self._run(
                "insert",
                lambda session: video_db_repository.create(session, record),
                StorageWriteError,
            )
        except StorageWriteError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise StorageConstraintError(record.id, str(e.__cause__.orig)) from e.__cause__
            raise

    @operation_logger("store_update")
    async def update(self, id: str, fields: Dict[str, Any]) -> bool:
        """
        Update only the supplied fields of the record with the given id.
        Unknown field names are ignored. A missing id is a silent no-op.

        Returns:
            True if a row matched, False otherwise

        Raises:
            StorageWriteError: On I/O failure
        """
        return await self._run(
            "update",
            lambda session: video_db_repository.update(session, id, dict(fields)),
            StorageWriteError,
        )

    @operation_logger("store_delete")
    async def delete(self, id: str) -> bool:
        """
        Remove the record with the given id. A missing id is a no-op.

        Returns:
            True if a row was removed, False otherwise

        Raises:
            StorageWriteError: On I/O failure
        """
        return await self._run(
            "delete",
            lambda session: video_db_repository.delete_by_id(session, id),
            StorageWriteError,
        )
