"""
Video database repository - CRUD operations for the videos table.
Module-level async functions that take the session explicitly; transaction
boundaries and error translation belong to the caller (the durable store).
"""
import logging
from typing import Any, Dict, Optional
from sqlalchemy import select, delete, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from vidiary.database.models.video import Video
from vidiary.models.domain import VideoRecord

logger = logging.getLogger(__name__)

# Attribute names that may be written by update(); id is the key and never changes
UPDATABLE_FIELDS = frozenset({"name", "description", "uri", "thumbnail_uri", "created_at", "duration"})


def _to_record(video: Video) -> VideoRecord:
    return VideoRecord(
        id=video.id,
        name=video.name,
        description=video.description,
        uri=video.uri,
        thumbnail_uri=video.thumbnail_uri,
        created_at=video.created_at,
        duration=video.duration,
    )


async def create(session: AsyncSession, record: VideoRecord) -> VideoRecord:
    """
    Insert a new video row.

    Args:
        session: Async database session
        record: Fully populated record, id included

    Returns:
        The stored record

    Raises:
        IntegrityError: If the id already exists
    """
    video = Video(**record.to_dict())
    session.add(video)
    await session.flush()
    return _to_record(video)


async def get_by_id(session: AsyncSession, id: str) -> Optional[VideoRecord]:
    """
    Get a video by its id.

    Returns:
        VideoRecord or None if not found
    """
    stmt = select(Video).where(Video.id == id)
    result = await session.execute(stmt)
    video = result.scalar_one_or_none()
    return _to_record(video) if video is not None else None


async def list_all(session: AsyncSession) -> list[VideoRecord]:
    """List all videos ordered by creation time (newest first)."""
    stmt = select(Video).order_by(Video.created_at.desc())
    result = await session.execute(stmt)
    return [_to_record(video) for video in result.scalars().all()]


def filter_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only known, writable columns. Anything else is dropped and logged."""
    accepted = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    rejected = sorted(set(fields) - set(accepted))
    if rejected:
        logger.warning(f"Ignoring unknown or read-only video fields: {rejected}")
    return accepted


async def update(session: AsyncSession, id: str, fields: Dict[str, Any]) -> bool:
    """
    Update the given fields of a video row. Unknown fields are ignored.

    Args:
        session: Async database session
        id: Video id
        fields: Fields to update (e.g., {"name": "New name"})

    Returns:
        True if a row matched, False if not found
    """
    values = filter_fields(fields)
    if not values:
        return await get_by_id(session, id) is not None

    stmt = (
        sql_update(Video)
        .where(Video.id == id)
        .values({getattr(Video, key): value for key, value in values.items()})
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount > 0


async def delete_by_id(session: AsyncSession, id: str) -> bool:
    """
    Delete a video by its id.

    Returns:
        True if deleted, False if not found
    """
    stmt = delete(Video).where(Video.id == id)
    result = await session.execute(stmt)
    return result.rowcount > 0
