"""
Video deletion service.
Removes the catalog entry first, then cleans up its asset files in the
background. Asset cleanup never turns a successful delete into a failure.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from vidiary.models.domain import MutationStatus, VideoEntry
from vidiary.services.assets import AssetStorage
from vidiary.services.catalog_cache import CatalogCache

logger = logging.getLogger(__name__)


@dataclass
class DeleteResult:
    """Result of video deletion operation."""
    status: str  # "completed", "not_found", "failed"
    video_id: str
    entry: Optional[VideoEntry] = None
    cleanup_scheduled: bool = False
    errors: List[str] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status != "failed"


async def delete_video(cache: CatalogCache, assets: AssetStorage, video_id: str) -> DeleteResult:
    """
    Delete a video entry and schedule removal of its files.

    Args:
        cache: Catalog cache owning the entry
        assets: Asset storage used for the background cleanup
        video_id: Id of the entry to delete

    Returns:
        DeleteResult; status "failed" means the entry is still stored
    """
    start = time.monotonic()
    result = await cache.delete(video_id)

    if result.status is MutationStatus.FAILED:
        logger.error(f"Failed to delete video {video_id}: {result.error}")
        return DeleteResult(
            status="failed",
            video_id=video_id,
            errors=[str(result.error)],
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    if result.status is MutationStatus.NOT_FOUND:
        logger.info(f"Video {video_id} not found, nothing to delete")
        return DeleteResult(
            status="not_found",
            video_id=video_id,
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    cleanup_scheduled = False
    if result.entry is not None:
        assets.schedule_cleanup([result.entry.uri, result.entry.thumbnail_uri], label=video_id)
        cleanup_scheduled = True

    return DeleteResult(
        status="completed",
        video_id=video_id,
        entry=result.entry,
        cleanup_scheduled=cleanup_scheduled,
        duration_ms=int((time.monotonic() - start) * 1000),
    )
