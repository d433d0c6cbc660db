"""
Capture workflow: crop a fixed-length clip from a picked video and catalog it.
"""
import logging
from typing import Optional

from vidiary.core.exceptions import VideoProcessingException
from vidiary.models.domain import VideoEntry
from vidiary.models.schemas import validate_update
from vidiary.services.assets import AssetStorage
from vidiary.services.catalog_cache import CatalogCache
from vidiary.services.media import MediaProcessor

logger = logging.getLogger(__name__)


class CaptureService:
    """Turns a source video plus metadata into a stored catalog entry."""

    def __init__(
        self,
        cache: CatalogCache,
        processor: MediaProcessor,
        assets: AssetStorage,
        clip_duration: float = 5.0,
    ):
        self.cache = cache
        self.processor = processor
        self.assets = assets
        self.clip_duration = clip_duration

    async def capture(
        self,
        source_uri: str,
        start_time: float,
        name: str,
        description: str = "",
    ) -> Optional[VideoEntry]:
        """
        Crop `clip_duration` seconds from `source_uri` at `start_time` and add the clip.

        Returns:
            The new entry, or None if the catalog rejected it (the produced
            files are then cleaned up in the background)

        Raises:
            ValidationException: If the metadata is invalid; nothing is cropped
            VideoProcessingException: If cropping failed; nothing is stored
        """
        # Reject bad metadata before spending time on the crop
        validate_update({"name": name, "description": description})
        if start_time < 0:
            raise VideoProcessingException("crop", f"negative start time {start_time}")

        clip = await self.processor.crop(source_uri, start_time, self.clip_duration)
        logger.info(f"Cropped {source_uri} at {start_time}s -> {clip.uri}")

        entry = await self.cache.add({
            "name": name,
            "description": description,
            "uri": clip.uri,
            "thumbnail_uri": clip.thumbnail_uri,
            "duration": clip.duration,
        })
        if entry is None:
            logger.warning(f"Catalog rejected clip {clip.uri}; removing produced files")
            self.assets.schedule_cleanup([clip.uri, clip.thumbnail_uri], label=f"orphan-{clip.uri}")
        return entry
