"""
Composition root.
Builds the store, cache and asset storage from settings and hands them to the
caller as one bundle; nothing here is a process-wide singleton.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from vidiary.core.config import Settings, get_settings
from vidiary.core.logging import setup_logging
from vidiary.services.assets import AssetStorage
from vidiary.services.capture import CaptureService
from vidiary.services.catalog_cache import CatalogCache
from vidiary.services.media import MediaProcessor
from vidiary.services.video_delete_service import DeleteResult, delete_video
from vidiary.store.durable_store import DurableVideoStore

logger = logging.getLogger(__name__)


@dataclass
class Catalog:
    """The objects a UI layer needs to read and edit the catalog."""
    settings: Settings
    store: DurableVideoStore
    cache: CatalogCache
    assets: AssetStorage
    capture: Optional[CaptureService] = None  # None when no media processor was given

    async def delete(self, video_id: str) -> DeleteResult:
        """Delete an entry and clean up its files in the background."""
        return await delete_video(self.cache, self.assets, video_id)

    async def close(self) -> None:
        """Let pending asset cleanups finish, then release the database."""
        await self.assets.wait_for_cleanup()
        await self.store.close()


def create_catalog(settings: Optional[Settings] = None, processor: Optional[MediaProcessor] = None) -> Catalog:
    """
    Wire a catalog from settings without touching disk.

    Args:
        settings: Settings to use, defaults to get_settings()
        processor: Media processor for clip capture; capture is unavailable without one
    """
    settings = settings or get_settings()
    store = DurableVideoStore.from_settings(settings)
    cache = CatalogCache(store)
    assets = AssetStorage.from_settings(settings)

    capture = None
    if processor is not None:
        capture = CaptureService(cache, processor, assets, clip_duration=settings.clip_duration)

    return Catalog(settings=settings, store=store, cache=cache, assets=assets, capture=capture)


async def open_catalog(
    settings: Optional[Settings] = None,
    processor: Optional[MediaProcessor] = None,
    configure_logging: bool = False,
) -> Catalog:
    """
    Wire a catalog and load it.

    Args:
        settings: Settings to use, defaults to get_settings()
        processor: Media processor for clip capture
        configure_logging: Install the file log handlers from settings first

    Raises:
        StorageInitError: If the database cannot be opened
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(
            log_level=settings.log_level,
            log_dir=settings.log_dir,
            console=settings.log_to_console,
        )

    catalog = create_catalog(settings, processor)
    loaded = await catalog.cache.bootstrap()
    if not loaded:
        logger.warning(f"Catalog opened with an empty list: {catalog.cache.last_error}")
    return catalog
