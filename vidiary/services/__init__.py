"""
Catalog services: the cache the UI reads, and the workflows built on it.
"""
from vidiary.services.assets import AssetStorage
from vidiary.services.capture import CaptureService
from vidiary.services.catalog_cache import CatalogCache
from vidiary.services.media import MediaProcessor, ProcessedVideo
from vidiary.services.video_delete_service import DeleteResult, delete_video

__all__ = [
    "AssetStorage",
    "CaptureService",
    "CatalogCache",
    "MediaProcessor",
    "ProcessedVideo",
    "DeleteResult",
    "delete_video",
]
