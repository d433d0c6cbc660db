"""
Domain models and validation schemas.
"""
from vidiary.models.domain import (
    MutationResult,
    MutationStatus,
    VideoEntry,
    VideoRecord,
    to_entry,
    to_record,
)
from vidiary.models.schemas import VideoEntryCreate, VideoEntryUpdate

__all__ = [
    "MutationResult",
    "MutationStatus",
    "VideoEntry",
    "VideoRecord",
    "to_entry",
    "to_record",
    "VideoEntryCreate",
    "VideoEntryUpdate",
]
