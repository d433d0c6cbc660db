"""
Media processing collaborator.

The catalog never encodes video itself; it asks a MediaProcessor to cut a
fixed-length clip and render its thumbnail, and only persists an entry once
that succeeded.
"""
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ProcessedVideo:
    """A clip produced by the media processor."""
    uri: str
    thumbnail_uri: str
    duration: float


class MediaProcessor(Protocol):
    """Cuts a clip out of a source video."""

    async def crop(self, source_uri: str, start_time: float, duration: float) -> ProcessedVideo:
        """
        Produce a clip of `duration` seconds starting at `start_time`.

        Raises:
            VideoProcessingException: If cropping or thumbnailing fails
        """
        ...
