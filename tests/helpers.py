"""
Test doubles for the catalog's collaborators.
"""
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy.exc import OperationalError

from vidiary.core.exceptions import VideoProcessingException
from vidiary.models.domain import VideoRecord
from vidiary.services.media import ProcessedVideo

T0 = datetime(2024, 5, 1, 8, 0, 0, tzinfo=timezone.utc)


class StepClock:
    """Returns T0, T0+1s, T0+2s, ... on successive calls."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


class ListClock:
    """Returns the given timestamps in order."""

    def __init__(self, values):
        self.values = list(values)

    def __call__(self) -> datetime:
        return self.values.pop(0)


class SequentialIds:
    """Returns video-1, video-2, ..."""

    def __init__(self, prefix: str = "video"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


class FakeMediaProcessor:
    """Writes placeholder clip/thumbnail files instead of encoding anything."""

    def __init__(self, output_dir: Path, fail: bool = False):
        self.output_dir = output_dir
        self.fail = fail
        self.calls = []

    async def crop(self, source_uri: str, start_time: float, duration: float) -> ProcessedVideo:
        self.calls.append((source_uri, start_time, duration))
        if self.fail:
            raise VideoProcessingException("crop", "encoder exited with code 1")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        index = len(self.calls)
        video = self.output_dir / f"clip-{index}.mp4"
        thumbnail = self.output_dir / f"clip-{index}.jpg"
        video.write_bytes(b"\x00" * 16)
        thumbnail.write_bytes(b"\xff\xd8")
        return ProcessedVideo(uri=video.as_uri(), thumbnail_uri=thumbnail.as_uri(), duration=duration)


def make_record(id: str, created_at: str, name: str = "Clip", **overrides) -> VideoRecord:
    fields = {
        "id": id,
        "name": name,
        "description": "",
        "uri": f"file:///videos/{id}.mp4",
        "thumbnail_uri": f"file:///thumbnails/{id}.jpg",
        "created_at": created_at,
        "duration": 5.0,
    }
    fields.update(overrides)
    return VideoRecord(**fields)


def disk_error(statement: str = "INSERT INTO videos"):
    """An OperationalError shaped like the one SQLAlchemy raises on I/O failure."""
    return OperationalError(statement, {}, sqlite3.OperationalError("disk I/O error"))
