"""
Domain models for the catalog.

VideoEntry is the rich, cache-side representation the UI reads. VideoRecord is
the flat, storage-native row. to_record/to_entry convert between the two
without loss (timestamps are kept at millisecond precision).
"""
from dataclasses import dataclass, field, replace, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any

from vidiary.core.exceptions import VidiaryException

# Canonical createdAt layout, e.g. 2024-05-01T08:30:00.123Z
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


@dataclass(frozen=True)
class VideoEntry:
    """One catalog entry as seen by the application."""
    id: str
    name: str
    uri: str
    created_at: datetime
    duration: float
    description: Optional[str] = ""
    thumbnail_uri: Optional[str] = None

    def merged(self, updates: Dict[str, Any]) -> "VideoEntry":
        """Return a copy with updates applied. id and created_at never change."""
        updates = {k: v for k, v in updates.items() if k not in ("id", "created_at")}
        return replace(self, **updates)


@dataclass(frozen=True)
class VideoRecord:
    """Flat row stored in the videos table."""
    id: str
    name: str
    uri: str
    created_at: str
    duration: float
    description: Optional[str] = ""
    thumbnail_uri: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


class MutationStatus(Enum):
    """Outcome of a cache mutation."""
    UPDATED = "updated"
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass
class MutationResult:
    """Result of an update or delete issued through the catalog cache."""
    status: MutationStatus
    video_id: str
    entry: Optional[VideoEntry] = None
    error: Optional[VidiaryException] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        """True unless the store rejected the mutation. NOT_FOUND counts as ok."""
        return self.status is not MutationStatus.FAILED


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision, which the stored format cannot hold."""
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Serialize a datetime to the canonical UTC createdAt string."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    # %f gives microseconds; keep the first three digits
    return value.strftime(TIMESTAMP_FORMAT)[:-4] + "Z"


def parse_timestamp(value: str) -> datetime:
    """Parse a stored createdAt string into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_timestamp(value: datetime) -> datetime:
    """Reduce a datetime to exactly what the stored createdAt string can hold."""
    return parse_timestamp(format_timestamp(value))


def to_record(entry: VideoEntry) -> VideoRecord:
    """Convert a cache entry to a storage row."""
    return VideoRecord(
        id=entry.id,
        name=entry.name,
        description=entry.description,
        uri=entry.uri,
        thumbnail_uri=entry.thumbnail_uri,
        created_at=format_timestamp(entry.created_at),
        duration=float(entry.duration),
    )


def to_entry(record: VideoRecord) -> VideoEntry:
    """Convert a storage row to a cache entry."""
    return VideoEntry(
        id=record.id,
        name=record.name,
        description=record.description,
        uri=record.uri,
        thumbnail_uri=record.thumbnail_uri,
        created_at=parse_timestamp(record.created_at),
        duration=float(record.duration),
    )
