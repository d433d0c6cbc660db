"""
Database models package.
All models must be imported here so Base.metadata knows every table.
"""
from vidiary.database.models.video import Video

__all__ = [
    "Video",
]
