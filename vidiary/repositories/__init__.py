"""
Repository layer exports.
"""
from vidiary.repositories import video_db_repository

__all__ = [
    'video_db_repository',
]
