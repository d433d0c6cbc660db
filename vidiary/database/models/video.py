"""
Video model - one row per catalog entry.
"""
from sqlalchemy import Float, Text
from sqlalchemy.orm import Mapped, mapped_column

from vidiary.database.base import Base


class Video(Base):
    """
    Videos table - stores clip metadata and references to its local assets.
    Column names are part of the on-disk contract and must not change.
    """
    __tablename__ = "videos"

    # Columns
    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    uri: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_uri: Mapped[str | None] = mapped_column("thumbnailUri", Text, nullable=True)
    created_at: Mapped[str] = mapped_column("createdAt", Text, nullable=False)  # ISO-8601, UTC
    duration: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self):
        return f"<Video(id={self.id}, name={self.name}, created_at={self.created_at})>"
