"""
Application configuration using Pydantic Settings.
All configuration values can be overridden via VIDIARY_* environment variables or .env file.
"""
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    log_to_console: bool = False

    # Storage (relative paths resolve against data_dir)
    data_dir: Path = Path("data")
    database_filename: str = "vidiary.db"
    database_echo: bool = False
    store_timeout_seconds: Optional[float] = None  # None disables the deadline

    # Asset directories
    videos_dir: Path = Path("videos")
    thumbnails_dir: Path = Path("thumbnails")
    imports_dir: Path = Path("imports")

    # Capture
    clip_duration: float = 5.0  # Fixed segment length in seconds

    class Config:
        env_prefix = "VIDIARY_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def database_path(self) -> Path:
        """Absolute path of the SQLite database file."""
        return (self.data_dir / self.database_filename).resolve()

    def resolve_dir(self, name: str) -> Path:
        """
        Resolve one of the asset directories against data_dir.

        Args:
            name: One of "videos", "thumbnails", "imports"

        Returns:
            Absolute Path for the directory (not created)
        """
        dirs = {
            "videos": self.videos_dir,
            "thumbnails": self.thumbnails_dir,
            "imports": self.imports_dir,
        }
        if name not in dirs:
            raise ValueError(f"Unknown asset directory: {name}. Available: {list(dirs.keys())}")

        path = dirs[name]
        if not path.is_absolute():
            path = self.data_dir / path
        return path.resolve()


# Global settings instance (lazily initialized)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
