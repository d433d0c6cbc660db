"""
Asset storage -- local files referenced by catalog entries.

Layout under the data directory:

    data/
    ├── imports/{asset_id}{suffix}      source videos copied in at selection time
    ├── videos/{asset_id}.mp4           cropped clips
    └── thumbnails/{asset_id}.jpg       preview images

Deleting assets is best-effort: a missing file is not an error and any other
failure is logged, never raised, because it only happens after the logical
delete has already succeeded.
"""
import asyncio
import logging
import shutil
import uuid
from pathlib import Path
from typing import Iterable, Optional, Set
from urllib.parse import unquote, urlparse

from vidiary.core.config import Settings
from vidiary.core.exceptions import FileOperationException

logger = logging.getLogger(__name__)


def uri_to_path(uri: str) -> Path:
    """Accept a plain path or a file:// URI."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


class AssetStorage:
    """Copies, names and removes the files behind catalog entries."""

    def __init__(self, videos_dir: Path, thumbnails_dir: Path, imports_dir: Path):
        self.videos_dir = Path(videos_dir)
        self.thumbnails_dir = Path(thumbnails_dir)
        self.imports_dir = Path(imports_dir)
        self._pending: Set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AssetStorage":
        return cls(
            videos_dir=settings.resolve_dir("videos"),
            thumbnails_dir=settings.resolve_dir("thumbnails"),
            imports_dir=settings.resolve_dir("imports"),
        )

    def ensure_dirs(self) -> None:
        for directory in (self.videos_dir, self.thumbnails_dir, self.imports_dir):
            directory.mkdir(parents=True, exist_ok=True)

    async def import_source(self, source: str) -> Path:
        """
        Copy a selected source video into the persistent imports directory.

        Args:
            source: Path or file:// URI of the picked video

        Returns:
            Path of the copy

        Raises:
            FileOperationException: If the copy fails
        """
        source_path = uri_to_path(source)
        self.ensure_dirs()
        target = self.imports_dir / f"{uuid.uuid4().hex}{source_path.suffix}"
        try:
            await asyncio.to_thread(shutil.copy2, source_path, target)
        except OSError as e:
            raise FileOperationException("copy", str(source_path), str(e)) from e

        logger.info(f"Imported source video {source_path} -> {target}")
        return target

    async def delete_asset(self, uri: Optional[str]) -> bool:
        """
        Delete one asset file.

        Returns:
            True if a file was removed, False if absent or on error
        """
        if not uri:
            return False

        path = uri_to_path(uri)
        try:
            await asyncio.to_thread(path.unlink)
            logger.debug(f"Deleted asset: {path}")
            return True
        except FileNotFoundError:
            logger.warning(f"Asset not found (already deleted?): {path}")
            return False
        except OSError as e:
            logger.error(f"Failed to delete asset {path}: {e}")
            return False

    async def delete_assets(self, uris: Iterable[Optional[str]]) -> int:
        """Delete several assets, returning how many were removed."""
        deleted = 0
        for uri in uris:
            if await self.delete_asset(uri):
                deleted += 1
        return deleted

    def schedule_cleanup(self, uris: Iterable[Optional[str]], label: str) -> asyncio.Task:
        """
        Delete the given assets in a background task. Failures are logged only.
        Must be called from a running event loop.
        """
        task = asyncio.get_running_loop().create_task(
            self.delete_assets(list(uris)),
            name=f"asset-cleanup-{label}",
        )
        self._pending.add(task)
        task.add_done_callback(self._on_cleanup_done)
        return task

    def _on_cleanup_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning(f"Asset cleanup cancelled: {task.get_name()}")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Asset cleanup crashed: {task.get_name()}: {error}")
        else:
            logger.info(f"Asset cleanup finished: {task.get_name()} removed {task.result()} file(s)")

    async def wait_for_cleanup(self) -> None:
        """Wait for background cleanups still running (used on shutdown and in tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
