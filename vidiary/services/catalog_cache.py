"""
Catalog cache -- the in-memory, always-sorted view of every video entry.

Readers (the UI) use `entries` and `get_by_id` synchronously. Every mutation is
written to the durable store first; the cached collection only changes once
the store call has returned successfully, so the cache never shows an entry
that would vanish on restart. Storage failures are logged and reported as
negative results rather than raised.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from vidiary.core.exceptions import (
    StorageError,
    StorageInitError,
    StorageReadError,
    ValidationException,
    VidiaryException,
)
from vidiary.core.logging import log_event, log_operation_error
from vidiary.models.domain import (
    MutationResult,
    MutationStatus,
    VideoEntry,
    to_entry,
    normalize_timestamp,
    to_record,
    truncate_to_millis,
)
from vidiary.models.schemas import VideoEntryCreate, VideoEntryUpdate, validate_create, validate_update
from vidiary.store.durable_store import DurableVideoStore

logger = logging.getLogger(__name__)

Listener = Callable[[tuple], None]


def default_id_factory() -> str:
    return str(uuid.uuid4())


def default_clock() -> datetime:
    return truncate_to_millis(datetime.now(timezone.utc))


def _sorted(entries: Iterable[VideoEntry]) -> List[VideoEntry]:
    return sorted(entries, key=lambda entry: entry.created_at, reverse=True)


class CatalogCache:
    """Observable mirror of the durable store, newest entry first."""

    def __init__(
        self,
        store: DurableVideoStore,
        id_factory: Callable[[], str] = default_id_factory,
        clock: Callable[[], datetime] = default_clock,
    ):
        self.store = store
        self.id_factory = id_factory
        self.clock = clock
        self._entries: List[VideoEntry] = []
        self._listeners: List[Listener] = []
        self.is_loading = False
        self.is_bootstrapped = False
        self.last_error: Optional[VidiaryException] = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple:
        """Current entries, newest first. A snapshot; mutate through the cache methods."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get_by_id(self, id: str) -> Optional[VideoEntry]:
        """Cache-only lookup; never falls back to the store."""
        for entry in self._entries:
            if entry.id == id:
                return entry
        return None

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked with the new entries after every change.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _replace(self, entries: Iterable[VideoEntry]) -> None:
        self._entries = _sorted(entries)
        snapshot = self.entries
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"Catalog listener {listener!r} failed")

    def _fail(self, operation: str, error: VidiaryException, context: Dict[str, Any]) -> None:
        self.last_error = error
        log_operation_error(
            logger=__name__,
            function=operation,
            operation=f"catalog_{operation}",
            error=error,
            context=context,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def bootstrap(self) -> bool:
        """
        Initialize the store and load every record into the cache.

        Replaces the cache contents wholesale, so calling it again (e.g. to
        retry after a read failure) never duplicates entries.

        Returns:
            True if loaded, False if the read failed and the cache was left empty

        Raises:
            StorageInitError: If the store cannot be opened (fatal)
        """
        self.is_loading = True
        try:
            await self.store.initialize()
            records = await self.store.list_all()
        except StorageInitError as e:
            self._fail("bootstrap", e, {})
            raise
        except StorageReadError as e:
            self._fail("bootstrap", e, {})
            self._replace([])
            return False
        finally:
            self.is_loading = False

        by_id: Dict[str, VideoEntry] = {}
        for record in records:
            by_id[record.id] = to_entry(record)

        self.last_error = None
        self.is_bootstrapped = True
        self._replace(by_id.values())
        log_event(
            level="INFO",
            logger=__name__,
            function="bootstrap",
            operation="catalog_bootstrap",
            event="catalog_loaded",
            message=f"Loaded {len(by_id)} video entries",
            context={"count": len(by_id)},
        )
        return True

    async def add(self, data: Union[VideoEntryCreate, Dict[str, Any]]) -> Optional[VideoEntry]:
        """
        Create an entry with a fresh id and created_at = now.

        Returns:
            The new entry, or None if validation or the store write failed
            (see last_error). The cache is unchanged on failure.
        """
        try:
            fields = validate_create(data)
        except ValidationException as e:
            self._fail("add", e, {})
            return None

        entry = VideoEntry(
            id=self.id_factory(),
            name=fields.name,
            description=fields.description,
            uri=fields.uri,
            thumbnail_uri=fields.thumbnail_uri,
            created_at=normalize_timestamp(self.clock()),
            duration=fields.duration,
        )

        try:
            await self.store.insert(to_record(entry))
        except StorageError as e:
            self._fail("add", e, {"video_id": entry.id, "name": entry.name})
            return None

        self.last_error = None
        self._replace([entry, *self._entries])
        log_event(
            level="INFO",
            logger=__name__,
            function="add",
            operation="catalog_add",
            event="entry_added",
            message=f"Added video entry {entry.id}",
            context={"video_id": entry.id, "name": entry.name},
        )
        return entry

    async def update(
        self, id: str, updates: Union[VideoEntryUpdate, Dict[str, Any]]
    ) -> MutationResult:
        """
        Change editable fields of an entry (never id or created_at).

        A missing id is a no-op reported as NOT_FOUND. The cached entry is only
        merged after the store confirmed the row was updated.
        """
        try:
            changes = validate_update(updates).changes()
        except ValidationException as e:
            self._fail("update", e, {"video_id": id})
            return MutationResult(MutationStatus.FAILED, id, error=e)

        try:
            matched = await self.store.update(id, changes)
        except StorageError as e:
            self._fail("update", e, {"video_id": id, "fields": sorted(changes)})
            return MutationResult(MutationStatus.FAILED, id, error=e)

        self.last_error = None
        current = self.get_by_id(id)
        if not matched:
            if current is not None:
                logger.warning(f"Video {id} is cached but has no stored row; leaving cache as is")
            return MutationResult(MutationStatus.NOT_FOUND, id)

        if current is None:
            return MutationResult(MutationStatus.UPDATED, id)

        updated = current.merged(changes)
        self._replace(updated if entry.id == id else entry for entry in self._entries)
        logger.info(f"Updated video entry {id}: {sorted(changes)}")
        return MutationResult(MutationStatus.UPDATED, id, entry=updated)

    async def delete(self, id: str) -> MutationResult:
        """
        Remove an entry from the store and then from the cache.

        The removed entry is returned so the caller can clean up its asset
        files; when the cache does not hold it, it is read from the store
        first. A missing id is a no-op reported as NOT_FOUND.
        """
        cached = self.get_by_id(id)
        stored = None
        try:
            if cached is None:
                stored = await self.store.get_by_id(id)
            removed_row = await self.store.delete(id)
        except StorageError as e:
            self._fail("delete", e, {"video_id": id})
            return MutationResult(MutationStatus.FAILED, id, error=e)

        self.last_error = None
        if cached is not None:
            self._replace(entry for entry in self._entries if entry.id != id)
        elif not removed_row:
            return MutationResult(MutationStatus.NOT_FOUND, id)

        removed = cached or (to_entry(stored) if stored is not None else None)
        logger.info(f"Deleted video entry {id}")
        return MutationResult(MutationStatus.DELETED, id, entry=removed)
