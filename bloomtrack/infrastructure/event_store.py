"""
Infrastructure layer: event collections on top of a key-value store.

Each collection (blooms, abortions, harvests) is stored as one JSON array
under its own key, plus a settings record.

Reads are fail-soft: if a collection cannot be read or decoded the store
logs the failure and returns an empty list, so the dashboards stay usable
on corrupt or unavailable storage. The price is that a broken store looks
like an empty farm; the error log is the only signal. Individual records
that no longer match the schema are skipped with a warning.

Writes are strict: a failed write raises StorageWriteError. Every
read-modify-write of a collection happens under one lock, and appends
re-read the raw stored array (not the fail-soft view), so concurrent saves
cannot drop each other's entries and unreadable data is never overwritten.
"""
import asyncio
import json
import logging
from typing import Any, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from bloomtrack.config import settings
from bloomtrack.domain.models import (
    AbortionEntry,
    AppSettings,
    BloomEntry,
    HarvestEntry,
)
from bloomtrack.exceptions import StorageError, StorageWriteError
from bloomtrack.infrastructure.key_value_store import (
    JsonFileKeyValueStore,
    KeyValueStore,
)
from bloomtrack.infrastructure.storage_constants import StorageKeys

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", BloomEntry, AbortionEntry, HarvestEntry)
Entry = Union[BloomEntry, AbortionEntry, HarvestEntry]

_COLLECTION_KEYS: dict[type, str] = {
    BloomEntry: StorageKeys.BLOOM_ENTRIES,
    AbortionEntry: StorageKeys.ABORTION_ENTRIES,
    HarvestEntry: StorageKeys.HARVEST_ENTRIES,
}


def _serialize(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def default_app_settings() -> AppSettings:
    """Settings used when nothing has been stored yet."""
    return AppSettings(
        default_variety=settings.default_variety,
        maturity_period_days=settings.default_maturity_period_days,
    )


class EventStore:
    """
    Accessor for the persisted event collections and settings.
    """

    def __init__(self, backend: KeyValueStore):
        """
        Initialize the store.

        Args:
            backend: Key-value storage backend
        """
        self.backend = backend
        self._write_lock = asyncio.Lock()

    async def _read_raw(self, key: str) -> list[Any]:
        """Stored array for a key. Raises on read or decode failure."""
        data = await self.backend.get(key)
        if data is None:
            return []
        try:
            decoded = json.loads(data)
        except json.JSONDecodeError as e:
            raise StorageError(f"Collection '{key}' is not valid JSON: {e}") from e
        if not isinstance(decoded, list):
            raise StorageError(f"Collection '{key}' is not a JSON array")
        return decoded

    async def _load_collection(self, model: Type[EntryT]) -> list[EntryT]:
        key = _COLLECTION_KEYS[model]
        try:
            raw = await self._read_raw(key)
        except StorageError as e:
            logger.error(f"Error loading {key}, treating as empty: {e}")
            return []

        entries = []
        for index, record in enumerate(raw):
            try:
                entries.append(model.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed record #{index} in {key}: {e.error_count()} error(s)"
                )
        logger.debug(f"Loaded {len(entries)}/{len(raw)} records from {key}")
        return entries

    async def _write_raw(self, key: str, records: list[Any]) -> None:
        try:
            await self.backend.set(key, json.dumps(records))
        except StorageError as e:
            logger.error(f"Error saving {key}: {e}")
            raise StorageWriteError(str(e)) from e

    async def load_bloom_entries(self) -> list[BloomEntry]:
        return await self._load_collection(BloomEntry)

    async def load_abortion_entries(self) -> list[AbortionEntry]:
        return await self._load_collection(AbortionEntry)

    async def load_harvest_entries(self) -> list[HarvestEntry]:
        return await self._load_collection(HarvestEntry)

    async def load_all(self) -> tuple[list[BloomEntry], list[AbortionEntry], list[HarvestEntry]]:
        """Load the three collections concurrently."""
        blooms, abortions, harvests = await asyncio.gather(
            self.load_bloom_entries(),
            self.load_abortion_entries(),
            self.load_harvest_entries(),
        )
        return blooms, abortions, harvests

    async def append_entry(self, entry: Entry) -> None:
        """
        Append an entry to its collection.

        Args:
            entry: Bloom, abortion or harvest entry

        Raises:
            StorageWriteError: If the existing collection cannot be read or
                the updated collection cannot be written
        """
        key = _COLLECTION_KEYS[type(entry)]
        async with self._write_lock:
            try:
                records = await self._read_raw(key)
            except StorageError as e:
                logger.error(f"Refusing to append to unreadable {key}: {e}")
                raise StorageWriteError(f"Cannot append to '{key}': {e}") from e
            records.append(_serialize(entry))
            await self._write_raw(key, records)
        logger.info(f"Saved {type(entry).__name__} {entry.id} ({len(records)} in {key})")

    async def update_bloom_entry(self, entry: BloomEntry) -> bool:
        """
        Replace a stored bloom with a corrected version (matched by id).

        Returns:
            True if a bloom with that id was found and replaced

        Raises:
            StorageWriteError: If the collection cannot be read or written
        """
        key = StorageKeys.BLOOM_ENTRIES
        async with self._write_lock:
            try:
                records = await self._read_raw(key)
            except StorageError as e:
                raise StorageWriteError(f"Cannot update '{key}': {e}") from e

            replaced = False
            for index, record in enumerate(records):
                if isinstance(record, dict) and record.get("id") == entry.id:
                    records[index] = _serialize(entry)
                    replaced = True
            if replaced:
                await self._write_raw(key, records)

        logger.info(f"Bloom {entry.id} {'updated' if replaced else 'not found for update'}")
        return replaced

    async def load_settings(self) -> AppSettings:
        """
        Stored settings merged over the defaults.

        Falls back to the defaults if the record is missing or unreadable.
        """
        defaults = default_app_settings()
        try:
            data = await self.backend.get(StorageKeys.SETTINGS)
            if data is None:
                return defaults
            stored = json.loads(data)
            return AppSettings.model_validate({**_serialize(defaults), **stored})
        except (StorageError, json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.error(f"Error loading settings, using defaults: {e}")
            return defaults

    async def save_settings(self, app_settings: AppSettings) -> None:
        """
        Persist the settings record.

        Raises:
            StorageWriteError: If the write fails
        """
        try:
            await self.backend.set(StorageKeys.SETTINGS, json.dumps(_serialize(app_settings)))
        except StorageError as e:
            logger.error(f"Error saving settings: {e}")
            raise StorageWriteError(str(e)) from e

    async def clear_all_data(self) -> None:
        """
        Delete every event collection. Settings are kept.

        Raises:
            StorageWriteError: If removal fails
        """
        async with self._write_lock:
            try:
                await self.backend.remove(StorageKeys.EVENT_COLLECTIONS)
            except StorageError as e:
                logger.error(f"Error clearing data: {e}")
                raise StorageWriteError(str(e)) from e
        logger.info("Cleared all event collections")


# Singleton instance
_event_store: Optional[EventStore] = None


def get_event_store() -> EventStore:
    """
    Get or create the singleton event store backed by the data directory.

    Returns:
        EventStore instance
    """
    global _event_store
    if _event_store is None:
        _event_store = EventStore(JsonFileKeyValueStore(settings.data_dir))
    return _event_store
