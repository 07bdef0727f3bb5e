"""
Infrastructure layer: async key-value stores with retry logic.
"""
import asyncio
import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Protocol
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from bloomtrack.config import settings
from bloomtrack.exceptions import StorageReadError, StorageWriteError
from bloomtrack.infrastructure.storage_constants import StorageConstants

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Async string key-value storage."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def remove(self, keys: Iterable[str]) -> None:
        ...


_storage_retry = retry(
    stop=stop_after_attempt(settings.storage_retry_attempts),
    wait=wait_exponential(
        multiplier=settings.storage_retry_multiplier,
        max=settings.storage_retry_max_wait,
    ),
    retry=retry_if_exception_type(OSError),
    reraise=True,
)


class JsonFileKeyValueStore:
    """
    Key-value store keeping one JSON document per key in a directory.

    Writes go to a temporary file first and are moved into place, so a
    crash mid-write leaves the previous value intact. Raw file I/O is
    retried on transient OS errors.
    """

    def __init__(self, data_dir: Optional[str] = None):
        """
        Initialize the store.

        Args:
            data_dir: Directory for the data files; defaults to settings.data_dir
        """
        self.data_dir = Path(data_dir or settings.data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}{StorageConstants.FILE_SUFFIX}"

    @_storage_retry
    def _read_file(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding=StorageConstants.ENCODING)

    @_storage_retry
    def _write_file(self, key: str, value: str) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        temp_path = path.with_name(path.name + StorageConstants.TEMP_SUFFIX)
        temp_path.write_text(value, encoding=StorageConstants.ENCODING)
        os.replace(temp_path, path)

    @_storage_retry
    def _remove_file(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    async def get(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under a key.

        Raises:
            StorageReadError: If the file cannot be read after retries
                or is not valid text
        """
        try:
            return await asyncio.to_thread(self._read_file, key)
        except OSError as e:
            raise StorageReadError(f"Failed to read '{key}': {e}") from e
        except UnicodeDecodeError as e:
            raise StorageReadError(f"'{key}' is not valid {StorageConstants.ENCODING}: {e}") from e

    async def set(self, key: str, value: str) -> None:
        """
        Store a raw value under a key.

        Raises:
            StorageWriteError: If the file cannot be written after retries
        """
        try:
            await asyncio.to_thread(self._write_file, key, value)
        except OSError as e:
            raise StorageWriteError(f"Failed to write '{key}': {e}") from e
        logger.debug(f"Wrote {len(value)} bytes to {key}")

    async def remove(self, keys: Iterable[str]) -> None:
        """
        Delete several keys. Missing keys are ignored.

        Raises:
            StorageWriteError: If a file cannot be removed after retries
        """
        for key in keys:
            try:
                await asyncio.to_thread(self._remove_file, key)
            except OSError as e:
                raise StorageWriteError(f"Failed to remove '{key}': {e}") from e


class InMemoryKeyValueStore:
    """Process-local key-value store, mainly for tests and ephemeral runs."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.data.pop(key, None)
