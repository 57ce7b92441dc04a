"""
Device-local key/value storage
Backs small persisted flags (such as the pending-signup flag) with a JSON file
File I/O is offloaded to a thread so callers never block the event loop
Reference: https://docs.python.org/3/library/asyncio-task.html#asyncio.to_thread
"""
import asyncio
import json
import logging
import threading
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from lokalfinds.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_local_storage() -> "LocalKeyValueStore":
    """
    Get a singleton LocalKeyValueStore at LOCAL_STORAGE_PATH.

    Reference: https://docs.python.org/3/library/functools.html#functools.lru_cache
    """
    return LocalKeyValueStore(settings.LOCAL_STORAGE_PATH)


class LocalKeyValueStore:
    """
    String key/value store persisted as a single JSON object.

    Values are strings, mirroring mobile key/value storage APIs. A missing
    or unreadable file reads as empty.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        # Serializes read-modify-write cycles across worker threads
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Local storage at {self.path} unreadable, treating as empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        # Atomic on POSIX: readers see either the old or the new file
        tmp_path.replace(self.path)

    def _get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def _set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def _remove(self, key: str) -> bool:
        with self._lock:
            data = self._load()
            if key not in data:
                return False
            del data[key]
            self._dump(data)
            return True

    def _pop(self, key: str) -> Optional[str]:
        with self._lock:
            data = self._load()
            value = data.pop(key, None)
            if value is not None:
                self._dump(data)
            return value

    async def get_item(self, key: str) -> Optional[str]:
        """
        Get a value by key.

        Returns:
            Value if found, None otherwise
        """
        return await asyncio.to_thread(self._get, key)

    async def set_item(self, key: str, value: str) -> None:
        """
        Store a value.

        Raises:
            OSError: If the storage file cannot be written
        """
        await asyncio.to_thread(self._set, key, value)

    async def remove_item(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if the key existed, False otherwise
        """
        return await asyncio.to_thread(self._remove, key)

    async def pop_item(self, key: str) -> Optional[str]:
        """
        Read and delete a key in one step, so a value is consumed at most once.

        Returns:
            The value if it existed, None otherwise
        """
        return await asyncio.to_thread(self._pop, key)
