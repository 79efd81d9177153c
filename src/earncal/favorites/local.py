"""Local favorites persistence for anonymous visitors.

The whole set lives under a single storage key as a JSON array of tickers,
e.g. ``{"favorites": "[\\"AAPL\\", \\"MSFT\\"]"}`` in the storage file.
"""

from __future__ import annotations

from pathlib import Path

import orjson

from earncal.core.constants import FAVORITES_STORAGE_KEY
from earncal.core.exceptions import StorageError
from earncal.core.logging import get_logger
from earncal.favorites.models import FavoriteSet
from earncal.favorites.protocols import KeyValueStorage

logger = get_logger(__name__)


class MemoryStorage:
    """In-process key-value storage with an optional byte quota."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            used = sum(len(k) + len(v) for k, v in self._items.items() if k != key)
            if used + len(key) + len(value) > self._quota_bytes:
                raise StorageError(f"Storage quota of {self._quota_bytes} bytes exceeded")
        self._items[key] = value


class FileStorage:
    """Key-value storage backed by one JSON object file.

    The file is read on every access so several processes see each other's
    writes (last writer wins).
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("Local storage unreadable", path=str(self.path), error=str(e))
            return {}
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            logger.warning("Local storage corrupt, ignoring", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(orjson.dumps(items, option=orjson.OPT_INDENT_2))
            tmp_path.replace(self.path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e


class LocalFavoritesStore:
    """Load and save the anonymous visitor's favorite set."""

    def __init__(self, storage: KeyValueStorage, key: str = FAVORITES_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key

    def load(self) -> FavoriteSet:
        """Read the stored set. Missing or unparseable values load as empty."""
        raw = self._storage.get_item(self._key)
        if not raw:
            return FavoriteSet()
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            logger.warning("Stored favorites are not valid JSON", key=self._key, error=str(e))
            return FavoriteSet()
        if not isinstance(data, list):
            logger.warning("Stored favorites are not a list", key=self._key)
            return FavoriteSet()
        return FavoriteSet(t for t in data if isinstance(t, str))

    def save(self, favorites: FavoriteSet) -> None:
        """Persist the full set.

        Raises:
            StorageError: If the underlying storage rejects the write
        """
        self._storage.set_item(self._key, orjson.dumps(favorites.as_list()).decode())
