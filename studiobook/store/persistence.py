"""
Local key-value persistence for the booking collection.

The whole collection lives under one fixed key as a single JSON string,
the way a browser's local storage would hold it. There is no schema
version and no transaction log: every save overwrites the previous value,
and two processes writing the same file simply replace each other's data
(last write wins).
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from studiobook.schemas.booking_schema import Booking

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the key-value backend cannot read or write."""


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string for ``key`` or None when absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageError: If the backend rejects the write.
        """
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore(KeyValueStore):
    """All keys kept in one JSON object on disk, rewritten atomically."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StorageError(f"Cannot read {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Cannot read {self._path}: top level is not an object")
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except StorageError:
                logger.warning("Store file %s unreadable, starting a fresh one", self._path)
                data = {}
            data[key] = value
            temp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                temp_path.replace(self._path)
            except OSError as e:
                if temp_path.exists():
                    temp_path.unlink(missing_ok=True)
                raise StorageError(f"Cannot write {self._path}: {e}") from e


class BookingRepository:
    """
    Loads and saves the booking collection under a fixed key.

    Serialization is compact and deterministic, so saving a collection that
    was just loaded reproduces the stored string byte for byte.
    """

    def __init__(self, kv: KeyValueStore, key: str) -> None:
        self._kv = kv
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @staticmethod
    def serialize(bookings: Iterable[Booking]) -> str:
        return json.dumps(
            [b.to_record() for b in bookings],
            ensure_ascii=False,
            separators=(",", ":"),
        )

    @staticmethod
    def deserialize(raw: str) -> list[Booking]:
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError("stored bookings value is not a list")
        return [Booking.model_validate(item) for item in data]

    def load(self) -> list[Booking]:
        """Return the persisted collection, or an empty one if absent or malformed."""
        try:
            raw = self._kv.get(self._key)
        except StorageError as e:
            logger.warning("Could not read bookings, starting empty: %s", e)
            return []
        if raw is None:
            return []
        try:
            bookings = self.deserialize(raw)
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning("Stored bookings under '%s' are malformed, starting empty: %s",
                           self._key, e)
            return []
        logger.debug("Loaded %d bookings from '%s'", len(bookings), self._key)
        return bookings

    def save(self, bookings: Iterable[Booking]) -> bool:
        """Overwrite the persisted collection. Returns False if the write failed."""
        payload = self.serialize(bookings)
        try:
            self._kv.set(self._key, payload)
        except StorageError as e:
            logger.error("Failed to persist bookings, in-memory state diverged: %s", e)
            return False
        return True
