from studiobook.store.booking_store import BookingStore
from studiobook.store.persistence import (
    BookingRepository,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StorageError,
)

__all__ = [
    "BookingStore",
    "BookingRepository",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "StorageError",
]
