"""
Key-value storage backends for the record store.

Each record collection is kept as one JSON document under a fixed key,
the same layout the browser build keeps in localStorage.
"""
from .backends import (
    KeyValueStorage,
    DatabaseStorage,
    MemoryStorage,
    NullStorage,
    init_storage,
)

__all__ = [
    "KeyValueStorage",
    "DatabaseStorage",
    "MemoryStorage",
    "NullStorage",
    "init_storage",
]
