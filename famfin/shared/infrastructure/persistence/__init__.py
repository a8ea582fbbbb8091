"""Persistence adapters."""

from .key_value import (
    DuckDBKeyValueStorage,
    KeyValueStorage,
    MemoryKeyValueStorage,
    create_storage,
)

__all__ = [
    "DuckDBKeyValueStorage",
    "KeyValueStorage",
    "MemoryKeyValueStorage",
    "create_storage",
]
