"""Device-local key-value storage.

Holds the persisted session (token string and serialized user JSON). The
DuckDB implementation keeps every blocking call off the event loop.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

import duckdb

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Async string key-value store."""

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def multi_set(self, items: Mapping[str, str]) -> None:
        """Write all pairs or none of them."""

    @abstractmethod
    async def multi_remove(self, keys: Iterable[str]) -> None:
        ...

    async def multi_get(self, keys: Iterable[str]) -> Dict[str, Optional[str]]:
        """Read several keys concurrently."""
        key_list: List[str] = list(keys)
        values = await asyncio.gather(*(self.get_item(key) for key in key_list))
        return dict(zip(key_list, values))

    async def close(self) -> None:
        return None


class MemoryKeyValueStorage(KeyValueStorage):
    """Volatile storage for tests and ':memory:' configurations."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def multi_set(self, items: Mapping[str, str]) -> None:
        self._data.update(items)

    async def multi_remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class DuckDBKeyValueStorage(KeyValueStorage):
    """Key-value storage in a single DuckDB table.

    Each operation runs on its own cursor in a worker thread, so concurrent
    reads from the event loop never share a connection handle.
    """

    TABLE = "kv_store"

    def __init__(self, db_path: str = ":memory:") -> None:
        self.db_path = db_path
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

    async def open(self) -> "DuckDBKeyValueStorage":
        """Connect and create the schema. Safe to call twice."""
        if self.conn is None:
            await asyncio.to_thread(self._connect)
            logger.info(f"Key-value storage initialized: {self.db_path}")
        return self

    def _connect(self) -> None:
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = duckdb.connect(self.db_path)
        self.conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {self.TABLE} (
                key VARCHAR PRIMARY KEY,
                value VARCHAR NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    def _cursor(self) -> duckdb.DuckDBPyConnection:
        if self.conn is None:
            raise RuntimeError("Storage not opened! Call open() first.")
        return self.conn.cursor()

    async def get_item(self, key: str) -> Optional[str]:
        def _get() -> Optional[str]:
            cur = self._cursor()
            try:
                row = cur.execute(f"SELECT value FROM {self.TABLE} WHERE key = ?", [key]).fetchone()
            finally:
                cur.close()
            return row[0] if row else None

        return await asyncio.to_thread(_get)

    async def set_item(self, key: str, value: str) -> None:
        await self.multi_set({key: value})

    async def multi_set(self, items: Mapping[str, str]) -> None:
        pairs = list(items.items())

        def _set() -> None:
            cur = self._cursor()
            try:
                cur.execute("BEGIN TRANSACTION")
                try:
                    for key, value in pairs:
                        cur.execute(
                            f"INSERT OR REPLACE INTO {self.TABLE} (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)",
                            [key, value],
                        )
                    cur.execute("COMMIT")
                except Exception:
                    cur.execute("ROLLBACK")
                    raise
            finally:
                cur.close()

        await asyncio.to_thread(_set)

    async def multi_remove(self, keys: Iterable[str]) -> None:
        key_list = list(keys)
        if not key_list:
            return

        def _remove() -> None:
            cur = self._cursor()
            try:
                placeholders = ", ".join("?" for _ in key_list)
                cur.execute(f"DELETE FROM {self.TABLE} WHERE key IN ({placeholders})", key_list)
            finally:
                cur.close()

        await asyncio.to_thread(_remove)

    async def close(self) -> None:
        if self.conn is not None:
            conn, self.conn = self.conn, None
            await asyncio.to_thread(conn.close)
            logger.info("Key-value storage closed")


def create_storage(db_path: str) -> KeyValueStorage:
    """Pick the storage backend for a configured path."""
    if db_path == ":memory:":
        return MemoryKeyValueStorage()
    return DuckDBKeyValueStorage(db_path)
