from __future__ import annotations

import abc
import asyncio
import contextlib
import sqlite3
import weakref
from logging import getLogger
from typing import AsyncIterator

__all__ = ("InMemoryTagStore", "SqliteTagStore", "TagStore", "TagStoreError")

log = getLogger(__name__)


class TagStoreError(Exception):
    """Raised when the underlying persistence fails."""


class TagStore(abc.ABC):
    """Key-value persistence of tag id -> content.

    Single operations are atomic. Callers that need a check followed by a
    mutation to behave as one step hold ``lock(tag_id)`` around both.
    """

    def __init__(self) -> None:
        """Initialize the per-id lock registry."""
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    @contextlib.asynccontextmanager
    async def lock(self, tag_id: str) -> AsyncIterator[None]:
        """Serialize all holders of the same tag id.

        Args:
            tag_id: The tag id to lock.
        """
        lock = self._locks.get(tag_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[tag_id] = lock
        async with lock:
            yield

    @abc.abstractmethod
    async def has(self, tag_id: str) -> bool:
        """Return whether a tag with the given id exists."""

    @abc.abstractmethod
    async def get(self, tag_id: str) -> str | None:
        """Return the content of a tag, or None if it does not exist."""

    @abc.abstractmethod
    async def put(self, tag_id: str, content: str) -> None:
        """Insert a tag or overwrite the content of an existing one."""

    @abc.abstractmethod
    async def remove(self, tag_id: str) -> None:
        """Delete a tag. Deleting an unknown id does nothing."""

    @abc.abstractmethod
    async def ids(self) -> list[str]:
        """Return all tag ids in ascending order."""


class InMemoryTagStore(TagStore):
    def __init__(self, tags: dict[str, str] | None = None) -> None:
        """Initialize the store, optionally seeded with tags."""
        super().__init__()
        self._tags: dict[str, str] = dict(tags or {})

    async def has(self, tag_id: str) -> bool:
        return tag_id in self._tags

    async def get(self, tag_id: str) -> str | None:
        return self._tags.get(tag_id)

    async def put(self, tag_id: str, content: str) -> None:
        self._tags[tag_id] = content

    async def remove(self, tag_id: str) -> None:
        self._tags.pop(tag_id, None)

    async def ids(self) -> list[str]:
        return sorted(self._tags)


_SCHEMA = """
CREATE TABLE IF NOT EXISTS tags (
    id      TEXT PRIMARY KEY NOT NULL,
    content TEXT NOT NULL
)
"""


class SqliteTagStore(TagStore):
    """Tag store persisted in a sqlite database.

    Every statement runs in its own transaction on a worker thread.
    """

    def __init__(self, path: str) -> None:
        """Open (and if needed create) the tag database.

        Args:
            path: Filesystem path of the database, or ":memory:".

        Raises:
            TagStoreError: If the database can not be opened or initialized.
        """
        super().__init__()
        self.path = path
        try:
            # check_same_thread=False because statements run through asyncio.to_thread
            self._conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
            self._conn.execute("PRAGMA journal_mode=WAL;")
            self._conn.execute(_SCHEMA)
        except sqlite3.Error as e:
            raise TagStoreError(f"Could not open tag database at {path!r}") from e
        self._conn_lock = asyncio.Lock()
        log.info("Opened tag database at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _execute_sync(self, query: str, params: tuple = ()) -> list[tuple]:
        try:
            with self._conn:
                return self._conn.execute(query, params).fetchall()
        except (sqlite3.Error, ValueError) as e:
            # ValueError covers text sqlite can not encode, such as lone surrogates
            raise TagStoreError(str(e)) from e

    async def _execute(self, query: str, params: tuple = ()) -> list[tuple]:
        async with self._conn_lock:
            return await asyncio.to_thread(self._execute_sync, query, params)

    async def has(self, tag_id: str) -> bool:
        rows = await self._execute("SELECT 1 FROM tags WHERE id = ?", (tag_id,))
        return bool(rows)

    async def get(self, tag_id: str) -> str | None:
        rows = await self._execute("SELECT content FROM tags WHERE id = ?", (tag_id,))
        return rows[0][0] if rows else None

    async def put(self, tag_id: str, content: str) -> None:
        await self._execute(
            "INSERT INTO tags (id, content) VALUES (?, ?) ON CONFLICT(id) DO UPDATE SET content = excluded.content",
            (tag_id, content),
        )

    async def remove(self, tag_id: str) -> None:
        await self._execute("DELETE FROM tags WHERE id = ?", (tag_id,))

    async def ids(self) -> list[str]:
        rows = await self._execute("SELECT id FROM tags ORDER BY id")
        return [row[0] for row in rows]
