"""
Async knowledge store.

Exposes the knowledge repository to async callers. Every operation
runs on a worker thread via ``asyncio.to_thread`` so the event loop is
never blocked by SQLite.

Cancelling the awaiting task does not stop the worker thread, so writes
carry a cancellation event: a write whose caller is cancelled before it
commits is rolled back, leaving the store unmodified.
"""

import asyncio
import threading
from typing import Callable, TypeVar

from content_intel.config import Settings
from content_intel.storage.database import Database
from content_intel.storage.models import (
    KnowledgeEntry,
    KnowledgeHierarchy,
    KnowledgeStatistics,
)
from content_intel.storage.repository import KnowledgeRepository
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class KnowledgeStore:
    """
    Durable, URL-unique collection of knowledge entries.

    Example:
        >>> store = KnowledgeStore.from_settings(settings)
        >>> if not await store.exists(entry.url):
        ...     saved = await store.save(entry)
        >>> stats = await store.statistics()
        >>> store.close()
    """

    def __init__(self, database: Database, owns_database: bool = False) -> None:
        """
        Initialize the store.

        Args:
            database: Database with schema set up
            owns_database: Close the database when the store is closed
        """
        self.database = database
        self.repository = KnowledgeRepository(database)
        self._owns_database = owns_database

    @classmethod
    def from_settings(cls, settings: Settings) -> "KnowledgeStore":
        """Open (creating or migrating as needed) the configured database."""
        database = Database.create(settings.storage)
        logger.info(f"Knowledge store opened at {database.database_path}")
        return cls(database, owns_database=True)

    async def _write(self, operation: Callable[..., T], *args) -> T:
        """Run a repository write, rolling it back if this task is cancelled."""
        cancelled = threading.Event()
        try:
            return await asyncio.to_thread(operation, *args, cancelled=cancelled)
        except asyncio.CancelledError:
            cancelled.set()
            logger.debug(f"{operation.__name__} cancelled before commit")
            raise

    async def exists(self, url: str) -> bool:
        """Whether an entry for this exact URL is stored."""
        return await asyncio.to_thread(self.repository.exists, url)

    async def save(self, entry: KnowledgeEntry) -> KnowledgeEntry:
        """
        Persist a new entry.

        Returns:
            The stored entry with id and saved_at assigned

        Raises:
            DuplicateError: If the URL is already stored
        """
        return await self._write(self.repository.insert, entry)

    async def get_all(self) -> list[KnowledgeEntry]:
        return await asyncio.to_thread(self.repository.get_all)

    async def get_by(self, attribute: str, value: str) -> list[KnowledgeEntry]:
        """
        Exact-match lookup on subject, topic, chapter or url.

        Raises:
            ValidationError: For any other attribute
        """
        return await asyncio.to_thread(self.repository.get_by, attribute, value)

    async def get_by_subject_topic(self, subject: str, topic: str) -> list[KnowledgeEntry]:
        return await asyncio.to_thread(
            self.repository.get_by_subject_topic, subject, topic)

    async def get_by_id(self, entry_id: int) -> KnowledgeEntry:
        """
        Raises:
            NotFoundError: If no entry has this id
        """
        return await asyncio.to_thread(self.repository.get_by_id, entry_id)

    async def get_by_url(self, url: str) -> KnowledgeEntry | None:
        return await asyncio.to_thread(self.repository.get_by_url, url)

    async def get_recent(self, limit: int = 10) -> list[KnowledgeEntry]:
        return await asyncio.to_thread(self.repository.get_recent, limit)

    async def get_hierarchy(self) -> KnowledgeHierarchy:
        """All entries grouped subject -> topic -> chapter, names sorted."""
        return await asyncio.to_thread(self.repository.hierarchy)

    async def delete_by_id(self, entry_id: int) -> bool:
        """Delete one entry; False if the id was unknown."""
        return await self._write(self.repository.delete, entry_id)

    async def clear_all(self) -> int:
        """Remove every entry; returns the number removed."""
        return await self._write(self.repository.clear)

    async def search(self, text: str) -> list[KnowledgeEntry]:
        """Case-insensitive substring search over stored text fields."""
        return await asyncio.to_thread(self.repository.search, text)

    async def count(self) -> int:
        return await asyncio.to_thread(self.repository.count)

    async def unique_subjects(self) -> list[str]:
        return await asyncio.to_thread(self.repository.unique_values, "subject")

    async def unique_topics(self) -> list[str]:
        return await asyncio.to_thread(self.repository.unique_values, "topic")

    async def statistics(self) -> KnowledgeStatistics:
        return await asyncio.to_thread(self.repository.statistics)

    def close(self) -> None:
        """Release the database if this store opened it."""
        if self._owns_database:
            self.database.close()

    def __repr__(self) -> str:
        return f"KnowledgeStore(database={self.database!r})"
