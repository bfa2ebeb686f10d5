"""
Repository for knowledge entries.

Synchronous data access over the ``knowledge`` table. The async
KnowledgeStore delegates every call here through a worker thread.
"""

import sqlite3
import threading
from datetime import datetime, timezone

from content_intel.core.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from content_intel.storage.database import Database
from content_intel.storage.models import (
    KnowledgeEntry,
    KnowledgeHierarchy,
    KnowledgeStatistics,
    organize_entries,
)
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)

# Attributes accepted by get_by(); each maps to an indexed column
INDEXED_ATTRIBUTES = frozenset({"subject", "topic", "chapter", "url"})

_INSERT_SQL = """
    INSERT INTO knowledge (
        url, subject, topic, chapter, title,
        key_points, paragraphs, timestamp, saved_at
    ) VALUES (
        :url, :subject, :topic, :chapter, :title,
        :key_points, :paragraphs, :timestamp, :saved_at
    )
"""


class KnowledgeRepository:
    """
    Repository for knowledge entries.

    Enforces at most one entry per URL: the existence check and the
    insert share one immediate transaction, and the unique index on
    ``url`` backs it up.

    Example:
        >>> repo = KnowledgeRepository(database)
        >>> saved = repo.insert(KnowledgeEntry(url="https://example.com"))
        >>> repo.exists("https://example.com")
        True
    """

    def __init__(self, db: Database) -> None:
        """Initialize repository with database."""
        self.db = db

    def exists(self, url: str) -> bool:
        """Check whether an entry for this exact URL is stored."""
        row = self.db.fetch_one(
            "SELECT 1 FROM knowledge WHERE url = ? LIMIT 1", (url,))
        return row is not None

    def insert(
        self, entry: KnowledgeEntry, cancelled: threading.Event | None = None
    ) -> KnowledgeEntry:
        """
        Persist a new entry.

        Args:
            entry: Unsaved entry (any id it carries is ignored)
            cancelled: Set when the async caller is cancelled; the insert
                is then rolled back

        Returns:
            The stored entry with id and saved_at assigned

        Raises:
            DuplicateError: If an entry with the same URL already exists
            DatabaseError: On any other storage failure
        """
        saved_at = datetime.now(timezone.utc)
        params = {**entry.to_row(), "saved_at": saved_at.isoformat()}

        try:
            with self.db.transaction(cancelled) as conn:
                existing = conn.execute(
                    "SELECT 1 FROM knowledge WHERE url = ? LIMIT 1", (entry.url,)
                ).fetchone()
                if existing is not None:
                    raise DuplicateError(
                        "URL already stored", url=entry.url)
                cursor = conn.execute(_INSERT_SQL, params)
                entry_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise DuplicateError("URL already stored", url=entry.url) from e
        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to save entry: {e}", query=_INSERT_SQL,
                details={"url": entry.url},
            ) from e

        logger.debug(f"Saved entry {entry_id} for {entry.url}")
        return entry.saved(entry_id, saved_at)

    def get_all(self) -> list[KnowledgeEntry]:
        """Every entry, oldest first."""
        rows = self.db.fetch_all("SELECT * FROM knowledge ORDER BY id")
        return [KnowledgeEntry.from_row(row) for row in rows]

    def get_by(self, attribute: str, value: str) -> list[KnowledgeEntry]:
        """
        Entries whose indexed attribute equals value exactly.

        Raises:
            ValidationError: If attribute is not an indexed attribute
        """
        if attribute not in INDEXED_ATTRIBUTES:
            raise ValidationError(
                f"Unknown attribute: {attribute}",
                field="attribute",
                details={"allowed": sorted(INDEXED_ATTRIBUTES)},
            )

        # Column name comes from the whitelist above
        rows = self.db.fetch_all(
            f"SELECT * FROM knowledge WHERE {attribute} = ? ORDER BY id", (value,))
        return [KnowledgeEntry.from_row(row) for row in rows]

    def get_by_subject_topic(self, subject: str, topic: str) -> list[KnowledgeEntry]:
        """Entries matching both subject and topic."""
        rows = self.db.fetch_all(
            "SELECT * FROM knowledge WHERE subject = ? AND topic = ? ORDER BY id",
            (subject, topic),
        )
        return [KnowledgeEntry.from_row(row) for row in rows]

    def get_by_id(self, entry_id: int) -> KnowledgeEntry:
        """
        Fetch one entry.

        Raises:
            NotFoundError: If no entry has this id
        """
        row = self.db.fetch_one("SELECT * FROM knowledge WHERE id = ?", (entry_id,))
        if row is None:
            raise NotFoundError(f"No entry with id {entry_id}", entry_id=entry_id)
        return KnowledgeEntry.from_row(row)

    def get_by_url(self, url: str) -> KnowledgeEntry | None:
        """The entry stored for this URL, if any."""
        row = self.db.fetch_one("SELECT * FROM knowledge WHERE url = ?", (url,))
        return KnowledgeEntry.from_row(row) if row else None

    def get_recent(self, limit: int = 10) -> list[KnowledgeEntry]:
        """Most recently captured entries, newest first."""
        rows = self.db.fetch_all(
            "SELECT * FROM knowledge ORDER BY timestamp DESC, id DESC LIMIT ?",
            (max(limit, 0),),
        )
        return [KnowledgeEntry.from_row(row) for row in rows]

    def delete(self, entry_id: int, cancelled: threading.Event | None = None) -> bool:
        """
        Delete one entry.

        Returns:
            True if an entry was removed, False if the id was unknown
        """
        try:
            with self.db.transaction(cancelled) as conn:
                cursor = conn.execute("DELETE FROM knowledge WHERE id = ?", (entry_id,))
                deleted = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to delete entry {entry_id}: {e}") from e

        if deleted:
            logger.debug(f"Deleted entry {entry_id}")
        return deleted

    def clear(self, cancelled: threading.Event | None = None) -> int:
        """Remove every entry. Returns the number removed."""
        try:
            with self.db.transaction(cancelled) as conn:
                cursor = conn.execute("DELETE FROM knowledge")
                removed = cursor.rowcount
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to clear knowledge store: {e}") from e

        logger.info(f"Cleared {removed} entries")
        return removed

    def search(self, text: str) -> list[KnowledgeEntry]:
        """
        Case-insensitive substring search.

        Matches title, subject, topic, key points and stored paragraphs.
        Blank text returns every entry.
        """
        entries = self.get_all()
        needle = text.strip()
        if not needle:
            return entries
        return [entry for entry in entries if entry.matches(needle)]

    def count(self) -> int:
        """Total number of stored entries."""
        return self.db.fetch_value("SELECT COUNT(*) FROM knowledge") or 0

    def unique_values(self, attribute: str) -> list[str]:
        """Sorted distinct values of an indexed attribute."""
        if attribute not in INDEXED_ATTRIBUTES:
            raise ValidationError(
                f"Unknown attribute: {attribute}", field="attribute")
        rows = self.db.fetch_all(
            f"SELECT DISTINCT {attribute} AS value FROM knowledge ORDER BY value")
        return [row["value"] for row in rows]

    def statistics(self) -> KnowledgeStatistics:
        """
        Aggregate counts per subject, topic and chapter.

        All counts are read from one snapshot, so the totals agree with
        each other even while other threads are saving.
        """
        with self.db.snapshot():
            return KnowledgeStatistics(
                total_entries=self.count(),
                counts_per_subject=self._group_counts("subject"),
                counts_per_topic=self._group_counts("topic"),
                counts_per_chapter=self._group_counts("chapter"),
            )

    def hierarchy(self) -> KnowledgeHierarchy:
        """Every entry grouped subject -> topic -> chapter."""
        return organize_entries(self.get_all())

    def _group_counts(self, column: str) -> dict[str, int]:
        rows = self.db.fetch_all(
            f"SELECT {column} AS value, COUNT(*) AS total FROM knowledge "
            f"GROUP BY {column} ORDER BY total DESC, value"
        )
        return {row["value"]: row["total"] for row in rows}
