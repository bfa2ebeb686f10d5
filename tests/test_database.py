"""
Tests for database storage module.

Tests SQLite setup, WAL mode, schema migrations and the repository.
"""

import asyncio
import sqlite3
import threading
from pathlib import Path

import pytest

from content_intel.config import StorageSettings
from content_intel.core.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from content_intel.storage import (
    SCHEMA_VERSION,
    Database,
    KnowledgeEntry,
    KnowledgeRepository,
    SchemaManager,
)
from content_intel.storage.schema import MIGRATIONS


class TestDatabase:
    """Tests for Database class."""

    def test_database_creation(self, temp_dir: Path):
        """Database file and parent directory should be created."""
        path = temp_dir / "nested" / "knowledge.db"
        db = Database.create(StorageSettings(database_path=path))

        assert path.exists()

        db.close()

    def test_database_wal_mode(self, database: Database):
        """Database should use WAL mode."""
        result = database.execute("PRAGMA journal_mode").fetchone()

        assert result[0].lower() == "wal"

    def test_database_tables_created(self, database: Database):
        """Database should have the knowledge and version tables."""
        rows = database.fetch_all(
            "SELECT name FROM sqlite_master WHERE type='table'")
        table_names = {row["name"] for row in rows}

        assert "knowledge" in table_names
        assert "schema_version" in table_names

    def test_indexes_created(self, database: Database):
        """Every lookup index should exist."""
        rows = database.fetch_all(
            "SELECT name FROM sqlite_master WHERE type='index' AND tbl_name='knowledge'")
        index_names = {row["name"] for row in rows}

        assert {
            "idx_knowledge_url",
            "idx_knowledge_subject",
            "idx_knowledge_topic",
            "idx_knowledge_chapter",
            "idx_knowledge_timestamp",
            "idx_knowledge_subject_topic",
        } <= index_names

    def test_schema_version(self, database: Database):
        """Schema should be at the latest version."""
        assert database.schema_version() == SCHEMA_VERSION

    def test_transaction_rolls_back(self, database: Database):
        """Errors inside a transaction should discard its writes."""
        with pytest.raises(RuntimeError):
            with database.transaction() as conn:
                conn.execute(
                    "INSERT INTO knowledge (url, timestamp, saved_at) VALUES (?, ?, ?)",
                    ("https://a.test/", "2024-01-01", "2024-01-01"),
                )
                raise RuntimeError("boom")

        assert database.fetch_value("SELECT COUNT(*) FROM knowledge") == 0

    def test_bad_query_raises_database_error(self, database: Database):
        """SQL errors should be wrapped."""
        with pytest.raises(DatabaseError) as exc_info:
            database.execute("SELECT * FROM missing_table")

        assert "missing_table" in exc_info.value.details["query"]

    def test_cancelled_transaction_rolls_back(self, database: Database):
        """A transaction whose caller was cancelled should not commit."""
        cancelled = threading.Event()

        with pytest.raises(asyncio.CancelledError):
            with database.transaction(cancelled) as conn:
                conn.execute(
                    "INSERT INTO knowledge (url, timestamp, saved_at) VALUES (?, ?, ?)",
                    ("https://a.test/", "2024-01-01", "2024-01-01"),
                )
                cancelled.set()

        assert database.fetch_value("SELECT COUNT(*) FROM knowledge") == 0

    def test_snapshot_reads(self, database: Database):
        """Reads inside a snapshot should work and leave no open transaction."""
        with database.snapshot():
            count = database.fetch_value("SELECT COUNT(*) FROM knowledge")

        assert count == 0
        with database.transaction() as conn:
            conn.execute("DELETE FROM knowledge")

    def test_snapshot_ignores_concurrent_commit(self, database: Database):
        """Rows committed by another thread mid-snapshot should stay invisible."""

        def insert_row():
            with database.transaction() as conn:
                conn.execute(
                    "INSERT INTO knowledge (url, timestamp, saved_at) VALUES (?, ?, ?)",
                    ("https://a.test/", "2024-01-01", "2024-01-01"),
                )

        with database.snapshot():
            before = database.fetch_value("SELECT COUNT(*) FROM knowledge")
            writer = threading.Thread(target=insert_row)
            writer.start()
            writer.join()
            during = database.fetch_value("SELECT COUNT(*) FROM knowledge")

        assert before == during == 0
        assert database.fetch_value("SELECT COUNT(*) FROM knowledge") == 1


class TestSchemaMigration:
    """Tests for additive schema evolution."""

    def open_connection(self, path: Path) -> sqlite3.Connection:
        conn = sqlite3.connect(str(path), isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def test_upgrade_keeps_rows(self, temp_dir: Path):
        """Opening a version 1 database should migrate it without data loss."""
        path = temp_dir / "old.db"
        conn = self.open_connection(path)
        SchemaManager(conn, target_version=1).initialize()
        conn.execute(
            "INSERT INTO knowledge (url, subject, timestamp, saved_at) VALUES (?, ?, ?, ?)",
            ("https://a.test/old", "Database", "2024-01-01T00:00:00+00:00",
             "2024-01-01T00:00:00+00:00"),
        )
        conn.close()

        db = Database.create(StorageSettings(database_path=path))
        repo = KnowledgeRepository(db)

        assert db.schema_version() == SCHEMA_VERSION
        assert repo.get_by_url("https://a.test/old").subject == "Database"
        db.close()

    def test_migrations_recorded(self, temp_dir: Path):
        """Each applied migration should be recorded once."""
        conn = self.open_connection(temp_dir / "x.db")
        manager = SchemaManager(conn)
        manager.initialize()
        manager.initialize()

        versions = [row[0] for row in conn.execute("SELECT version FROM schema_version")]

        assert versions == sorted(MIGRATIONS)
        assert not manager.needs_migration()
        conn.close()


class TestKnowledgeRepository:
    """Tests for synchronous repository operations."""

    @pytest.fixture
    def repo(self, database: Database) -> KnowledgeRepository:
        return KnowledgeRepository(database)

    def test_insert_assigns_identity(self, repo: KnowledgeRepository, entry_factory):
        """Inserted entries should get id and saved_at."""
        saved = repo.insert(entry_factory("https://a.test/1", key_points=("One", "Two")))

        assert saved.id is not None and saved.id > 0
        assert saved.saved_at is not None
        assert repo.get_by_id(saved.id) == saved

    def test_ids_increase(self, repo: KnowledgeRepository, entry_factory):
        """Ids should increase and never be reused."""
        first = repo.insert(entry_factory("https://a.test/1"))
        repo.delete(first.id)
        second = repo.insert(entry_factory("https://a.test/2"))

        assert second.id > first.id

    def test_duplicate_url(self, repo: KnowledgeRepository, entry_factory):
        """A second insert of the same url should fail."""
        repo.insert(entry_factory("https://a.test/1"))

        with pytest.raises(DuplicateError) as exc_info:
            repo.insert(entry_factory("https://a.test/1", subject="Database"))

        assert exc_info.value.url == "https://a.test/1"
        assert repo.count() == 1

    def test_unicode_round_trip(self, repo: KnowledgeRepository, entry_factory):
        """Non-ASCII text should be stored unchanged."""
        saved = repo.insert(entry_factory(
            "https://a.test/ü", title="Grüße", paragraphs=("Überblick über SQL",)))

        loaded = repo.get_by_url("https://a.test/ü")

        assert loaded.title == "Grüße"
        assert loaded.paragraphs == ("Überblick über SQL",)
        assert loaded.id == saved.id

    def test_get_by_unknown_attribute(self, repo: KnowledgeRepository):
        """Only indexed attributes should be queryable."""
        with pytest.raises(ValidationError):
            repo.get_by("title; DROP TABLE knowledge", "x")

    def test_get_by_id_missing(self, repo: KnowledgeRepository):
        """Unknown ids should raise NotFoundError."""
        with pytest.raises(NotFoundError):
            repo.get_by_id(999)

    def test_concurrent_inserts_same_url(self, repo: KnowledgeRepository, entry_factory):
        """Racing inserts of one url should store exactly one entry."""
        barrier = threading.Barrier(8)
        outcomes: list[str] = []
        lock = threading.Lock()

        def worker():
            barrier.wait()
            try:
                repo.insert(entry_factory("https://a.test/race"))
                result = "saved"
            except DuplicateError:
                result = "duplicate"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count("saved") == 1
        assert outcomes.count("duplicate") == 7
        assert len(repo.get_by("url", "https://a.test/race")) == 1

    def test_entry_requires_url(self):
        """Entries without url should be rejected."""
        with pytest.raises(ValidationError):
            KnowledgeEntry(url="")

    def test_entry_fallbacks(self):
        """Empty category fields should become the fallbacks."""
        entry = KnowledgeEntry(url="https://a.test/", subject="", topic="", chapter="")

        assert (entry.subject, entry.topic, entry.chapter) == ("General", "Miscellaneous", "General")

    def test_entry_key_points_capped(self):
        """Entries should hold at most ten key points."""
        entry = KnowledgeEntry(url="https://a.test/", key_points=[str(i) for i in range(15)])

        assert len(entry.key_points) == 10
