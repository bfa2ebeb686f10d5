"""
Tests for the async knowledge store.

Tests uniqueness, lookups, search, statistics and deletion.
"""

import asyncio
import threading
from datetime import datetime, timezone

import pytest

from content_intel.core.exceptions import DuplicateError, NotFoundError, ValidationError
from content_intel.storage import KnowledgeStore


class TestSaveAndExists:
    """Tests for saving entries."""

    @pytest.mark.asyncio
    async def test_save_then_exists(self, store: KnowledgeStore, entry_factory):
        """Saved urls should be reported as existing."""
        assert await store.exists("https://a.test/x") is False

        saved = await store.save(entry_factory("https://a.test/x"))

        assert saved.id is not None
        assert await store.exists("https://a.test/x") is True

    @pytest.mark.asyncio
    async def test_exists_is_exact(self, store: KnowledgeStore, entry_factory):
        """Url comparison should be exact."""
        await store.save(entry_factory("https://a.test/x"))

        assert await store.exists("https://a.test/x/") is False
        assert await store.exists("https://A.test/x") is False

    @pytest.mark.asyncio
    async def test_duplicate_url_rejected(self, store: KnowledgeStore, entry_factory):
        """Saving the same url twice should fail and keep one entry."""
        await store.save(entry_factory("https://a.test/x"))
        before = await store.get_all()

        with pytest.raises(DuplicateError):
            await store.save(entry_factory(
                "https://a.test/x",
                timestamp=datetime(2024, 6, 1, tzinfo=timezone.utc),
            ))

        assert await store.get_all() == before
        assert len(await store.get_by("url", "https://a.test/x")) == 1

    @pytest.mark.asyncio
    async def test_concurrent_saves(self, store: KnowledgeStore, entry_factory):
        """Concurrent saves of one url should produce one entry."""
        results = await asyncio.gather(
            *(store.save(entry_factory("https://a.test/race")) for _ in range(5)),
            return_exceptions=True,
        )

        saved = [r for r in results if not isinstance(r, Exception)]
        duplicates = [r for r in results if isinstance(r, DuplicateError)]

        assert len(saved) == 1
        assert len(duplicates) == 4
        assert await store.count() == 1


class TestQueries:
    """Tests for lookups and search."""

    @pytest.fixture
    async def populated(self, store: KnowledgeStore, entry_factory) -> KnowledgeStore:
        await store.save(entry_factory(
            "https://a.test/1", subject="Database", topic="SQL",
            title="Joins explained", key_points=("Inner joins",)))
        await store.save(entry_factory(
            "https://a.test/2", subject="Database", topic="Indexing",
            title="B-tree indexes", paragraphs=("Indexes speed up lookups.",)))
        await store.save(entry_factory(
            "https://a.test/3", subject="General", topic="Miscellaneous",
            title="Release notes",
            timestamp=datetime(2024, 7, 1, tzinfo=timezone.utc)))
        return store

    @pytest.mark.asyncio
    async def test_get_by_subject(self, populated: KnowledgeStore):
        """Filtering by subject should return exactly the matches."""
        entries = await populated.get_by("subject", "Database")

        assert [e.url for e in entries] == ["https://a.test/1", "https://a.test/2"]

    @pytest.mark.asyncio
    async def test_statistics(self, populated: KnowledgeStore):
        """Statistics should count per category."""
        stats = await populated.statistics()

        assert stats.total_entries == 3
        assert stats.counts_per_subject["Database"] == 2
        assert stats.counts_per_subject["General"] == 1
        assert stats.unique_subject_count == 2
        assert stats.unique_topic_count == 3
        assert stats.to_dict()["counts_per_topic"]["SQL"] == 1

    @pytest.mark.asyncio
    async def test_get_all_ordered(self, populated: KnowledgeStore):
        """get_all should return entries in id order."""
        entries = await populated.get_all()
        ids = [e.id for e in entries]

        assert ids == sorted(ids)
        assert len(entries) == 3

    @pytest.mark.asyncio
    async def test_get_by_subject_topic(self, populated: KnowledgeStore):
        """Composite lookup should need both values to match."""
        entries = await populated.get_by_subject_topic("Database", "SQL")

        assert [e.url for e in entries] == ["https://a.test/1"]
        assert await populated.get_by_subject_topic("General", "SQL") == []

    @pytest.mark.asyncio
    async def test_get_by_unknown_attribute(self, populated: KnowledgeStore):
        """Unsupported attributes should be rejected."""
        with pytest.raises(ValidationError):
            await populated.get_by("title", "Joins explained")

    @pytest.mark.asyncio
    async def test_get_by_id(self, populated: KnowledgeStore):
        """get_by_id should find saved entries and reject unknown ids."""
        first = (await populated.get_all())[0]

        assert (await populated.get_by_id(first.id)).url == first.url

        with pytest.raises(NotFoundError):
            await populated.get_by_id(9999)

    @pytest.mark.asyncio
    async def test_search(self, populated: KnowledgeStore):
        """Search should be a case-insensitive substring match."""
        by_title = await populated.search("JOINS")
        by_paragraph = await populated.search("speed up")
        by_key_point = await populated.search("inner")
        by_subject = await populated.search("database")

        assert [e.url for e in by_title] == ["https://a.test/1"]
        assert [e.url for e in by_paragraph] == ["https://a.test/2"]
        assert [e.url for e in by_key_point] == ["https://a.test/1"]
        assert len(by_subject) == 2
        assert await populated.search("nothing like this") == []

    @pytest.mark.asyncio
    async def test_unique_values(self, populated: KnowledgeStore):
        """Unique subjects and topics should be sorted."""
        assert await populated.unique_subjects() == ["Database", "General"]
        assert await populated.unique_topics() == ["Indexing", "Miscellaneous", "SQL"]

    @pytest.mark.asyncio
    async def test_get_recent(self, populated: KnowledgeStore):
        """Recent entries should be newest first."""
        recent = await populated.get_recent(limit=2)

        assert recent[0].url == "https://a.test/3"
        assert len(recent) == 2


class TestDeletion:
    """Tests for deleting entries."""

    @pytest.mark.asyncio
    async def test_delete_by_id(self, store: KnowledgeStore, entry_factory):
        """Deleting should remove the entry and free its url."""
        saved = await store.save(entry_factory("https://a.test/x"))

        assert await store.delete_by_id(saved.id) is True
        assert await store.exists("https://a.test/x") is False

        resaved = await store.save(entry_factory("https://a.test/x"))
        assert resaved.id > saved.id

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, store: KnowledgeStore, entry_factory):
        """Unknown ids should return False and change nothing."""
        await store.save(entry_factory("https://a.test/x"))
        before = await store.get_all()

        assert await store.delete_by_id(12345) is False
        assert await store.get_all() == before

    @pytest.mark.asyncio
    async def test_clear_all(self, store: KnowledgeStore, entry_factory):
        """clear_all should remove everything and report the count."""
        for i in range(3):
            await store.save(entry_factory(f"https://a.test/{i}"))

        assert await store.clear_all() == 3
        assert await store.get_all() == []
        assert (await store.statistics()).total_entries == 0


class TestCancellation:
    """Tests for cancelled writes."""

    @pytest.mark.asyncio
    async def test_cancelled_save_is_rolled_back(self, store: KnowledgeStore, entry_factory):
        """A save cancelled before it commits should leave the store unmodified."""
        started = threading.Event()
        gate = threading.Event()
        finished = threading.Event()
        insert = store.repository.insert

        def gated_insert(entry, cancelled=None):
            started.set()
            gate.wait(5)
            try:
                return insert(entry, cancelled=cancelled)
            finally:
                finished.set()

        store.repository.insert = gated_insert

        task = asyncio.create_task(store.save(entry_factory("https://a.test/cancel")))
        await asyncio.to_thread(started.wait, 5)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        gate.set()
        assert await asyncio.to_thread(finished.wait, 5)

        assert await store.exists("https://a.test/cancel") is False
        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_uncancelled_save_commits(self, store: KnowledgeStore, entry_factory):
        """Saves that are not cancelled should commit normally."""
        await store.save(entry_factory("https://a.test/kept"))

        assert await store.exists("https://a.test/kept") is True


class TestHierarchy:
    """Tests for the subject/topic/chapter grouping."""

    @pytest.mark.asyncio
    async def test_get_hierarchy(self, store: KnowledgeStore, entry_factory):
        """Entries should be grouped and sorted at every level."""
        await store.save(entry_factory(
            "https://a.test/1", subject="Database", topic="SQL", chapter="Basics"))
        await store.save(entry_factory(
            "https://a.test/2", subject="Database", topic="Indexing", chapter="Advanced"))
        await store.save(entry_factory(
            "https://a.test/3", subject="Database", topic="SQL", chapter="Advanced"))
        await store.save(entry_factory("https://a.test/4", subject="Cloud Computing"))

        hierarchy = await store.get_hierarchy()

        assert list(hierarchy) == ["Cloud Computing", "Database"]
        assert list(hierarchy["Database"]) == ["Indexing", "SQL"]
        assert list(hierarchy["Database"]["SQL"]) == ["Advanced", "Basics"]
        assert [e.url for e in hierarchy["Database"]["SQL"]["Basics"]] == ["https://a.test/1"]
        assert list(hierarchy["Cloud Computing"]) == ["Miscellaneous"]

    @pytest.mark.asyncio
    async def test_empty_hierarchy(self, store: KnowledgeStore):
        """An empty store has an empty hierarchy."""
        assert await store.get_hierarchy() == {}
