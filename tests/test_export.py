"""
Tests for export module.

Tests grouping of entries and Markdown/HTML book rendering.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from content_intel.core.exceptions import ExportError
from content_intel.export import KnowledgeBookExporter
from content_intel.storage import organize_entries


@pytest.fixture
def hierarchy(entry_factory):
    """Three entries across two subjects."""
    return organize_entries([
        entry_factory(
            "https://a.test/joins", subject="Database", topic="SQL", chapter="Basics",
            title="Joins explained", key_points=[f"Point {i}" for i in range(8)],
            paragraphs=("A" * 250, "Second paragraph.", "Third paragraph."),
        ),
        entry_factory(
            "https://a.test/btree", subject="Database", topic="Indexing",
            chapter="Advanced", title="B-tree indexes",
        ),
        entry_factory("https://a.test/misc", title=""),
    ])


@pytest.fixture
def exporter() -> KnowledgeBookExporter:
    return KnowledgeBookExporter(title="Test Book")


class TestOrganizeEntries:
    """Tests for grouping entries into the hierarchy."""

    def test_sorted_at_every_level(self, hierarchy):
        """Subjects, topics and chapters should be sorted."""
        assert list(hierarchy) == ["Database", "General"]
        assert list(hierarchy["Database"]) == ["Indexing", "SQL"]
        assert list(hierarchy["General"]["Miscellaneous"]) == ["General"]

    def test_entries_keep_order(self, entry_factory):
        """Entries in one chapter should keep their input order."""
        grouped = organize_entries([
            entry_factory("https://a.test/2"),
            entry_factory("https://a.test/1"),
        ])

        notes = grouped["General"]["Miscellaneous"]["General"]
        assert [e.url for e in notes] == ["https://a.test/2", "https://a.test/1"]


class TestMarkdownBook:
    """Tests for the Markdown book."""

    def test_contents(self, exporter: KnowledgeBookExporter, hierarchy):
        """The book should list every chapter with its note count."""
        book = exporter.render(
            hierarchy, generated_at=datetime(2024, 5, 1, tzinfo=timezone.utc))

        assert book.startswith("# Test Book")
        assert "Generated May 01, 2024. 3 notes in 2 subjects." in book
        assert "- Database" in book
        assert "Basics (1 notes)" in book
        assert "## Database" in book
        assert "### SQL" in book
        assert "#### Advanced" in book

    def test_note_limits(self, exporter: KnowledgeBookExporter, hierarchy):
        """Notes should show five key points and two short excerpts."""
        book = exporter.render(hierarchy)

        assert "- Point 4" in book
        assert "Point 5" not in book
        assert "> " + "A" * 200 + "..." in book
        assert "Second paragraph." in book
        assert "Third paragraph." not in book

    def test_untitled_entry(self, exporter: KnowledgeBookExporter, hierarchy):
        """Entries without title should be shown as Untitled."""
        book = exporter.render(hierarchy)

        assert "##### Untitled" in book
        assert "<https://a.test/misc>" in book

    def test_empty_store(self, exporter: KnowledgeBookExporter):
        """There is nothing to export from an empty store."""
        with pytest.raises(ExportError):
            exporter.render({})


class TestHtmlBook:
    """Tests for the HTML book."""

    def test_html_structure(self, exporter: KnowledgeBookExporter, hierarchy):
        """The HTML book should carry title, headings and notes."""
        book = exporter.render(hierarchy, fmt="html")

        assert "<title>Test Book</title>" in book
        assert "<h1>Database</h1>" in book
        assert "<h3>Basics</h3>" in book
        assert '<div class="note-title">Joins explained</div>' in book

    def test_html_escapes_text(self, exporter: KnowledgeBookExporter, entry_factory):
        """Captured text must not be injected as markup."""
        grouped = organize_entries([
            entry_factory("https://a.test/x", title="<script>alert(1)</script>"),
        ])

        book = exporter.render(grouped, fmt="html")

        assert "<script>alert(1)</script>" not in book
        assert "&lt;script&gt;" in book

    def test_unknown_format(self, exporter: KnowledgeBookExporter, hierarchy):
        """Unknown formats should be rejected."""
        with pytest.raises(ExportError):
            exporter.render(hierarchy, fmt="pdf")


class TestExportFile:
    """Tests for writing the book."""

    def test_format_from_suffix(self, exporter: KnowledgeBookExporter, hierarchy, temp_dir: Path):
        """The output suffix should choose the format."""
        md_path = exporter.export(hierarchy, temp_dir / "book.md")
        html_path = exporter.export(hierarchy, temp_dir / "out" / "book.html")

        assert md_path.read_text(encoding="utf-8").startswith("# Test Book")
        assert html_path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_explicit_format_wins(self, exporter: KnowledgeBookExporter, hierarchy, temp_dir: Path):
        """An explicit format should override the suffix."""
        path = exporter.export(hierarchy, temp_dir / "book.txt", fmt="markdown")

        assert path.read_text(encoding="utf-8").startswith("# Test Book")

    def test_unknown_suffix(self, exporter: KnowledgeBookExporter, hierarchy, temp_dir: Path):
        """Unknown suffixes without a format should be rejected."""
        with pytest.raises(ExportError) as exc_info:
            exporter.export(hierarchy, temp_dir / "book.pdf")

        assert exc_info.value.path.endswith("book.pdf")
