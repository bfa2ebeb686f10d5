"""
Tests for exception hierarchy.

Tests custom exceptions and error handling.
"""

import pytest

from content_intel.core.exceptions import (
    ContentIntelError,
    ConfigurationError,
    ValidationError,
    StorageError,
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ExportError,
)


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    def test_base_exception(self):
        """ContentIntelError should be the base for all custom exceptions."""
        exc = ContentIntelError("Test error")

        assert isinstance(exc, Exception)
        assert str(exc) == "Test error"

    def test_configuration_error(self):
        """ConfigurationError should inherit from ContentIntelError."""
        exc = ConfigurationError("Invalid config")

        assert isinstance(exc, ContentIntelError)

    def test_validation_error(self):
        """ValidationError should carry the offending field."""
        exc = ValidationError("Missing url", field="url")

        assert isinstance(exc, ContentIntelError)
        assert exc.field == "url"

    @pytest.mark.parametrize(
        "exc",
        [
            DatabaseError("Query failed"),
            DuplicateError("Exists", url="https://a.test/x"),
            NotFoundError("Missing", entry_id=7),
        ],
    )
    def test_storage_errors(self, exc):
        """Store errors should all be StorageErrors."""
        assert isinstance(exc, StorageError)
        assert isinstance(exc, ContentIntelError)


class TestExceptionDetails:
    """Tests for error messages and details."""

    def test_details_in_str(self):
        """Details should be appended to the message."""
        exc = ContentIntelError("Failed", details={"path": "/tmp/x"})

        assert str(exc) == "Failed (path='/tmp/x')"
        assert exc.message == "Failed"

    def test_repr(self):
        """repr should show class, message and details."""
        exc = ConfigurationError("Bad", details={"key": 1})

        assert repr(exc) == "ConfigurationError('Bad', details={'key': 1})"

    def test_duplicate_error_url(self):
        """DuplicateError should expose the url."""
        exc = DuplicateError("URL already stored", url="https://a.test/x")

        assert exc.url == "https://a.test/x"
        assert exc.details["url"] == "https://a.test/x"

    def test_not_found_entry_id(self):
        """NotFoundError should expose the entry id."""
        exc = NotFoundError("No entry", entry_id=42)

        assert exc.entry_id == 42
        assert "entry_id=42" in str(exc)

    def test_export_error_path(self):
        """ExportError should expose the output path."""
        exc = ExportError("Cannot write", path="/tmp/book.md")

        assert exc.path == "/tmp/book.md"
        assert not isinstance(exc, StorageError)

    def test_database_error_truncates_query(self):
        """Long queries should be truncated in details."""
        query = "SELECT " + "x, " * 200
        exc = DatabaseError("Query failed", query=query)

        assert exc.query == query
        assert len(exc.details["query"]) == 203
        assert exc.details["query"].endswith("...")

    def test_catch_all(self):
        """All errors should be catchable with the base class."""
        with pytest.raises(ContentIntelError):
            raise DuplicateError("Exists", url="https://a.test/x")
