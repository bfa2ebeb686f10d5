"""
Custom exceptions for the Content Intelligence Engine.

Provides a hierarchy of exceptions for precise error handling across
the engine. All exceptions inherit from ContentIntelError.

Exception Hierarchy:
    ContentIntelError (base)
    ├── ConfigurationError
    ├── ValidationError
    ├── ExportError
    └── StorageError
        ├── DatabaseError
        ├── DuplicateError
        └── NotFoundError

The classifier and summarizer never raise on sparse input; these
errors come from the engine boundary (ValidationError) and from the
knowledge store (StorageError and subclasses).
"""

from typing import Any


class ContentIntelError(Exception):
    """
    Base exception for all Content Intelligence Engine errors.

    All custom exceptions inherit from this class, allowing for
    catch-all handling when needed.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(
                f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ContentIntelError):
    """
    Error in configuration loading or validation.

    Raised when:
    - Configuration file is missing or malformed
    - Keyword table file has an unexpected shape
    """

    pass


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(ContentIntelError):
    """
    Malformed or missing required input field.

    Raised at the engine boundary when an extractor payload cannot be
    turned into a PageContent (e.g. missing url), or when a store query
    names an attribute that is not indexed.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)
        self.field = field


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(ContentIntelError):
    """
    Base error for knowledge store operations.

    Raised for general storage-related failures not covered by
    more specific subclasses.
    """

    pass


class DatabaseError(StorageError):
    """
    Error in SQLite database operations.

    Raised when:
    - Database connection fails
    - Query execution fails
    - Schema migration fails
    """

    def __init__(
        self,
        message: str,
        query: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if query:
            # Truncate long queries for readability
            details["query"] = query[:200] + \
                "..." if len(query) > 200 else query
        super().__init__(message, details)
        self.query = query


class DuplicateError(StorageError):
    """
    An entry with the same url already exists in the store.

    The store holds at most one entry per url; a second save for
    the same url fails with this error and leaves the store unchanged.
    """

    def __init__(
        self,
        message: str,
        url: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["url"] = url
        super().__init__(message, details)
        self.url = url


class NotFoundError(StorageError):
    """Lookup of an entry id that is not in the store."""

    def __init__(
        self,
        message: str,
        entry_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if entry_id is not None:
            details["entry_id"] = entry_id
        super().__init__(message, details)
        self.entry_id = entry_id


class ExportError(ContentIntelError):
    """
    Knowledge book could not be rendered or written.

    Raised when:
    - The store has no entries to export
    - The output format is unknown
    - The output file cannot be written
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)
        self.path = path
