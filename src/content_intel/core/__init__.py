"""
Core module for the Content Intelligence Engine.

Contains the exception hierarchy shared by all subsystems.
"""

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

__all__ = [
    # Base
    "ContentIntelError",
    "ConfigurationError",
    # Input
    "ValidationError",
    # Storage
    "StorageError",
    "DatabaseError",
    "DuplicateError",
    "NotFoundError",
    # Export
    "ExportError",
]
