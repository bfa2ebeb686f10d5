"""
Storage module for the Content Intelligence Engine.

Provides SQLite-based knowledge storage with:
- Connection management with WAL mode
- Additive schema migrations
- Repository pattern for data access
- An async store facade for the pipeline
"""

from content_intel.storage.database import Database
from content_intel.storage.schema import (
    SchemaManager,
    SCHEMA_VERSION,
)
from content_intel.storage.models import (
    KnowledgeEntry,
    KnowledgeHierarchy,
    KnowledgeStatistics,
    organize_entries,
)
from content_intel.storage.repository import (
    KnowledgeRepository,
    INDEXED_ATTRIBUTES,
)
from content_intel.storage.store import KnowledgeStore

__all__ = [
    # Database
    "Database",
    # Schema
    "SchemaManager",
    "SCHEMA_VERSION",
    # Models
    "KnowledgeEntry",
    "KnowledgeHierarchy",
    "KnowledgeStatistics",
    "organize_entries",
    # Repository
    "KnowledgeRepository",
    "INDEXED_ATTRIBUTES",
    # Store
    "KnowledgeStore",
]
