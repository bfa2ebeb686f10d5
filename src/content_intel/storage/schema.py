"""
Database schema definition and migration.

The schema evolves only by appending migrations. Each migration is a
list of statements applied in one transaction and recorded in
``schema_version``, so opening an older database upgrades it in place
without touching existing rows.
"""

import sqlite3

from content_intel.core.exceptions import DatabaseError
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)

MIGRATIONS: dict[int, list[str]] = {
    1: [
        """
        CREATE TABLE IF NOT EXISTS knowledge (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            url TEXT NOT NULL,
            subject TEXT NOT NULL DEFAULT 'General',
            topic TEXT NOT NULL DEFAULT 'Miscellaneous',
            chapter TEXT NOT NULL DEFAULT 'General',
            title TEXT NOT NULL DEFAULT '',
            key_points TEXT NOT NULL DEFAULT '[]',
            paragraphs TEXT NOT NULL DEFAULT '[]',
            timestamp TEXT NOT NULL,
            saved_at TEXT NOT NULL
        )
        """,
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_knowledge_url ON knowledge(url)",
        "CREATE INDEX IF NOT EXISTS idx_knowledge_subject ON knowledge(subject)",
        "CREATE INDEX IF NOT EXISTS idx_knowledge_topic ON knowledge(topic)",
        "CREATE INDEX IF NOT EXISTS idx_knowledge_chapter ON knowledge(chapter)",
    ],
    2: [
        "CREATE INDEX IF NOT EXISTS idx_knowledge_timestamp ON knowledge(timestamp)",
        "CREATE INDEX IF NOT EXISTS idx_knowledge_subject_topic ON knowledge(subject, topic)",
    ],
}

# Current schema version
SCHEMA_VERSION = max(MIGRATIONS)


class SchemaManager:
    """
    Manages database schema creation and migrations.

    Expects a connection in autocommit mode (isolation_level=None) so
    that it controls transaction boundaries itself.

    Example:
        >>> manager = SchemaManager(connection)
        >>> manager.initialize()
        >>> manager.get_version()
        2
    """

    def __init__(self, connection: sqlite3.Connection, target_version: int = SCHEMA_VERSION) -> None:
        """
        Initialize schema manager.

        Args:
            connection: SQLite database connection
            target_version: Highest migration to apply
        """
        self.conn = connection
        self.target_version = target_version

    def initialize(self) -> None:
        """Create the version table and apply pending migrations."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """)

        if self.needs_migration():
            self.migrate()
        else:
            logger.info(f"Schema version {self.get_version()} is current")

    def get_version(self) -> int:
        """Get current schema version."""
        cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
        version = cursor.fetchone()[0]
        return version or 0

    def needs_migration(self) -> bool:
        """Check if schema needs migration."""
        return self.get_version() < self.target_version

    def migrate(self) -> None:
        """
        Apply every migration newer than the current version.

        Raises:
            DatabaseError: If a migration fails (that migration is rolled back)
        """
        current = self.get_version()

        for version in sorted(MIGRATIONS):
            if version <= current or version > self.target_version:
                continue

            logger.info(f"Applying schema migration {version}")
            try:
                self.conn.execute("BEGIN")
                for statement in MIGRATIONS[version]:
                    self.conn.execute(statement)
                self.conn.execute(
                    "INSERT INTO schema_version (version) VALUES (?)", (version,))
                self.conn.execute("COMMIT")
            except sqlite3.Error as e:
                self.conn.execute("ROLLBACK")
                raise DatabaseError(
                    f"Schema migration {version} failed: {e}",
                    details={"version": version},
                ) from e

        logger.info(f"Schema at version {self.get_version()}")
