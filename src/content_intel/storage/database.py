"""
SQLite database connection management.

Provides thread-safe database access with WAL mode and one connection
per thread. Writes are serialized through a process-wide lock and run
inside ``BEGIN IMMEDIATE`` transactions, so a check-then-insert is
atomic with respect to every other writer.
"""

import asyncio
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from content_intel.config import StorageSettings
from content_intel.core.exceptions import DatabaseError
from content_intel.storage.schema import SchemaManager
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)


class Database:
    """
    SQLite database manager.

    Provides thread-safe access to SQLite database with:
    - WAL mode so readers only ever see committed rows
    - Connection per thread
    - Automatic schema initialization and migration

    Example:
        >>> db = Database.create(settings.storage)
        >>> with db.transaction() as conn:
        ...     conn.execute("DELETE FROM knowledge WHERE id = ?", (3,))
    """

    def __init__(
        self,
        database_path: Path,
        wal_mode: bool = True,
        cache_size_mb: int = 16,
    ) -> None:
        """
        Initialize database manager.

        Args:
            database_path: Path to SQLite database file
            wal_mode: Enable WAL mode for better concurrency
            cache_size_mb: SQLite cache size in megabytes
        """
        self.database_path = Path(database_path)
        self.wal_mode = wal_mode
        self.cache_size_mb = cache_size_mb

        self._connections: dict[int, sqlite3.Connection] = {}
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._initialized = False

        logger.info(f"Database manager created (path={database_path})")

    @classmethod
    def create(cls, storage: StorageSettings) -> "Database":
        """
        Create a standalone database with its schema ready.

        Args:
            storage: Storage settings

        Returns:
            Database instance
        """
        database = cls(
            database_path=storage.database_path,
            wal_mode=storage.wal_mode,
            cache_size_mb=storage.cache_size_mb,
        )
        database.setup()
        return database

    def setup(self) -> None:
        """Create the parent directory and bring the schema up to date."""
        if self._initialized:
            return

        self.database_path.parent.mkdir(parents=True, exist_ok=True)

        conn = self._get_connection()
        with self._write_lock:
            SchemaManager(conn).initialize()

        self._initialized = True
        logger.info("Database setup complete")

    def _get_connection(self) -> sqlite3.Connection:
        """
        Get connection for current thread.

        Creates new connection if none exists for this thread.
        """
        thread_id = threading.get_ident()

        if thread_id not in self._connections:
            with self._lock:
                if thread_id not in self._connections:
                    conn = self._create_connection()
                    self._connections[thread_id] = conn

        return self._connections[thread_id]

    def _create_connection(self) -> sqlite3.Connection:
        """Create and configure a new connection."""
        try:
            # Autocommit; transaction() issues BEGIN/COMMIT itself
            conn = sqlite3.connect(
                str(self.database_path),
                check_same_thread=False,
                timeout=30.0,
                isolation_level=None,
            )

            # Enable row factory for dict-like access
            conn.row_factory = sqlite3.Row

            # Configure pragmas
            cache_pages = (self.cache_size_mb * 1024 * 1024) // 4096
            conn.execute(f"PRAGMA cache_size = -{cache_pages}")
            conn.execute(
                "PRAGMA journal_mode = WAL" if self.wal_mode else "PRAGMA journal_mode = DELETE")
            conn.execute("PRAGMA synchronous = NORMAL")
            conn.execute("PRAGMA temp_store = MEMORY")
            conn.execute("PRAGMA busy_timeout = 30000")

            logger.debug(
                f"Created new connection for thread {threading.get_ident()}")
            return conn

        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to create database connection: {e}",
                details={"path": str(self.database_path)},
            ) from e

    @contextmanager
    def transaction(
        self, cancelled: threading.Event | None = None
    ) -> Iterator[sqlite3.Connection]:
        """
        Execute operations in a write transaction.

        Holds the write lock and a RESERVED database lock for the whole
        block. Commits on success and rolls back on any error.

        A worker thread keeps running when the task awaiting it is
        cancelled, so async callers pass ``cancelled``: if it is set by
        the time the block finishes, the transaction is rolled back
        instead of committed and CancelledError is raised.

        Args:
            cancelled: Event set by an async caller that has been cancelled

        Yields:
            SQLite connection
        """
        conn = self._get_connection()
        with self._write_lock:
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise DatabaseError(f"Could not begin transaction: {e}") from e
            try:
                yield conn
                if cancelled is not None and cancelled.is_set():
                    raise asyncio.CancelledError("caller cancelled before commit")
                conn.execute("COMMIT")
            except BaseException:
                conn.execute("ROLLBACK")
                raise

    @contextmanager
    def snapshot(self) -> Iterator[sqlite3.Connection]:
        """
        Run several reads against one consistent view of the database.

        Opens a deferred read transaction on this thread's connection;
        under WAL every read inside it sees the same committed state.

        Yields:
            SQLite connection
        """
        conn = self._get_connection()
        try:
            conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise DatabaseError(f"Could not begin read transaction: {e}") from e
        try:
            yield conn
        finally:
            conn.execute("COMMIT")

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """
        Execute SQL statement.

        Args:
            sql: SQL statement
            params: Query parameters

        Returns:
            Cursor with results
        """
        conn = self._get_connection()
        try:
            return conn.execute(sql, params)
        except sqlite3.Error as e:
            raise DatabaseError(
                f"Query execution failed: {e}", query=sql) from e

    def fetch_one(self, sql: str, params: tuple = ()) -> dict | None:
        """
        Fetch single row as dictionary.

        Args:
            sql: SQL query
            params: Query parameters

        Returns:
            Row as dict or None
        """
        cursor = self.execute(sql, params)
        row = cursor.fetchone()
        return dict(row) if row else None

    def fetch_all(self, sql: str, params: tuple = ()) -> list[dict]:
        """
        Fetch all rows as dictionaries.

        Args:
            sql: SQL query
            params: Query parameters

        Returns:
            List of rows as dicts
        """
        cursor = self.execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]

    def fetch_value(self, sql: str, params: tuple = ()):
        """Fetch the first column of the first row, or None."""
        cursor = self.execute(sql, params)
        row = cursor.fetchone()
        return row[0] if row else None

    def schema_version(self) -> int:
        """Current schema version of the open database."""
        return SchemaManager(self._get_connection()).get_version()

    def close(self) -> None:
        """Close all connections."""
        with self._lock:
            for conn in self._connections.values():
                try:
                    conn.close()
                except sqlite3.Error as e:
                    logger.warning(f"Error closing connection: {e}")
            self._connections.clear()

        self._initialized = False
        logger.info("All database connections closed")

    def __repr__(self) -> str:
        status = "initialized" if self._initialized else "not initialized"
        return f"Database(path={self.database_path!r}, {status})"
