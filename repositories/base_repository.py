"""
Base repository with common database operations.
"""

import logging
import sqlite3
from abc import ABC
from contextlib import contextmanager

from database import Database

logger = logging.getLogger("wager_ledger.repositories")

SQLITE_MAX_INTEGER = 2**63 - 1


class BaseRepository(ABC):
    """
    Base class for all repositories.

    Provides common database connection management and utilities.
    """

    # Track DB paths that have already had schema initialization performed
    _schema_initialized_paths = set()

    def __init__(self, db_path: str):
        """
        Initialize repository with database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        # Ensure schema is initialized for this database path (idempotent)
        if db_path not in type(self)._schema_initialized_paths:
            Database(db_path)
            type(self)._schema_initialized_paths.add(db_path)

    @staticmethod
    def is_valid_row_id(row_id: int) -> bool:
        """Whether row_id can name a row: a positive signed 64-bit SQLite integer."""
        return 1 <= row_id <= SQLITE_MAX_INTEGER

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory enabled."""
        use_uri = self.db_path.startswith("file:")
        conn = sqlite3.connect(self.db_path, uri=use_uri)
        conn.row_factory = sqlite3.Row
        if not use_uri:  # Skip WAL for in-memory databases
            conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    @contextmanager
    def connection(self):
        """
        Context manager for database connections.

        Automatically commits on success, rolls back on exception,
        and always closes the connection.
        """
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def atomic_transaction(self):
        """
        Context manager for atomic transactions with immediate write lock.

        Uses BEGIN IMMEDIATE to acquire a write lock immediately, so every
        settlement or grant is one serialized step relative to all others.

        Usage:
            with self.atomic_transaction() as conn:
                cursor = conn.cursor()
                cursor.execute(...)

        The transaction commits on success and rolls back on exception.
        """
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            logger.debug("Rolled back transaction on %s", self.db_path)
            raise
        finally:
            conn.close()
