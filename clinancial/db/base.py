"""
Base repository module with connection management and schema initialization.

Provides the foundation for all database operations in the clinancial ledger.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from clinancial.config import DB_TIMEOUT, get_db_path
from clinancial.errors import StorageError

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Base repository class with SQLite connection management.

    Every operation runs in its own connection scope: committed on success,
    rolled back on error, always closed. Statements issued inside one scope
    share a transaction.
    """

    def __init__(
        self, db_path: Optional[Union[str, Path]] = None, init_schema: bool = True
    ):
        """
        Initialize the base repository.

        Args:
            db_path: Path to the SQLite database file. Defaults to the
                configured path (CLINANCIAL_DB or ~/.config/clinancial)
            init_schema: Whether to initialize the schema on startup
        """
        self.db_path = Path(db_path) if db_path else get_db_path()
        self._ensure_db_directory()
        if init_schema:
            self.create_schema()

    def _ensure_db_directory(self):
        """Ensure the database directory exists."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Database directory ensured: {self.db_path.parent}")
        except OSError as e:
            logger.error(f"Failed to create database directory: {e}", exc_info=True)
            raise StorageError(
                f"Cannot create database directory {self.db_path.parent}: {e}"
            ) from e

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=DB_TIMEOUT)
            conn.row_factory = sqlite3.Row
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Database error on {self.db_path}: {e}", exc_info=True)
            if conn:
                conn.rollback()
            raise StorageError(str(e)) from e
        except Exception:
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                conn.close()

    def create_schema(self):
        """Create the accounts and registers tables if they do not exist."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS accounts (
                    id INTEGER PRIMARY KEY,
                    name TEXT NOT NULL,
                    ctime INTEGER NOT NULL
                )
            """)

            # Absent endpoints are stored as 0
            conn.execute("""
                CREATE TABLE IF NOT EXISTS registers (
                    id INTEGER PRIMARY KEY,
                    name TEXT NOT NULL,
                    time INTEGER NOT NULL,
                    val REAL NOT NULL CHECK(val > 0),
                    fromaccount INTEGER NOT NULL DEFAULT 0,
                    toaccount INTEGER NOT NULL DEFAULT 0
                )
            """)

            self._create_indexes(conn)

            logger.debug(f"Ledger schema initialized at {self.db_path}")

    def _create_indexes(self, conn):
        """Create database indexes for query performance."""
        indexes = [
            ("idx_accounts_name", "accounts", "name"),
            ("idx_registers_time", "registers", "time"),
            ("idx_registers_fromaccount", "registers", "fromaccount"),
            ("idx_registers_toaccount", "registers", "toaccount"),
        ]

        for index_name, table, columns in indexes:
            conn.execute(f"""
                CREATE INDEX IF NOT EXISTS {index_name}
                ON {table}({columns})
            """)

    def drop_schema(self):
        """Drop both tables, wiping all data. Call create_schema() to reuse."""
        with self._get_connection() as conn:
            conn.execute("DROP TABLE IF EXISTS accounts")
            conn.execute("DROP TABLE IF EXISTS registers")
        logger.info(f"Ledger schema dropped at {self.db_path}")
