"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a transactional cursor (``get_cursor``) and
applying migrations on application start (``init_db``).  Every
resource kind owns exactly one table; the column layout mirrors the
field declarations in ``services.kinds``.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import settings


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: one table per resource kind
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS configuration_validations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            is_active INTEGER NOT NULL DEFAULT 0,
            validation_rule TEXT,
            description TEXT,
            max_retries INTEGER,
            timeout_seconds INTEGER,
            enabled_for_production INTEGER NOT NULL DEFAULT 0,
            dynamic_config TEXT,
            created_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL,
            version INTEGER NOT NULL DEFAULT 0
        );

        CREATE TABLE IF NOT EXISTS database_integrations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            is_active INTEGER NOT NULL DEFAULT 0,
            connection_string TEXT NOT NULL,
            vector_store_type TEXT NOT NULL,
            description TEXT,
            database_integration_id INTEGER,
            metadata TEXT,
            timeout_seconds INTEGER,
            max_retries INTEGER,
            is_encrypted INTEGER NOT NULL DEFAULT 0,
            last_synced_at TIMESTAMP,
            status_message TEXT,
            environment TEXT,
            region TEXT,
            tags TEXT,
            created_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL,
            version INTEGER NOT NULL DEFAULT 0
        );

        CREATE TABLE IF NOT EXISTS recommenders (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            is_active INTEGER NOT NULL DEFAULT 0,
            description TEXT,
            model_version TEXT,
            created_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL,
            version INTEGER NOT NULL DEFAULT 0
        );

        CREATE TABLE IF NOT EXISTS user_feedback (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            is_active INTEGER NOT NULL DEFAULT 0,
            description TEXT,
            rating INTEGER NOT NULL,
            feedback_date TIMESTAMP NOT NULL,
            user_id INTEGER NOT NULL,
            is_resolved INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL,
            version INTEGER NOT NULL DEFAULT 0
        );
        """,
    ),
    # Migration 2: indices for the default sort and the foreign-key filters
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_configuration_validations_created_at ON configuration_validations(created_at);
        CREATE INDEX IF NOT EXISTS idx_database_integrations_created_at ON database_integrations(created_at);
        CREATE INDEX IF NOT EXISTS idx_database_integrations_parent ON database_integrations(database_integration_id);
        CREATE INDEX IF NOT EXISTS idx_recommenders_created_at ON recommenders(created_at);
        CREATE INDEX IF NOT EXISTS idx_user_feedback_created_at ON user_feedback(created_at);
        CREATE INDEX IF NOT EXISTS idx_user_feedback_user_id ON user_feedback(user_id);
        """,
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    ``database_url`` defaults to ``settings.database_url``.  Absolute
    paths (and the special ``:memory:`` name) are returned as is;
    relative paths are resolved against the package root.
    """
    db_url = database_url or settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # core_template_api/
    return str((base_dir / db_url).resolve())


def _casefold(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return str(value).casefold()


def get_connection(database_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name.  No
    type detection is enabled; timestamps come back as the ISO strings
    they were stored as.  ``timeout`` makes concurrent writers wait for
    the database lock instead of failing immediately.

    ``py_casefold(text)`` is registered on every connection.  SQLite's
    own ``lower()`` only folds ASCII letters, so case-insensitive
    predicates use this function instead.
    """
    conn = sqlite3.connect(get_database_path(database_path), timeout=30)
    conn.row_factory = sqlite3.Row
    conn.create_function("py_casefold", 1, _casefold, deterministic=True)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor(database_path: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor; commit on success, roll back on error, always close."""
    conn = get_connection(database_path)
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(database_path: Optional[str] = None) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a new migration, append it with an
    incremented version number.
    """
    with get_cursor(database_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
