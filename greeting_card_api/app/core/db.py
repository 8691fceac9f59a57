"""
SQLite database integration and simple migration system.

This module provides functions for opening a connection
(``get_connection``), a cursor context manager (``get_cursor``) and
``init_db`` which applies pending schema migrations.  Applied versions
are recorded in the ``migrations`` table and new migrations run in
order, so an existing database file is upgraded in place.

The ``greetings`` table enforces the same bounds as the service layer
through ``CHECK`` constraints and a ``BEFORE INSERT`` trigger, and
other triggers reject ``UPDATE`` and ``DELETE`` so that rows stay
append-only even for direct SQL access.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: base greetings table
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS greetings (
            id TEXT PRIMARY KEY,
            sender TEXT NOT NULL CHECK (length(sender) <= 100 AND length(trim(sender)) > 0),
            receiver TEXT NOT NULL CHECK (length(receiver) <= 100 AND length(trim(receiver)) > 0),
            message TEXT NOT NULL DEFAULT '' CHECK (length(message) <= 500),
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        );

        CREATE INDEX IF NOT EXISTS idx_greetings_created_at ON greetings(created_at DESC);
        """,
    ),
    # Migration 2: day theme and optional display fields
    (
        2,
        """
        ALTER TABLE greetings ADD COLUMN day_index INTEGER NOT NULL DEFAULT 0 CHECK (day_index >= 0);
        ALTER TABLE greetings ADD COLUMN subtitle TEXT NOT NULL DEFAULT '' CHECK (length(subtitle) <= 200);
        ALTER TABLE greetings ADD COLUMN quote TEXT NOT NULL DEFAULT '' CHECK (length(quote) <= 500);
        -- JSON array of memory lines
        ALTER TABLE greetings ADD COLUMN memories TEXT NOT NULL DEFAULT '[]';
        """,
    ),
    # Migration 3: rows are append-only
    (
        3,
        """
        CREATE TRIGGER IF NOT EXISTS greetings_no_update
        BEFORE UPDATE ON greetings
        BEGIN
            SELECT RAISE(ABORT, 'greetings are append-only');
        END;

        CREATE TRIGGER IF NOT EXISTS greetings_no_delete
        BEFORE DELETE ON greetings
        BEGIN
            SELECT RAISE(ABORT, 'greetings are append-only');
        END;
        """,
    ),
    # Migration 4: bounds that ALTER TABLE cannot add as CHECK constraints
    (
        4,
        """
        CREATE TRIGGER IF NOT EXISTS greetings_check_bounds
        BEFORE INSERT ON greetings
        WHEN NEW.day_index > 7
            OR json_array_length(NEW.memories) > 20
            OR EXISTS (SELECT 1 FROM json_each(NEW.memories) WHERE length(value) > 200)
        BEGIN
            SELECT RAISE(ABORT, 'greeting violates storage bounds');
        END;
        """,
    ),
]


def get_database_path(database_url: str) -> str:
    """Resolve ``database_url`` to a filesystem path.

    Absolute paths are used as is; relative paths are resolved against
    the project root (the directory containing ``greeting_card_api``).
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


def get_connection(db_path: str) -> sqlite3.Connection:
    """Open a new SQLite connection with rows addressable by column name."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: str) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def current_version(db_path: str) -> int:
    """Return the highest applied migration version (0 for a new file)."""
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        return row["version"] if row and row["version"] is not None else 0


def init_db(db_path: str) -> int:
    """Create the database file if needed and apply pending migrations.

    Returns the schema version after the upgrade.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    version = current_version(db_path)
    with get_cursor(db_path) as cursor:
        for migration_version, sql in MIGRATIONS:
            if migration_version > version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (migration_version,)
                )
                version = migration_version
    return version
