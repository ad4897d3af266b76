"""Database schema for memkit SQLite storage.

Contains:
- Schema DDL (SCHEMA)
- Schema version tracking (SCHEMA_VERSION)
- Table allowlist (ALLOWED_TABLES, validate_table_name)
- Database initialization (init_db)
"""

import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Allowed table names for SQL queries (prevents SQL injection via table names).
# Names are always double-quoted in SQL; "current" is an SQLite keyword.
ALLOWED_TABLES = frozenset(
    {
        "canon",
        "current",
        "deltas",
        "meta",
        "schema_version",
    }
)


def validate_table_name(table: str) -> str:
    """Validate table name against the allowlist.

    Raises:
        ValueError: If table name is not in allowlist
    """
    if table not in ALLOWED_TABLES:
        raise ValueError(f"Invalid table name: {table}")
    return table


SCHEMA = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS "schema_version" (
    version INTEGER PRIMARY KEY
);

-- Canon singleton (key = 'canon')
CREATE TABLE IF NOT EXISTS "canon" (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL
);

-- Current state singleton (key = 'current')
CREATE TABLE IF NOT EXISTS "current" (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL
);

-- Delta log (key = delta id)
CREATE TABLE IF NOT EXISTS "deltas" (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL
);

-- Flags (key = flag name)
CREATE TABLE IF NOT EXISTS "meta" (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL
);
"""


def init_db(conn: sqlite3.Connection, db_path: Path) -> None:
    """Create tables, record the schema version, tighten permissions."""
    conn.executescript(SCHEMA)

    row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
    if row is None:
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
    elif row[0] != SCHEMA_VERSION:
        logger.info(f"Updating schema version {row[0]} -> {SCHEMA_VERSION}")
        conn.execute("UPDATE schema_version SET version = ?", (SCHEMA_VERSION,))

    conn.commit()

    # Owner read/write only
    try:
        os.chmod(db_path, 0o600)
        os.chmod(db_path.parent, 0o700)
    except OSError as e:
        logger.warning(f"Could not set secure permissions: {e}")
