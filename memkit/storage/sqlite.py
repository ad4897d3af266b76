"""SQLite storage backend for memkit.

The transactional backend: one database file, one table per logical
collection, each row a JSON payload keyed by record key. Connections are
opened per operation and always closed.
"""

import contextlib
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .base import Storage
from .schema import init_db, validate_table_name

logger = logging.getLogger(__name__)

DB_FILENAME = "memkit.db"


class SQLiteStorage(Storage):
    """SQLite-backed storage.

    Opening the storage creates the database and schema; an error here
    means the backend is unavailable and is left to the caller (see
    ``memkit.storage.backend.open_storage``).
    """

    backend_name = "sqlite"
    storage_errors = (sqlite3.Error, OSError, ValueError, TypeError)

    # Milliseconds to wait on a locked database
    BUSY_TIMEOUT_MS = 5000

    def __init__(self, data_dir: Path, db_path: Optional[Path] = None):
        self.data_dir = Path(data_dir)
        self.db_path = Path(db_path) if db_path is not None else self.data_dir / DB_FILENAME
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute(f"PRAGMA busy_timeout={self.BUSY_TIMEOUT_MS}")
        return conn

    @contextlib.contextmanager
    def _connect(self):
        """Commit on success, roll back on error, always close."""
        conn = self._get_conn()
        try:
            yield conn
            conn.commit()
        except Exception as e:
            logger.debug(f"Transaction failed, rolling back: {e}")
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._connect() as conn:
            init_db(conn, self.db_path)

    def _decode(self, payload: Optional[str]) -> Optional[Dict[str, Any]]:
        if not payload:
            return None
        try:
            value = json.loads(payload)
        except json.JSONDecodeError as e:
            logger.warning(f"Corrupt payload in {self.db_path.name}: {e}")
            return None
        return value if isinstance(value, dict) else None

    # === Primitives ===

    def _get_record(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        table = validate_table_name(collection)
        with self._connect() as conn:
            row = conn.execute(f'SELECT payload FROM "{table}" WHERE key = ?', (key,)).fetchone()
        return self._decode(row["payload"]) if row else None

    def _put_record(self, collection: str, key: str, record: Dict[str, Any]) -> None:
        table = validate_table_name(collection)
        with self._connect() as conn:
            conn.execute(
                f'INSERT OR REPLACE INTO "{table}" (key, payload) VALUES (?, ?)',
                (key, json.dumps(record)),
            )

    def _delete_record(self, collection: str, key: str) -> None:
        table = validate_table_name(collection)
        with self._connect() as conn:
            conn.execute(f'DELETE FROM "{table}" WHERE key = ?', (key,))

    def _list_records(self, collection: str) -> List[Dict[str, Any]]:
        table = validate_table_name(collection)
        with self._connect() as conn:
            rows = conn.execute(f'SELECT payload FROM "{table}"').fetchall()
        records = []
        for row in rows:
            record = self._decode(row["payload"])
            if record is not None:
                records.append(record)
        return records

    def _replace_collection(self, collection: str, records: Dict[str, Dict[str, Any]]) -> None:
        table = validate_table_name(collection)
        with self._connect() as conn:
            conn.execute(f'DELETE FROM "{table}"')
            conn.executemany(
                f'INSERT INTO "{table}" (key, payload) VALUES (?, ?)',
                [(key, json.dumps(record)) for key, record in records.items()],
            )

    def _clear_collections(self, collections: Tuple[str, ...]) -> None:
        tables = [validate_table_name(c) for c in collections]
        with self._connect() as conn:
            for table in tables:
                conn.execute(f'DELETE FROM "{table}"')
