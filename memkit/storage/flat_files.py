"""Flat key-value storage backend for memkit.

The fallback used when SQLite is unavailable. Each logical collection is
serialized whole as one JSON blob under a fixed key, one file per key:

    memkit-canon.json     the canon record
    memkit-current.json   the current-state record
    memkit-deltas.json    array of delta records
    memkit-meta.json      object of flag name -> value

Every write rewrites the whole blob through a temp file and
``os.replace``. A blob that cannot be decoded reads as absent.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .base import (
    COLLECTION_CANON,
    COLLECTION_CURRENT,
    COLLECTION_DELTAS,
    COLLECTION_META,
    Storage,
)

logger = logging.getLogger(__name__)

BLOB_KEYS = {
    COLLECTION_CANON: "memkit-canon",
    COLLECTION_CURRENT: "memkit-current",
    COLLECTION_DELTAS: "memkit-deltas",
    COLLECTION_META: "memkit-meta",
}

# Collections stored as a single record rather than a keyed set
_SINGLETONS = (COLLECTION_CANON, COLLECTION_CURRENT)


class FlatFileStorage(Storage):
    """One JSON file per collection under ``data_dir``."""

    backend_name = "flat"

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            # Reads see no blobs and writes fail through Storage._write
            logger.warning(f"Cannot create data directory {self.data_dir}: {e}")

    def blob_path(self, collection: str) -> Path:
        if collection not in BLOB_KEYS:
            raise ValueError(f"Unknown collection: {collection}")
        return self.data_dir / f"{BLOB_KEYS[collection]}.json"

    # === Blob I/O ===

    def _load_blob(self, collection: str) -> Any:
        path = self.blob_path(collection)
        if not path.exists():
            return None
        raw = path.read_text(encoding="utf-8")
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable blob {path.name}: {e}")
            return None

    def _save_blob(self, collection: str, value: Any) -> None:
        path = self.blob_path(collection)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=self.data_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _remove_blob(self, collection: str) -> None:
        path = self.blob_path(collection)
        if path.exists():
            path.unlink()

    def _keyed(self, collection: str) -> Dict[str, Dict[str, Any]]:
        """Load a keyed collection as key -> record."""
        blob = self._load_blob(collection)
        if collection == COLLECTION_META:
            if not isinstance(blob, dict):
                return {}
            return {key: {"key": key, "value": value} for key, value in blob.items()}
        if not isinstance(blob, list):
            return {}
        records: Dict[str, Dict[str, Any]] = {}
        for item in blob:
            if isinstance(item, dict) and isinstance(item.get("id"), str):
                records[item["id"]] = item
        return records

    def _store_keyed(self, collection: str, records: Dict[str, Dict[str, Any]]) -> None:
        if collection == COLLECTION_META:
            self._save_blob(collection, {key: r.get("value") for key, r in records.items()})
        else:
            self._save_blob(collection, list(records.values()))

    # === Primitives ===

    def _get_record(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        if collection in _SINGLETONS:
            blob = self._load_blob(collection)
            return blob if isinstance(blob, dict) else None
        return self._keyed(collection).get(key)

    def _put_record(self, collection: str, key: str, record: Dict[str, Any]) -> None:
        if collection in _SINGLETONS:
            self._save_blob(collection, record)
            return
        records = self._keyed(collection)
        # Existing keys are replaced in place, new keys appended
        records[key] = record
        self._store_keyed(collection, records)

    def _delete_record(self, collection: str, key: str) -> None:
        if collection in _SINGLETONS:
            self._remove_blob(collection)
            return
        records = self._keyed(collection)
        if key in records:
            del records[key]
            self._store_keyed(collection, records)

    def _list_records(self, collection: str) -> List[Dict[str, Any]]:
        if collection in _SINGLETONS:
            blob = self._load_blob(collection)
            return [blob] if isinstance(blob, dict) else []
        return list(self._keyed(collection).values())

    def _replace_collection(self, collection: str, records: Dict[str, Dict[str, Any]]) -> None:
        if collection in _SINGLETONS:
            raise ValueError(f"Cannot replace singleton collection: {collection}")
        self._store_keyed(collection, records)

    def _clear_collections(self, collections: Tuple[str, ...]) -> None:
        for collection in collections:
            self._remove_blob(collection)
