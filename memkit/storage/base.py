"""Storage interface for memkit backends.

Every backend stores four logical collections of JSON-compatible
records:

- ``canon``: one record under key ``"canon"``
- ``current``: one record under key ``"current"``
- ``deltas``: one record per delta, keyed by the delta's ``id``
- ``meta``: flags keyed by name (currently ``onboardingSeen``)

Backends implement the raw record primitives; this base class builds the
typed API on top of them and owns the failure policy: reads that fail
degrade to defaults, writes that fail are logged and otherwise ignored.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from memkit.logging_config import log_bulk, log_delete, log_save
from memkit.types import (
    CANON_ID,
    CURRENT_ID,
    Canon,
    CurrentState,
    Delta,
    now_ms,
)

logger = logging.getLogger(__name__)

COLLECTION_CANON = "canon"
COLLECTION_CURRENT = "current"
COLLECTION_DELTAS = "deltas"
COLLECTION_META = "meta"
COLLECTIONS = (COLLECTION_CANON, COLLECTION_CURRENT, COLLECTION_DELTAS, COLLECTION_META)

META_ONBOARDING = "onboardingSeen"


class Storage(ABC):
    """Uniform CRUD surface over canon, current, deltas and meta."""

    #: Short name used in logs and status output.
    backend_name: str = "abstract"

    #: Exceptions that count as "backend failure" for this backend.
    storage_errors: Tuple[Type[BaseException], ...] = (OSError, ValueError, TypeError)

    # === Backend primitives ===

    @abstractmethod
    def _get_record(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored record or None."""

    @abstractmethod
    def _put_record(self, collection: str, key: str, record: Dict[str, Any]) -> None:
        """Insert or replace one record."""

    @abstractmethod
    def _delete_record(self, collection: str, key: str) -> None:
        """Remove one record; absent keys are not an error."""

    @abstractmethod
    def _list_records(self, collection: str) -> List[Dict[str, Any]]:
        """Return every record in a collection."""

    @abstractmethod
    def _replace_collection(self, collection: str, records: Dict[str, Dict[str, Any]]) -> None:
        """Clear a collection and store ``records`` (key -> record)."""

    @abstractmethod
    def _clear_collections(self, collections: Tuple[str, ...]) -> None:
        """Remove every record from the given collections."""

    def close(self) -> None:
        """Release resources. Backends without persistent handles do nothing."""

    # === Failure policy ===

    def _read(self, what: str, fn: Callable[[], Any], default: Any) -> Any:
        try:
            return fn()
        except self.storage_errors as e:
            logger.warning(f"[{self.backend_name}] Failed to read {what}: {e}")
            return default

    def _write(self, what: str, fn: Callable[[], None]) -> bool:
        try:
            fn()
            return True
        except self.storage_errors as e:
            logger.warning(f"[{self.backend_name}] Failed to write {what}: {e}")
            return False

    # === Canon ===

    def get_canon(self) -> Canon:
        """Stored canon, or the empty default. Never raises."""
        record = self._read(
            "canon", lambda: self._get_record(COLLECTION_CANON, CANON_ID), None
        )
        if not isinstance(record, dict):
            return Canon()
        return Canon.from_dict(record)

    def save_canon(self, canon: Canon) -> Canon:
        """Stamp ``updated_at`` and persist. Returns the stamped record."""
        stamped = replace(canon, id=CANON_ID, updated_at=now_ms())
        self.put_canon(stamped)
        return stamped

    def put_canon(self, canon: Canon) -> None:
        """Persist canon exactly as given (no restamp)."""
        if self._write(
            "canon", lambda: self._put_record(COLLECTION_CANON, CANON_ID, canon.to_dict())
        ):
            log_save(self.backend_name, "canon", CANON_ID)

    # === Current state ===

    def get_current(self) -> CurrentState:
        """Stored current state, or the empty default. Never raises."""
        record = self._read(
            "current", lambda: self._get_record(COLLECTION_CURRENT, CURRENT_ID), None
        )
        if not isinstance(record, dict):
            return CurrentState()
        return CurrentState.from_dict(record)

    def save_current(self, current: CurrentState) -> CurrentState:
        stamped = replace(current, id=CURRENT_ID, updated_at=now_ms())
        self.put_current(stamped)
        return stamped

    def put_current(self, current: CurrentState) -> None:
        if self._write(
            "current",
            lambda: self._put_record(COLLECTION_CURRENT, CURRENT_ID, current.to_dict()),
        ):
            log_save(self.backend_name, "current", CURRENT_ID)

    # === Deltas ===

    def list_deltas(self) -> List[Delta]:
        """All stored deltas, in no particular order."""
        records = self._read("deltas", lambda: self._list_records(COLLECTION_DELTAS), [])
        deltas = []
        for record in records:
            if not isinstance(record, dict) or not isinstance(record.get("id"), str):
                logger.warning(f"[{self.backend_name}] Skipping malformed delta record")
                continue
            deltas.append(Delta.from_dict(record))
        return deltas

    def get_delta(self, delta_id: str) -> Optional[Delta]:
        record = self._read(
            f"delta {delta_id}", lambda: self._get_record(COLLECTION_DELTAS, delta_id), None
        )
        if not isinstance(record, dict) or not isinstance(record.get("id"), str):
            return None
        return Delta.from_dict(record)

    def save_delta(self, delta: Delta) -> Delta:
        """Upsert by id. The summary is not re-validated here."""
        if self._write(
            f"delta {delta.id}",
            lambda: self._put_record(COLLECTION_DELTAS, delta.id, delta.to_dict()),
        ):
            log_save(self.backend_name, "delta", delta.id, delta.summary)
        return delta

    def delete_delta(self, delta_id: str) -> None:
        """Remove by id; absent ids are a no-op."""
        if self._write(
            f"delta {delta_id}", lambda: self._delete_record(COLLECTION_DELTAS, delta_id)
        ):
            log_delete(self.backend_name, "delta", delta_id)

    def replace_deltas(self, deltas: List[Delta]) -> None:
        """Replace the whole delta collection.

        Repeated ids collapse to the last occurrence, as a keyed put would.
        """
        records = {d.id: d.to_dict() for d in deltas}
        if self._write("deltas", lambda: self._replace_collection(COLLECTION_DELTAS, records)):
            log_bulk(self.backend_name, "replace_deltas", len(records))

    # === Meta ===

    def get_onboarding_seen(self) -> bool:
        record = self._read(
            "meta", lambda: self._get_record(COLLECTION_META, META_ONBOARDING), None
        )
        if not isinstance(record, dict):
            return False
        return bool(record.get("value"))

    def set_onboarding_seen(self, value: bool) -> None:
        record = {"key": META_ONBOARDING, "value": bool(value)}
        self._write("meta", lambda: self._put_record(COLLECTION_META, META_ONBOARDING, record))

    # === Reset ===

    def reset_all(self) -> None:
        """Clear all four collections unconditionally."""
        if self._write("all collections", lambda: self._clear_collections(COLLECTIONS)):
            log_bulk(self.backend_name, "reset", 0)
