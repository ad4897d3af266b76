"""Whole-dataset operations: export, replace and merge.

Merging uses two different collision policies on purpose:

- singletons (canon, current) merge with ``overlay_wins``: incoming
  fields replace existing ones
- deltas merge with ``keep_existing_wins``: an incoming delta whose id
  already exists is dropped, the local entry is kept untouched

None of these operations are atomic across collections.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List

from memkit.logging_config import log_bulk
from memkit.types import Canon, CurrentState, Delta, MemoryData, now_ms

if TYPE_CHECKING:
    from memkit.storage import Storage

logger = logging.getLogger(__name__)


def overlay_wins(existing: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow overlay: incoming fields that are present (not None) win."""
    merged = dict(existing)
    merged.update({key: value for key, value in incoming.items() if value is not None})
    return merged


def keep_existing_wins(existing: List[Delta], incoming: List[Delta]) -> List[Delta]:
    """Union by id. Existing entries are kept; incoming ids already seen are dropped."""
    seen = {d.id for d in existing}
    merged = list(existing)
    for delta in incoming:
        if delta.id in seen:
            continue
        seen.add(delta.id)
        merged.append(delta)
    return merged


class BulkMixin:
    """Export/replace/merge over ``self._storage``."""

    _storage: "Storage"

    def export_all(self) -> MemoryData:
        """Snapshot of canon, current and all deltas."""
        return MemoryData(
            canon=self._storage.get_canon(),
            current=self._storage.get_current(),
            deltas=self._storage.list_deltas(),
        )

    def replace_all(self, data: MemoryData) -> None:
        """Overwrite everything with ``data``. Deltas not in ``data`` are discarded."""
        self._storage.put_canon(data.canon)
        self._storage.put_current(data.current)
        self._storage.replace_deltas(data.deltas)
        logger.info(f"Replaced all data ({len(data.deltas)} deltas)")
        log_bulk(self._storage.backend_name, "replace_all", len(data.deltas))

    def merge_all(self, data: MemoryData) -> MemoryData:
        """Merge ``data`` into what is stored and persist the result.

        Returns:
            The merged MemoryData that was written
        """
        existing = self.export_all()
        stamp = now_ms()

        canon = Canon.from_dict(overlay_wins(existing.canon.to_dict(), data.canon.to_dict()))
        canon.updated_at = stamp
        current = CurrentState.from_dict(
            overlay_wins(existing.current.to_dict(), data.current.to_dict())
        )
        current.updated_at = stamp
        deltas = keep_existing_wins(existing.deltas, data.deltas)

        dropped = len(existing.deltas) + len(data.deltas) - len(deltas)
        if dropped:
            logger.info(f"Merge kept local copies for {dropped} colliding delta id(s)")

        merged = MemoryData(canon=canon, current=current, deltas=deltas)
        self.replace_all(merged)
        return merged
