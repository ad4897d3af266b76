"""MemoryKit class: main interface for memkit operations."""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from memkit.core.bulk import BulkMixin
from memkit.core.filters import DeltaFilter, filter_deltas
from memkit.core.validation import sanitize_string, sanitize_tags, validate_enum
from memkit.importers.json_importer import MODE_MERGE, JsonImporter, load_sample_data
from memkit.pack import (
    FORMAT_PLAINTEXT,
    build_context_pack,
    build_markdown_bundle,
    preset_deltas,
    select_deltas,
    wrap_for_model,
)
from memkit.storage import open_storage
from memkit.types import DELTA_AREAS, DELTA_TYPES, Canon, CurrentState, Delta

if TYPE_CHECKING:
    from memkit.storage import Storage

logger = logging.getLogger(__name__)

DEFAULT_JSON_EXPORT = "portable-ai-memory-kit.json"
DEFAULT_MARKDOWN_EXPORT = "portable-ai-memory-kit.md"

CANON_FIELDS = ("identity_goals", "rules", "preferences", "glossary")
CURRENT_FIELDS = ("now", "today")

SUMMARY_MAX_CHARS = 500
DETAILS_MAX_CHARS = 10000
FIELD_MAX_CHARS = 20000


class MemoryKit(BulkMixin):
    """Canon, current state and delta log over one storage backend.

    Examples:
        kit = MemoryKit()                       # backend picked from environment
        kit = MemoryKit(data_dir=path, backend="flat")
        kit.add_delta("Shipped v1", area="Work", type="Milestone")
        print(kit.context_pack(preset="normal"))
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        storage: Optional["Storage"] = None,
        backend: Optional[str] = None,
    ):
        """Initialize MemoryKit.

        Args:
            data_dir: Data directory (default: MEMKIT_DATA_DIR or ~/.memkit)
            storage: Storage instance to use instead of opening one
            backend: "auto", "sqlite" or "flat" (default: MEMKIT_BACKEND)
        """
        if storage is not None:
            self._storage = storage
        else:
            self._storage = open_storage(data_dir, backend)
        logger.debug(f"MemoryKit initialized with storage: {type(self._storage).__name__}")

    @property
    def storage(self) -> "Storage":
        return self._storage

    @property
    def backend_name(self) -> str:
        return self._storage.backend_name

    def close(self) -> None:
        self._storage.close()

    # === Singletons ===

    def get_canon(self) -> Canon:
        return self._storage.get_canon()

    def save_canon(self, canon: Canon) -> Canon:
        return self._storage.save_canon(canon)

    def update_canon(self, **fields: str) -> Canon:
        """Replace the given canon fields and save."""
        changes = self._field_changes(fields, CANON_FIELDS, "canon")
        return self._storage.save_canon(replace(self._storage.get_canon(), **changes))

    def get_current(self) -> CurrentState:
        return self._storage.get_current()

    def save_current(self, current: CurrentState) -> CurrentState:
        return self._storage.save_current(current)

    def update_current(self, **fields: str) -> CurrentState:
        """Replace the given current-state fields and save."""
        changes = self._field_changes(fields, CURRENT_FIELDS, "current")
        return self._storage.save_current(replace(self._storage.get_current(), **changes))

    def _field_changes(self, fields: Dict[str, Any], allowed, record: str) -> Dict[str, str]:
        unknown = sorted(set(fields) - set(allowed))
        if unknown:
            raise ValueError(f"Unknown {record} field(s): {', '.join(unknown)}")
        return {
            name: sanitize_string(value, name, FIELD_MAX_CHARS, required=False)
            for name, value in fields.items()
            if value is not None
        }

    # === Deltas ===

    def list_deltas(self) -> List[Delta]:
        return self._storage.list_deltas()

    def filter_deltas(self, flt: Optional[DeltaFilter] = None) -> List[Delta]:
        """Stored deltas matching ``flt``, newest first."""
        return filter_deltas(self._storage.list_deltas(), flt)

    def get_delta(self, delta_id: str) -> Optional[Delta]:
        return self._storage.get_delta(delta_id)

    def save_delta(self, delta: Delta) -> Delta:
        """Store as given. Use add_delta/update_delta for checked edits."""
        return self._storage.save_delta(delta)

    def delete_delta(self, delta_id: str) -> None:
        self._storage.delete_delta(delta_id)

    def add_delta(
        self,
        summary: str,
        area: str = "Work",
        type: str = "Update",
        details: str = "",
        tags: Optional[List[str]] = None,
        date_iso: Optional[str] = None,
    ) -> Delta:
        """Create a delta. Blank summaries are rejected."""
        delta = Delta.new(date_iso=date_iso)
        return self._storage.save_delta(
            self._checked_delta(
                delta,
                summary=summary,
                area=area,
                type=type,
                details=details,
                tags=tags,
                date_iso=delta.date_iso,
            )
        )

    def update_delta(self, delta_id: str, **changes: Any) -> Delta:
        """Edit an existing delta in place.

        Raises:
            KeyError: If no delta has this id
            ValueError: If the edit leaves the delta invalid
        """
        existing = self._storage.get_delta(delta_id)
        if existing is None:
            raise KeyError(f"Delta not found: {delta_id}")
        allowed = {"summary", "area", "type", "details", "tags", "date_iso"}
        unknown = sorted(set(changes) - allowed)
        if unknown:
            raise ValueError(f"Unknown delta field(s): {', '.join(unknown)}")
        return self._storage.save_delta(self._checked_delta(existing, **changes))

    def _checked_delta(self, delta: Delta, **changes: Any) -> Delta:
        """Apply ``changes`` to ``delta``, checking only the changed fields.

        The summary is always checked; imported values in untouched
        fields are kept as they are.
        """
        changes = {k: v for k, v in changes.items() if v is not None}
        checked: Dict[str, Any] = {
            "summary": sanitize_string(
                changes.get("summary", delta.summary), "summary", SUMMARY_MAX_CHARS
            ).strip(),
        }
        if "area" in changes:
            checked["area"] = validate_enum(changes["area"], "area", DELTA_AREAS)
        if "type" in changes:
            checked["type"] = validate_enum(changes["type"], "type", DELTA_TYPES)
        if "details" in changes:
            checked["details"] = sanitize_string(
                changes["details"], "details", DETAILS_MAX_CHARS, required=False
            )
        if "tags" in changes:
            checked["tags"] = sanitize_tags(list(changes["tags"]))
        if "date_iso" in changes:
            checked["date_iso"] = sanitize_string(changes["date_iso"], "date", 10)
        return replace(delta, **checked)

    # === Onboarding / reset ===

    def get_onboarding_seen(self) -> bool:
        return self._storage.get_onboarding_seen()

    def set_onboarding_seen(self, value: bool = True) -> None:
        self._storage.set_onboarding_seen(value)

    def reset_all(self) -> None:
        logger.info("Resetting all data")
        self._storage.reset_all()

    # === Context pack ===

    def context_pack(
        self,
        format: str = FORMAT_PLAINTEXT,
        preset: Optional[str] = None,
        last_n: int = 5,
        selected_ids: Optional[Iterable[str]] = None,
        include_canon: bool = True,
        include_current: bool = True,
        include_deltas: bool = True,
        wrap: Optional[str] = None,
    ) -> str:
        """Render a context pack from stored data.

        Args:
            format: "plaintext" or "markdown"
            preset: "quick", "normal" or "deep"; overrides last_n/selected_ids
            last_n: How many recent deltas to include
            selected_ids: Explicit delta ids (newest first in the output)
            include_canon: Render canon values (else empty)
            include_current: Render current-state values (else empty)
            include_deltas: Include any deltas at all
            wrap: Optional model target ("chatgpt", "claude", "gemini")
        """
        deltas = self._storage.list_deltas()
        if not include_deltas:
            selected: List[Delta] = []
        elif preset:
            selected = preset_deltas(deltas, preset)
        else:
            selected = select_deltas(deltas, last_n=last_n, selected_ids=selected_ids)

        content = build_context_pack(
            self._storage.get_canon() if include_canon else None,
            self._storage.get_current() if include_current else None,
            selected,
            format,
        )
        return wrap_for_model(wrap, content) if wrap else content

    # === Files ===

    def export_json(self, path: Optional[Path] = None) -> Path:
        """Write all data as pretty-printed JSON."""
        target = Path(path) if path else Path(DEFAULT_JSON_EXPORT)
        target.write_text(json.dumps(self.export_all().to_dict(), indent=2), encoding="utf-8")
        logger.info(f"Exported JSON to {target}")
        return target

    def export_markdown(self, path: Optional[Path] = None) -> Path:
        """Write the markdown bundle (five most recent deltas)."""
        target = Path(path) if path else Path(DEFAULT_MARKDOWN_EXPORT)
        target.write_text(build_markdown_bundle(self.export_all()), encoding="utf-8")
        logger.info(f"Exported markdown bundle to {target}")
        return target

    def import_file(self, path: Path, mode: str = MODE_MERGE, dry_run: bool = False) -> Dict[str, Any]:
        """Import a JSON export. See ``JsonImporter.import_to``."""
        return JsonImporter(str(path), mode=mode).import_to(self, dry_run=dry_run)

    def load_sample(self) -> None:
        """Overwrite everything with the bundled sample data."""
        self.replace_all(load_sample_data())
