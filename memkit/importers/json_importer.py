"""JSON importer for memkit.

Imports the JSON format written by ``memkit export json`` (and by the
original browser tool):

    {
        "canon": {"identityGoals": "...", "rules": "...", ...},
        "current": {"now": "...", "today": "...", ...},
        "deltas": [{"id": "...", "dateISO": "2024-05-01", ...}, ...]
    }

A payload that fails validation is rejected as a whole; nothing is
written.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

from memkit.core.validation import normalize_data, validate_data
from memkit.errors import ImportValidationError
from memkit.types import MemoryData

if TYPE_CHECKING:
    from memkit.core import MemoryKit

logger = logging.getLogger(__name__)

MODE_MERGE = "merge"
MODE_REPLACE = "replace"
IMPORT_MODES = (MODE_MERGE, MODE_REPLACE)

INVALID_JSON_MESSAGE = "invalid JSON file"

SAMPLE_PACKAGE = "memkit.data"
SAMPLE_RESOURCE = "sample.json"


def parse_memory_json(content: str) -> Any:
    """Decode JSON text.

    Raises:
        ValueError: With the single message ``invalid JSON file``
    """
    try:
        return json.loads(content)
    except (json.JSONDecodeError, TypeError) as e:
        logger.debug(f"Import content is not JSON: {e}")
        raise ValueError(INVALID_JSON_MESSAGE) from e


def load_payload(payload: Any) -> MemoryData:
    """Validate and normalize a decoded payload.

    Raises:
        ImportValidationError: Carrying every validation message
    """
    result = validate_data(payload)
    if not result.valid:
        raise ImportValidationError(result.errors)
    return normalize_data(payload)


def load_sample_data() -> MemoryData:
    """The bundled sample dataset, normalized."""
    content = resources.files(SAMPLE_PACKAGE).joinpath(SAMPLE_RESOURCE).read_text(encoding="utf-8")
    return load_payload(parse_memory_json(content))


class JsonImporter:
    """Import a MemoryData JSON file into a MemoryKit."""

    def __init__(self, file_path: str, mode: str = MODE_MERGE):
        """Initialize with path to JSON file.

        Args:
            file_path: Path to the JSON file to import
            mode: "merge" to merge into existing data, "replace" to overwrite it
        """
        if mode not in IMPORT_MODES:
            raise ValueError(f"mode must be one of {', '.join(IMPORT_MODES)}, got {mode!r}")
        self.file_path = Path(file_path).expanduser()
        self.mode = mode
        self.payload: Optional[Any] = None

    def parse(self) -> Any:
        """Read and decode the file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not valid JSON
        """
        if not self.file_path.exists():
            raise FileNotFoundError(f"File not found: {self.file_path}")
        try:
            content = self.file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(INVALID_JSON_MESSAGE) from e
        self.payload = parse_memory_json(content)
        return self.payload

    def import_to(self, kit: "MemoryKit", dry_run: bool = False) -> Dict[str, Any]:
        """Validate, normalize and apply the file.

        Args:
            kit: MemoryKit to import into
            dry_run: If True, validate only

        Returns:
            Dict with ``valid``, ``errors``, ``mode``, ``applied`` and
            ``counts`` (incoming deltas, deltas stored afterwards)
        """
        result: Dict[str, Any] = {
            "valid": False,
            "errors": [],
            "mode": self.mode,
            "applied": False,
            "counts": {"incoming": 0, "stored": 0},
        }

        try:
            payload = self.parse() if self.payload is None else self.payload
        except ValueError as e:
            result["errors"] = [str(e)]
            return result

        try:
            data = load_payload(payload)
        except ImportValidationError as e:
            logger.warning(f"Import of {self.file_path.name} rejected: {len(e.errors)} error(s)")
            result["errors"] = e.errors
            return result

        result["valid"] = True
        result["counts"]["incoming"] = len(data.deltas)
        if dry_run:
            return result

        if self.mode == MODE_MERGE:
            merged = kit.merge_all(data)
            result["counts"]["stored"] = len(merged.deltas)
        else:
            kit.replace_all(data)
            result["counts"]["stored"] = len({d.id for d in data.deltas})
        result["applied"] = True
        logger.info(f"Imported {self.file_path.name} ({self.mode})")
        return result
