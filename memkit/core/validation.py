"""Validation for memkit inputs.

Two families live here:

- Import validation: ``validate_data`` checks an externally supplied
  payload (already JSON-decoded) against the MemoryData shape and
  collects every problem; ``normalize_data`` turns a valid payload into
  a ``MemoryData``.
- Editing-boundary sanitizers (``sanitize_string``, ``validate_enum``,
  ``sanitize_tags``) shared by the facade, CLI and MCP layers. These
  raise ``ValueError``.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from memkit.types import (
    CANON_ID,
    CURRENT_ID,
    DELTA_AREAS,
    DELTA_TYPES,
    Canon,
    CurrentState,
    Delta,
    MemoryData,
    clean_tags,
    now_ms,
)

logger = logging.getLogger(__name__)

CANON_FIELDS = ("identityGoals", "rules", "preferences", "glossary")
CURRENT_FIELDS = ("now", "today")
DELTA_STRING_FIELDS = ("id", "dateISO", "summary", "details")


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _is_missing(value: Any) -> bool:
    # Empty objects and arrays are present; null and falsy scalars are not
    if isinstance(value, (dict, list)):
        return False
    return not value


def _delta_errors(index: int, value: Any) -> List[str]:
    prefix = f"Deltas[{index}]"
    if not isinstance(value, dict):
        return [f"{prefix} must be an object"]

    errors = []
    for name in DELTA_STRING_FIELDS:
        if not _is_str(value.get(name)):
            errors.append(f"{prefix}.{name} must be a string")
    if value.get("area") not in DELTA_AREAS:
        errors.append(f"{prefix}.area must be one of {', '.join(DELTA_AREAS)}")
    if value.get("type") not in DELTA_TYPES:
        errors.append(f"{prefix}.type must be one of {', '.join(DELTA_TYPES)}")
    tags = value.get("tags")
    if not isinstance(tags, list) or not all(_is_str(t) for t in tags):
        errors.append(f"{prefix}.tags must be an array of strings")
    return errors


def validate_data(payload: Any) -> ValidationResult:
    """Check a decoded import payload. Shallow; collects all errors.

    No date-format or id-uniqueness checks are made.
    """
    if not isinstance(payload, dict):
        return ValidationResult(valid=False, errors=["Payload is not an object"])

    errors: List[str] = []

    canon = payload.get("canon")
    if _is_missing(canon):
        errors.append("Missing canon")
    elif not isinstance(canon, dict):
        errors.append("Canon must be an object")
    else:
        for name in CANON_FIELDS:
            if not _is_str(canon.get(name)):
                errors.append(f"Canon.{name} must be a string")

    current = payload.get("current")
    if _is_missing(current):
        errors.append("Missing current")
    elif not isinstance(current, dict):
        errors.append("Current must be an object")
    else:
        for name in CURRENT_FIELDS:
            if not _is_str(current.get(name)):
                errors.append(f"Current.{name} must be a string")

    deltas = payload.get("deltas")
    if not isinstance(deltas, list):
        errors.append("Deltas must be an array")
    else:
        for index, item in enumerate(deltas):
            errors.extend(_delta_errors(index, item))

    return ValidationResult(valid=not errors, errors=errors)


def normalize_data(payload: Dict[str, Any]) -> MemoryData:
    """Turn an already-validated payload into MemoryData.

    Forces singleton ids, backfills a missing ``updatedAt`` with the
    current time and defaults missing ``tags`` to an empty list. Total:
    assumes ``validate_data`` passed.
    """
    stamp = now_ms()

    canon_raw = dict(payload.get("canon") or {})
    canon_raw["id"] = CANON_ID
    canon = Canon.from_dict(canon_raw)
    if not canon.updated_at:
        canon.updated_at = stamp

    current_raw = dict(payload.get("current") or {})
    current_raw["id"] = CURRENT_ID
    current = CurrentState.from_dict(current_raw)
    if not current.updated_at:
        current.updated_at = stamp

    deltas = []
    for item in payload.get("deltas") or []:
        item = dict(item)
        if item.get("tags") is None:
            item["tags"] = []
        deltas.append(Delta.from_dict(item))

    return MemoryData(canon=canon, current=current, deltas=deltas)


# === Editing-boundary sanitizers ===


def sanitize_string(
    value: Any, field_name: str, max_length: int = 1000, required: bool = True
) -> str:
    """Validate a string input and strip control characters.

    Args:
        value: The value to sanitize.
        field_name: Name of the field for error messages.
        max_length: Maximum allowed string length.
        required: If True, blank strings are rejected.

    Raises:
        ValueError: If validation fails.
    """
    if value is None and not required:
        return ""

    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string, got {type(value).__name__}")

    if required and not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    if len(value) > max_length:
        raise ValueError(f"{field_name} too long (max {max_length} characters, got {len(value)})")

    # Remove null bytes and control characters except newlines and tabs
    return re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)


def validate_enum(
    value: Any,
    field_name: str,
    valid_values: Sequence[str],
    default: Optional[str] = None,
) -> str:
    """Validate a closed-set value, returning ``default`` for None."""
    if value is None:
        if default is not None:
            return default
        raise ValueError(f"{field_name} is required")
    if value not in valid_values:
        raise ValueError(f"{field_name} must be one of {', '.join(valid_values)}, got {value!r}")
    return value


def sanitize_tags(value: Any, field_name: str = "tags", max_items: int = 50) -> List[str]:
    """Validate a tag list; blanks and repeats are dropped."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be an array, got {type(value).__name__}")
    if len(value) > max_items:
        raise ValueError(f"{field_name} too many items (max {max_items}, got {len(value)})")
    sanitized = [
        sanitize_string(tag, f"{field_name}[{i}]", 100, required=False)
        for i, tag in enumerate(value)
    ]
    return clean_tags(sanitized)
