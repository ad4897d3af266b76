"""Handlers for the context pack and Delta tools."""

import json
from typing import Any, Dict

from memkit.core import DeltaFilter, MemoryKit
from memkit.mcp.sanitize import (
    sanitize_string,
    sanitize_tags,
    validate_bool,
    validate_enum,
    validate_number,
)
from memkit.pack import MODEL_TARGETS, PACK_FORMATS, PRESET_LIMITS
from memkit.types import DELTA_AREAS, DELTA_TYPES

# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def _optional_enum(arguments: Dict[str, Any], name: str, values) -> Any:
    value = arguments.get(name)
    if value is None:
        return None
    return validate_enum(value, name, values)


def validate_memory_context_pack(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["format"] = validate_enum(
        arguments.get("format"), "format", PACK_FORMATS, "plaintext"
    )
    sanitized["preset"] = _optional_enum(arguments, "preset", list(PRESET_LIMITS))
    sanitized["last_n"] = int(validate_number(arguments.get("last_n"), "last_n", 0, 100, 5))
    sanitized["selected_ids"] = sanitize_tags(arguments.get("delta_ids"), "delta_ids", 100) or None
    sanitized["include_canon"] = validate_bool(arguments.get("include_canon"), "include_canon", True)
    sanitized["include_current"] = validate_bool(
        arguments.get("include_current"), "include_current", True
    )
    sanitized["include_deltas"] = validate_bool(
        arguments.get("include_deltas"), "include_deltas", True
    )
    sanitized["wrap"] = _optional_enum(arguments, "target", MODEL_TARGETS)
    return sanitized


def validate_memory_delta_list(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["area"] = _optional_enum(arguments, "area", DELTA_AREAS)
    sanitized["type"] = _optional_enum(arguments, "type", DELTA_TYPES)
    sanitized["tags"] = sanitize_tags(arguments.get("tags"))
    sanitized["search"] = sanitize_string(arguments.get("search"), "search", 500, required=False)
    sanitized["start"] = sanitize_string(arguments.get("start"), "start", 10, required=False) or None
    sanitized["end"] = sanitize_string(arguments.get("end"), "end", 10, required=False) or None
    sanitized["limit"] = int(validate_number(arguments.get("limit"), "limit", 1, 500, 20))
    return sanitized


def validate_memory_delta_add(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["summary"] = sanitize_string(arguments.get("summary"), "summary", 500, required=True)
    sanitized["area"] = validate_enum(arguments.get("area"), "area", DELTA_AREAS, "Work")
    sanitized["type"] = validate_enum(arguments.get("type"), "type", DELTA_TYPES, "Update")
    sanitized["details"] = sanitize_string(
        arguments.get("details"), "details", 10000, required=False
    )
    sanitized["tags"] = sanitize_tags(arguments.get("tags"))
    sanitized["date_iso"] = sanitize_string(arguments.get("date"), "date", 10, required=False) or None
    return sanitized


def validate_memory_delta_delete(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": sanitize_string(arguments.get("id"), "id", 100, required=True)}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def handle_memory_context_pack(args: Dict[str, Any], kit: MemoryKit) -> str:
    return kit.context_pack(**args)


def handle_memory_delta_list(args: Dict[str, Any], kit: MemoryKit) -> str:
    limit = args.pop("limit", 20)
    deltas = kit.filter_deltas(DeltaFilter(**args))[:limit]
    if not deltas:
        return "No deltas found."
    return json.dumps([d.to_dict() for d in deltas], indent=2)


def handle_memory_delta_add(args: Dict[str, Any], kit: MemoryKit) -> str:
    delta = kit.add_delta(**args)
    return f"Delta saved: {delta.id[:8]}... ({delta.date_iso} {delta.area} {delta.type})"


def handle_memory_delta_delete(args: Dict[str, Any], kit: MemoryKit) -> str:
    existed = kit.get_delta(args["id"]) is not None
    kit.delete_delta(args["id"])
    if existed:
        return f"Delta deleted: {args['id'][:8]}..."
    return f"No delta with id {args['id'][:8]}... (nothing deleted)"


VALIDATORS = {
    "memory_context_pack": validate_memory_context_pack,
    "memory_delta_list": validate_memory_delta_list,
    "memory_delta_add": validate_memory_delta_add,
    "memory_delta_delete": validate_memory_delta_delete,
}

HANDLERS = {
    "memory_context_pack": handle_memory_context_pack,
    "memory_delta_list": handle_memory_delta_list,
    "memory_delta_add": handle_memory_delta_add,
    "memory_delta_delete": handle_memory_delta_delete,
}
