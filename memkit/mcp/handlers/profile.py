"""Handlers for Canon and Current State tools."""

import json
from typing import Any, Dict

from memkit.core import MemoryKit
from memkit.mcp.sanitize import sanitize_string

FIELD_MAX_LENGTH = 20000

# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def _optional_fields(arguments: Dict[str, Any], names) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    for name in names:
        if arguments.get(name) is not None:
            sanitized[name] = sanitize_string(
                arguments[name], name, FIELD_MAX_LENGTH, required=False
            )
    if not sanitized:
        raise ValueError(f"at least one of {', '.join(names)} is required")
    return sanitized


def validate_memory_canon_get(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {}


def validate_memory_canon_update(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return _optional_fields(arguments, ("identity_goals", "rules", "preferences", "glossary"))


def validate_memory_current_get(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {}


def validate_memory_current_update(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return _optional_fields(arguments, ("now", "today"))


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def handle_memory_canon_get(args: Dict[str, Any], kit: MemoryKit) -> str:
    return json.dumps(kit.get_canon().to_dict(), indent=2)


def handle_memory_canon_update(args: Dict[str, Any], kit: MemoryKit) -> str:
    kit.update_canon(**args)
    return f"Canon updated: {', '.join(sorted(args))}"


def handle_memory_current_get(args: Dict[str, Any], kit: MemoryKit) -> str:
    return json.dumps(kit.get_current().to_dict(), indent=2)


def handle_memory_current_update(args: Dict[str, Any], kit: MemoryKit) -> str:
    kit.update_current(**args)
    return f"Current state updated: {', '.join(sorted(args))}"


VALIDATORS = {
    "memory_canon_get": validate_memory_canon_get,
    "memory_canon_update": validate_memory_canon_update,
    "memory_current_get": validate_memory_current_get,
    "memory_current_update": validate_memory_current_update,
}

HANDLERS = {
    "memory_canon_get": handle_memory_canon_get,
    "memory_canon_update": handle_memory_canon_update,
    "memory_current_get": handle_memory_current_get,
    "memory_current_update": handle_memory_current_update,
}
