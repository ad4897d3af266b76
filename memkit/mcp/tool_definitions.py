"""MCP tool schema definitions for memkit.

Each Tool() defines the name, description, and JSON Schema for one MCP tool.
Validators and handlers live in memkit.mcp.handlers.
"""

from mcp.types import Tool

from memkit.pack import MODEL_TARGETS, PACK_FORMATS, PRESET_LIMITS
from memkit.types import DELTA_AREAS, DELTA_TYPES

_DELTA_FIELDS = {
    "summary": {
        "type": "string",
        "description": "One-line summary of the change",
    },
    "area": {
        "type": "string",
        "enum": list(DELTA_AREAS),
        "description": "Life/work area (default: Work)",
    },
    "type": {
        "type": "string",
        "enum": list(DELTA_TYPES),
        "description": "Kind of change (default: Update)",
    },
    "details": {
        "type": "string",
        "description": "Longer details; truncated to 240 characters in context packs",
    },
    "tags": {
        "type": "array",
        "items": {"type": "string"},
        "description": "Free-form tags",
    },
    "date": {
        "type": "string",
        "pattern": r"^\d{4}-\d{2}-\d{2}$",
        "description": "Date YYYY-MM-DD (default: today)",
    },
}

TOOLS = [
    Tool(
        name="memory_context_pack",
        description="Build a context pack (Canon + Current State + selected Deltas) to paste at the start of a conversation.",
        inputSchema={
            "type": "object",
            "properties": {
                "format": {
                    "type": "string",
                    "enum": list(PACK_FORMATS),
                    "description": "Output format (default: plaintext)",
                    "default": "plaintext",
                },
                "preset": {
                    "type": "string",
                    "enum": list(PRESET_LIMITS),
                    "description": "quick (no deltas), normal (5 most recent) or deep (10 most recent). Overrides last_n and delta_ids.",
                },
                "last_n": {
                    "type": "integer",
                    "description": "Number of most recent deltas to include (default: 5)",
                    "default": 5,
                    "minimum": 0,
                    "maximum": 100,
                },
                "delta_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Include exactly these deltas instead of the most recent ones",
                },
                "include_canon": {"type": "boolean", "default": True},
                "include_current": {"type": "boolean", "default": True},
                "include_deltas": {"type": "boolean", "default": True},
                "target": {
                    "type": "string",
                    "enum": list(MODEL_TARGETS),
                    "description": "Prefix assistant-specific instructions",
                },
            },
            "additionalProperties": False,
        },
    ),
    Tool(
        name="memory_canon_get",
        description="Read the Canon: identity & goals, rules, preferences, glossary.",
        inputSchema={"type": "object", "properties": {}, "additionalProperties": False},
    ),
    Tool(
        name="memory_canon_update",
        description="Replace one or more Canon fields. Omitted fields are left unchanged.",
        inputSchema={
            "type": "object",
            "properties": {
                "identity_goals": {"type": "string"},
                "rules": {"type": "string"},
                "preferences": {"type": "string"},
                "glossary": {"type": "string"},
            },
            "additionalProperties": False,
        },
    ),
    Tool(
        name="memory_current_get",
        description="Read the Current State snapshot (now, today).",
        inputSchema={"type": "object", "properties": {}, "additionalProperties": False},
    ),
    Tool(
        name="memory_current_update",
        description="Replace Current State fields. Omitted fields are left unchanged.",
        inputSchema={
            "type": "object",
            "properties": {
                "now": {"type": "string", "description": "What is happening now"},
                "today": {"type": "string", "description": "Today's focus"},
            },
            "additionalProperties": False,
        },
    ),
    Tool(
        name="memory_delta_list",
        description="List Deltas newest first, optionally filtered.",
        inputSchema={
            "type": "object",
            "properties": {
                "area": _DELTA_FIELDS["area"],
                "type": _DELTA_FIELDS["type"],
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Only deltas carrying all of these tags",
                },
                "search": {"type": "string", "description": "Text in summary or details"},
                "start": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}$"},
                "end": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}$"},
                "limit": {
                    "type": "integer",
                    "default": 20,
                    "minimum": 1,
                    "maximum": 500,
                },
            },
            "additionalProperties": False,
        },
    ),
    Tool(
        name="memory_delta_add",
        description="Record a Delta: a dated change, decision, insight or milestone.",
        inputSchema={
            "type": "object",
            "properties": dict(_DELTA_FIELDS),
            "required": ["summary"],
            "additionalProperties": False,
        },
    ),
    Tool(
        name="memory_delta_delete",
        description="Delete a Delta by id. Deleting an unknown id is not an error.",
        inputSchema={
            "type": "object",
            "properties": {"id": {"type": "string"}},
            "required": ["id"],
            "additionalProperties": False,
        },
    ),
]
