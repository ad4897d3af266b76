"""
memkit MCP Server - memory operations for MCP clients.

Exposes Canon, Current State, Deltas and context packs as MCP tools so
an assistant can read and update the user's portable memory directly.

Every call is checked twice: against the tool's JSON Schema (jsonschema
Draft 7) and then by the tool's own validator, which sanitizes strings
and applies defaults. Errors never leak internals to the client.

Usage:
    memkit mcp  # Start MCP server (stdio transport)
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    TextContent,
    Tool,
)

from memkit.core import MemoryKit
from memkit.mcp.handlers import HANDLERS, VALIDATORS
from memkit.mcp.tool_definitions import TOOLS

logger = logging.getLogger(__name__)

# Initialize MCP server
mcp = Server("memkit")

# Storage location for this MCP session
_mcp_data_dir: Optional[Path] = None
_mcp_backend: Optional[str] = None

_SCHEMA_VALIDATORS: Dict[str, Draft7Validator] = {
    tool.name: Draft7Validator(tool.inputSchema) for tool in TOOLS
}


def configure(data_dir: Optional[Path] = None, backend: Optional[str] = None) -> None:
    """Set where this MCP session stores data."""
    global _mcp_data_dir, _mcp_backend
    _mcp_data_dir = Path(data_dir).expanduser() if data_dir else None
    _mcp_backend = backend
    # Clear cached instance so next get_kit uses the new location
    if hasattr(get_kit, "_instance"):
        get_kit._instance.close()  # type: ignore[attr-defined]
        delattr(get_kit, "_instance")


def get_kit() -> MemoryKit:
    """Get or create MemoryKit instance."""
    if not hasattr(get_kit, "_instance"):
        get_kit._instance = MemoryKit(data_dir=_mcp_data_dir, backend=_mcp_backend)  # type: ignore[attr-defined]
    return get_kit._instance  # type: ignore[attr-defined]


# =============================================================================
# INPUT VALIDATION & SANITIZATION
# =============================================================================


def validate_tool_input(name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and sanitize MCP tool inputs."""
    try:
        if not isinstance(name, str):
            raise ValueError(f"tool name must be a string, got {type(name).__name__}")
        if not name:
            raise ValueError("tool name must not be empty")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ValueError(f"arguments must be an object, got {type(arguments).__name__}")

        validator = VALIDATORS.get(name)
        schema_validator = _SCHEMA_VALIDATORS.get(name)
        if validator is None or schema_validator is None:
            raise ValueError(f"Unknown tool: {name}")

        errors = sorted(schema_validator.iter_errors(arguments), key=lambda err: list(err.path))
        if errors:
            first = errors[0]
            path = ".".join(str(part) for part in first.path) or "(root)"
            raise ValueError(f"Schema validation failed at {path}: {first.message}")

        return validator(arguments)

    except (ValueError, TypeError) as e:
        logger.warning(f"Input validation failed for tool {name}: {e}")
        raise ValueError(f"Invalid input: {str(e)}")


def handle_tool_error(e: Exception, tool_name: str, arguments: Dict[str, Any]) -> List[TextContent]:
    """Handle tool errors securely."""
    if isinstance(e, ValueError):
        # Input validation or business logic error
        logger.warning(f"Invalid input for tool {tool_name}: {e}")
        message = str(e)
        if not message.startswith("Invalid input:"):
            message = f"Invalid input: {message}"
        return [TextContent(type="text", text=message)]

    elif isinstance(e, KeyError):
        logger.warning(f"Record not found for tool {tool_name}")
        return [TextContent(type="text", text="Resource not found")]

    elif isinstance(e, PermissionError):
        logger.warning(f"Permission denied for tool {tool_name}")
        return [TextContent(type="text", text="Access denied")]

    else:
        # Unknown error - log full details but return generic message
        argument_keys = list(arguments.keys()) if isinstance(arguments, dict) else []
        logger.error(
            f"Internal error in tool {tool_name}",
            extra={
                "tool_name": tool_name,
                "arguments_keys": argument_keys,
                "error_type": type(e).__name__,
                "error_message": str(e),
            },
            exc_info=True,
        )
        return [TextContent(type="text", text="Internal server error")]


# =============================================================================
# MCP PROTOCOL HANDLERS
# =============================================================================


@mcp.list_tools()
async def list_tools() -> list[Tool]:
    """List available memory tools."""
    return list(TOOLS)


@mcp.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls with validation and error handling."""
    try:
        sanitized_args = validate_tool_input(name, arguments)
        kit = get_kit()
        result = HANDLERS[name](sanitized_args, kit)
        return [TextContent(type="text", text=result)]
    except Exception as e:
        return handle_tool_error(e, name, arguments)


async def run_server():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await mcp.run(
            read_stream,
            write_stream,
            mcp.create_initialization_options(),
        )


def main(data_dir: Optional[str] = None, backend: Optional[str] = None):
    """Entry point for MCP server.

    Data directory resolution: explicit argument, then MEMKIT_DATA_DIR,
    then ~/.memkit.
    """
    configure(data_dir, backend)
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
