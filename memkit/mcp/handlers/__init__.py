"""Handler registry for MCP tools.

Merges HANDLERS and VALIDATORS from all sub-modules into unified dicts.
"""

from typing import Callable, Dict

from memkit.mcp.handlers.deltas import HANDLERS as _DELTAS_H
from memkit.mcp.handlers.deltas import VALIDATORS as _DELTAS_V
from memkit.mcp.handlers.profile import HANDLERS as _PROFILE_H
from memkit.mcp.handlers.profile import VALIDATORS as _PROFILE_V

HANDLERS: Dict[str, Callable] = {
    **_DELTAS_H,
    **_PROFILE_H,
}

VALIDATORS: Dict[str, Callable] = {
    **_DELTAS_V,
    **_PROFILE_V,
}
