"""CLI command modules for memkit.

Each module contains related command handlers dispatched from __main__.py.
"""

from memkit.cli.commands.data import (
    cmd_export,
    cmd_import,
    cmd_onboarding,
    cmd_reset,
    cmd_sample,
    cmd_status,
)
from memkit.cli.commands.delta import cmd_delta, resolve_delta_id
from memkit.cli.commands.helpers import print_json, validate_input
from memkit.cli.commands.pack import cmd_pack
from memkit.cli.commands.profile import cmd_canon, cmd_current

__all__ = [
    "cmd_canon",
    "cmd_current",
    "cmd_delta",
    "cmd_export",
    "cmd_import",
    "cmd_onboarding",
    "cmd_pack",
    "cmd_reset",
    "cmd_sample",
    "cmd_status",
    "print_json",
    "resolve_delta_id",
    "validate_input",
]
