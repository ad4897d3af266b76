"""
memkit CLI - command-line interface for the portable memory kit.

Usage:
    memkit canon show [--json]
    memkit canon set [--identity-goals T] [--rules T] [--preferences T] [--glossary T]
    memkit current show [--json]
    memkit current set [--now T] [--today T]
    memkit delta list [--area A] [--type T] [--tag T]... [--search Q] [--from D] [--to D]
    memkit delta add SUMMARY [--area A] [--type T] [--details D] [--tag T]... [--date D]
    memkit delta edit ID [--summary S] [--area A] [--type T] [--details D] [--tag T]...
    memkit delta delete ID
    memkit delta show ID [--json]
    memkit pack [--format F] [--preset P] [--last N] [--id ID]... [--for MODEL] [--output FILE]
    memkit export json|md [--output FILE]
    memkit import FILE [--replace] [--dry-run]
    memkit sample [--yes]
    memkit reset [--yes]
    memkit onboarding show|dismiss|reset
    memkit status [--json]
    memkit mcp
"""

import argparse
import logging
import os
import sys

from memkit import MemoryKit
from memkit.cli.commands import (
    cmd_canon,
    cmd_current,
    cmd_delta,
    cmd_export,
    cmd_import,
    cmd_onboarding,
    cmd_pack,
    cmd_reset,
    cmd_sample,
    cmd_status,
)
from memkit.cli.commands.helpers import validate_count, validate_date
from memkit.logging_config import setup_memkit_logging
from memkit.pack import MODEL_TARGETS, PACK_FORMATS, PRESET_LIMITS
from memkit.types import DELTA_AREAS, DELTA_TYPES
from memkit.utils import DATA_DIR_ENV, VALID_BACKENDS

# Set up logging. The console only gets warnings; setup_memkit_logging
# raises the memkit logger to INFO for the file log.
_console = logging.StreamHandler()
_console.setLevel(logging.WARNING)
logging.basicConfig(level=logging.WARNING, handlers=[_console])
logger = logging.getLogger(__name__)


def cmd_mcp(args):
    """Start MCP server."""
    try:
        from memkit.mcp.server import main as mcp_main
    except ImportError as e:
        logger.error("MCP dependencies not installed. Run: pip install mcp")
        logger.error(f"Error: {e}")
        sys.exit(1)
    mcp_main(data_dir=args.data_dir, backend=args.backend)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memkit",
        description="Portable, local-first memory for AI assistants",
    )
    parser.add_argument("--data-dir", "-d", help=f"Data directory (default: ${DATA_DIR_ENV} or ~/.memkit)")
    parser.add_argument("--backend", "-b", choices=VALID_BACKENDS, default=None,
                        help="Storage backend (default: $MEMKIT_BACKEND or auto)")
    parser.add_argument("--log-level", default=None,
                        help="Log level for the file log (default: $MEMKIT_LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # canon
    p_canon = subparsers.add_parser("canon", help="Stable profile: identity, rules, preferences, glossary")
    canon_sub = p_canon.add_subparsers(dest="canon_action", required=True)
    canon_show = canon_sub.add_parser("show", help="Show canon")
    canon_show.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    canon_set = canon_sub.add_parser("set", help="Set canon fields ('-' reads stdin)")
    canon_set.add_argument("--identity-goals", dest="identity_goals", help="Identity & goals")
    canon_set.add_argument("--rules", help="Rules")
    canon_set.add_argument("--preferences", help="Preferences")
    canon_set.add_argument("--glossary", help="Glossary")

    # current
    p_current = subparsers.add_parser("current", help="Current focus snapshot")
    current_sub = p_current.add_subparsers(dest="current_action", required=True)
    current_show = current_sub.add_parser("show", help="Show current state")
    current_show.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    current_set = current_sub.add_parser("set", help="Set current state fields ('-' reads stdin)")
    current_set.add_argument("--now", help="What is happening now")
    current_set.add_argument("--today", help="Today's focus")

    # delta
    p_delta = subparsers.add_parser("delta", help="Dated log of changes")
    delta_sub = p_delta.add_subparsers(dest="delta_action", required=True)

    delta_list = delta_sub.add_parser("list", help="List deltas, newest first")
    delta_list.add_argument("--area", choices=DELTA_AREAS, help="Filter by area")
    delta_list.add_argument("--type", "-t", choices=DELTA_TYPES, help="Filter by type")
    delta_list.add_argument("--tag", action="append", help="Require tag (repeatable or comma-separated)")
    delta_list.add_argument("--search", "-s", help="Text in summary or details")
    delta_list.add_argument("--from", dest="start", type=validate_date, help="Start date (inclusive)")
    delta_list.add_argument("--to", dest="end", type=validate_date, help="End date (inclusive)")
    delta_list.add_argument("--limit", "-l", type=validate_count, default=0, help="Maximum entries")
    delta_list.add_argument("--verbose", "-v", action="store_true", help="Show details")
    delta_list.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    delta_add = delta_sub.add_parser("add", help="Add a delta")
    delta_add.add_argument("summary", help="One-line summary")
    delta_add.add_argument("--area", choices=DELTA_AREAS, default="Work", help="Area (default: Work)")
    delta_add.add_argument("--type", "-t", choices=DELTA_TYPES, default="Update", help="Type (default: Update)")
    delta_add.add_argument("--details", help="Longer details ('-' reads stdin)")
    delta_add.add_argument("--tag", action="append", help="Tag (repeatable or comma-separated)")
    delta_add.add_argument("--date", type=validate_date, help="Date YYYY-MM-DD (default: today)")

    delta_edit = delta_sub.add_parser("edit", help="Edit a delta")
    delta_edit.add_argument("id", help="Delta ID (or unique prefix)")
    delta_edit.add_argument("--summary", help="New summary")
    delta_edit.add_argument("--area", choices=DELTA_AREAS, help="New area")
    delta_edit.add_argument("--type", "-t", choices=DELTA_TYPES, help="New type")
    delta_edit.add_argument("--details", help="New details ('-' reads stdin)")
    delta_edit.add_argument("--tag", action="append", help="Replace tags (repeatable or comma-separated)")
    delta_edit.add_argument("--clear-tags", action="store_true", help="Remove all tags")
    delta_edit.add_argument("--date", type=validate_date, help="New date YYYY-MM-DD")

    delta_delete = delta_sub.add_parser("delete", help="Delete a delta")
    delta_delete.add_argument("id", help="Delta ID (or unique prefix)")

    delta_show = delta_sub.add_parser("show", help="Show one delta")
    delta_show.add_argument("id", help="Delta ID (or unique prefix)")
    delta_show.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    # pack
    p_pack = subparsers.add_parser("pack", help="Build a context pack")
    p_pack.add_argument("--format", "-f", choices=PACK_FORMATS, default="plaintext", help="Output format")
    p_pack.add_argument("--preset", "-p", choices=list(PRESET_LIMITS),
                        help="quick (no deltas), normal (5) or deep (10)")
    p_pack.add_argument("--last", "-n", type=validate_count, default=5,
                        help="Include the N most recent deltas (default: 5)")
    p_pack.add_argument("--id", action="append", help="Include this delta (repeatable; overrides --last)")
    p_pack.add_argument("--no-canon", action="store_true", help="Leave canon values empty")
    p_pack.add_argument("--no-current", action="store_true", help="Leave current state values empty")
    p_pack.add_argument("--no-deltas", action="store_true", help="Include no deltas")
    p_pack.add_argument("--for", dest="target", choices=MODEL_TARGETS, help="Prefix model instructions")
    p_pack.add_argument("--output", "-o", help="Write to file instead of stdout")

    # export
    p_export = subparsers.add_parser("export", help="Export all data")
    p_export.add_argument("export_format", choices=["json", "md"], help="json (full) or md (bundle)")
    p_export.add_argument("--output", "-o", default=None,
                          help="Output path ('-' for stdout; default: portable-ai-memory-kit.<ext>)")

    # import
    p_import = subparsers.add_parser("import", help="Import a JSON export")
    p_import.add_argument("file", help="JSON file")
    p_import.add_argument("--replace", action="store_true", help="Replace all data instead of merging")
    p_import.add_argument("--dry-run", action="store_true", help="Validate only")
    p_import.add_argument("--yes", "-y", action="store_true", help="Skip confirmation for --replace")
    p_import.add_argument("--json", "-j", action="store_true", help="Output result as JSON")

    # sample / reset
    p_sample = subparsers.add_parser("sample", help="Overwrite all data with sample data")
    p_sample.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    p_reset = subparsers.add_parser("reset", help="Delete all data")
    p_reset.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    # onboarding
    p_onboarding = subparsers.add_parser("onboarding", help="First-run guide")
    onboarding_sub = p_onboarding.add_subparsers(dest="onboarding_action", required=True)
    onboarding_sub.add_parser("show", help="Show the guide")
    onboarding_sub.add_parser("dismiss", help="Mark the guide as seen")
    onboarding_sub.add_parser("reset", help="Show the guide again")

    # status
    p_status = subparsers.add_parser("status", help="Show backend and counts")
    p_status.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    # mcp
    subparsers.add_parser("mcp", help="Start MCP server (stdio transport)")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # --data-dir also moves the logs, so it goes through the environment
    if args.data_dir:
        os.environ[DATA_DIR_ENV] = os.path.expanduser(args.data_dir)

    try:
        setup_memkit_logging(args.log_level)
    except OSError as e:
        logger.warning(f"File logging disabled: {e}")

    if args.command == "mcp":
        cmd_mcp(args)
        return

    # Initialize MemoryKit with error handling
    try:
        kit = MemoryKit(backend=args.backend)
    except Exception as e:
        logger.error(f"Failed to initialize memkit: {e}")
        sys.exit(1)

    # Dispatch with error handling
    try:
        if args.command == "canon":
            cmd_canon(args, kit)
        elif args.command == "current":
            cmd_current(args, kit)
        elif args.command == "delta":
            cmd_delta(args, kit)
        elif args.command == "pack":
            cmd_pack(args, kit)
        elif args.command == "export":
            cmd_export(args, kit)
        elif args.command == "import":
            cmd_import(args, kit)
        elif args.command == "sample":
            cmd_sample(args, kit)
        elif args.command == "reset":
            cmd_reset(args, kit)
        elif args.command == "onboarding":
            cmd_onboarding(args, kit)
        elif args.command == "status":
            cmd_status(args, kit)
    except (ValueError, TypeError, KeyError) as e:
        logger.error(f"Input validation error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)
    finally:
        kit.close()


if __name__ == "__main__":
    main()
