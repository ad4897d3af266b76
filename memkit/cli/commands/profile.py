"""Canon and Current State commands."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from memkit.cli.commands.helpers import print_json, read_value, validate_input

if TYPE_CHECKING:
    from memkit import MemoryKit

logger = logging.getLogger(__name__)

CANON_LABELS = (
    ("identity_goals", "Identity & Goals"),
    ("rules", "Rules"),
    ("preferences", "Preferences"),
    ("glossary", "Glossary"),
)
CURRENT_LABELS = (("now", "Now"), ("today", "Today"))


def _format_updated(updated_at: int) -> str:
    if not updated_at:
        return "never"
    return datetime.fromtimestamp(updated_at / 1000).strftime("%Y-%m-%d %H:%M")


def _show(record, labels, title: str) -> None:
    print(f"{title} (updated {_format_updated(record.updated_at)})")
    print("=" * 40)
    for attr, label in labels:
        value = getattr(record, attr).strip()
        print(f"\n{label}:")
        print(f"  {value}" if value else "  (empty)")


def _collect(args, labels, max_length: int) -> dict:
    fields = {}
    for attr, _label in labels:
        raw = getattr(args, attr, None)
        if raw is not None:
            fields[attr] = validate_input(read_value(raw), attr, max_length)
    if not fields:
        flags = ", ".join(f"--{attr.replace('_', '-')}" for attr, _ in labels)
        raise ValueError(f"Nothing to set; pass at least one of {flags}")
    return fields


def cmd_canon(args, kit: "MemoryKit"):
    """Handle canon subcommands."""
    if args.canon_action == "show":
        canon = kit.get_canon()
        if args.json:
            print_json(canon.to_dict())
        else:
            _show(canon, CANON_LABELS, "Canon")

    elif args.canon_action == "set":
        canon = kit.update_canon(**_collect(args, CANON_LABELS, 20000))
        print(f"✓ Canon saved ({kit.backend_name})")
        logger.debug(f"Canon updated at {canon.updated_at}")


def cmd_current(args, kit: "MemoryKit"):
    """Handle current-state subcommands."""
    if args.current_action == "show":
        current = kit.get_current()
        if args.json:
            print_json(current.to_dict())
        else:
            _show(current, CURRENT_LABELS, "Current State")

    elif args.current_action == "set":
        current = kit.update_current(**_collect(args, CURRENT_LABELS, 20000))
        print(f"✓ Current state saved ({kit.backend_name})")
        logger.debug(f"Current state updated at {current.updated_at}")
