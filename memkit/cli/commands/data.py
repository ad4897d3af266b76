"""Data management commands: export, import, sample, reset, onboarding, status."""

import logging
import sys
from typing import TYPE_CHECKING

from memkit.cli.commands.helpers import confirm, print_json
from memkit.importers.json_importer import MODE_MERGE, MODE_REPLACE

if TYPE_CHECKING:
    from memkit import MemoryKit

logger = logging.getLogger(__name__)

ONBOARDING_TEXT = """Welcome to memkit.

1. Fill in your Canon:    memkit canon set --identity-goals "..." --rules "..."
2. Set your Current State: memkit current set --now "..." --today "..."
3. Log changes as Deltas:  memkit delta add "Decided X" --type Decision
4. Build a context pack:   memkit pack --preset normal --for claude

Paste the pack at the start of a chat with any assistant.
Dismiss this with: memkit onboarding dismiss"""


def cmd_export(args, kit: "MemoryKit"):
    """Export all data as JSON or a markdown bundle."""
    output = args.output
    if args.export_format == "json":
        if output == "-":
            print_json(kit.export_all().to_dict())
            return
        path = kit.export_json(output)
    else:
        if output == "-":
            from memkit.pack import build_markdown_bundle

            print(build_markdown_bundle(kit.export_all()))
            return
        path = kit.export_markdown(output)
    print(f"✓ Exported to {path}")


def cmd_import(args, kit: "MemoryKit"):
    """Import a JSON export, merging by default."""
    mode = MODE_REPLACE if args.replace else MODE_MERGE
    if mode == MODE_REPLACE and not args.dry_run:
        if not confirm("Replace ALL existing data with the file contents?", args.yes):
            print("Import cancelled.")
            return

    result = kit.import_file(args.file, mode=mode, dry_run=args.dry_run)

    if args.json:
        print_json(result)
        if not result["valid"]:
            sys.exit(1)
        return

    if not result["valid"]:
        print("Import failed:")
        for error in result["errors"]:
            print(f"  - {error}")
        sys.exit(1)

    counts = result["counts"]
    if args.dry_run:
        print(f"✓ Valid file: {counts['incoming']} deltas (dry run, nothing written)")
    else:
        print(f"✓ Imported ({mode}): {counts['incoming']} deltas in file, {counts['stored']} stored")


def cmd_sample(args, kit: "MemoryKit"):
    """Overwrite all data with the bundled sample."""
    if not confirm("Overwrite ALL data with the sample dataset?", args.yes):
        print("Cancelled.")
        return
    kit.load_sample()
    print(f"✓ Sample data loaded ({len(kit.list_deltas())} deltas)")


def cmd_reset(args, kit: "MemoryKit"):
    """Delete everything, including the onboarding flag."""
    if not confirm("Delete ALL memkit data?", args.yes):
        print("Cancelled.")
        return
    kit.reset_all()
    print("✓ All data cleared")


def cmd_onboarding(args, kit: "MemoryKit"):
    """Handle onboarding subcommands."""
    if args.onboarding_action == "show":
        print(ONBOARDING_TEXT)
        if kit.get_onboarding_seen():
            print("\n(already dismissed)")
    elif args.onboarding_action == "dismiss":
        kit.set_onboarding_seen(True)
        print("✓ Onboarding dismissed")
    elif args.onboarding_action == "reset":
        kit.set_onboarding_seen(False)
        print("✓ Onboarding will show again")


def cmd_status(args, kit: "MemoryKit"):
    """Show backend and record counts."""
    canon = kit.get_canon()
    current = kit.get_current()
    deltas = kit.list_deltas()
    status = {
        "backend": kit.backend_name,
        "canon_updated_at": canon.updated_at,
        "current_updated_at": current.updated_at,
        "deltas": len(deltas),
        "latest_delta": max(d.date_iso for d in deltas) if deltas else None,
        "onboarding_seen": kit.get_onboarding_seen(),
    }
    if args.json:
        print_json(status)
        return

    print("memkit status")
    print("=" * 40)
    print(f"Backend:     {status['backend']}")
    print(f"Canon:       {'set' if canon.updated_at else 'empty'}")
    print(f"Current:     {'set' if current.updated_at else 'empty'}")
    print(f"Deltas:      {status['deltas']}")
    if status["latest_delta"]:
        print(f"Latest:      {status['latest_delta']}")
    print(f"Onboarding:  {'dismissed' if status['onboarding_seen'] else 'pending'}")
