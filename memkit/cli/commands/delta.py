"""Delta log commands: list, add, edit, delete, show."""

import logging
from typing import TYPE_CHECKING

from memkit.cli.commands.helpers import print_json, read_value, tags_from_args, validate_input
from memkit.core.filters import DeltaFilter

if TYPE_CHECKING:
    from memkit import MemoryKit

logger = logging.getLogger(__name__)


def resolve_delta_id(kit: "MemoryKit", partial_id: str) -> str:
    """Resolve a partial delta ID to full ID.

    Tries exact match first, then prefix match.
    Returns full ID or raises ValueError if not found or ambiguous.
    """
    if kit.get_delta(partial_id) is not None:
        return partial_id

    matches = [d for d in kit.list_deltas() if d.id.startswith(partial_id)]
    if len(matches) == 0:
        raise ValueError(f"Delta '{partial_id}' not found")
    elif len(matches) == 1:
        return matches[0].id
    else:
        match_ids = [m.id[:12] for m in matches[:5]]
        suffix = "..." if len(matches) > 5 else ""
        raise ValueError(
            f"Ambiguous ID '{partial_id}' matches {len(matches)} deltas: {', '.join(match_ids)}{suffix}"
        )


def _print_delta(delta, verbose: bool = False) -> None:
    tags = f" [{', '.join(delta.tags)}]" if delta.tags else ""
    print(f"  [{delta.id[:8]}] {delta.date_iso} {delta.area}/{delta.type}: {delta.summary}{tags}")
    if verbose and delta.details:
        for line in delta.details.splitlines():
            print(f"      {line}")


def cmd_delta(args, kit: "MemoryKit"):
    """Handle delta subcommands."""
    if args.delta_action == "list":
        flt = DeltaFilter(
            area=args.area,
            type=args.type,
            tags=tags_from_args(args.tag),
            search=validate_input(args.search or "", "search", 200),
            start=args.start,
            end=args.end,
        )
        deltas = kit.filter_deltas(flt)
        if args.limit:
            deltas = deltas[: args.limit]

        if args.json:
            print_json([d.to_dict() for d in deltas])
            return
        if not deltas:
            print("No deltas found.")
            return
        print(f"Deltas ({len(deltas)})")
        print("=" * 40)
        for delta in deltas:
            _print_delta(delta, verbose=args.verbose)

    elif args.delta_action == "add":
        delta = kit.add_delta(
            validate_input(args.summary, "summary", 500),
            area=args.area,
            type=args.type,
            details=validate_input(read_value(args.details or ""), "details", 10000),
            tags=tags_from_args(args.tag),
            date_iso=args.date,
        )
        print(f"✓ Delta added: {delta.id[:8]}...")

    elif args.delta_action == "edit":
        delta_id = resolve_delta_id(kit, args.id)
        changes = {
            "summary": validate_input(args.summary, "summary", 500) if args.summary is not None else None,
            "area": args.area,
            "type": args.type,
            "details": (
                validate_input(read_value(args.details), "details", 10000)
                if args.details is not None
                else None
            ),
            "date_iso": args.date,
        }
        if args.tag is not None:
            changes["tags"] = tags_from_args(args.tag)
        if args.clear_tags:
            changes["tags"] = []
        delta = kit.update_delta(delta_id, **changes)
        print(f"✓ Delta updated: {delta.id[:8]}...")

    elif args.delta_action == "delete":
        delta_id = resolve_delta_id(kit, args.id)
        kit.delete_delta(delta_id)
        print(f"✓ Delta deleted: {delta_id[:8]}...")

    elif args.delta_action == "show":
        delta = kit.get_delta(resolve_delta_id(kit, args.id))
        if args.json:
            print_json(delta.to_dict())
            return
        print(f"Delta {delta.id}")
        print("=" * 40)
        print(f"Date:    {delta.date_iso}")
        print(f"Area:    {delta.area}")
        print(f"Type:    {delta.type}")
        print(f"Summary: {delta.summary}")
        print(f"Tags:    {', '.join(delta.tags) if delta.tags else '(none)'}")
        if delta.details:
            print("\nDetails:")
            print(delta.details)
