"""Context pack command."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from memkit import MemoryKit

logger = logging.getLogger(__name__)


def cmd_pack(args, kit: "MemoryKit"):
    """Render a context pack to stdout or a file."""
    selected_ids = None
    if args.id:
        from memkit.cli.commands.delta import resolve_delta_id

        selected_ids = [resolve_delta_id(kit, partial) for partial in args.id]

    content = kit.context_pack(
        format=args.format,
        preset=args.preset,
        last_n=args.last,
        selected_ids=selected_ids,
        include_canon=not args.no_canon,
        include_current=not args.no_current,
        include_deltas=not args.no_deltas,
        wrap=args.target,
    )

    if args.output:
        path = Path(args.output).expanduser()
        path.write_text(content, encoding="utf-8")
        print(f"✓ Context pack written to {path}")
    else:
        print(content)
