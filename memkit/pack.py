"""Context pack rendering.

``build_context_pack`` is a pure function: the same canon, current state,
delta list and format always give byte-identical text. It never sorts;
callers pick and order the deltas (see ``select_deltas``).
"""

from typing import Iterable, List, Optional, Sequence

from memkit.types import Canon, CurrentState, Delta, MemoryData

FORMAT_PLAINTEXT = "plaintext"
FORMAT_MARKDOWN = "markdown"
PACK_FORMATS = (FORMAT_PLAINTEXT, FORMAT_MARKDOWN)

DETAILS_MAX_CHARS = 240
ELLIPSIS = "…"
REQUEST_PLACEHOLDER = "- [Paste what you want help with here]"

PRESET_LIMITS = {"quick": 0, "normal": 5, "deep": 10}
DEFAULT_LAST_N = 5
BUNDLE_DELTA_COUNT = 5

MODEL_WRAPPERS = {
    "chatgpt": (
        "CHATGPT INSTRUCTIONS:\n"
        "- Treat Canon as the source of truth.\n"
        "- If a detail is not in Canon/Current/Deltas, treat it as unknown (ask or offer options).\n"
        "- Ask at most 1–3 clarifying questions only if necessary; otherwise propose a plan and proceed.\n"
        "- Keep outputs structured with headings and bullets. Avoid fluff.\n"
    ),
    "claude": (
        "CLAUDE INSTRUCTIONS:\n"
        "- Be strict: do not invent details.\n"
        "- Use Canon/Current/Deltas as the only facts.\n"
        "- Provide a short answer first, then an optional “Deeper” section.\n"
        "- Keep tone calm, direct, and practical.\n"
    ),
    "gemini": (
        "GEMINI INSTRUCTIONS:\n"
        "- Use headings and checklists.\n"
        "- Avoid long narrative.\n"
        "- If there are multiple approaches, give 2 options with pros/cons, then a recommendation.\n"
        "- Don’t assume missing facts—ask concise questions if needed.\n"
    ),
}
MODEL_TARGETS = tuple(MODEL_WRAPPERS)


def truncate(value: str, max_chars: int = DETAILS_MAX_CHARS) -> str:
    if len(value) <= max_chars:
        return value
    return f"{value[:max_chars]}{ELLIPSIS}"


def format_delta_line(delta: Delta) -> str:
    details = (delta.details or "").strip()
    detail_text = f" — {truncate(details)}" if details else ""
    return f"- {delta.date_iso} {delta.area} {delta.type} {delta.summary}{detail_text}"


def _field(value: Optional[str]) -> str:
    return (value or "").strip()


def build_context_pack(
    canon: Optional[Canon],
    current: Optional[CurrentState],
    deltas: Sequence[Delta],
    format: str = FORMAT_PLAINTEXT,
) -> str:
    """Render canon, current state and deltas as one text block.

    Args:
        canon: Canon record, or None to render empty values
        current: Current state, or None to render empty values
        deltas: Deltas to include, rendered in the given order
        format: "plaintext" or "markdown"

    Raises:
        ValueError: If format is not supported
    """
    if format not in PACK_FORMATS:
        raise ValueError(f"format must be one of {', '.join(PACK_FORMATS)}, got {format!r}")

    markdown = format == FORMAT_MARKDOWN

    def heading(text: str) -> str:
        return f"## {text}" if markdown else text

    lines: List[str] = ["# CONTEXT PACK" if markdown else "CONTEXT PACK"]

    lines.append(heading("Canon:"))
    lines.append(f"- Identity & Goals: {_field(canon.identity_goals if canon else None)}")
    lines.append(f"- Rules: {_field(canon.rules if canon else None)}")
    lines.append(f"- Preferences: {_field(canon.preferences if canon else None)}")
    lines.append(f"- Glossary: {_field(canon.glossary if canon else None)}")

    lines.append("")
    lines.append(heading("Current State:"))
    lines.append(f"- Now: {_field(current.now if current else None)}")
    lines.append(f"- Today: {_field(current.today if current else None)}")

    lines.append("")
    lines.append(heading("Deltas (selected):"))
    if not deltas:
        lines.append("- (none)")
    else:
        lines.extend(format_delta_line(d) for d in deltas)

    lines.append("")
    lines.append(heading("REQUEST:"))
    lines.append(REQUEST_PLACEHOLDER)

    return "\n".join(lines)


def wrap_for_model(target: str, content: str) -> str:
    """Prefix ``content`` with the fixed instruction block for ``target``."""
    if target not in MODEL_WRAPPERS:
        raise ValueError(f"target must be one of {', '.join(MODEL_TARGETS)}, got {target!r}")
    return f"{MODEL_WRAPPERS[target]}\n{content}".strip()


# === Selection ===


def sort_deltas(deltas: Iterable[Delta]) -> List[Delta]:
    """Newest first by ``date_iso``; ties keep their input order."""
    return sorted(deltas, key=lambda d: d.date_iso, reverse=True)


def select_deltas(
    deltas: Iterable[Delta],
    last_n: int = DEFAULT_LAST_N,
    selected_ids: Optional[Iterable[str]] = None,
    include: bool = True,
) -> List[Delta]:
    """Pick the deltas for a pack.

    Explicit ids win over ``last_n``; either way the result is newest first.
    """
    if not include:
        return []
    ordered = sort_deltas(deltas)
    ids = set(selected_ids or [])
    if ids:
        return [d for d in ordered if d.id in ids]
    return ordered[: max(0, last_n)]


def preset_deltas(deltas: Iterable[Delta], preset: str) -> List[Delta]:
    """Deltas for a named preset: quick (none), normal (5), deep (10)."""
    if preset not in PRESET_LIMITS:
        raise ValueError(f"preset must be one of {', '.join(PRESET_LIMITS)}, got {preset!r}")
    return select_deltas(deltas, last_n=PRESET_LIMITS[preset])


def build_markdown_bundle(data: MemoryData) -> str:
    """Markdown pack over the most recent deltas, as written by ``export md``."""
    recent = select_deltas(data.deltas, last_n=BUNDLE_DELTA_COUNT)
    return build_context_pack(data.canon, data.current, recent, FORMAT_MARKDOWN)
