"""
Shared record types for memkit.

These dataclasses are the vocabulary between storage, bulk operations,
the importer and the pack renderer. Attribute names are Python style;
``to_dict``/``from_dict`` speak the camelCase wire format used by
export files (``identityGoals``, ``updatedAt``, ``dateISO``).
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

# === Closed vocabularies ===

DELTA_AREAS = (
    "Work",
    "Personal",
    "Health",
    "Finance",
    "Learning",
    "Relationships",
    "Other",
)

DELTA_TYPES = (
    "Update",
    "Decision",
    "Insight",
    "Milestone",
    "Blocker",
    "Idea",
)

CANON_ID = "canon"
CURRENT_ID = "current"

# === Shared Utility Functions ===


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def today_iso() -> str:
    """Today's local date as YYYY-MM-DD."""
    return date.today().isoformat()


def new_delta_id() -> str:
    return str(uuid.uuid4())


def clean_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Strip tags, drop blanks and repeats (first occurrence wins)."""
    cleaned: List[str] = []
    for tag in tags or []:
        if not isinstance(tag, str):
            continue
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _timestamp(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


# === Records ===


@dataclass
class Canon:
    """The stable profile record. Exactly one exists."""

    identity_goals: str = ""
    rules: str = ""
    preferences: str = ""
    glossary: str = ""
    updated_at: int = 0
    id: str = CANON_ID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "identityGoals": self.identity_goals,
            "rules": self.rules,
            "preferences": self.preferences,
            "glossary": self.glossary,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "Canon":
        d = d or {}
        return cls(
            identity_goals=_str(d.get("identityGoals")),
            rules=_str(d.get("rules")),
            preferences=_str(d.get("preferences")),
            glossary=_str(d.get("glossary")),
            updated_at=_timestamp(d.get("updatedAt")),
            id=CANON_ID,
        )


@dataclass
class CurrentState:
    """The frequently changing snapshot. Exactly one exists."""

    now: str = ""
    today: str = ""
    updated_at: int = 0
    id: str = CURRENT_ID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "now": self.now,
            "today": self.today,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "CurrentState":
        d = d or {}
        return cls(
            now=_str(d.get("now")),
            today=_str(d.get("today")),
            updated_at=_timestamp(d.get("updatedAt")),
            id=CURRENT_ID,
        )


@dataclass
class Delta:
    """A dated log entry. Identity is ``id``."""

    id: str
    date_iso: str
    area: str = "Work"
    type: str = "Update"  # Update | Decision | Insight | Milestone | Blocker | Idea
    summary: str = ""
    details: str = ""
    tags: List[str] = field(default_factory=list)

    @classmethod
    def new(
        cls,
        summary: str = "",
        area: str = "Work",
        type: str = "Update",
        details: str = "",
        tags: Optional[List[str]] = None,
        date_iso: Optional[str] = None,
    ) -> "Delta":
        """Fresh entry with a random id, dated today."""
        return cls(
            id=new_delta_id(),
            date_iso=date_iso or today_iso(),
            area=area,
            type=type,
            summary=summary,
            details=details,
            tags=list(tags or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "dateISO": self.date_iso,
            "area": self.area,
            "type": self.type,
            "summary": self.summary,
            "details": self.details,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Delta":
        tags = d.get("tags")
        return cls(
            id=str(d["id"]),
            date_iso=_str(d.get("dateISO")),
            area=_str(d.get("area")) or "Work",
            type=_str(d.get("type")) or "Update",
            summary=_str(d.get("summary")),
            details=_str(d.get("details")),
            tags=[t for t in tags if isinstance(t, str)] if isinstance(tags, list) else [],
        )


@dataclass
class MemoryData:
    """Everything: Canon + Current + all Deltas. Not persisted as such."""

    canon: Canon = field(default_factory=Canon)
    current: CurrentState = field(default_factory=CurrentState)
    deltas: List[Delta] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canon": self.canon.to_dict(),
            "current": self.current.to_dict(),
            "deltas": [d.to_dict() for d in self.deltas],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MemoryData":
        return cls(
            canon=Canon.from_dict(d.get("canon")),
            current=CurrentState.from_dict(d.get("current")),
            deltas=[Delta.from_dict(item) for item in d.get("deltas") or []],
        )