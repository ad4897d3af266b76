"""Delta list filtering."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from memkit.pack import sort_deltas
from memkit.types import Delta


@dataclass
class DeltaFilter:
    """Criteria for ``filter_deltas``. Empty values match everything."""

    area: Optional[str] = None
    type: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    search: str = ""
    start: Optional[str] = None  # inclusive YYYY-MM-DD
    end: Optional[str] = None  # inclusive YYYY-MM-DD


def parse_tag_list(raw: Optional[str]) -> List[str]:
    """Split comma-separated tag input, dropping blanks."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _matches(delta: Delta, flt: DeltaFilter, wanted_tags: List[str], needle: str) -> bool:
    if flt.area and delta.area != flt.area:
        return False
    if flt.type and delta.type != flt.type:
        return False
    # Dates compare as strings; YYYY-MM-DD sorts lexically
    if flt.start and delta.date_iso < flt.start:
        return False
    if flt.end and delta.date_iso > flt.end:
        return False
    if wanted_tags:
        have = {t.lower() for t in delta.tags}
        if not all(tag in have for tag in wanted_tags):
            return False
    if needle:
        if needle not in delta.summary.lower() and needle not in delta.details.lower():
            return False
    return True


def filter_deltas(deltas: Iterable[Delta], flt: Optional[DeltaFilter] = None) -> List[Delta]:
    """Apply ``flt`` and return matches newest first."""
    flt = flt or DeltaFilter()
    wanted_tags = [t.lower() for t in flt.tags if t]
    needle = flt.search.strip().lower()
    return sort_deltas(d for d in deltas if _matches(d, flt, wanted_tags, needle))
