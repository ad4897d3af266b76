"""memkit core: the MemoryKit facade plus bulk, validation and filter helpers.

    from memkit.core import MemoryKit
"""

from memkit.core.bulk import BulkMixin, keep_existing_wins, overlay_wins
from memkit.core.filters import DeltaFilter, filter_deltas, parse_tag_list
from memkit.core.kit import MemoryKit
from memkit.core.validation import ValidationResult, normalize_data, validate_data

__all__ = [
    "MemoryKit",
    "BulkMixin",
    "overlay_wins",
    "keep_existing_wins",
    "DeltaFilter",
    "filter_deltas",
    "parse_tag_list",
    "ValidationResult",
    "validate_data",
    "normalize_data",
]
