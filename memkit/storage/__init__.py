"""memkit storage backends.

Two interchangeable backends behind one ``Storage`` interface:
SQLite (``memkit.storage.sqlite.SQLiteStorage``) and flat JSON files
(``FlatFileStorage``). Use ``open_storage`` to pick one.
"""

from .backend import open_storage
from .base import (
    COLLECTION_CANON,
    COLLECTION_CURRENT,
    COLLECTION_DELTAS,
    COLLECTION_META,
    COLLECTIONS,
    META_ONBOARDING,
    Storage,
)
from .flat_files import FlatFileStorage

__all__ = [
    "Storage",
    "FlatFileStorage",
    "open_storage",
    "COLLECTIONS",
    "COLLECTION_CANON",
    "COLLECTION_CURRENT",
    "COLLECTION_DELTAS",
    "COLLECTION_META",
    "META_ONBOARDING",
]
