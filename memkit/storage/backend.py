"""Backend selection for memkit storage.

The choice is made once, when storage is opened:

- ``flat`` preference: always the flat-file backend
- ``sqlite`` preference: SQLite, or ``StorageUnavailableError``
- ``auto`` (default): SQLite when it can be opened, otherwise flat files

The two backends never share data. Whatever was written under one is
invisible to the other if the capability changes between runs.
"""

import logging
from pathlib import Path
from typing import Optional

from memkit.errors import StorageUnavailableError
from memkit.utils import BACKEND_FLAT, BACKEND_SQLITE, get_memkit_home, resolve_backend

from .base import Storage
from .flat_files import FlatFileStorage

logger = logging.getLogger(__name__)


def _open_sqlite(data_dir: Path) -> Storage:
    """Probe and open the transactional backend.

    Raises whatever the probe hit: ImportError when the interpreter was
    built without sqlite3, sqlite3.Error/OSError when the database cannot
    be created or initialized.
    """
    from .sqlite import SQLiteStorage

    return SQLiteStorage(data_dir)


def open_storage(data_dir: Optional[Path] = None, backend: Optional[str] = None) -> Storage:
    """Open the storage backend for ``data_dir``.

    Args:
        data_dir: Directory holding the data (default: ``get_memkit_home()``)
        backend: ``auto`` | ``sqlite`` | ``flat`` (default: ``MEMKIT_BACKEND``)

    Returns:
        A ready Storage instance
    """
    data_dir = Path(data_dir) if data_dir is not None else get_memkit_home()
    preference = resolve_backend(backend)

    if preference == BACKEND_FLAT:
        logger.debug(f"Using flat-file storage in {data_dir} (configured)")
        return FlatFileStorage(data_dir)

    try:
        storage = _open_sqlite(data_dir)
    except Exception as e:
        if preference == BACKEND_SQLITE:
            raise StorageUnavailableError(f"SQLite storage unavailable: {e}") from e
        logger.warning(f"SQLite storage unavailable ({e}), using flat-file storage")
        return FlatFileStorage(data_dir)

    logger.debug(f"Using SQLite storage at {storage.db_path}")
    return storage
