"""Environment-driven configuration helpers for memkit.

Settings are read from the environment at call time so tests (and the
CLI) can override them per invocation:

- ``MEMKIT_DATA_DIR``: where data and logs live (default ``~/.memkit``)
- ``MEMKIT_BACKEND``: ``auto`` | ``sqlite`` | ``flat`` (default ``auto``)
- ``MEMKIT_LOG_LEVEL``: logging level for ``setup_memkit_logging``
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

BACKEND_AUTO = "auto"
BACKEND_SQLITE = "sqlite"
BACKEND_FLAT = "flat"
VALID_BACKENDS = (BACKEND_AUTO, BACKEND_SQLITE, BACKEND_FLAT)

DEFAULT_LOG_LEVEL = "INFO"

DATA_DIR_ENV = "MEMKIT_DATA_DIR"
BACKEND_ENV = "MEMKIT_BACKEND"
LOG_LEVEL_ENV = "MEMKIT_LOG_LEVEL"


def get_memkit_home() -> Path:
    """Return the data directory, creating it if needed.

    Falls back to a directory under the system temp dir when the home
    directory is not writable (sandboxed/container/CI environments).
    """
    env_dir = os.environ.get(DATA_DIR_ENV, "").strip()
    home = Path(env_dir).expanduser() if env_dir else Path.home() / ".memkit"
    try:
        home.mkdir(parents=True, exist_ok=True)
        return home
    except OSError as e:
        fallback = Path(tempfile.gettempdir()) / ".memkit"
        logger.warning(f"Cannot write to {home} ({e}), falling back to {fallback}")
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def resolve_backend(preference: Optional[str] = None) -> str:
    """Resolve the storage backend preference.

    Explicit argument wins over ``MEMKIT_BACKEND``. Unknown values are
    treated as ``auto``.
    """
    value = preference if preference is not None else os.environ.get(BACKEND_ENV, "")
    value = (value or BACKEND_AUTO).strip().lower()
    if value not in VALID_BACKENDS:
        logger.warning(f"Unknown storage backend {value!r}, using {BACKEND_AUTO!r}")
        return BACKEND_AUTO
    return value


def resolve_log_level(level: Optional[str] = None) -> str:
    value = level or os.environ.get(LOG_LEVEL_ENV, "") or DEFAULT_LOG_LEVEL
    return value.strip().upper()
