"""Logging setup for memkit.

Two sinks, both under ``<data_dir>/logs``:

- ``local-<date>.log``: the ``memkit`` logger hierarchy
- ``memory-events-<date>.log``: one line per store mutation
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from memkit.utils import get_memkit_home, resolve_log_level

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def _log_dir() -> Path:
    log_dir = get_memkit_home() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def setup_memkit_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the ``memkit`` logger.

    Adds a file handler once; a console handler is added only at DEBUG.
    Invalid level names fall back to INFO.
    """
    root = logging.getLogger("memkit")
    level_name = resolve_log_level(level)
    numeric = getattr(logging, level_name, None)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    root.setLevel(numeric)

    if not any(isinstance(h, logging.FileHandler) for h in root.handlers):
        handler = logging.FileHandler(_log_dir() / f"local-{_today()}.log", encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in root.handlers
    )
    if numeric == logging.DEBUG and not has_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(console)

    return root


def log_memory_event(event_type: str, details: str, backend: str = "unknown") -> None:
    """Append one line to the memory events log."""
    try:
        path = _log_dir() / f"memory-events-{_today()}.log"
        stamp = datetime.now(timezone.utc).isoformat()
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{stamp} | {event_type} | backend={backend} | {details}\n")
    except OSError as e:
        logger.debug(f"Could not write memory event: {e}")


def log_save(backend: str, record_type: str, record_id: str, summary: str = "") -> None:
    details = f"type={record_type}, id={record_id[:8]}"
    if summary:
        details += f", summary={summary[:50]}"
    log_memory_event("save", details, backend=backend)


def log_delete(backend: str, record_type: str, record_id: str) -> None:
    log_memory_event("delete", f"type={record_type}, id={record_id[:8]}", backend=backend)


def log_bulk(backend: str, operation: str, deltas: int) -> None:
    log_memory_event(operation, f"deltas={deltas}", backend=backend)
