"""
Pytest fixtures and test configuration for memkit tests.
"""

import logging
from typing import Any, Dict

import pytest

from memkit.core import MemoryKit
from memkit.storage import FlatFileStorage
from memkit.types import Canon, CurrentState, Delta, MemoryData


@pytest.fixture(autouse=True)
def memkit_env(tmp_path, monkeypatch):
    """Point every test at its own data directory."""
    data_dir = tmp_path / "memkit-home"
    monkeypatch.setenv("MEMKIT_DATA_DIR", str(data_dir))
    monkeypatch.delenv("MEMKIT_BACKEND", raising=False)
    monkeypatch.delenv("MEMKIT_LOG_LEVEL", raising=False)
    yield data_dir
    # Handlers added by setup_memkit_logging point into tmp_path
    root = logging.getLogger("memkit")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def _open_backend(name: str, data_dir):
    if name == "sqlite":
        from memkit.storage.sqlite import SQLiteStorage

        return SQLiteStorage(data_dir)
    return FlatFileStorage(data_dir)


@pytest.fixture(params=["sqlite", "flat"])
def storage(request, tmp_path):
    """Storage instance, once per backend."""
    store = _open_backend(request.param, tmp_path / "store")
    yield store
    store.close()


@pytest.fixture
def storage_factory(tmp_path):
    """Open a named backend over a fixed directory (reopen to check persistence)."""
    opened = []

    def factory(name: str, subdir: str = "store"):
        store = _open_backend(name, tmp_path / subdir)
        opened.append(store)
        return store

    yield factory
    for store in opened:
        store.close()


@pytest.fixture
def kit(storage):
    """MemoryKit over each backend."""
    return MemoryKit(storage=storage)


@pytest.fixture
def flat_kit(tmp_path):
    return MemoryKit(storage=FlatFileStorage(tmp_path / "flat"))


def _make_delta(**overrides) -> Delta:
    defaults: Dict[str, Any] = dict(
        id="delta-1",
        date_iso="2024-06-01",
        area="Work",
        type="Update",
        summary="Shipped the importer",
        details="",
        tags=[],
    )
    defaults.update(overrides)
    return Delta(**defaults)


def _make_canon(**overrides) -> Canon:
    defaults: Dict[str, Any] = dict(
        identity_goals="Build calm software",
        rules="Be concise",
        preferences="Bullets",
        glossary="P0 = urgent",
        updated_at=1000,
    )
    defaults.update(overrides)
    return Canon(**defaults)


def _make_current(**overrides) -> CurrentState:
    defaults: Dict[str, Any] = dict(now="Writing tests", today="Finish storage", updated_at=1000)
    defaults.update(overrides)
    return CurrentState(**defaults)


def _make_payload(**overrides) -> Dict[str, Any]:
    """A valid import payload (wire format)."""
    payload: Dict[str, Any] = {
        "canon": {
            "identityGoals": "Imported goals",
            "rules": "Imported rules",
            "preferences": "Imported prefs",
            "glossary": "Imported glossary",
            "updatedAt": 5,
        },
        "current": {"now": "Imported now", "today": "Imported today", "updatedAt": 5},
        "deltas": [
            {
                "id": "imp-1",
                "dateISO": "2024-06-02",
                "area": "Personal",
                "type": "Insight",
                "summary": "Imported delta",
                "details": "From a file",
                "tags": ["import"],
            }
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_delta():
    return _make_delta


@pytest.fixture
def make_canon():
    return _make_canon


@pytest.fixture
def make_current():
    return _make_current


@pytest.fixture
def make_payload():
    return _make_payload


@pytest.fixture
def sample_data() -> MemoryData:
    return MemoryData(
        canon=_make_canon(),
        current=_make_current(),
        deltas=[
            _make_delta(id="a", date_iso="2024-06-01", summary="First"),
            _make_delta(id="b", date_iso="2024-06-03", summary="Third"),
            _make_delta(id="c", date_iso="2024-06-02", summary="Second"),
        ],
    )
