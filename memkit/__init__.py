"""
memkit - a portable, local-first memory kit.

Keeps a Canon profile, a Current State snapshot and a log of Deltas on
disk, and renders them into context packs for any assistant.
"""

from .core import MemoryKit
from .types import Canon, CurrentState, Delta, MemoryData

try:
    from importlib.metadata import version

    __version__ = version("portable-memory-kit")
except Exception:
    __version__ = "0.0.0"

__all__ = ["MemoryKit", "Canon", "CurrentState", "Delta", "MemoryData"]
