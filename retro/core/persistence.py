"""
Cache slots — Durable storage for the suggestion cache

One serializable blob per workspace: read once at session start,
written after every cache mutation. Loss or corruption of the blob is
never fatal; the cache simply starts empty.

Storage: .retro/suggestions.json (orjson, written atomically)
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import orjson

logger = logging.getLogger(__name__)


class CacheSlot(ABC):
    """A single durable key-value slot holding the cache's plain form."""

    @abstractmethod
    def read(self) -> Optional[Dict[str, Any]]:
        """Return the stored blob, or None if nothing usable is stored."""
        pass

    @abstractmethod
    def write(self, data: Dict[str, Any]) -> None:
        """Replace the stored blob."""
        pass


class MemorySlot(CacheSlot):
    """In-process slot. Useful for tests and ephemeral sessions."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data = data
        self.writes = 0

    def read(self) -> Optional[Dict[str, Any]]:
        return self.data

    def write(self, data: Dict[str, Any]) -> None:
        self.data = data
        self.writes += 1


class JsonFileSlot(CacheSlot):
    """
    Slot backed by a JSON file.

    A corrupted file is renamed aside (`.corrupted`) so the next write
    starts clean without destroying the evidence.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None

        try:
            data = orjson.loads(self.path.read_bytes())
            if not isinstance(data, dict):
                raise ValueError("cache root must be a JSON object")
            return data
        except (orjson.JSONDecodeError, OSError, ValueError) as e:
            logger.warning("Suggestion cache at %s is unreadable (%s); starting empty", self.path, e)
            try:
                self.path.rename(self.path.with_suffix(".json.corrupted"))
            except OSError as rename_error:
                logger.debug("Could not move corrupted cache aside: %s", rename_error)
            return None

    def write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".json.tmp")
        tmp.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
        os.replace(str(tmp), str(self.path))
