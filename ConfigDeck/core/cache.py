"""
Cache collaborators for the composed application configuration.

A cache exposes ``get(key)``, ``set(key, value, duration)`` and
``delete(key)``. ``get`` returns the MISSING sentinel on a miss so that falsy
cached values (an empty composed config, for instance) still count as hits.
"""

import copy
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)


class _Missing:
    """Marker returned by Cache.get() for absent entries."""

    _instance = None

    def __new__(cls) -> '_Missing':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'MISSING'


MISSING = _Missing()


class Cache(ABC):
    """Key-value cache contract used by the config manager."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the cached value, or MISSING."""

    @abstractmethod
    def set(self, key: str, value: Any, duration: int = 0) -> bool:
        """Store a value; duration is in seconds, 0 means never expire."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a value; deleting an absent key is not an error."""


class MemoryCache(Cache):
    """
    In-process cache with per-entry expiry.

    Values are deep-copied on the way in and out, so callers mutating a
    returned config tree do not alter the cached entry.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISSING

            value, expires_at = entry
            if expires_at is not None and expires_at <= time.monotonic():
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return MISSING

            return copy.deepcopy(value)

    def set(self, key: str, value: Any, duration: int = 0) -> bool:
        expires_at = time.monotonic() + duration if duration and duration > 0 else None
        with self._lock:
            self._entries[key] = (copy.deepcopy(value), expires_at)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            self._entries.pop(key, None)
        return True

    def flush(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()


class NullCache(Cache):
    """Cache that stores nothing; every read is a miss."""

    def get(self, key: str) -> Any:
        return MISSING

    def set(self, key: str, value: Any, duration: int = 0) -> bool:
        return True

    def delete(self, key: str) -> bool:
        return True
