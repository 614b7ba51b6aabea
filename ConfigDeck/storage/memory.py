"""
In-memory config storage, mostly useful for tests and as a fallback.
"""

from typing import Any, Dict, Optional

from ConfigDeck.storage.base import Storage


class MemoryStorage(Storage):
    """Keeps config values in a plain dict for the lifetime of the process."""

    def __init__(self, data: Optional[Dict[Any, Any]] = None) -> None:
        self.data: Dict[Any, Any] = dict(data or {})

    def save(self, values: Dict[Any, Any]) -> bool:
        self.data.update(values)
        return True

    def get(self) -> Dict[Any, Any]:
        return dict(self.data)

    def clear(self) -> bool:
        self.data = {}
        return True
