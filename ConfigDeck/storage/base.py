"""
Persistent storage contract for config item values.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class Storage(ABC):
    """
    Base class for config storages.

    A storage keeps a flat mapping of config item ids to their serialized values.
    """

    @abstractmethod
    def save(self, values: Dict[Any, Any]) -> bool:
        """
        Save the given values in persistent storage.

        Args:
            values: Mapping of item id to serialized value

        Returns:
            bool: success
        """

    @abstractmethod
    def get(self) -> Dict[Any, Any]:
        """
        Return all values stored in persistent storage.

        Returns:
            Dict[Any, Any]: mapping of item id to serialized value
        """

    @abstractmethod
    def clear(self) -> bool:
        """
        Clear all values in persistent storage.

        Returns:
            bool: success
        """

    def clear_value(self, key: Any) -> bool:
        """
        Clear the value of a single key.

        Storages which can delete one key directly should override this; the
        default rewrites the whole storage without the key.

        Args:
            key: Item id

        Returns:
            bool: success
        """
        values = self.get()
        if key not in values:
            # JSON files give integer ids back as strings
            key = str(key)
            if key not in values:
                return True

        del values[key]
        self.clear()
        if not values:
            return True

        return self.save(values)
