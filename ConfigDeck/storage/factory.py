"""
Storage factory.

Builds storages from specification dicts such as::

    {"class": "file", "file_name": "/var/app/config.yml"}
    {"class": "db", "db": "sqlite:///app.db", "table": "app_config"}
    {"class": "myapp.storage.RedisStorage", "url": "redis://localhost"}
"""

from typing import Any, Dict, Mapping, Type

from ConfigDeck.exceptions import ConfigurationError
from ConfigDeck.settings.defaults import STORAGE_NAMES
from ConfigDeck.storage.base import Storage
from ConfigDeck.storage.database import DbStorage
from ConfigDeck.storage.file import FileStorage
from ConfigDeck.storage.memory import MemoryStorage
from ConfigDeck.storage.record import RecordStorage
from ConfigDeck.utils import import_string

STORAGE_CLASSES: Dict[str, Type[Storage]] = dict(zip(
    STORAGE_NAMES,
    (MemoryStorage, FileStorage, DbStorage, RecordStorage)
))


def resolve_storage_class(name: Any) -> Type[Storage]:
    if isinstance(name, type) and issubclass(name, Storage):
        return name

    if isinstance(name, str):
        if name in STORAGE_CLASSES:
            return STORAGE_CLASSES[name]
        if '.' in name:
            storage_class = import_string(name)
            if isinstance(storage_class, type) and issubclass(storage_class, Storage):
                return storage_class

    raise ConfigurationError(
        f'Unknown storage class "{name}". Use one of: {", ".join(STORAGE_CLASSES)} '
        f'or the import path of a Storage subclass.'
    )


def create_storage(spec: Mapping[str, Any]) -> Storage:
    """
    Create a storage from its specification.

    Args:
        spec: Dict with the storage "class" (short name, import path or class)
            plus the storage constructor arguments

    Returns:
        Storage: the new storage

    Raises:
        ConfigurationError: If the class is unknown or the arguments are invalid
    """
    options = dict(spec)
    storage_class = resolve_storage_class(options.pop('class', None))

    try:
        return storage_class(**options)
    except TypeError as e:
        raise ConfigurationError(f'Invalid options for storage "{storage_class.__name__}": {e}', cause=e) from e
