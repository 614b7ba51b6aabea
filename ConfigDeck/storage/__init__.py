"""
Persistent storages for config item values.
"""

from ConfigDeck.storage.base import Storage
from ConfigDeck.storage.database import DbStorage
from ConfigDeck.storage.factory import STORAGE_CLASSES, create_storage
from ConfigDeck.storage.file import FileStorage
from ConfigDeck.storage.memory import MemoryStorage
from ConfigDeck.storage.record import RecordStorage

__all__ = [
    'Storage',
    'MemoryStorage',
    'FileStorage',
    'DbStorage',
    'RecordStorage',
    'STORAGE_CLASSES',
    'create_storage',
]
