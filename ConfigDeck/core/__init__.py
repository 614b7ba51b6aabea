"""
Core config item model: items, the manager, paths, validators and caching.
"""

from ConfigDeck.core.cache import MISSING, Cache, MemoryCache, NullCache
from ConfigDeck.core.item import UNSET, Item
from ConfigDeck.core.manager import Manager

__all__ = [
    'Item',
    'Manager',
    'UNSET',
    'MISSING',
    'Cache',
    'MemoryCache',
    'NullCache',
]
