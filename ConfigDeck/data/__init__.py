"""
Data access module for the ConfigDeck package.

This module provides the database manager used by the database-backed config
storages and the active record base used by the record storage.
"""

from ConfigDeck.data.database import DatabaseManager, create_db_manager_from_settings
from ConfigDeck.data.records import ConfigRecord

__all__ = [
    'DatabaseManager',
    'create_db_manager_from_settings',
    'ConfigRecord',
]
