"""
Default settings values for ConfigDeck.

This module defines the default settings used when no custom settings file
is provided. These values serve as fallbacks and define the base settings
structure.

Default values can be overridden by:
1. Settings files (configdeck.yml)
2. Programmatic configuration via the SettingsManager
"""

from typing import Dict, Any

# Short names accepted for a storage "class" (see ConfigDeck.storage.factory)
STORAGE_NAMES = ("memory", "file", "db", "record")

# Default database configuration (used by the "db" and "record" storages)
DATABASE_DEFAULTS: Dict[str, Any] = {
    # Database backend: 'sqlite' (default) or 'postgresql'
    "type": "sqlite",
    "sqlite": {
        # Path to the SQLite database file (null = ~/.configdeck/configdeck.db)
        "path": None
    },
    "postgresql": {
        "host": "localhost",
        "port": 5432,
        "database": "configdeck",
        # User for PostgreSQL connection (null = use system user)
        "user": None,
        # Password for PostgreSQL connection (null = use system auth)
        "password": None
    },
    # Connection timeout in seconds
    "timeout": 30
}

# Default persistent storage configuration
STORAGE_DEFAULTS: Dict[str, Any] = {
    # Storage backend used by managers created without an explicit storage:
    # 'db', 'record', 'file' or 'memory'
    "class": "db",
    # Table holding one row per config item
    "table": "app_config",
    "key_column": "id",
    "value_column": "value",
    "file": {
        # Path of the flat-file storage (null = ~/.configdeck/app_config_data.yml)
        "path": None
    }
}

# Default cache configuration for composed application config
CACHE_DEFAULTS: Dict[str, Any] = {
    # Enable caching of the composed config
    "enabled": True,
    # Time-to-live in seconds (0 = never expire)
    "duration": 0,
    # Cache key for the composed config
    "id": "ConfigDeck.core.manager.Manager"
}

# Default logging configuration
LOGGING_DEFAULTS: Dict[str, Any] = {
    # Logging level: 'debug', 'info', 'warning', 'error', 'critical'
    "level": "info",
    # Log format: 'json' or 'text'
    "format": "json",
    # Log file path (null = stderr only)
    "file": None
}

# Complete default configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    "database": DATABASE_DEFAULTS,
    "storage": STORAGE_DEFAULTS,
    "cache": CACHE_DEFAULTS,
    "logging": LOGGING_DEFAULTS
}
