"""
ConfigDeck - Dynamic application configuration for Flask applications.

Selected configuration values can be overridden at runtime from a persistent
store (database table, flat file or memory) and are merged back into the
running application's configuration on each request.

Key Components:
- Item: A single path-addressed, overridable configuration value
- Manager: Catalog of items bound to a storage, with cached config composition
- Storages: MemoryStorage, FileStorage, DbStorage, RecordStorage
- AppConfigurator: Flask extension applying the overrides before each request
- Admin API and CLI for editing the stored values

Usage Examples:
    # Override Flask settings from a database table
    from flask import Flask
    from ConfigDeck import AppConfigurator, Manager

    app = Flask(__name__)
    manager = Manager(
        items={
            'mailServer': {'path': 'config.MAIL_SERVER', 'label': 'Mail server', 'rules': [['required']]},
            'pageSize': {'path': 'config.PAGE_SIZE', 'cast': 'int', 'rules': [['integer', {'min': 1}]]},
        },
        storage={'class': 'db', 'db': 'sqlite:///app_config.db'},
    )
    AppConfigurator(manager, app)

    # Setting the log level
    from ConfigDeck import set_log_level
    set_log_level('debug')  # Show more detailed logs
"""

__version__ = '1.0.0'

from ConfigDeck.utils.logging import get_logger, set_log_level, configure_logging
from ConfigDeck.settings import get_settings

# Get a logger for the main package
logger = get_logger(__name__)


def initialize_settings() -> bool:
    """
    Load ConfigDeck settings from the standard locations.

    Returns:
        bool: True if a settings file was found and loaded, False if using defaults
    """
    logger.debug("Initializing settings")
    return get_settings().load_config()


# Import key components to expose in the package namespace
from ConfigDeck.core.item import Item
from ConfigDeck.core.manager import Manager
from ConfigDeck.storage import DbStorage, FileStorage, MemoryStorage, RecordStorage, Storage
from ConfigDeck.api.configurator import AppConfigurator

__all__ = [
    'Item',
    'Manager',
    'Storage',
    'MemoryStorage',
    'FileStorage',
    'DbStorage',
    'RecordStorage',
    'AppConfigurator',
    'initialize_settings',
    'get_settings',
    'set_log_level',
    'configure_logging',
]
