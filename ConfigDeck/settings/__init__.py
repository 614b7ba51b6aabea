"""
ConfigDeck settings system.

This package holds ConfigDeck's own settings (which database and storage to
use, cache duration, logging) with support for hierarchical keys, deep
merging, and validation.

Usage:
    from ConfigDeck.settings import get_settings

    # Get a settings value
    storage_class = get_settings().get("storage.class")

    # Set a settings value
    get_settings().set("cache.duration", 300)

    # Load settings from standard locations
    get_settings().load_config()
"""

from ConfigDeck.settings.manager import SettingsManager, get_settings, load_structured_file
from ConfigDeck.settings.schema import validate_settings
from ConfigDeck.settings.utils import deep_merge, merge_all

__all__ = [
    "SettingsManager",
    "get_settings",
    "load_structured_file",
    "validate_settings",
    "deep_merge",
    "merge_all",
]
