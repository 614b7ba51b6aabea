"""
Settings manager for ConfigDeck.

This module implements the SettingsManager class that holds ConfigDeck's own
settings (database connection, default storage, cache and logging) with
support for hierarchical keys, deep merging, and loading from files.

These are the library's settings, not the application configuration items
managed by ConfigDeck.core.manager.Manager.
"""

import os
import json
import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union, List

import yaml

from ConfigDeck.exceptions import ConfigurationError
from ConfigDeck.settings.defaults import DEFAULT_CONFIG
from ConfigDeck.settings.schema import validate_settings
from ConfigDeck.settings.utils import deep_merge
from ConfigDeck.utils.logging import get_logger


def load_structured_file(path: Union[str, Path]) -> Any:
    """
    Load a YAML or JSON file, choosing the parser by extension.

    ``.json`` files are parsed as JSON; everything else as YAML, which is a
    superset of JSON for the documents ConfigDeck writes.

    Args:
        path: Path to the file

    Returns:
        The parsed document (None for an empty YAML file)

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() == '.json':
            return json.load(f)
        return yaml.safe_load(f)


class SettingsManager:
    """
    Settings manager for ConfigDeck.

    Implements a singleton pattern to ensure only one settings instance
    exists across the application.

    Features:
    - Hierarchical key access (e.g., "storage.table")
    - Deep merging of settings dictionaries
    - Loading from YAML or JSON files
    - Settings validation

    Attributes:
        _instance (SettingsManager): The singleton instance
        _config (Dict[str, Any]): The settings dictionary
        logger: The logger instance
    """
    _instance = None

    def __new__(cls) -> 'SettingsManager':
        if cls._instance is None:
            cls._instance = super(SettingsManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        """Reset the settings to the defaults from DEFAULT_CONFIG."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self.logger = get_logger(__name__)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a settings value using dot notation.

        Args:
            key (str): Hierarchical key using dot notation (e.g., "storage.table")
            default (Any, optional): Value returned if key is not found. Defaults to None.

        Returns:
            Any: The settings value if found, otherwise the default value.

        Examples:
            >>> settings = get_settings()
            >>> table = settings.get("storage.table", "app_config")
        """
        if not key:
            return default

        value = self._config
        for part in key.split('.'):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set a settings value using dot notation.

        Creates intermediate dictionaries if they don't exist.

        Args:
            key (str): Hierarchical key using dot notation (e.g., "cache.duration")
            value (Any): Value to set

        Examples:
            >>> get_settings().set("storage.class", "file")
        """
        if not key:
            return

        parts = key.split('.')
        config = self._config

        for part in parts[:-1]:
            if part not in config or not isinstance(config[part], dict):
                config[part] = {}
            config = config[part]

        config[parts[-1]] = value

    def get_database_uri(self) -> str:
        """
        Get the database URI used by database-backed storages.

        For SQLite this includes the path to the database file, for PostgreSQL
        the connection parameters.

        Returns:
            str: The database URI
        """
        db_type = self.get("database.type", "sqlite")

        if db_type == "sqlite":
            path = self.get("database.sqlite.path")

            if path is None:
                path = str(Path.home() / ".configdeck" / "configdeck.db")
                os.makedirs(os.path.dirname(path), exist_ok=True)

            return f"sqlite:///{path}"

        elif db_type == "postgresql":
            host = self.get("database.postgresql.host", "localhost")
            port = self.get("database.postgresql.port", 5432)
            database = self.get("database.postgresql.database", "configdeck")
            user = self.get("database.postgresql.user")
            password = self.get("database.postgresql.password")

            uri = "postgresql://"
            if user:
                uri += user
                if password:
                    uri += f":{password}"
                uri += "@"
            uri += f"{host}:{port}/{database}"

            return uri

        raise ConfigurationError(
            message=f"Unsupported database type: {db_type}",
            context={"database.type": db_type}
        )

    def get_storage_file(self) -> str:
        """
        Get the path of the flat-file storage.

        Returns:
            str: The configured path, or ~/.configdeck/app_config_data.yml
        """
        path = self.get("storage.file.path")
        if path is None:
            path = str(Path.home() / ".configdeck" / "app_config_data.yml")
        return path

    def get_cache_settings(self) -> Dict[str, Any]:
        """
        Get composed-config cache settings.

        A disabled cache is reported as a negative duration, which managers
        treat as "do not cache".

        Returns:
            Dict[str, Any]: Dictionary with cache settings (id, duration)
        """
        duration = self.get("cache.duration", 0)
        if not self.get("cache.enabled", True):
            duration = -1
        return {
            "id": self.get("cache.id", "ConfigDeck.core.manager.Manager"),
            "duration": duration
        }

    def find_config_file(self) -> Optional[Path]:
        """
        Find the settings file in standard locations.

        Searches in the following order:
        1. Current working directory: ./configdeck.yml
        2. User's home directory: ~/.configdeck/configdeck.yml

        Returns:
            Optional[Path]: Path to the settings file if found, None otherwise
        """
        search_locations = [
            Path.cwd() / 'configdeck.yml',
            Path.home() / '.configdeck' / 'configdeck.yml',
        ]

        for path in search_locations:
            if path.is_file():
                self.logger.debug(f"Found settings file at: {path}")
                return path

        self.logger.debug("No settings file found in standard locations")
        return None

    def load_config(self) -> bool:
        """
        Load settings from the first available standard location.

        If no file is found, or the file is invalid, the current settings are kept.

        Returns:
            bool: True if a settings file was found and loaded, False otherwise
        """
        config_path = self.find_config_file()

        if not config_path:
            self.logger.info("No settings file found, using defaults")
            return False

        try:
            errors = self.load_from_file(config_path)
        except (OSError, yaml.YAMLError, ValueError) as e:
            self.logger.error(f"Failed to load settings file: {e}")
            return False

        if errors:
            self.logger.warning(f"Settings validation errors: {errors}")
            return False

        self.logger.info(f"Loaded settings from {config_path}")
        return True

    def load_from_file(self, path: Union[str, Path]) -> Dict[str, List[str]]:
        """
        Load settings from a specific YAML or JSON file.

        The file is merged over the current settings only when it validates.

        Args:
            path (Union[str, Path]): Path to the settings file

        Returns:
            Dict[str, List[str]]: Dictionary of validation errors, if any

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file extension is not supported
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        if path.suffix.lower() not in ('.yaml', '.yml', '.json'):
            raise ValueError(f"Unsupported settings file format: {path.suffix}")

        config = load_structured_file(path) or {}

        errors = validate_settings(config)
        if not errors:
            self._config = deep_merge(self._config, config)

        return errors

    def get_all(self) -> Dict[str, Any]:
        """
        Get a copy of the entire settings dictionary.

        Returns:
            Dict[str, Any]: The entire settings dictionary
        """
        return copy.deepcopy(self._config)


def get_settings() -> SettingsManager:
    """
    Get the singleton SettingsManager instance.

    Examples:
        >>> from ConfigDeck.settings import get_settings
        >>> storage_class = get_settings().get("storage.class")
    """
    return SettingsManager()
