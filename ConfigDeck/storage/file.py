"""
Flat-file config storage.

Values are kept in a single YAML document, or a JSON one when the file name
ends with ``.json``.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ConfigDeck.exceptions import StorageError
from ConfigDeck.settings import get_settings, load_structured_file
from ConfigDeck.storage.base import Storage
from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)


class FileStorage(Storage):
    """
    Stores config values in a YAML or JSON file.

    Saving replaces the whole file, so callers pass the complete value set.

    Args:
        file_name: Path of the storage file; defaults to the ``storage.file.path``
            setting, or ~/.configdeck/app_config_data.yml
    """

    def __init__(self, file_name: Optional[Union[str, Path]] = None) -> None:
        self._file_name = str(file_name) if file_name else None

    @property
    def file_name(self) -> str:
        if not self._file_name:
            self._file_name = get_settings().get_storage_file()
        return self._file_name

    @file_name.setter
    def file_name(self, value: Union[str, Path]) -> None:
        self._file_name = str(value)

    @property
    def is_json(self) -> bool:
        return Path(self.file_name).suffix.lower() == '.json'

    def save(self, values: Dict[Any, Any]) -> bool:
        self.clear()

        file_name = self.file_name
        os.makedirs(os.path.dirname(os.path.abspath(file_name)), exist_ok=True)

        content = self.compose_file_content(values)
        try:
            with open(file_name, 'w', encoding='utf-8') as f:
                written = f.write(content)
        except OSError as e:
            raise StorageError(
                f"Unable to write config storage file {file_name}: {e}",
                context={"file_name": file_name},
                cause=e
            ) from e
        self.invalidate_file_cache(file_name)

        logger.debug(f"Wrote {len(values)} config values to {file_name}")
        return written > 0

    def get(self) -> Dict[Any, Any]:
        file_name = self.file_name
        if not os.path.exists(file_name):
            return {}

        try:
            data = load_structured_file(file_name)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise StorageError(
                f"Unable to read config storage file {file_name}: {e}",
                context={"file_name": file_name},
                cause=e
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageError(
                f"Config storage file {file_name} should hold a mapping, {type(data).__name__} found.",
                context={"file_name": file_name}
            )
        return data

    def clear(self) -> bool:
        file_name = self.file_name
        if os.path.exists(file_name):
            self.invalidate_file_cache(file_name)
            os.remove(file_name)
        return True

    def compose_file_content(self, values: Dict[Any, Any]) -> str:
        if self.is_json:
            return json.dumps(values, indent=2, ensure_ascii=False)
        return yaml.safe_dump(values, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def invalidate_file_cache(self, file_name: str) -> None:
        """
        Hook called after the storage file is written or deleted.

        Override it when something else caches the file content, e.g. a
        process reloading settings on change.
        """
