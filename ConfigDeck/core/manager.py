"""
Config manager module for the ConfigDeck package.

The Manager holds a catalog of config items, binds them to a persistent
storage, and composes the application configuration overrides from their
values. The composed configuration is cached, since it is fetched on every
request.

Example:
    >>> manager = Manager(
    ...     items={
    ...         'appName': {'path': 'name', 'label': 'Application name', 'rules': [['required']]},
    ...         'pageSize': {'path': 'params.pageSize', 'cast': 'int'},
    ...     },
    ...     storage={'class': 'memory'},
    ...     source={'name': 'My App', 'params': {'pageSize': 20}},
    ... )
    >>> _ = manager.set_item_values({"pageSize": 50}).save()
    >>> manager.fetch_config()
    {'name': 'My App', 'params': {'pageSize': 50}}
"""

import os
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from ConfigDeck.core.cache import MISSING, Cache, MemoryCache
from ConfigDeck.core.item import Item
from ConfigDeck.exceptions import ConfigurationError, ItemNotFoundError
from ConfigDeck.settings import get_settings, load_structured_file, merge_all
from ConfigDeck.storage import Storage, create_storage
from ConfigDeck.utils import import_string
from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)

ItemsSpec = Union[Mapping[Any, Union[Item, Mapping[str, Any]]], str, os.PathLike]


class Manager:
    """
    Manages application configuration items stored in persistent storage.

    Args:
        items: Config items, a mapping of item id to an Item or its specification
            dict, or the path of a YAML/JSON file holding such a mapping
        storage: Storage instance or its specification dict; defaults to the
            ``storage.*`` settings
        source: Configuration source items extract their values from
        cache: Cache for the composed config (get/set/delete); defaults to a
            MemoryCache of its own
        cache_id: Cache key for the composed config
        cache_duration: Cache duration in seconds; 0 means never expire, a
            negative value disables caching
    """

    def __init__(
        self,
        items: Optional[ItemsSpec] = None,
        storage: Optional[Union[Storage, Mapping[str, Any]]] = None,
        source: Any = None,
        cache: Optional[Cache] = None,
        cache_id: Optional[str] = None,
        cache_duration: Optional[int] = None,
    ) -> None:
        cache_settings = get_settings().get_cache_settings()

        self.source = source
        self.cache = cache if cache is not None else MemoryCache()
        self.cache_id = cache_id or cache_settings["id"]
        self.cache_duration = cache_duration if cache_duration is not None else cache_settings["duration"]

        self._items: Any = OrderedDict()
        self._storage: Any = None

        if items is not None:
            self.set_items(items)
        if storage is not None:
            self.set_storage(storage)

    # Storage

    def set_storage(self, storage: Union[Storage, Mapping[str, Any]]) -> 'Manager':
        """
        Set the storage, as an instance or a specification dict with a "class" key.

        Raises:
            ConfigurationError: If storage is neither a Storage nor a mapping
        """
        if not isinstance(storage, (Storage, Mapping)):
            raise ConfigurationError(
                f'"{type(self).__name__}.storage" should be an instance of "{Storage.__name__}" '
                f'or its specification dict. "{type(storage).__name__}" given.'
            )
        self._storage = storage
        return self

    def get_storage(self) -> Storage:
        """Return the storage, creating it from its specification on first access."""
        if self._storage is None:
            self._storage = self.default_storage_spec()

        if not isinstance(self._storage, Storage):
            self._storage = create_storage(self._storage)

        return self._storage

    storage = property(get_storage, set_storage)

    def default_storage_spec(self) -> Dict[str, Any]:
        """The storage specification used when none was given, from the settings."""
        settings = get_settings()
        storage_class = settings.get("storage.class", "db")
        if storage_class == "file":
            return {"class": "file", "file_name": settings.get_storage_file()}
        return {"class": storage_class}

    # Items

    def set_items(self, items: ItemsSpec) -> 'Manager':
        """
        Set the config items.

        Args:
            items: Mapping of item id to Item or specification dict, or the path
                of a YAML/JSON file holding that mapping (loaded on first access)
        """
        if isinstance(items, (str, os.PathLike)):
            self._items = os.fspath(items)
        else:
            self._items = OrderedDict(items)
        return self

    def _normalize_items(self) -> None:
        if isinstance(self._items, OrderedDict):
            return

        if isinstance(self._items, str):
            file_name = self._items
            if not os.path.isfile(file_name):
                raise ConfigurationError(f'File "{file_name}" does not exist.', context={"file_name": file_name})
            try:
                items = load_structured_file(file_name)
            except (OSError, ValueError, yaml.YAMLError) as e:
                raise ConfigurationError(f'Unable to load items from "{file_name}": {e}', cause=e) from e
            if not isinstance(items, Mapping):
                raise ConfigurationError(
                    f'File "{file_name}" should hold a mapping of item id to item specification.',
                    context={"file_name": file_name}
                )
            logger.debug(f"Loaded {len(items)} config item specifications from {file_name}")
            self._items = OrderedDict(items)
            return

        raise ConfigurationError(
            f'"{type(self).__name__}.items" should be a mapping or the name of a file containing it.'
        )

    def get_items(self) -> 'OrderedDict[Any, Item]':
        """
        Return all config items, creating them from their specifications as needed.

        Returns:
            OrderedDict[Any, Item]: item id to item, in registration order
        """
        self._normalize_items()
        return OrderedDict((item_id, self.get_item(item_id)) for item_id in list(self._items))

    def get_item(self, item_id: Any) -> Item:
        """
        Return the config item with the given id.

        Raises:
            ItemNotFoundError: If no item has this id
        """
        self._normalize_items()

        if item_id not in self._items:
            raise ItemNotFoundError(
                f"Unknown config item '{item_id}'.",
                context={"item": item_id}
            )

        item = self._items[item_id]
        if not isinstance(item, Item):
            item = self.create_item(item_id, item)
            self._items[item_id] = item
        else:
            if item.id is None:
                item.id = item_id
            if item.source is None:
                item.source = self.source

        return item

    def has_item(self, item_id: Any) -> bool:
        self._normalize_items()
        return item_id in self._items

    def create_item(self, item_id: Any, spec: Mapping[str, Any]) -> Item:
        """
        Create a config item from its specification.

        The spec may name an Item subclass (or its import path) under "class".
        """
        if not isinstance(spec, Mapping):
            raise ConfigurationError(
                f'Config item "{item_id}" should be an Item or its specification dict. '
                f'"{type(spec).__name__}" given.'
            )

        options = dict(spec)
        item_class = options.pop('class', None) or Item
        if isinstance(item_class, str):
            item_class = import_string(item_class)
        if not (isinstance(item_class, type) and issubclass(item_class, Item)):
            raise ConfigurationError(f'Config item "{item_id}" class should be an Item subclass.')

        options['id'] = item_id
        if options.get('source') is None:
            options['source'] = self.source

        try:
            return item_class(**options)
        except TypeError as e:
            raise ConfigurationError(f'Invalid specification for config item "{item_id}": {e}', cause=e) from e

    def set_item_values(self, item_values: Mapping[Any, Any]) -> 'Manager':
        """
        Set the values of several items at once.

        Raises:
            ItemNotFoundError: If an id does not belong to a managed item
        """
        for item_id, value in item_values.items():
            self.get_item(item_id).set_value(value)
        return self

    def get_item_values(self) -> Dict[Any, Any]:
        """Return the current value of every item, by id."""
        return {item_id: item.get_value() for item_id, item in self.get_items().items()}

    # Configuration

    def compose_config(self) -> Dict[Any, Any]:
        """
        Compose the application configuration from all items.

        Returns:
            Dict[Any, Any]: deep merge of every item's config fragment
        """
        return merge_all(*(item.compose_config() for item in self.get_items().values()))

    def save(self) -> 'Manager':
        """Save the current values of all items in persistent storage."""
        values = {item_id: item.serialize_value() for item_id, item in self.get_items().items()}

        if self.get_storage().save(values):
            self.invalidate_cache()
            logger.info(f"Saved {len(values)} config values")

        return self

    def restore(self) -> 'Manager':
        """
        Restore item values from persistent storage.

        Stored values with no matching item are ignored. Storages keeping keys
        as text (tables, JSON files) give back integer ids as strings, so a
        stored key also matches the item whose id has the same text form.
        """
        stored_values = self.get_storage().get()
        stored_by_text = {str(key): value for key, value in stored_values.items()}

        for item_id, item in self.get_items().items():
            if item_id in stored_values:
                item.unserialize_value(stored_values[item_id])
            elif str(item_id) in stored_by_text:
                item.unserialize_value(stored_by_text[str(item_id)])

        return self

    def reset(self) -> 'Manager':
        """Clear persistent storage and restore the original value of every item."""
        self.get_storage().clear()
        self.invalidate_cache()

        for item in self.get_items().values():
            item.reset_value()

        logger.info("Reset all config values")
        return self

    def reset_value(self, key: Any) -> 'Manager':
        """
        Clear one item's value from persistent storage and restore its original value.

        Raises:
            ItemNotFoundError: If key does not belong to a managed item
        """
        item = self.get_item(key)

        self.get_storage().clear_value(key)
        self.invalidate_cache()

        item.reset_value()

        logger.info(f"Reset config value '{key}'")
        return self

    def fetch_config(self) -> Dict[Any, Any]:
        """
        Return the composed configuration, restoring it from storage on a cache miss.

        Returns:
            Dict[Any, Any]: application configuration overrides
        """
        if self.cache_duration is not None and self.cache_duration < 0:
            return self.restore().compose_config()

        config = self.cache.get(self.cache_id)
        if config is MISSING:
            logger.debug(f"Config cache miss: {self.cache_id}")
            config = self.restore().compose_config()
            self.cache.set(self.cache_id, config, self.cache_duration)
        else:
            logger.debug(f"Config cache hit: {self.cache_id}")

        return config

    def invalidate_cache(self) -> None:
        self.cache.delete(self.cache_id)

    # Validation

    def validate(self) -> bool:
        """
        Validate all items. Every item is validated even after a failure.

        Returns:
            bool: whether all items are valid
        """
        result = True
        for item in self.get_items().values():
            result = item.validate() and result
        return result

    def get_errors(self) -> Dict[Any, List[str]]:
        """Return validation errors of the items which have any, by id."""
        return {
            item_id: item.get_errors()
            for item_id, item in self.get_items().items()
            if item.has_errors()
        }
