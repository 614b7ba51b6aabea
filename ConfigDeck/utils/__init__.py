"""
Utility functions for the ConfigDeck package.

This module provides helpers shared by the CLI, the admin API and the
storage backends: JSON formatting and dotted import-path resolution.
"""

import json
from importlib import import_module
from typing import Any

from ConfigDeck.exceptions import ConfigurationError
from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)


def format_json(data: Any, indent: int = 2, sort_keys: bool = False) -> str:
    """
    Format data as JSON string with proper encoding.

    Args:
        data: The data to format as JSON
        indent: Number of spaces for indentation (default: 2)
        sort_keys: Whether to sort dictionary keys (default: False)

    Returns:
        A formatted JSON string

    Example:
        >>> print(format_json({'params': {'adminEmail': 'admin@example.com'}}))
        {
          "params": {
            "adminEmail": "admin@example.com"
          }
        }
    """
    return json.dumps(
        data,
        indent=indent,
        ensure_ascii=False,
        sort_keys=sort_keys,
        default=str  # Handle non-serializable types
    )


def import_string(dotted_path: str) -> Any:
    """
    Import a class or attribute from a dotted path such as ``package.module.Class``.

    Args:
        dotted_path: Module path and attribute name separated by the last dot

    Returns:
        The imported attribute

    Raises:
        ConfigurationError: If the module or attribute cannot be imported
    """
    try:
        module_path, attribute = dotted_path.rsplit('.', 1)
    except ValueError as e:
        raise ConfigurationError(f'"{dotted_path}" is not a valid import path.', cause=e) from e

    try:
        module = import_module(module_path)
    except ImportError as e:
        raise ConfigurationError(f'Unable to import module "{module_path}": {e}', cause=e) from e

    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise ConfigurationError(f'Module "{module_path}" does not define "{attribute}".', cause=e) from e
