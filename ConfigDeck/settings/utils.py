"""
Utility functions for the ConfigDeck settings system and config composition.

This module provides the recursive dictionary merge used both to layer
settings files over defaults and to combine the fragments composed by
config items into one application configuration tree.
"""

from typing import Any, Dict, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two dictionaries, with override values taking precedence.

    Rules:
    - If both values are dictionaries, recursively merge them
    - If the value is a list, replace it completely (no merging)
    - Otherwise, override the base value with the override value

    Neither input is mutated.

    Args:
        base: Base dictionary
        override: Dictionary with values to override

    Returns:
        New dictionary with merged values
    """
    result = dict(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def merge_all(*fragments: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge any number of dictionaries in order.

    Later fragments win on colliding scalar keys; colliding mappings are merged.

    Args:
        *fragments: Dictionaries to merge, earliest first

    Returns:
        New merged dictionary (empty when no fragments are given)
    """
    result: Dict[str, Any] = {}
    for fragment in fragments:
        result = deep_merge(result, fragment)
    return result
