"""
Config path handling for ConfigDeck.

A config path is an ordered sequence of keys locating a value inside a nested
configuration tree, for example ``"config.MAIL_SERVER"`` or
``["components", "mailer", "host"]``.

Path extraction walks a source tree one segment at a time. Every node of the
tree is classified into one of three kinds:

- MAPPING: dicts and other mappings, plus lists and tuples (indexed by position)
- OBJECT: any other object; segments resolve to attributes, then to
  ``__getitem__`` access. An object offering ``get_components()`` resolves the
  literal segment ``"components"`` through that registry.
- SCALAR: strings, numbers, booleans and None; nothing can be extracted from them
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, List, Sequence, Union

from ConfigDeck.exceptions import ConfigurationError, PathLookupError, PathTypeError

PathLike = Union[str, Sequence[Any]]

# Segment that is resolved through a component registry when the source offers one
COMPONENTS_SEGMENT = 'components'

SCALAR_TYPES = (str, bytes, int, float, complex, bool, type(None))


class SourceKind(Enum):
    """Kinds of config tree nodes path extraction knows how to handle."""
    MAPPING = 'mapping'
    OBJECT = 'object'
    SCALAR = 'scalar'


def classify_source(source: Any) -> SourceKind:
    """
    Classify a config tree node.

    Args:
        source: The node to classify

    Returns:
        The node's SourceKind
    """
    if isinstance(source, SCALAR_TYPES):
        return SourceKind.SCALAR
    if isinstance(source, (Mapping, list, tuple)):
        return SourceKind.MAPPING
    return SourceKind.OBJECT


def normalize_path(path: PathLike) -> List[Any]:
    """
    Normalize a dotted path string or a segment sequence into a list of segments.

    Args:
        path: "a.b.c" or ["a", "b", "c"]

    Returns:
        List of path segments
    """
    if isinstance(path, str):
        return path.split('.')
    return list(path)


def _lookup_mapping(source: Any, name: Any) -> Any:
    if isinstance(source, Mapping):
        if name not in source:
            raise PathLookupError(f'Key "{name}" not present!', context={"key": name})
        return source[name]

    # lists and tuples: segments are positions
    try:
        return source[int(name)]
    except (ValueError, TypeError, IndexError) as e:
        raise PathLookupError(f'Key "{name}" not present!', context={"key": name}, cause=e) from e


def _lookup_object(source: Any, name: Any) -> Any:
    if name == COMPONENTS_SEGMENT and callable(getattr(source, 'get_components', None)):
        return source.get_components()

    if isinstance(name, str) and hasattr(source, name):
        return getattr(source, name)

    if hasattr(source, '__getitem__'):
        try:
            return source[name]
        except (KeyError, IndexError, TypeError) as e:
            raise PathLookupError(
                f'Property "{type(source).__name__}::{name}" not present!',
                context={"key": name},
                cause=e
            ) from e

    raise PathLookupError(
        f'Property "{type(source).__name__}::{name}" not present!',
        context={"key": name}
    )


def find_path_value(source: Any, path_parts: Sequence[Any]) -> Any:
    """
    Find the value located by the given path parts inside a source tree.

    Args:
        source: Config source (mapping, object or sequence)
        path_parts: Path segments, at least one

    Returns:
        The value found at the path

    Raises:
        PathLookupError: If the path is empty or a segment is not present
        PathTypeError: If the path descends into a scalar value
    """
    if not path_parts:
        raise PathLookupError('Empty extraction path.')

    name = path_parts[0]
    rest = path_parts[1:]

    kind = classify_source(source)
    if kind is SourceKind.MAPPING:
        result = _lookup_mapping(source, name)
    elif kind is SourceKind.OBJECT:
        result = _lookup_object(source, name)
    else:
        remaining = '.'.join(str(part) for part in path_parts)
        raise PathTypeError(
            f'Unable to extract path "{remaining}" from "{type(source).__name__}"',
            context={"path": remaining}
        )

    if not rest:
        return result

    return find_path_value(result, rest)


def compose_path_value(path_parts: Sequence[Any], value: Any) -> Dict[Any, Any]:
    """
    Compose the nested configuration fragment placing value at the given path.

    Args:
        path_parts: Path segments, at least one
        value: Value for the innermost key

    Returns:
        Nested single-key dictionaries, e.g. {"a": {"b": value}}

    Raises:
        ConfigurationError: If the path is empty
    """
    if not path_parts:
        raise ConfigurationError('Empty composition path.')

    name = path_parts[0]
    rest = path_parts[1:]

    if not rest:
        return {name: value}

    return {name: compose_path_value(rest, value)}
