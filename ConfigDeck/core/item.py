"""
Config item module for the ConfigDeck package.

An Item represents a single overridable application configuration value. It
extracts its current value from a configuration source by path, composes the
configuration fragment that applies its value, converts the value to and from
the representation kept in persistent storage, and validates it.
"""

import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence, Union

from ConfigDeck.core.paths import (
    PathLike,
    compose_path_value,
    find_path_value,
    normalize_path,
)
from ConfigDeck.core.validators import Validator, create_validator
from ConfigDeck.exceptions import ConfigurationError
from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)


class _Unset:
    """Marker for a value that was never initialised."""

    def __repr__(self) -> str:
        return 'UNSET'


UNSET = _Unset()

# Cast names accepted by Item.cast
CAST_TYPES = (
    'int', 'integer',
    'float', 'real', 'double',
    'string', 'str',
    'bool', 'boolean',
    'object',
    'array', 'json',
)

_FALSE_STRINGS = ('', '0', 'false', 'no', 'off')


class Item:
    """
    A single application configuration item.

    The item is addressed by path inside its source: either a dotted string
    ('config.MAIL_SERVER') or a sequence of keys (['config', 'MAIL_SERVER']).
    Without a path the item points to ``params.<id>``.

    Attributes:
        id: Config item unique identifier
        path: Config path (string or sequence of keys)
        label: Label for the value, used in validation messages
        description: Brief description of the item
        cast: Native type the stored value is cast to (see CAST_TYPES)
        options: Additional descriptive options, e.g. form input hints
        source: Configuration source the value is extracted from

    Example:
        >>> item = Item(id='appName', path='name', source={'name': 'My App'})
        >>> item.get_value()
        'My App'
        >>> item.set_value('Override').compose_config()
        {'name': 'Override'}
    """

    def __init__(
        self,
        id: Union[str, int, None] = None,
        path: Optional[PathLike] = None,
        label: str = 'Value',
        description: Optional[str] = None,
        cast: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
        rules: Optional[Sequence[Any]] = None,
        source: Any = None,
        value: Any = UNSET,
    ) -> None:
        self.id = id
        self.path = path
        self.label = label
        self.description = description
        self.cast = cast
        self.options = options
        self.source = source

        self._rules: List[Any] = list(rules or [])
        self._value = value
        self._origin_value = UNSET
        self._errors: List[str] = []
        self._validators: Optional[List[Validator]] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, path={self.path!r})"

    # Value lifecycle

    def get_value(self) -> Any:
        """
        Return the current value, extracting it from the source on first access.
        """
        if self._value is UNSET:
            self._value = self.extract_current_value()

        return self._value

    def set_value(self, value: Any) -> 'Item':
        """
        Set the value.

        The first call after construction, or after reset_value(), remembers
        the value that was current before it, so that reset_value() can restore it.

        Returns:
            Item: self reference
        """
        if self._origin_value is UNSET:
            self._origin_value = self.get_value()

        self._value = value

        return self

    value = property(get_value, set_value)

    def has_origin_value(self) -> bool:
        """Whether the value was overridden since construction or the last reset."""
        return self._origin_value is not UNSET

    def reset_value(self) -> 'Item':
        """
        Restore the value the item held before it was first overridden.

        Returns:
            Item: self reference
        """
        if self._origin_value is not UNSET:
            self._value = self._origin_value
            self._origin_value = UNSET

        return self

    def serialize_value(self) -> Any:
        """
        Prepare the value for the persistent storage.

        Values of items with a cast are JSON-encoded unless they are None or
        scalar, so storages holding flat values can keep them.

        Returns:
            Any: value to be saved in persistent storage
        """
        value = self.get_value()

        if self.cast is None:
            return value

        if value is None or isinstance(value, (str, int, float, bool)):
            return value

        return json.dumps(value, default=_encode_namespace)

    def unserialize_value(self, value: Any) -> Any:
        """
        Restore the value from the raw one kept in persistent storage.

        Args:
            value: Raw value from persistent storage

        Returns:
            Any: the actual config value, which is also set on the item
        """
        value = self.cast_value(value)

        self.set_value(value)

        return value

    def cast_value(self, value: Any) -> Any:
        """
        Typecast a raw value from persistent storage according to cast.

        Args:
            value: Raw value

        Returns:
            Any: the value after typecast

        Raises:
            ConfigurationError: If cast holds an unsupported type name
        """
        if self.cast is None or value is None:
            return value

        cast = self.cast
        if cast in ('int', 'integer', 'float', 'real', 'double'):
            try:
                return self._cast_number(value, cast in ('int', 'integer'))
            except (ValueError, TypeError, OverflowError) as e:
                raise ConfigurationError(
                    f'Unable to cast value {value!r} of config item "{self.id}" to {cast}: {e}',
                    context={"item": self.id, "cast": cast},
                    cause=e
                ) from e
        if cast in ('string', 'str'):
            return str(value)
        if cast in ('bool', 'boolean'):
            if isinstance(value, str):
                return value.strip().lower() not in _FALSE_STRINGS
            return bool(value)
        if cast == 'object':
            return _decode_json(value, object_hook=lambda fields: SimpleNamespace(**fields))
        if cast in ('array', 'json'):
            return _decode_json(value)

        raise ConfigurationError(
            f'Unsupported "{type(self).__name__}.cast" value: {cast!r}',
            context={"item": self.id, "cast": cast}
        )

    @staticmethod
    def _cast_number(value: Any, integer: bool) -> Any:
        if not integer:
            return float(value)
        if isinstance(value, str):
            value = value.strip()
            return int(value) if value.lstrip('+-').isdigit() else int(float(value))
        return int(value)

    # Paths

    def get_path_parts(self) -> List[Any]:
        """
        Return the config path parts.

        Returns:
            List[Any]: config path segments
        """
        if not self.path:
            self.path = self.compose_default_path()

        return normalize_path(self.path)

    def compose_default_path(self) -> List[Any]:
        """
        Compose the default config path, pointing to ``params`` with the key equal to id.
        """
        return ['params', self.id]

    def extract_current_value(self) -> Any:
        """
        Extract the current value from the config source.

        Raises:
            ConfigurationError: If the item has no source
            PathLookupError: If the path is not present in the source
            PathTypeError: If the path descends into a scalar value
        """
        if self.source is None:
            raise ConfigurationError(
                f'Config item "{self.id}" has no source to extract its value from.',
                context={"item": self.id}
            )

        return self.find_config_path_value(self.source, self.get_path_parts())

    def find_config_path_value(self, source: Any, path_parts: Sequence[Any]) -> Any:
        """
        Find the given config path inside the given source.

        Args:
            source: Config source
            path_parts: Config path parts

        Returns:
            Any: config value
        """
        return find_path_value(source, path_parts)

    def compose_config(self) -> Dict[Any, Any]:
        """
        Compose the configuration fragment which applies this item's value.

        Returns:
            Dict[Any, Any]: nested configuration dictionary
        """
        return self.compose_config_path_value(self.get_path_parts())

    def compose_config_path_value(self, path_parts: Sequence[Any]) -> Dict[Any, Any]:
        """
        Compose the configuration dictionary for the given path parts.

        Raises:
            ConfigurationError: If path_parts is empty
        """
        if not path_parts:
            raise ConfigurationError('Empty composition path.', context={"item": self.id})

        return compose_path_value(path_parts, self.get_value())

    # Validation

    def set_rules(self, rules: Sequence[Any]) -> 'Item':
        """
        Set validation rules. Each rule names a validator followed by its parameters.

        Returns:
            Item: self reference
        """
        self._rules = list(rules)
        self._validators = None

        return self

    def get_rules(self) -> List[Any]:
        return self._rules

    rules = property(get_rules, set_rules)

    def create_validators(self) -> List[Validator]:
        """
        Create validator objects from rules, with an implicit "safe" rule first.

        Raises:
            ConfigurationError: If a rule does not specify the validator name
        """
        validators = []

        for rule in [['safe']] + list(self.get_rules()):
            if isinstance(rule, str):
                rule = [rule]

            if not rule or rule[0] is None:
                raise ConfigurationError(
                    f'Invalid validation rule for "{self.label}". The rule must specify the validator name.',
                    context={"item": self.id}
                )

            validators.append(create_validator(rule[0], rule[1:]))

        return validators

    def get_validators(self) -> List[Validator]:
        if self._validators is None:
            self._validators = self.create_validators()

        return self._validators

    def validate(self, clear_errors: bool = True) -> bool:
        """
        Validate the value against the rules.

        Args:
            clear_errors: Whether to discard errors of previous validations first

        Returns:
            bool: whether the validation passed without any error
        """
        if clear_errors:
            self.clear_errors()

        for validator in self.get_validators():
            validator.validate(self)

        if self._errors:
            logger.debug(f"Config item '{self.id}' failed validation: {self._errors}")

        return not self._errors

    def add_error(self, message: str) -> None:
        self._errors.append(message)

    def get_errors(self) -> List[str]:
        return list(self._errors)

    def has_errors(self) -> bool:
        return bool(self._errors)

    def clear_errors(self) -> None:
        self._errors = []

    def to_dict(self) -> Dict[str, Any]:
        """
        Describe the item, including its current value.

        Returns:
            Dict[str, Any]: id, label, description, path, cast, options and value
        """
        return {
            'id': self.id,
            'label': self.label,
            'description': self.description,
            'path': '.'.join(str(part) for part in self.get_path_parts()),
            'cast': self.cast,
            'options': self.options,
            'value': self.get_value(),
        }


def _decode_json(value: Any, object_hook: Any = None) -> Any:
    if not isinstance(value, (str, bytes, bytearray)):
        # Already decoded, e.g. a storage keeping structured values
        return value
    try:
        return json.loads(value, object_hook=object_hook)
    except ValueError as e:
        raise ConfigurationError(f'Unable to decode JSON value: {e}', cause=e) from e


def _encode_namespace(value: Any) -> Any:
    if isinstance(value, SimpleNamespace):
        return vars(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
