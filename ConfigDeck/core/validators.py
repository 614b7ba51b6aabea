"""
Validation rules for config items.

Each config item declares its rules as a list of sequences, each naming a
validator followed by optional positional parameters and an optional trailing
dict of keyword options:

    rules = [
        ["required"],
        ["integer", {"min": 1, "max": 65535}],
        ["in", ["smtp", "sendmail"]],
        ["match", r"^[a-z]+$", {"message": "{label} must be lowercase."}],
    ]

Validators record messages on the item; they never raise for invalid values.
"""

import re
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Type

from ConfigDeck.exceptions import ConfigurationError
from ConfigDeck.utils import import_string


def is_empty(value: Any) -> bool:
    """Whether a value counts as blank for validation purposes."""
    return value is None or value == '' or value == [] or value == {}


class Validator:
    """
    Base class for config item validators.

    Subclasses implement validate_value() and call add_error() for failures.
    Message templates may reference {label} and any keyword passed to add_error().
    """

    # Skip validation when the value is blank (see is_empty)
    skip_on_empty = True
    message = '{label} is invalid.'

    def __init__(self, message: Optional[str] = None, **options: Any) -> None:
        if message is not None:
            self.message = message
        if options:
            raise ConfigurationError(
                f'Unknown options for validator "{type(self).__name__}": {", ".join(sorted(options))}'
            )

    def validate(self, item: Any) -> None:
        value = item.get_value()
        if self.skip_on_empty and is_empty(value):
            return
        self.validate_value(item, value)

    def validate_value(self, item: Any, value: Any) -> None:
        raise NotImplementedError

    def add_error(self, item: Any, message: Optional[str] = None, **params: Any) -> None:
        template = message if message is not None else self.message
        item.add_error(template.format(label=item.label, **params))


class SafeValidator(Validator):
    """Marks the value as safe for mass assignment; performs no checks."""

    def validate(self, item: Any) -> None:
        return None


class RequiredValidator(Validator):
    skip_on_empty = False
    message = '{label} cannot be blank.'

    def validate_value(self, item: Any, value: Any) -> None:
        if is_empty(value) or (isinstance(value, str) and not value.strip()):
            self.add_error(item)


class StringValidator(Validator):
    message = '{label} must be a string.'
    too_short = '{label} should contain at least {min} characters.'
    too_long = '{label} should contain at most {max} characters.'

    def __init__(self, min: Optional[int] = None, max: Optional[int] = None, **kwargs: Any) -> None:
        self.min = min
        self.max = max
        super().__init__(**kwargs)

    def validate_value(self, item: Any, value: Any) -> None:
        if not isinstance(value, str):
            self.add_error(item)
            return
        if self.min is not None and len(value) < self.min:
            self.add_error(item, self.too_short, min=self.min)
        if self.max is not None and len(value) > self.max:
            self.add_error(item, self.too_long, max=self.max)


class NumberValidator(Validator):
    integer_only = False
    message = '{label} must be a number.'
    too_small = '{label} must be no less than {min}.'
    too_big = '{label} must be no greater than {max}.'

    _pattern = re.compile(r'^\s*[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?\s*$')

    def __init__(self, min: Optional[float] = None, max: Optional[float] = None, **kwargs: Any) -> None:
        self.min = min
        self.max = max
        super().__init__(**kwargs)

    def _parse(self, value: Any) -> Optional[float]:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return None if self.integer_only and not value.is_integer() else value
        if isinstance(value, str) and self._pattern.match(value):
            number = float(value)
            if self.integer_only and not number.is_integer():
                return None
            return number
        return None

    def validate_value(self, item: Any, value: Any) -> None:
        number = self._parse(value)
        if number is None:
            self.add_error(item)
            return
        if self.min is not None and number < self.min:
            self.add_error(item, self.too_small, min=self.min)
        if self.max is not None and number > self.max:
            self.add_error(item, self.too_big, max=self.max)


class IntegerValidator(NumberValidator):
    integer_only = True
    message = '{label} must be an integer.'


class BooleanValidator(Validator):
    message = '{label} must be either "{true}" or "{false}".'

    def __init__(self, true_value: Any = True, false_value: Any = False, strict: bool = False, **kwargs: Any) -> None:
        self.true_value = true_value
        self.false_value = false_value
        self.strict = strict
        super().__init__(**kwargs)

    def validate_value(self, item: Any, value: Any) -> None:
        if self.strict:
            valid = any(type(value) is type(option) and value == option
                        for option in (self.true_value, self.false_value))
        else:
            valid = value in (self.true_value, self.false_value) or str(value).lower() in ('1', '0', 'true', 'false')
        if not valid:
            self.add_error(item, true=self.true_value, false=self.false_value)


class RangeValidator(Validator):
    message = '{label} is invalid.'

    def __init__(self, range: Iterable[Any] = (), not_in: bool = False, **kwargs: Any) -> None:
        self.range = list(range)
        self.not_in = not_in
        super().__init__(**kwargs)
        if not self.range:
            raise ConfigurationError('The "range" parameter of the "in" validator must not be empty.')

    def validate_value(self, item: Any, value: Any) -> None:
        if (value in self.range) == self.not_in:
            self.add_error(item)


class MatchValidator(Validator):
    message = '{label} is invalid.'

    def __init__(self, pattern: Optional[str] = None, not_match: bool = False, **kwargs: Any) -> None:
        if not pattern:
            raise ConfigurationError('The "pattern" parameter of the "match" validator is required.')
        self.pattern = re.compile(pattern)
        self.not_match = not_match
        super().__init__(**kwargs)

    def validate_value(self, item: Any, value: Any) -> None:
        matched = isinstance(value, str) and self.pattern.search(value) is not None
        if matched == self.not_match:
            self.add_error(item)


class EmailValidator(MatchValidator):
    message = '{label} is not a valid email address.'

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(pattern=r'^[a-zA-Z0-9!#$%&\'*+/=?^_`{|}~-]+(?:\.[a-zA-Z0-9!#$%&\'*+/=?^_`{|}~-]+)*'
                                 r'@(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?\.)+[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?$',
                         **kwargs)


class UrlValidator(Validator):
    message = '{label} is not a valid URL.'

    _pattern = re.compile(
        r'^https?://'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IPv4
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)

    def validate_value(self, item: Any, value: Any) -> None:
        if not isinstance(value, str) or not self._pattern.match(value):
            self.add_error(item)


VALIDATORS: Dict[str, Type[Validator]] = {
    'safe': SafeValidator,
    'required': RequiredValidator,
    'string': StringValidator,
    'number': NumberValidator,
    'integer': IntegerValidator,
    'boolean': BooleanValidator,
    'in': RangeValidator,
    'match': MatchValidator,
    'email': EmailValidator,
    'url': UrlValidator,
}


def register_validator(name: str, validator_class: Type[Validator]) -> None:
    """Register a validator class under a rule name."""
    VALIDATORS[name] = validator_class


def resolve_validator_class(name: Any) -> Type[Validator]:
    """
    Resolve a rule name to a validator class.

    Args:
        name: A registered rule name, a dotted import path or a Validator subclass

    Raises:
        ConfigurationError: If the name cannot be resolved to a Validator subclass
    """
    if isinstance(name, type) and issubclass(name, Validator):
        return name

    if isinstance(name, str):
        if name in VALIDATORS:
            return VALIDATORS[name]
        if '.' in name:
            validator_class = import_string(name)
            if isinstance(validator_class, type) and issubclass(validator_class, Validator):
                return validator_class

    raise ConfigurationError(f'Unknown validator "{name}".')


def create_validator(name: Any, params: Sequence[Any] = ()) -> Validator:
    """
    Create a validator from a rule name and its parameters.

    A trailing mapping in params is passed as keyword options, everything
    before it positionally.

    Args:
        name: Rule name, import path or Validator subclass
        params: Positional parameters, optionally followed by an options dict
    """
    validator_class = resolve_validator_class(name)

    args = list(params)
    options: Dict[str, Any] = {}
    if args and isinstance(args[-1], Mapping):
        options = dict(args.pop())

    try:
        return validator_class(*args, **options)
    except TypeError as e:
        raise ConfigurationError(f'Invalid parameters for validator "{name}": {e}', cause=e) from e
