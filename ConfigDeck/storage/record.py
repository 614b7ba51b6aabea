"""
Config storage working through an active record model.
"""

from typing import Any, Dict, Type, Union

from ConfigDeck.data.records import ConfigRecord
from ConfigDeck.exceptions import ConfigurationError
from ConfigDeck.storage.base import Storage
from ConfigDeck.utils import import_string


class RecordStorage(Storage):
    """
    Stores config values as ConfigRecord rows.

    Args:
        model: ConfigRecord subclass, or its dotted import path
        key_attribute: Record attribute holding the item id
        value_attribute: Record attribute holding the serialized value
    """

    def __init__(
        self,
        model: Union[Type[ConfigRecord], str, None] = None,
        key_attribute: str = 'key',
        value_attribute: str = 'value',
    ) -> None:
        if isinstance(model, str):
            model = import_string(model)
        if not (isinstance(model, type) and issubclass(model, ConfigRecord)):
            raise ConfigurationError(
                f'"{type(self).__name__}.model" should be a ConfigRecord subclass, {model!r} given.'
            )
        self.model = model
        self.key_attribute = key_attribute
        self.value_attribute = value_attribute

    def save(self, values: Dict[Any, Any]) -> bool:
        # Record keys are text columns
        values = {str(key): value for key, value in values.items()}
        result = True

        for record in self.model.find_all():
            key = str(getattr(record, self.key_attribute))
            if key in values:
                setattr(record, self.value_attribute, values.pop(key))
                result = record.save() and result

        for key, value in values.items():
            record = self.model(**{self.key_attribute: key, self.value_attribute: value})
            result = record.save() and result

        return result

    def get(self) -> Dict[Any, Any]:
        return {
            getattr(record, self.key_attribute): getattr(record, self.value_attribute)
            for record in self.model.find_all()
        }

    def clear(self) -> bool:
        result = True
        for record in self.model.find_all():
            result = record.delete() and result
        return result

    def clear_value(self, key: Any) -> bool:
        record = self.model.find_by(**{self.key_attribute: str(key)})
        if record is not None:
            return record.delete()
        return True
