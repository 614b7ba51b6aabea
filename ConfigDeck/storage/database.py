"""
Relational table config storage.
"""

from typing import Any, Dict, Optional, Union

from ConfigDeck.data.database import DatabaseManager, create_db_manager_from_settings
from ConfigDeck.data.records import quote
from ConfigDeck.settings import get_settings
from ConfigDeck.storage.base import Storage
from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)


class DbStorage(Storage):
    """
    Stores config values in a database table, one row per item.

    Args:
        db: DatabaseManager or database URI; defaults to the settings database
        table: Name of the table holding the values
        key_column: Column holding the item id
        value_column: Column holding the serialized value
        auto_create: Create the table on first use when it does not exist

    Example:
        >>> storage = DbStorage('sqlite:///:memory:')
        >>> storage.save({'appName': 'My App'})
        True
        >>> storage.get()
        {'appName': 'My App'}
    """

    def __init__(
        self,
        db: Optional[Union[DatabaseManager, str]] = None,
        table: Optional[str] = None,
        key_column: Optional[str] = None,
        value_column: Optional[str] = None,
        auto_create: bool = True,
    ) -> None:
        settings = get_settings()
        self._db = DatabaseManager(db) if isinstance(db, str) else db
        self.table = table or settings.get("storage.table", "app_config")
        self.key_column = key_column or settings.get("storage.key_column", "id")
        self.value_column = value_column or settings.get("storage.value_column", "value")
        self.auto_create = auto_create
        self._table_checked = False

    @property
    def db(self) -> DatabaseManager:
        if self._db is None:
            self._db = create_db_manager_from_settings()
        return self._db

    def ensure_table(self) -> None:
        """Create the storage table if it is missing and auto_create is enabled."""
        if self._table_checked or not self.auto_create:
            return

        if not self.db.table_exists(self.table):
            self.db.create_table(
                self.table,
                f"CREATE TABLE IF NOT EXISTS {quote(self.table)} ("
                f"{quote(self.key_column)} VARCHAR(255) NOT NULL PRIMARY KEY, "
                f"{quote(self.value_column)} TEXT)"
            )
        self._table_checked = True

    def save(self, values: Dict[Any, Any]) -> bool:
        existing_values = self.get()
        ph = self.db.placeholder
        table = quote(self.table)
        key_column = quote(self.key_column)
        value_column = quote(self.value_column)

        updated = 0
        for key, value in values.items():
            # The key column is text
            key = str(key)
            if key in existing_values:
                if _same_stored_value(value, existing_values[key]):
                    continue
                self.db.execute(
                    f"UPDATE {table} SET {value_column} = {ph} WHERE {key_column} = {ph}",
                    (value, key)
                )
            else:
                self.db.execute(
                    f"INSERT INTO {table} ({key_column}, {value_column}) VALUES ({ph}, {ph})",
                    (key, value)
                )
            updated += 1

        logger.debug(f"Saved {updated} changed config values to table {self.table}")
        return True

    def get(self) -> Dict[Any, Any]:
        self.ensure_table()
        rows = self.db.execute(
            f"SELECT {quote(self.key_column)}, {quote(self.value_column)} FROM {quote(self.table)}"
        )
        return {row[self.key_column]: row[self.value_column] for row in rows}

    def clear(self) -> bool:
        self.ensure_table()
        self.db.execute(f"DELETE FROM {quote(self.table)}")
        return True

    def clear_value(self, key: Any) -> bool:
        self.ensure_table()
        self.db.execute(
            f"DELETE FROM {quote(self.table)} WHERE {quote(self.key_column)} = {self.db.placeholder}",
            (str(key),)
        )
        return True


def _same_stored_value(value: Any, stored: Any) -> bool:
    """Whether value equals the stored one, which the TEXT column may hold as a string."""
    if value == stored:
        return True
    return value is not None and isinstance(stored, str) and str(value) == stored
