"""
Record-mapped table rows for the ConfigDeck package.

ConfigRecord is a minimal active record: each instance is one table row, with
the table's columns as attributes. Subclasses bind it to a table and a
DatabaseManager:

    class AppSetting(ConfigRecord):
        table_name = 'app_setting'
        db = DatabaseManager('sqlite:///settings.db')
"""

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from ConfigDeck.data.database import DatabaseManager, create_db_manager_from_settings
from ConfigDeck.exceptions import ConfigurationError
from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)

R = TypeVar('R', bound='ConfigRecord')


def quote(name: str) -> str:
    """Quote an SQL identifier (valid for both SQLite and PostgreSQL)."""
    return '"' + name.replace('"', '""') + '"'


class ConfigRecord:
    """
    Active record over a key/value table.

    Attributes:
        db: DatabaseManager the records live in (settings database if None)
        table_name: Name of the table
        columns: Column names; the first one is the auto-increment primary key
    """

    db: Optional[DatabaseManager] = None
    table_name: str = 'app_config_record'
    columns: Sequence[str] = ('id', 'key', 'value')
    primary_key: str = 'id'

    def __init__(self, **attributes: Any) -> None:
        unknown = set(attributes) - set(self.columns)
        if unknown:
            raise ConfigurationError(
                f'Unknown attributes for "{type(self).__name__}": {", ".join(sorted(unknown))}'
            )
        for column in self.columns:
            setattr(self, column, attributes.get(column))

    def __repr__(self) -> str:
        values = ', '.join(f"{column}={getattr(self, column)!r}" for column in self.columns)
        return f"{type(self).__name__}({values})"

    @property
    def is_new(self) -> bool:
        """Whether the record has not been inserted yet."""
        return getattr(self, self.primary_key) is None

    def get_attributes(self) -> Dict[str, Any]:
        return {column: getattr(self, column) for column in self.columns}

    @classmethod
    def get_db(cls) -> DatabaseManager:
        if cls.db is None:
            cls.db = create_db_manager_from_settings()
        return cls.db

    @classmethod
    def _from_row(cls: Type[R], row: Any) -> R:
        return cls(**{column: row[column] for column in cls.columns})

    @classmethod
    def create_table(cls) -> None:
        """Create the record table unless it already exists."""
        db = cls.get_db()
        if db.table_exists(cls.table_name):
            return

        if db.db_type == 'sqlite':
            pk_definition = f"{quote(cls.primary_key)} INTEGER PRIMARY KEY AUTOINCREMENT"
        else:
            pk_definition = f"{quote(cls.primary_key)} SERIAL PRIMARY KEY"

        definitions = [pk_definition] + [
            f"{quote(column)} TEXT" for column in cls.columns if column != cls.primary_key
        ]
        db.create_table(
            cls.table_name,
            f"CREATE TABLE IF NOT EXISTS {quote(cls.table_name)} ({', '.join(definitions)})"
        )

    @classmethod
    def find_all(cls: Type[R]) -> List[R]:
        """Return every record, ordered by primary key."""
        rows = cls.get_db().execute(
            f"SELECT {', '.join(quote(c) for c in cls.columns)} FROM {quote(cls.table_name)} "
            f"ORDER BY {quote(cls.primary_key)}"
        )
        return [cls._from_row(row) for row in rows]

    @classmethod
    def find_by(cls: Type[R], **attributes: Any) -> Optional[R]:
        """
        Return the first record matching all the given attribute values.

        Returns:
            The matching record, or None
        """
        db = cls.get_db()
        conditions = ' AND '.join(f"{quote(name)} = {db.placeholder}" for name in attributes)
        query = f"SELECT {', '.join(quote(c) for c in cls.columns)} FROM {quote(cls.table_name)}"
        if conditions:
            query += f" WHERE {conditions}"
        query += f" ORDER BY {quote(cls.primary_key)} LIMIT 1"

        rows = db.execute(query, tuple(attributes.values()))
        return cls._from_row(rows[0]) if rows else None

    def save(self) -> bool:
        """
        Insert the record if it is new, otherwise update it by primary key.

        Returns:
            bool: True on success
        """
        db = self.get_db()
        ph = db.placeholder
        values = {column: getattr(self, column) for column in self.columns if column != self.primary_key}

        if self.is_new:
            query = (
                f"INSERT INTO {quote(self.table_name)} ({', '.join(quote(c) for c in values)}) "
                f"VALUES ({', '.join(ph for _ in values)})"
            )
            if db.db_type == 'postgresql':
                query += f" RETURNING {quote(self.primary_key)}"
            with db.cursor() as cursor:
                cursor.execute(query, tuple(values.values()))
                if db.db_type == 'postgresql':
                    new_id = cursor.fetchone()[self.primary_key]
                else:
                    new_id = cursor.lastrowid
            setattr(self, self.primary_key, new_id)
            logger.debug(f"Inserted {type(self).__name__} #{new_id}")
            return True

        assignments = ', '.join(f"{quote(c)} = {ph}" for c in values)
        db.execute(
            f"UPDATE {quote(self.table_name)} SET {assignments} WHERE {quote(self.primary_key)} = {ph}",
            tuple(values.values()) + (getattr(self, self.primary_key),)
        )
        return True

    def delete(self) -> bool:
        """
        Delete the record.

        Returns:
            bool: True if a row was deleted
        """
        if self.is_new:
            return False

        db = self.get_db()
        with db.cursor() as cursor:
            cursor.execute(
                f"DELETE FROM {quote(self.table_name)} WHERE {quote(self.primary_key)} = {db.placeholder}",
                (getattr(self, self.primary_key),)
            )
            deleted = cursor.rowcount > 0
        if deleted:
            setattr(self, self.primary_key, None)
        return deleted
