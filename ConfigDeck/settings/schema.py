from typing import TypedDict, Literal, Optional, Dict, Any, List
import re

from ConfigDeck.settings.defaults import STORAGE_NAMES

# Define valid options as literals for type checking
DatabaseType = Literal["sqlite", "postgresql"]
LoggingLevel = Literal["debug", "info", "warning", "error", "critical"]
LoggingFormat = Literal["json", "text"]

class SQLiteConfig(TypedDict):
    """TypedDict for SQLite configuration validation"""
    path: Optional[str]

class PostgreSQLConfig(TypedDict):
    """TypedDict for PostgreSQL configuration validation"""
    host: str
    port: int
    database: str
    user: Optional[str]
    password: Optional[str]

class DatabaseConfig(TypedDict):
    """TypedDict for database configuration validation"""
    type: DatabaseType
    sqlite: SQLiteConfig
    postgresql: PostgreSQLConfig
    timeout: int

class FileStorageConfig(TypedDict):
    """TypedDict for flat-file storage configuration validation"""
    path: Optional[str]

class StorageConfig(TypedDict):
    """TypedDict for storage configuration validation ("class" is checked separately)"""
    table: str
    key_column: str
    value_column: str
    file: FileStorageConfig

class CacheConfig(TypedDict):
    """TypedDict for composed-config cache validation"""
    enabled: bool
    duration: int
    id: str

class LoggingConfig(TypedDict):
    """TypedDict for logging configuration validation"""
    level: LoggingLevel
    format: LoggingFormat
    file: Optional[str]

class SettingsSchema(TypedDict):
    """Root settings schema that includes all sections"""
    database: DatabaseConfig
    storage: StorageConfig
    cache: CacheConfig
    logging: LoggingConfig

# Schema validation functions
_IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

def is_valid_identifier(name: Any) -> bool:
    """Validate a SQL table or column name"""
    return isinstance(name, str) and bool(_IDENTIFIER_PATTERN.match(name))

def is_valid_database_type(db_type: str) -> bool:
    """Validate the database type against allowed values"""
    return db_type in ("sqlite", "postgresql")

def is_valid_logging_level(level: str) -> bool:
    """Validate the logging level against allowed values"""
    return level in ("debug", "info", "warning", "error", "critical")

def is_valid_logging_format(fmt: str) -> bool:
    """Validate the logging format against allowed values"""
    return fmt in ("json", "text")

def is_valid_port(port: int) -> bool:
    """Validate that a port number is within the allowed range."""
    return isinstance(port, int) and 1 <= port <= 65535

def is_valid_storage_class(name: Any) -> bool:
    """A storage class is either a registered short name or a dotted import path."""
    if not isinstance(name, str):
        return False
    return name in STORAGE_NAMES or '.' in name

def validate_database_config(db_config: Dict[str, Any]) -> List[str]:
    """
    Validate the database configuration section.

    Args:
        db_config: Database configuration dictionary

    Returns:
        List of validation error messages
    """
    errors = []

    if "type" in db_config and not is_valid_database_type(db_config["type"]):
        errors.append(f"Invalid database type: {db_config['type']}. Must be one of: sqlite, postgresql")

    if "sqlite" in db_config and isinstance(db_config["sqlite"], dict):
        path = db_config["sqlite"].get("path")
        if path is not None and not isinstance(path, str):
            errors.append(f"SQLite path must be a string or null, got {type(path).__name__}")

    if "postgresql" in db_config and isinstance(db_config["postgresql"], dict):
        pg_config = db_config["postgresql"]

        if "port" in pg_config and not is_valid_port(pg_config["port"]):
            errors.append(f"Invalid PostgreSQL port: {pg_config['port']}. Must be between 1 and 65535")

        if "database" in pg_config and not isinstance(pg_config["database"], str):
            errors.append("PostgreSQL database name must be a string")

    if "timeout" in db_config:
        if not isinstance(db_config["timeout"], int):
            errors.append("Database timeout must be an integer")
        elif db_config["timeout"] < 1:
            errors.append(f"Database timeout must be at least 1 second, got {db_config['timeout']}")

    return errors

def validate_storage_config(storage_config: Dict[str, Any]) -> List[str]:
    """
    Validate the storage configuration section.

    Args:
        storage_config: Storage configuration dictionary

    Returns:
        List of validation error messages
    """
    errors = []

    if "class" in storage_config and not is_valid_storage_class(storage_config["class"]):
        valid = ", ".join(sorted(STORAGE_NAMES))
        errors.append(f"Invalid storage class: {storage_config['class']}. Must be one of: {valid} or an import path")

    for setting in ("table", "key_column", "value_column"):
        if setting in storage_config and not is_valid_identifier(storage_config[setting]):
            errors.append(f"Storage {setting} must be a valid SQL identifier, got {storage_config[setting]!r}")

    if "file" in storage_config and isinstance(storage_config["file"], dict):
        path = storage_config["file"].get("path")
        if path is not None and not isinstance(path, str):
            errors.append(f"Storage file path must be a string or null, got {type(path).__name__}")

    return errors

def validate_cache_config(cache_config: Dict[str, Any]) -> List[str]:
    """
    Validate the cache configuration section.

    Args:
        cache_config: Cache configuration dictionary

    Returns:
        List of validation error messages
    """
    errors = []

    if "enabled" in cache_config and not isinstance(cache_config["enabled"], bool):
        errors.append("Cache enabled flag must be a boolean")

    # bool is a subclass of int, reject it explicitly
    if "duration" in cache_config:
        duration = cache_config["duration"]
        if not isinstance(duration, int) or isinstance(duration, bool):
            errors.append("Cache duration must be an integer number of seconds")

    if "id" in cache_config and (not isinstance(cache_config["id"], str) or not cache_config["id"]):
        errors.append("Cache id must be a non-empty string")

    return errors

def validate_logging_config(logging_config: Dict[str, Any]) -> List[str]:
    """
    Validate the logging configuration section.

    Args:
        logging_config: Logging configuration dictionary

    Returns:
        List of validation error messages
    """
    errors = []

    if "level" in logging_config and not is_valid_logging_level(logging_config["level"]):
        errors.append(f"Invalid logging level: {logging_config['level']}. Must be one of: debug, info, warning, error, critical")

    if "format" in logging_config and not is_valid_logging_format(logging_config["format"]):
        errors.append(f"Invalid logging format: {logging_config['format']}. Must be one of: json, text")

    if "file" in logging_config and logging_config["file"] is not None and not isinstance(logging_config["file"], str):
        errors.append("Log file must be a string or null")

    return errors

_SECTION_VALIDATORS = {
    "database": validate_database_config,
    "storage": validate_storage_config,
    "cache": validate_cache_config,
    "logging": validate_logging_config,
}

def validate_settings(config: Any, require_all: bool = False) -> Dict[str, list]:
    """
    Validate a settings structure.

    Args:
        config: The settings dictionary to validate
        require_all: Whether every section must be present (a complete settings
            tree) or only the present sections are checked (a settings file
            layered over defaults)

    Returns:
        Dictionary mapping sections to lists of error messages
    """
    if not isinstance(config, dict):
        return {"root": [f"Settings must be a mapping, got {type(config).__name__}"]}

    errors = {}

    for section, validator in _SECTION_VALIDATORS.items():
        if section not in config:
            if require_all:
                errors[section] = [f"{section.capitalize()} configuration is missing"]
            continue

        if not isinstance(config[section], dict):
            errors[section] = [f"{section.capitalize()} configuration must be a mapping"]
            continue

        section_errors = validator(config[section])
        if section_errors:
            errors[section] = section_errors

    unknown = sorted(set(config) - set(_SECTION_VALIDATORS))
    if unknown:
        errors["root"] = [f"Unknown settings section: {name}" for name in unknown]

    return errors
