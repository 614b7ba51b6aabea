"""
Settings-related commands for the ConfigDeck CLI.

This module provides commands for interacting with ConfigDeck's own settings,
including viewing, initializing, and validating settings files.
"""

import json
import os
from pathlib import Path
from typing import Optional

import click
import yaml

from ConfigDeck.settings import get_settings, load_structured_file, validate_settings
from ConfigDeck.utils.logging import get_logger

# Get logger for this module
logger = get_logger(__name__)


def settings_show(format_type: str = 'yaml', section: Optional[str] = None) -> int:
    """
    Display the current active settings.

    Args:
        format_type: Output format (yaml or json)
        section: Optional section to display (e.g., 'database', 'storage')

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    settings = get_settings()

    if section:
        data = settings.get(section)
        if data is None:
            click.echo(f"Error: Section '{section}' not found in settings", err=True)
            return 1
    else:
        data = settings.get_all()

    if format_type.lower() == 'json':
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))

    return 0


def settings_init(output_path: Optional[str] = None, force: bool = False) -> int:
    """
    Create a template settings file with explanatory comments.

    Args:
        output_path: Path where to create the template file
        force: Overwrite an existing file without asking

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    path = Path(output_path or os.path.join(os.getcwd(), 'configdeck.yml'))

    if path.exists() and not force:
        if not click.confirm(f"File {path} already exists. Overwrite?"):
            click.echo("Aborted.")
            return 1

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(SETTINGS_TEMPLATE)
    except OSError as e:
        logger.error(f"Error creating settings template: {e}")
        click.echo(f"Error: {e}", err=True)
        return 1

    click.echo(f"Settings template created at: {path}")
    return 0


def settings_validate(settings_path: str) -> int:
    """
    Validate a settings file.

    Args:
        settings_path: Path to the settings file to validate

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    path = Path(settings_path)

    if not path.exists():
        click.echo(f"Error: Settings file not found: {path}", err=True)
        return 1

    if path.suffix.lower() not in ('.yaml', '.yml', '.json'):
        click.echo(f"Error: Unsupported file format: {path.suffix}", err=True)
        return 1

    try:
        data = load_structured_file(path) or {}
    except (ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: Unable to parse {path}: {e}", err=True)
        return 1

    errors = validate_settings(data)
    if not errors:
        click.echo(f"Settings file is valid: {path}")
        return 0

    click.echo("Settings validation errors:")
    for section, section_errors in errors.items():
        for error in section_errors:
            click.echo(f"  - {section}: {error}")
    return 1


SETTINGS_TEMPLATE = """# ConfigDeck Settings File
# Settings of the ConfigDeck library itself. The application config items
# are described in a separate catalog file.

# Database Configuration (used by the 'db' and 'record' storages)
database:
  # Database type: 'sqlite' or 'postgresql'
  type: sqlite

  # SQLite Configuration (used when type is 'sqlite')
  sqlite:
    # Path to SQLite database file (null for ~/.configdeck/configdeck.db)
    path: null

  # PostgreSQL Configuration (used when type is 'postgresql')
  postgresql:
    host: localhost
    port: 5432
    database: configdeck
    # Authentication (null for system authentication)
    user: null
    password: null

  # Connection timeout in seconds
  timeout: 30

# Storage Configuration
storage:
  # Storage used when none is given: 'db', 'record', 'file' or 'memory'
  class: db
  # Table and columns of the 'db' storage
  table: app_config
  key_column: id
  value_column: value
  file:
    # Path of the 'file' storage (.json for JSON, YAML otherwise)
    path: null

# Composed Config Cache
cache:
  enabled: true
  # Time-to-live in seconds (0 = never expire)
  duration: 0
  id: ConfigDeck.core.manager.Manager

# Logging Configuration
logging:
  # Logging level (debug, info, warning, error, critical)
  level: info
  # Log format (json, text)
  format: json
  # Log file path (null for console only)
  file: null
"""
