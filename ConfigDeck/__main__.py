#!/usr/bin/env python3
"""
Main entry point for the ConfigDeck package when run as a module.

This module provides the entry point for running the ConfigDeck package as a
module using `python -m ConfigDeck`. It delegates to the CLI's main function.

Example:
    $ python -m ConfigDeck --catalog config_items.yml items
    $ python -m ConfigDeck --catalog config_items.yml --db-uri sqlite:///config.db set pageSize 50
    $ python -m ConfigDeck settings show
"""

import sys

from ConfigDeck.exceptions import ConfigDeckError
from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)


def main():
    """Main entry point for the ConfigDeck package."""
    from ConfigDeck.cli.commands import main as cli_main

    try:
        cli_main()
    except ConfigDeckError as e:
        logger.error(f"{e.error_code}: {e.message}")
        print(f"Error: {e.user_message}")
        print("Technical details have been logged.")
        sys.exit(1)


if __name__ == "__main__":
    main()
