"""
Command-line interface module for the ConfigDeck package.

This module provides a command-line interface for inspecting and editing the
config items of an application. It includes commands for listing items,
reading and saving values, resetting overrides, and managing ConfigDeck's
own settings.

Key Components:
- main: Main entry point for the CLI
- cli: The click command group
"""

from ConfigDeck.cli.commands import cli, main

__all__ = ['cli', 'main']
