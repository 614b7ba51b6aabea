"""
Web integration module for the ConfigDeck package.

Key Components:
- AppConfigurator: Flask extension applying config overrides before each request
- create_app / start_server: Admin REST API for editing config items
"""

from ConfigDeck.api.configurator import AppConfigurator, apply_config
from ConfigDeck.api.server import create_app, start_server

__all__ = ['AppConfigurator', 'apply_config', 'create_app', 'start_server']
