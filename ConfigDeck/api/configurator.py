"""
Flask extension applying config manager overrides to the running application.

Example:
    app = Flask(__name__)
    manager = Manager(items='config_items.yml', storage={'class': 'db'})
    AppConfigurator(manager, app)

On every request the composed configuration is fetched from the manager and
merged into the application, e.g. ``{'config': {'MAIL_SERVER': 'smtp.local'}}``
updates ``app.config['MAIL_SERVER']``.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from flask import Flask, current_app

from ConfigDeck.core.manager import Manager
from ConfigDeck.core.paths import COMPONENTS_SEGMENT, SCALAR_TYPES
from ConfigDeck.exceptions import ConfigurationError
from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)


def apply_config(target: Any, config: Mapping) -> Any:
    """
    Merge a composed configuration tree into a live target.

    Nested mappings are merged recursively into existing mappings and objects
    (as attributes); everything else is assigned.

    Args:
        target: Mapping or object to update in place
        config: Configuration tree

    Returns:
        The target
    """
    for key, value in config.items():
        if isinstance(target, MutableMapping):
            current = target.get(key)
            if isinstance(value, Mapping) and _is_mergeable(current):
                apply_config(current, value)
            else:
                target[key] = value
            continue

        if key == COMPONENTS_SEGMENT and isinstance(value, Mapping) and callable(getattr(target, 'get_components', None)):
            apply_config(target.get_components(), value)
            continue

        current = getattr(target, key, None)
        if isinstance(value, Mapping) and _is_mergeable(current):
            apply_config(current, value)
        else:
            setattr(target, key, value)

    return target


def _is_mergeable(node: Any) -> bool:
    if node is None or isinstance(node, SCALAR_TYPES):
        return False
    if isinstance(node, Mapping):
        return isinstance(node, MutableMapping)
    return not isinstance(node, (list, tuple))


class AppConfigurator:
    """
    Configures a Flask application from a config manager before each request.

    Failures are logged as warnings and never interrupt the request: the
    storage may legitimately not exist yet, e.g. before the first migration.

    Args:
        manager: Config manager; if omitted it is looked up in
            ``app.extensions["<extension_key>.manager"]``
        app: Flask application to initialize right away
        extension_key: Name this extension is registered under in ``app.extensions``
    """

    def __init__(self, manager: Optional[Manager] = None, app: Optional[Flask] = None,
                 extension_key: str = 'configdeck') -> None:
        self.manager = manager
        self.extension_key = extension_key

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Register the extension and its before_request hook on the application."""
        app.extensions[self.extension_key] = self

        if self.manager is not None:
            app.extensions.setdefault(f"{self.extension_key}.manager", self.manager)
            if self.manager.source is None:
                self.manager.source = app

        app.before_request(self._before_request)

    def _before_request(self) -> None:
        self.configure_application()

    def get_manager(self, app: Flask) -> Manager:
        """
        Return the config manager for the application.

        Raises:
            ConfigurationError: If no manager is available
        """
        if self.manager is not None:
            return self.manager

        manager = app.extensions.get(f"{self.extension_key}.manager")
        if manager is None:
            raise ConfigurationError(
                f'Application extension "{self.extension_key}.manager" is missing.',
                context={"extension_key": self.extension_key}
            )
        return manager

    def configure_application(self, app: Optional[Flask] = None) -> bool:
        """
        Fetch the composed configuration and apply it to the application.

        Args:
            app: Application to configure; defaults to the current application

        Returns:
            bool: whether the configuration was applied
        """
        try:
            if app is None:
                app = current_app._get_current_object()
            apply_config(app, self.get_manager(app).fetch_config())
        except Exception as e:
            logger.warning(f'"{type(self).__name__}" is unable to update application configuration '
                           f'from config manager: {e}')
            return False

        return True
