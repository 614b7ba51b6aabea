"""
Admin API server module for the ConfigDeck package.

This module provides a Flask-based API for inspecting and editing the config
items of a Manager through RESTful endpoints under ``/config``.
"""

import time
from functools import wraps
from typing import Any, Callable, Dict, Optional, Tuple

import werkzeug.exceptions
from flask import Blueprint, Flask, Response, current_app, g, request

from ConfigDeck.core.manager import Manager
from ConfigDeck.exceptions import ConfigDeckError, ValidationError
from ConfigDeck.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)

MANAGER_EXTENSION_KEY = 'configdeck.manager'

config_blueprint = Blueprint('config', __name__, url_prefix='/config')


def format_response(data: Any = None, message: str = None,
                    error: str = None, status_code: int = 200,
                    meta: Dict[str, Any] = None,
                    error_code: str = None) -> Tuple[Dict[str, Any], int]:
    """
    Format API response in a standardized structure.

    Args:
        data: Response data payload
        message: Optional success message
        error: Optional error message
        status_code: HTTP status code
        meta: Optional metadata dictionary
        error_code: Optional error code identifier

    Returns:
        Tuple of (response_dict, status_code)
    """
    response = {
        'success': 200 <= status_code < 300,
        'status_code': status_code,
    }

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if error:
        response['error'] = error

    if error_code:
        response['error_code'] = error_code

    if meta:
        response['meta'] = meta

    return response, status_code


def api_response(f: Callable) -> Callable:
    """
    Decorator wrapping endpoint results in the standard response structure.

    Endpoints return either data, or a (data, status_code) tuple. Exceptions
    are left to the application error handlers.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        result = f(*args, **kwargs)

        if isinstance(result, tuple) and len(result) == 2:
            data, status_code = result
            return format_response(data=data, status_code=status_code)

        return format_response(data=result)

    return decorated_function


def get_manager() -> Manager:
    """
    Get the config manager of the current application.

    Item values are restored from storage once per request, so reads report
    the stored overrides and saves do not write back stale values.
    """
    manager = current_app.extensions[MANAGER_EXTENSION_KEY]
    if not g.get('configdeck_restored'):
        manager.restore()
        g.configdeck_restored = True
    return manager


def get_json_body() -> Dict[str, Any]:
    """
    Return the JSON request body as a dict.

    Raises:
        werkzeug.exceptions.BadRequest: If the body is not a JSON object
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise werkzeug.exceptions.BadRequest('Request body must be a JSON object.')
    return body


@config_blueprint.route('/items', methods=['GET'])
@api_response
def list_items() -> Dict[str, Any]:
    """List all config items with their current values."""
    items = [item.to_dict() for item in get_manager().get_items().values()]
    return {
        'count': len(items),
        'items': items
    }


@config_blueprint.route('/items/<item_id>', methods=['GET'])
@api_response
def get_item(item_id: str) -> Dict[str, Any]:
    """Get a single config item."""
    return get_manager().get_item(item_id).to_dict()


@config_blueprint.route('/items/<item_id>', methods=['PUT'])
@api_response
def update_item(item_id: str) -> Dict[str, Any]:
    """
    Update the value of a config item and save all values.

    Body:
        value: The new value
    """
    body = get_json_body()
    if 'value' not in body:
        raise werkzeug.exceptions.BadRequest('Missing required field: value')

    manager = get_manager()
    item = manager.get_item(item_id)

    previous = item.get_value()
    item.set_value(body['value'])
    if not item.validate():
        errors = item.get_errors()
        item.set_value(previous)
        raise ValidationError(
            f"Invalid value for config item '{item_id}'",
            errors={item_id: errors},
            user_message=errors[0]
        )

    manager.save()
    return item.to_dict()


@config_blueprint.route('/items', methods=['PUT'])
@api_response
def update_items() -> Dict[str, Any]:
    """
    Update the values of several config items and save all values.

    Body:
        values: Mapping of item id to new value
    """
    values = get_json_body().get('values')
    if not isinstance(values, dict):
        raise werkzeug.exceptions.BadRequest('Field "values" must be a JSON object.')

    manager = get_manager()
    previous = {item_id: manager.get_item(item_id).get_value() for item_id in values}

    manager.set_item_values(values)
    if not manager.validate():
        errors = manager.get_errors()
        manager.set_item_values(previous)
        raise ValidationError("Invalid config values", errors=errors)

    manager.save()
    return manager.get_item_values()


@config_blueprint.route('/items/<item_id>', methods=['DELETE'])
@api_response
def reset_item(item_id: str) -> Dict[str, Any]:
    """Remove a config item's stored value, restoring its original value."""
    manager = get_manager()
    manager.reset_value(item_id)
    return manager.get_item(item_id).to_dict()


@config_blueprint.route('/save', methods=['POST'])
@api_response
def save() -> Dict[str, Any]:
    """Save the current values of all config items."""
    manager = get_manager()
    manager.save()
    return manager.get_item_values()


@config_blueprint.route('/reset', methods=['POST'])
@api_response
def reset() -> Dict[str, Any]:
    """Clear all stored values, restoring every item's original value."""
    manager = get_manager()
    manager.reset()
    return manager.get_item_values()


@config_blueprint.route('/composed', methods=['GET'])
@api_response
def composed() -> Dict[str, Any]:
    """Get the composed application configuration overrides."""
    return get_manager().fetch_config()


def create_app(manager: Manager, debug: bool = False) -> Flask:
    """
    Create and configure the admin Flask application.

    Args:
        manager: Config manager exposed by the API
        debug: Enable debug mode with additional error information

    Returns:
        A configured Flask application
    """
    app = Flask(__name__)
    app.config.update(DEBUG=debug)
    app.extensions[MANAGER_EXTENSION_KEY] = manager

    # Configure JSON responses
    app.json.sort_keys = False
    app.json.ensure_ascii = False

    @app.before_request
    def before_request() -> None:
        """Set up request context with timing information."""
        g.start_time = time.time()

    @app.after_request
    def after_request(response: Response) -> Response:
        """Log request information and add timing headers."""
        if hasattr(g, 'start_time'):
            duration_ms = (time.time() - g.start_time) * 1000
            response.headers['X-Request-Duration-Ms'] = str(int(duration_ms))
            logger.info(
                f"Request: {request.method} {request.path} | "
                f"Status: {response.status_code} | "
                f"Duration: {duration_ms:.2f}ms"
            )
        return response

    @app.errorhandler(werkzeug.exceptions.HTTPException)
    def handle_http_error(error: werkzeug.exceptions.HTTPException) -> Tuple[Dict[str, Any], int]:
        """Handle HTTP errors such as bad requests and unknown routes."""
        return format_response(
            error=error.name,
            message=str(error.description),
            status_code=error.code,
            meta={'debug_info': str(error)} if debug else None
        )

    @app.errorhandler(ConfigDeckError)
    def handle_configdeck_error(error: ConfigDeckError) -> Tuple[Dict[str, Any], int]:
        """Handle ConfigDeck-specific exceptions."""
        if error.status_code >= 500:
            logger.error(f"ConfigDeck Error: {error.error_code} - {error.message}")
        else:
            logger.warning(f"ConfigDeck Error: {error.error_code} - {error.message}")

        error.context['debug'] = debug
        error_dict = error.to_dict()

        meta = {}
        if isinstance(error, ValidationError):
            meta['errors'] = error.errors
        if debug and 'technical_details' in error_dict:
            meta['technical_details'] = error_dict['technical_details']

        return format_response(
            error=error.__class__.__name__,
            message=error.user_message,
            status_code=error.status_code,
            error_code=error.error_code,
            meta=meta or None
        )

    @app.errorhandler(Exception)
    def handle_exception(error: Exception) -> Tuple[Dict[str, Any], int]:
        """Handle unexpected exceptions."""
        logger.exception(f"Unhandled server exception: {error}")
        system_error = ConfigDeckError(
            message=f"Unhandled exception: {error}",
            user_message="An unexpected error occurred.",
            error_code="CD-SYS-5000",
            status_code=500,
            cause=error
        )
        return handle_configdeck_error(system_error)

    app.register_blueprint(config_blueprint)

    return app


def start_server(manager: Manager, host: str = '127.0.0.1', port: int = 5000,
                 debug: bool = False) -> None:
    """
    Start the admin API server.

    Args:
        manager: Config manager exposed by the API
        host: Host address to bind to
        port: Port to listen on
        debug: Whether to run in debug mode
    """
    app = create_app(manager, debug)
    logger.info(f"Starting ConfigDeck admin server on {host}:{port} (debug: {debug})")
    app.run(host=host, port=port, debug=debug)
