#!/usr/bin/env python3
"""
Example showing how to run a Flask application whose settings can be edited at runtime.

The application config is overridden from a SQLite table before each request,
and the ConfigDeck admin API is started on a second port for editing the values.
"""
import argparse
import threading

from flask import Flask, current_app

from ConfigDeck import AppConfigurator, Manager
from ConfigDeck.api.server import start_server
from ConfigDeck.utils.logging import get_logger, set_log_level

# Configure logging
set_log_level('info')
logger = get_logger(__name__, {"component": "api_example"})

def create_application(manager):
    """Create the application whose config is managed by ConfigDeck."""
    app = Flask(__name__)
    app.config.update(MAIL_SERVER='localhost', PAGE_SIZE=20)

    AppConfigurator(manager, app)

    @app.route('/')
    def index():
        return {
            'mail_server': current_app.config['MAIL_SERVER'],
            'page_size': current_app.config['PAGE_SIZE'],
        }

    return app

def main():
    """Main entry point for the example."""
    parser = argparse.ArgumentParser(description='ConfigDeck example application')
    parser.add_argument('--host', default='localhost', help='Host to listen on')
    parser.add_argument('--port', type=int, default=5001, help='Port of the application')
    parser.add_argument('--admin-port', type=int, default=5002, help='Port of the admin API')
    parser.add_argument('--db-uri', default='sqlite:///app_config.db', help='Database URI to use')

    args = parser.parse_args()

    manager = Manager(
        items={
            'mailServer': {'path': 'config.MAIL_SERVER', 'label': 'Mail server', 'rules': [['required']]},
            'pageSize': {'path': 'config.PAGE_SIZE', 'label': 'Page size', 'cast': 'int',
                         'rules': [['integer', {'min': 1, 'max': 100}]]},
        },
        storage={'class': 'db', 'db': args.db_uri},
    )
    app = create_application(manager)

    admin = threading.Thread(
        target=start_server,
        kwargs={'manager': manager, 'host': args.host, 'port': args.admin_port},
        daemon=True,
    )
    admin.start()

    print(f"Application: http://{args.host}:{args.port}/")
    print(f"Admin API:   http://{args.host}:{args.admin_port}/config/items")
    print("Try: curl -X PUT -H 'Content-Type: application/json' "
          f"-d '{{\"value\": 50}}' http://{args.host}:{args.admin_port}/config/items/pageSize")
    print("Press Ctrl+C to stop")

    app.run(host=args.host, port=args.port)

if __name__ == '__main__':
    main()
