#!/usr/bin/env python3
"""
Basic usage example for the ConfigDeck module.
"""
import json

from ConfigDeck import Manager

def print_json(data):
    """Print data as formatted JSON."""
    print(json.dumps(data, indent=2, ensure_ascii=False))

def main():
    """Main function."""
    # Base configuration of the application, as loaded from its config files
    app_config = {
        'name': 'My Application',
        'params': {
            'adminEmail': 'admin@example.com',
            'pageSize': 20,
        },
    }

    manager = Manager(
        items={
            'appName': {'path': 'name', 'label': 'Application name', 'rules': [['required']]},
            'adminEmail': {'label': 'Admin email', 'rules': [['required'], ['email']]},
            'pageSize': {'path': 'params.pageSize', 'cast': 'int', 'rules': [['integer', {'min': 1}]]},
        },
        storage={'class': 'db', 'db': 'sqlite:///:memory:'},
        source=app_config,
    )

    # Current values come from the base configuration
    print("Current values:")
    print_json(manager.get_item_values())

    # Edit and validate new values
    manager.set_item_values({'appName': 'Renamed Application', 'pageSize': '50'})
    if not manager.validate():
        print_json(manager.get_errors())
        return

    # Persist the overrides
    manager.save()

    # Any process sharing the storage can now compose the overrides
    print("\nComposed configuration overrides:")
    print_json(manager.fetch_config())

    # Drop a single override
    manager.reset_value('appName')
    print("\nAfter resetting appName:")
    print_json(manager.get_item_values())

if __name__ == '__main__':
    main()
