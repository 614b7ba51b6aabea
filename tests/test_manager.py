"""
Tests for the ConfigDeck config manager.
"""

import os
import shutil
import tempfile
import unittest
from collections import OrderedDict

import yaml

from ConfigDeck.core.cache import MISSING, MemoryCache
from ConfigDeck.core.item import Item
from ConfigDeck.core.manager import Manager
from ConfigDeck.data import ConfigRecord, DatabaseManager
from ConfigDeck.exceptions import ConfigurationError, ItemNotFoundError
from ConfigDeck.settings import get_settings
from ConfigDeck.storage import DbStorage, FileStorage, MemoryStorage, RecordStorage


class CountingStorage(MemoryStorage):
    """MemoryStorage recording how often it is read."""

    def __init__(self, data=None):
        super().__init__(data)
        self.reads = 0
        self.cleared_keys = []

    def get(self):
        self.reads += 1
        return super().get()

    def clear_value(self, key):
        self.cleared_keys.append(key)
        return super().clear_value(key)


class CustomItem(Item):
    pass


SOURCE = {
    'name': 'Test Application',
    'params': {
        'adminEmail': 'admin@example.com',
        'pageSize': 20,
    },
}


class TestManager(unittest.TestCase):
    """Test cases for the config manager."""

    def setUp(self):
        get_settings()._initialize()
        self.storage = CountingStorage()
        self.cache = MemoryCache()
        self.manager = Manager(
            items={
                'appName': {'path': 'name', 'label': 'Application name', 'rules': [['required']]},
                'adminEmail': {'label': 'Admin email', 'rules': [['required'], ['email']]},
                'pageSize': {'path': 'params.pageSize', 'cast': 'int', 'rules': [['integer', {'min': 1}]]},
            },
            storage=self.storage,
            source=SOURCE,
            cache=self.cache,
        )

    def test_get_items_preserves_order(self):
        items = self.manager.get_items()
        self.assertIsInstance(items, OrderedDict)
        self.assertEqual(list(items), ['appName', 'adminEmail', 'pageSize'])
        self.assertEqual(items['adminEmail'].id, 'adminEmail')
        self.assertIs(items['appName'].source, SOURCE)

    def test_get_item_returns_same_instance(self):
        self.assertIs(self.manager.get_item('appName'), self.manager.get_item('appName'))

    def test_unknown_item(self):
        with self.assertRaises(ItemNotFoundError):
            self.manager.get_item('unknown')
        # Also usable as a KeyError
        with self.assertRaises(KeyError):
            self.manager.get_item('unknown')

    def test_item_class_and_own_source(self):
        manager = Manager(items={
            'custom': {'class': CustomItem, 'path': 'x', 'source': {'x': 1}},
            'dotted': {'class': f'{__name__}.CustomItem', 'path': 'name'},
        }, source=SOURCE)
        self.assertIsInstance(manager.get_item('custom'), CustomItem)
        self.assertEqual(manager.get_item('custom').get_value(), 1)
        self.assertEqual(manager.get_item('dotted').get_value(), 'Test Application')

    def test_item_instances(self):
        item = Item(path='name')
        manager = Manager(items={'appName': item}, source=SOURCE)
        self.assertEqual(manager.get_item('appName').id, 'appName')
        self.assertEqual(manager.get_item('appName').get_value(), 'Test Application')

    def test_items_from_file(self):
        temp_dir = tempfile.mkdtemp()
        try:
            file_name = os.path.join(temp_dir, 'items.yml')
            with open(file_name, 'w') as f:
                yaml.safe_dump({'appName': {'path': 'name'}}, f)
            manager = Manager(items=file_name, source=SOURCE)
            self.assertEqual(manager.get_item_values(), {'appName': 'Test Application'})
        finally:
            shutil.rmtree(temp_dir)

    def test_items_file_errors(self):
        with self.assertRaises(ConfigurationError):
            Manager(items='/nonexistent/items.yml').get_items()

        temp_dir = tempfile.mkdtemp()
        try:
            file_name = os.path.join(temp_dir, 'items.yml')
            with open(file_name, 'w') as f:
                f.write('- just\n- a list\n')
            with self.assertRaises(ConfigurationError):
                Manager(items=file_name).get_items()
        finally:
            shutil.rmtree(temp_dir)

    def test_storage_from_spec(self):
        manager = Manager(storage={'class': 'memory'})
        self.assertIsInstance(manager.get_storage(), MemoryStorage)
        self.assertIs(manager.get_storage(), manager.get_storage())

    def test_default_storage_from_settings(self):
        temp_dir = tempfile.mkdtemp()
        try:
            get_settings().set('storage.class', 'file')
            get_settings().set('storage.file.path', os.path.join(temp_dir, 'data.yml'))
            storage = Manager().get_storage()
            self.assertIsInstance(storage, FileStorage)
            self.assertEqual(storage.file_name, os.path.join(temp_dir, 'data.yml'))
        finally:
            shutil.rmtree(temp_dir)

    def test_invalid_storage(self):
        with self.assertRaises(ConfigurationError):
            Manager(storage='memory')

    def test_set_and_get_item_values(self):
        self.manager.set_item_values({'appName': 'New name', 'pageSize': 50})
        values = self.manager.get_item_values()
        self.assertEqual(values['appName'], 'New name')
        self.assertEqual(values['pageSize'], 50)
        self.assertEqual(values['adminEmail'], 'admin@example.com')

        with self.assertRaises(ItemNotFoundError):
            self.manager.set_item_values({'unknown': 1})

    def test_compose_config_merges_fragments(self):
        self.assertEqual(self.manager.compose_config(), {
            'name': 'Test Application',
            'params': {'adminEmail': 'admin@example.com', 'pageSize': 20},
        })

    def test_compose_config_without_items(self):
        self.assertEqual(Manager(items={}).compose_config(), {})

    def test_save_and_restore(self):
        self.manager.set_item_values({'appName': 'Override', 'pageSize': 50}).save()
        self.assertEqual(self.storage.data['appName'], 'Override')

        manager = Manager(items={
            'appName': {'path': 'name'},
            'pageSize': {'path': 'params.pageSize', 'cast': 'int'},
        }, storage=MemoryStorage({'appName': 'Override', 'pageSize': '50', 'removed': 'x'}), source=SOURCE)
        manager.restore()
        self.assertEqual(manager.compose_config(), {'name': 'Override', 'params': {'pageSize': 50}})

    def test_save_invalidates_cache(self):
        self.cache.set(self.manager.cache_id, {'stale': True})
        self.manager.save()
        self.assertIs(self.cache.get(self.manager.cache_id), MISSING)

    def test_reset(self):
        self.manager.set_item_values({'appName': 'Override'}).save()
        self.manager.reset()
        self.assertEqual(self.storage.data, {})
        self.assertEqual(self.manager.get_item('appName').get_value(), 'Test Application')

    def test_reset_value(self):
        self.manager.set_item_values({'appName': 'Override', 'adminEmail': 'root@example.com'}).save()
        self.cache.set(self.manager.cache_id, {'stale': True})

        self.manager.reset_value('appName')

        self.assertEqual(self.storage.data, {
            'adminEmail': 'root@example.com',
            'pageSize': 20,
        })
        self.assertEqual(self.manager.get_item('appName').get_value(), 'Test Application')
        self.assertEqual(self.manager.get_item('adminEmail').get_value(), 'root@example.com')
        self.assertIs(self.cache.get(self.manager.cache_id), MISSING)

    def test_reset_value_unknown_item_leaves_storage_untouched(self):
        self.storage.save({'appName': 'Override'})
        with self.assertRaises(ItemNotFoundError):
            self.manager.reset_value('unknown')
        self.assertEqual(self.storage.cleared_keys, [])
        self.assertEqual(self.storage.data, {'appName': 'Override'})

    def test_fetch_config_reads_storage_once(self):
        self.storage.save({'appName': 'Override'})

        first = self.manager.fetch_config()
        self.assertEqual(first['name'], 'Override')
        self.assertEqual(self.storage.reads, 1)

        second = self.manager.fetch_config()
        self.assertEqual(second, first)
        self.assertEqual(self.storage.reads, 1)

    def test_fetch_config_caches_empty_config(self):
        manager = Manager(items={}, storage=self.storage, cache=self.cache, cache_id='empty')
        self.assertEqual(manager.fetch_config(), {})
        self.assertEqual(manager.fetch_config(), {})
        self.assertEqual(self.storage.reads, 1)

    def test_negative_duration_disables_cache(self):
        self.manager.cache_duration = -1
        self.manager.fetch_config()
        self.manager.fetch_config()
        self.assertEqual(self.storage.reads, 2)
        self.assertIs(self.cache.get(self.manager.cache_id), MISSING)

    def test_validate_runs_every_item(self):
        self.manager.set_item_values({'appName': '', 'adminEmail': 'not-an-email', 'pageSize': 0})
        self.assertFalse(self.manager.validate())
        errors = self.manager.get_errors()
        self.assertEqual(set(errors), {'appName', 'adminEmail', 'pageSize'})
        self.assertEqual(errors['appName'], ['Application name cannot be blank.'])

    def test_validate_valid(self):
        self.assertTrue(self.manager.validate())
        self.assertEqual(self.manager.get_errors(), {})

    def test_managers_do_not_share_cached_config(self):
        first = Manager(items={'n': {'path': 'name'}}, storage=MemoryStorage({'n': 'A'}), source=SOURCE)
        second = Manager(items={'n': {'path': 'name'}}, storage=MemoryStorage({'n': 'B'}), source=SOURCE)
        self.assertEqual(first.fetch_config(), {'name': 'A'})
        self.assertEqual(second.fetch_config(), {'name': 'B'})
        self.assertIsNot(first.cache, second.cache)

    def test_default_cache_settings(self):
        manager = Manager()
        self.assertEqual(manager.cache_id, 'ConfigDeck.core.manager.Manager')
        self.assertEqual(manager.cache_duration, 0)

        get_settings().set('cache.enabled', False)
        self.assertEqual(Manager().cache_duration, -1)


class IntegerIdRecord(ConfigRecord):
    table_name = 'integer_id_record'


class TestIntegerItemIds(unittest.TestCase):
    """Integer item ids survive storages keeping their keys as text."""

    def setUp(self):
        get_settings()._initialize()
        self.temp_dir = tempfile.mkdtemp()
        self.source = {'a': 'x'}

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def create_manager(self, storage):
        return Manager(items={1: {'path': 'a'}}, storage=storage, source=self.source, cache_duration=-1)

    def assert_round_trip(self, create_storage):
        manager = self.create_manager(create_storage())
        manager.set_item_values({1: 'y'}).save()
        manager.set_item_values({1: 'z'}).save()

        restored = self.create_manager(create_storage())
        self.assertEqual(restored.restore().compose_config(), {'a': 'z'})

        restored.reset_value(1)
        self.assertEqual(self.create_manager(create_storage()).fetch_config(), {'a': 'x'})

    def test_db_storage(self):
        db = DatabaseManager(f"sqlite:///{os.path.join(self.temp_dir, 'config.db')}")
        self.assert_round_trip(lambda: DbStorage(db))

    def test_record_storage(self):
        IntegerIdRecord.db = DatabaseManager('sqlite:///:memory:')
        IntegerIdRecord.create_table()
        try:
            self.assert_round_trip(lambda: RecordStorage(IntegerIdRecord))
        finally:
            IntegerIdRecord.db.close()
            IntegerIdRecord.db = None

    def test_json_file_storage(self):
        file_name = os.path.join(self.temp_dir, 'config.json')
        self.assert_round_trip(lambda: FileStorage(file_name))


if __name__ == "__main__":
    unittest.main()
