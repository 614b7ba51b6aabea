"""
Tests for the ConfigDeck admin API.
"""

import unittest

from ConfigDeck.api.server import create_app, format_response
from ConfigDeck.core.cache import MemoryCache
from ConfigDeck.core.manager import Manager
from ConfigDeck.settings import get_settings
from ConfigDeck.storage import MemoryStorage

SOURCE = {
    'name': 'Test Application',
    'params': {'adminEmail': 'admin@example.com', 'pageSize': 20},
}


class TestFormatResponse(unittest.TestCase):

    def test_success_envelope(self):
        body, status = format_response(data={'a': 1})
        self.assertEqual(status, 200)
        self.assertEqual(body, {'success': True, 'status_code': 200, 'data': {'a': 1}})

    def test_error_envelope(self):
        body, status = format_response(error='Not Found', message='Missing', status_code=404, error_code='X')
        self.assertFalse(body['success'])
        self.assertEqual(body['error_code'], 'X')
        self.assertNotIn('data', body)


class TestAdminApi(unittest.TestCase):
    """Test cases for the /config endpoints."""

    def setUp(self):
        get_settings()._initialize()
        self.storage = MemoryStorage()
        self.manager = Manager(
            items={
                'appName': {'path': 'name', 'label': 'Application name', 'rules': [['required']]},
                'adminEmail': {'label': 'Admin email', 'rules': [['email']]},
                'pageSize': {'path': 'params.pageSize', 'cast': 'int', 'rules': [['integer', {'min': 1}]]},
            },
            storage=self.storage,
            source=SOURCE,
            cache=MemoryCache(),
        )
        self.client = create_app(self.manager).test_client()

    def test_list_items(self):
        response = self.client.get('/config/items')
        self.assertEqual(response.status_code, 200)
        data = response.get_json()['data']
        self.assertEqual(data['count'], 3)
        self.assertEqual([item['id'] for item in data['items']], ['appName', 'adminEmail', 'pageSize'])
        self.assertEqual(data['items'][0]['value'], 'Test Application')
        self.assertEqual(data['items'][2]['path'], 'params.pageSize')

    def test_get_item(self):
        response = self.client.get('/config/items/adminEmail')
        self.assertEqual(response.get_json()['data']['value'], 'admin@example.com')

    def test_unknown_item_is_404(self):
        response = self.client.get('/config/items/unknown')
        self.assertEqual(response.status_code, 404)
        body = response.get_json()
        self.assertFalse(body['success'])
        self.assertEqual(body['error'], 'ItemNotFoundError')
        self.assertEqual(body['error_code'], 'CD-CONF-1001')

    def test_update_item_saves(self):
        response = self.client.put('/config/items/pageSize', json={'value': 50})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['data']['value'], 50)
        self.assertEqual(self.storage.data['pageSize'], 50)

    def test_update_item_validation_error(self):
        response = self.client.put('/config/items/appName', json={'value': ''})
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertEqual(body['message'], 'Application name cannot be blank.')
        self.assertEqual(body['meta']['errors'], {'appName': ['Application name cannot be blank.']})
        self.assertEqual(self.manager.get_item('appName').get_value(), 'Test Application')
        self.assertEqual(self.storage.data, {})

    def test_update_item_requires_value(self):
        response = self.client.put('/config/items/appName', json={'other': 1})
        self.assertEqual(response.status_code, 400)
        response = self.client.put('/config/items/appName', data='not json')
        self.assertEqual(response.status_code, 400)

    def test_update_items(self):
        response = self.client.put('/config/items', json={'values': {'appName': 'New', 'pageSize': 5}})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.storage.data['appName'], 'New')
        self.assertEqual(self.storage.data['pageSize'], 5)

    def test_update_items_validation_error(self):
        response = self.client.put('/config/items', json={'values': {'adminEmail': 'bad', 'pageSize': 0}})
        self.assertEqual(response.status_code, 400)
        errors = response.get_json()['meta']['errors']
        self.assertEqual(set(errors), {'adminEmail', 'pageSize'})
        self.assertEqual(self.storage.data, {})
        self.assertEqual(self.manager.get_item('pageSize').get_value(), 20)

    def test_reset_item(self):
        self.client.put('/config/items/appName', json={'value': 'Override'})
        response = self.client.delete('/config/items/appName')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['data']['value'], 'Test Application')
        self.assertNotIn('appName', self.storage.data)

    def test_save_and_reset(self):
        self.manager.set_item_values({'appName': 'Override'})
        response = self.client.post('/config/save')
        self.assertEqual(response.get_json()['data']['appName'], 'Override')
        self.assertEqual(self.storage.data['appName'], 'Override')

        response = self.client.post('/config/reset')
        self.assertEqual(response.get_json()['data']['appName'], 'Test Application')
        self.assertEqual(self.storage.data, {})

    def test_composed(self):
        self.storage.save({'pageSize': '30'})
        response = self.client.get('/config/composed')
        self.assertEqual(response.get_json()['data'], {
            'name': 'Test Application',
            'params': {'adminEmail': 'admin@example.com', 'pageSize': 30},
        })

    def test_stored_values_are_reported_and_kept(self):
        self.storage.save({'appName': 'Stored name', 'adminEmail': 'root@example.com'})

        response = self.client.get('/config/items/adminEmail')
        self.assertEqual(response.get_json()['data']['value'], 'root@example.com')

        response = self.client.put('/config/items/appName', json={'value': 'New name'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.storage.data['appName'], 'New name')
        self.assertEqual(self.storage.data['adminEmail'], 'root@example.com')

    def test_bulk_update_keeps_other_stored_values(self):
        self.storage.save({'adminEmail': 'root@example.com'})
        self.client.put('/config/items', json={'values': {'pageSize': 5}})
        self.assertEqual(self.storage.data['adminEmail'], 'root@example.com')
        self.assertEqual(self.storage.data['pageSize'], 5)

    def test_unknown_route(self):
        response = self.client.get('/nowhere')
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.get_json()['success'])


if __name__ == "__main__":
    unittest.main()
