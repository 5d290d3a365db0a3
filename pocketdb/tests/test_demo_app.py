#!/usr/bin/env python3
"""
Tests for the Flask statement console in demo_app/

Run: python -m pytest pocketdb/tests/test_demo_app.py -v
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from demo_app.app import create_app
from pocketdb import Database


class TestConsoleAPI(unittest.TestCase):

    def setUp(self):
        self.db = Database()
        self.app = create_app(self.db)
        self.client = self.app.test_client()

    def test_execute_select(self):
        response = self.client.post('/api/execute', json={'sql': 'SELECT * FROM users WHERE id=1'})
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body['ok'])
        self.assertEqual(body['rows'], [{'id': 1, 'username': 'John Doe', 'age': 25}])
        self.assertEqual(body['output'], '{"id":1,"username":"John Doe","age":25}')

    def test_execute_join(self):
        response = self.client.post('/api/execute', json={
            'sql': 'SELECT * FROM users JOIN orders ON users.id = orders.user_id'})
        self.assertEqual(response.get_json()['lines'], ['John Doe bought Laptop'])

    def test_execute_error(self):
        response = self.client.post('/api/execute', json={'sql': 'DROP TABLE ghosts'})
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertFalse(body['ok'])
        self.assertEqual(body['error'], {'kind': 'not_found', 'message': 'Table not found.'})

    def test_execute_requires_sql(self):
        self.assertEqual(self.client.post('/api/execute', json={}).status_code, 400)
        self.assertEqual(self.client.post('/api/execute', data='nope').status_code, 400)

    def test_statements_share_database(self):
        self.client.post('/api/execute', json={'sql': 'CREATE TABLE pets (id int, name text)'})
        self.client.post('/api/execute', json={'sql': "INSERT INTO pets VALUES (1, 'Rex')"})
        self.assertEqual(self.db.count('pets'), 1)

    def test_tables(self):
        body = self.client.get('/api/tables').get_json()
        self.assertIn({'name': 'users', 'rows': 2}, body['tables'])
        self.assertIn({'name': 'orders', 'rows': 1}, body['tables'])

    def test_describe(self):
        body = self.client.get('/api/tables/orders').get_json()
        self.assertEqual([col['name'] for col in body['columns']], ['id', 'user_id', 'item'])
        self.assertEqual(self.client.get('/api/tables/ghosts').status_code, 404)

    def test_console_page(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'PocketDB Console', response.data)

        response = self.client.post('/', data={
            'sql': 'SELECT * FROM users JOIN orders ON x'})
        self.assertIn(b'John Doe bought Laptop', response.data)


class TestUnseededConsole(unittest.TestCase):

    def test_no_seed(self):
        client = create_app(Database(), seed=False).test_client()
        self.assertEqual(client.get('/api/tables').get_json(), {'tables': []})


if __name__ == '__main__':
    unittest.main(verbosity=2)
