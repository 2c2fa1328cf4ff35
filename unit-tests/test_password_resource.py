from unittest import TestCase, mock

import requests

from helper import PASSPHRASE, FakePassbolt, get_connected_params, get_test_key
from passboltprovider import api
from passboltprovider.diagnostics import Diagnostics
from passboltprovider.error import Error, PassboltApiError
from passboltprovider.resources import FolderResource, PasswordResource


def password_plan(**kwargs):
    plan = {
        'name': 'db',
        'username': 'admin',
        'uri': 'https://db.example.com',
        'password': 'x',
    }
    plan.update(kwargs)
    return plan


class TestPasswordResource(TestCase):
    def setUp(self):
        self.server = FakePassbolt().start()
        self.params = get_connected_params()
        self.resource = PasswordResource()
        self.resource.configure(self.params, Diagnostics())

    def tearDown(self):
        mock.patch.stopall()

    def test_schema(self):
        schema = self.resource.schema().to_dict()
        attributes = schema['attributes']
        self.assertTrue(attributes['password']['sensitive'])
        self.assertTrue(attributes['id']['computed'])
        for name in ('name', 'username', 'uri', 'password'):
            self.assertTrue(attributes[name]['required'])
        for name in ('description', 'folder_parent', 'share_group'):
            self.assertTrue(attributes[name]['optional'])

    def test_create(self):
        response = self.resource.create(password_plan(description='Main database'))
        self.assertFalse(response.diagnostics.has_error())
        resource_id = response.state['id']
        stored = self.server.resources[resource_id]
        self.assertEqual(stored['name'], 'db')
        self.assertEqual(stored['description'], 'Main database')
        self.assertEqual(stored['secret'], 'x')
        self.assertIsNone(stored['folder_parent_id'])
        self.assertEqual(response.state['password'], 'x')

    def test_create_validation(self):
        for field, message in (('name', 'Name cannot be empty'), ('username', 'Username cannot be empty'),
                               ('uri', 'URI cannot be empty'), ('password', 'Password cannot be empty')):
            response = self.resource.create(password_plan(**{field: ''}))
            self.assertIsNone(response.state)
            self.assertEqual(response.diagnostics.errors[0].summary, 'Validation Error')
            self.assertEqual(response.diagnostics.errors[0].detail, message)
        self.assertEqual(self.server.calls, [])

    def test_create_invalid_uri(self):
        for uri in ('ftp://db.example.com', 'db.example.com', 'mailto:admin@example.com'):
            response = self.resource.create(password_plan(uri=uri))
            self.assertIsNone(response.state)
            self.assertEqual(response.diagnostics.errors[0].detail, 'URI must be a valid HTTP or HTTPS URL')
        self.assertEqual(self.server.calls, [])

    def test_create_in_folder(self):
        folder_id = self.server.add_folder('Infra')
        response = self.resource.create(password_plan(folder_parent='Infra'))
        self.assertFalse(response.diagnostics.has_error())
        self.assertEqual(self.server.resources[response.state['id']]['folder_parent_id'], folder_id)

    def test_create_folder_not_found(self):
        response = self.resource.create(password_plan(folder_parent='Missing'))
        self.assertIsNone(response.state)
        self.assertEqual(response.diagnostics.errors[0].detail, "Folder 'Missing' not found")
        self.assertNotIn('create_resource', self.server.calls)

    def test_create_shared_with_group(self):
        group_id = self.server.add_group('DBAs')
        response = self.resource.create(password_plan(share_group='DBAs'))
        self.assertFalse(response.diagnostics.has_error())
        self.assertEqual(len(self.server.shares), 1)
        resource_id, shares = self.server.shares[0]
        self.assertEqual(resource_id, response.state['id'])
        self.assertEqual(shares, [api.ShareOperation(type=api.PERMISSION_READ, aro=api.ARO_GROUP, aro_id=group_id)])

    def test_create_unknown_group_is_skipped(self):
        response = self.resource.create(password_plan(share_group='Nobody'))
        self.assertFalse(response.diagnostics.has_error())
        self.assertIn(response.state['id'], self.server.resources)
        self.assertEqual(self.server.shares, [])
        self.assertNotIn('share_resource', self.server.calls)

    def test_create_share_fails(self):
        self.server.add_group('DBAs')
        self.server.fail('share_resource', PassboltApiError(400, 'The permissions are not valid.'))
        response = self.resource.create(password_plan(share_group='DBAs'))
        self.assertEqual(response.diagnostics.errors[0].summary, 'Cannot share resource')
        self.assertIn(response.state['id'], self.server.resources)

    def test_create_group_listing_fails(self):
        self.server.fail('get_groups', Error('Connection failed'))
        response = self.resource.create(password_plan(share_group='DBAs'))
        self.assertEqual(response.diagnostics.errors[0].summary, 'Cannot get groups')

    def test_create_server_error(self):
        self.server.fail('create_resource', PassboltApiError(400, 'Could not validate resource data.'))
        response = self.resource.create(password_plan())
        self.assertIsNone(response.state)
        self.assertEqual(response.diagnostics.errors[0].summary, 'Cannot create resource')

    def test_read_keeps_password(self):
        folder_id = self.server.add_folder('Infra')
        resource_id = self.server.add_resource('db', username='root', uri='https://db.example.com',
                                               password='remote', folder_parent_id=folder_id)
        state = password_plan(id=resource_id, password='local', folder_parent=None)
        response = self.resource.read(state)
        self.assertFalse(response.diagnostics.has_error())
        self.assertEqual(response.state['username'], 'root')
        self.assertEqual(response.state['password'], 'local')
        self.assertEqual(response.state['folder_parent'], 'Infra')
        self.assertIsNone(response.state['description'])

    def test_read_description(self):
        resource_id = self.server.add_resource('db', username='admin', uri='https://db.example.com',
                                               description='Primary')
        response = self.resource.read(password_plan(id=resource_id))
        self.assertEqual(response.state['description'], 'Primary')

        self.server.resources[resource_id]['description'] = ''
        response = self.resource.read(password_plan(id=resource_id, description='Primary'))
        self.assertEqual(response.state['description'], '')

    def test_read_deleted_out_of_band(self):
        response = self.resource.read(password_plan(id='a1111111-1111-1111-1111-111111111111'))
        self.assertIsNone(response.state)
        self.assertFalse(response.diagnostics.has_error())

    def test_read_error(self):
        self.server.fail('get_resource', PassboltApiError(500, 'Internal Error'))
        response = self.resource.read(password_plan(id='a2222222-2222-2222-2222-222222222222'))
        self.assertEqual(response.diagnostics.errors[0].summary, 'Error reading password')
        self.assertIsNotNone(response.state)

    def test_update_no_change(self):
        resource_id = self.server.add_resource('db', username='admin', uri='https://db.example.com', password='x')
        state = password_plan(id=resource_id)
        response = self.resource.update(password_plan(), state)
        self.assertFalse(response.diagnostics.has_error())
        self.assertEqual(response.state['id'], resource_id)
        self.assertNotIn('delete_resource', self.server.calls)
        self.assertNotIn('create_resource', self.server.calls)

    def test_update_any_field_recreates(self):
        changes = (
            {'name': 'db2'},
            {'description': 'changed'},
            {'username': 'root'},
            {'uri': 'https://db2.example.com'},
            {'password': 'y'},
        )
        for change in changes:
            self.server.calls.clear()
            resource_id = self.server.add_resource('db', username='admin', uri='https://db.example.com',
                                                   password='x')
            response = self.resource.update(password_plan(**change), password_plan(id=resource_id))
            self.assertFalse(response.diagnostics.has_error(), change)
            self.assertNotEqual(response.state['id'], resource_id, change)
            self.assertNotIn(resource_id, self.server.resources)
            self.assertEqual(self.server.calls[-2:], ['delete_resource', 'create_resource'])
            field, value = next(iter(change.items()))
            self.assertEqual(response.state[field], value)

    def test_update_folder_change_recreates(self):
        folder_id = self.server.add_folder('Infra')
        resource_id = self.server.add_resource('db', username='admin', uri='https://db.example.com')
        response = self.resource.update(password_plan(folder_parent='Infra'), password_plan(id=resource_id))
        self.assertFalse(response.diagnostics.has_error())
        new_id = response.state['id']
        self.assertEqual(self.server.resources[new_id]['folder_parent_id'], folder_id)

    def test_update_folder_not_found_keeps_resource(self):
        resource_id = self.server.add_resource('db', username='admin', uri='https://db.example.com')
        response = self.resource.update(password_plan(folder_parent='Missing'), password_plan(id=resource_id))
        self.assertTrue(response.diagnostics.has_error())
        self.assertIn(resource_id, self.server.resources)
        self.assertNotIn('delete_resource', self.server.calls)

    def test_update_validation(self):
        resource_id = self.server.add_resource('db', username='admin', uri='https://db.example.com')
        response = self.resource.update(password_plan(uri='db.example.com'), password_plan(id=resource_id))
        self.assertEqual(response.diagnostics.errors[0].detail, 'URI must be a valid HTTP or HTTPS URL')
        self.assertEqual(self.server.calls, [])

    def test_update_recreation_fails(self):
        resource_id = self.server.add_resource('db', username='admin', uri='https://db.example.com')
        self.server.fail('create_resource', PassboltApiError(400, 'Could not validate resource data.'))
        response = self.resource.update(password_plan(name='db2'), password_plan(id=resource_id))
        self.assertIsNone(response.state)
        self.assertEqual(response.diagnostics.errors[0].summary, 'Resource recreation failed')
        self.assertNotIn(resource_id, self.server.resources)

    def test_update_delete_fails(self):
        resource_id = self.server.add_resource('db', username='admin', uri='https://db.example.com')
        self.server.fail('delete_resource', PassboltApiError(403, 'Forbidden'))
        response = self.resource.update(password_plan(name='db2'), password_plan(id=resource_id))
        self.assertEqual(response.diagnostics.errors[0].summary, 'Error deleting old resource')
        self.assertEqual(response.state['id'], resource_id)
        self.assertNotIn('create_resource', self.server.calls)

    def test_delete(self):
        resource_id = self.server.add_resource('db', username='admin', uri='https://db.example.com')
        response = self.resource.delete(password_plan(id=resource_id))
        self.assertIsNone(response.state)
        self.assertFalse(response.diagnostics.has_error())
        self.assertNotIn(resource_id, self.server.resources)

    def test_delete_fails(self):
        response = self.resource.delete(password_plan(id='a3333333-3333-3333-3333-333333333333'))
        self.assertEqual(response.diagnostics.errors[0].summary, 'Error deleting password')
        self.assertIn('404', response.diagnostics.errors[0].detail)

    def test_end_to_end(self):
        folders = FolderResource()
        folders.configure(self.params, Diagnostics())

        response = folders.create({'name': 'Infra'})
        folder_state = response.state
        folder = self.server.get_folder(self.params, folder_state['id'])
        self.assertEqual(folder.name, 'Infra')
        self.assertFalse(folder.personal)

        response = self.resource.create(password_plan(folder_parent='Infra'))
        self.assertFalse(response.diagnostics.has_error())
        state = response.state
        self.assertEqual(self.server.resources[state['id']]['folder_parent_id'], folder_state['id'])

        first = self.resource.read(state).state
        second = self.resource.read(first).state
        for field in ('name', 'username', 'uri'):
            self.assertEqual(first[field], second[field])
        self.assertEqual(second['password'], 'x')

        old_id = second['id']
        self.server.calls.clear()
        response = self.resource.update(password_plan(uri='https://db2.example.com', folder_parent='Infra'), second)
        self.assertFalse(response.diagnostics.has_error())
        self.assertEqual(self.server.calls[-2:], ['delete_resource', 'create_resource'])
        new_id = response.state['id']
        self.assertNotEqual(new_id, old_id)

        response = self.resource.delete(response.state)
        self.assertIsNone(response.state)
        with self.assertRaises(PassboltApiError) as context:
            self.server.get_resource(self.params, new_id)
        self.assertTrue(context.exception.is_not_found)


class TestPasswordResourceTransport(TestCase):
    def setUp(self):
        self.params = get_connected_params()
        self.params.key = get_test_key()
        self.params.passphrase = PASSPHRASE
        self.request_mock = mock.patch.object(requests.Session, 'request').start()
        self.resource = PasswordResource()
        self.resource.configure(self.params, Diagnostics())

    def tearDown(self):
        mock.patch.stopall()
        self.params.rest_context.close()

    def test_read_redirect_loop(self):
        self.request_mock.side_effect = requests.exceptions.TooManyRedirects('Exceeded 30 redirects.')
        state = password_plan(id='r1')
        response = self.resource.read(state)
        self.assertEqual(response.state['id'], 'r1')
        self.assertEqual(response.diagnostics.errors[0].summary, 'Error reading password')
        self.assertIn('Exceeded 30 redirects', response.diagnostics.errors[0].detail)

    def test_create_chunked_encoding_error(self):
        self.request_mock.side_effect = requests.exceptions.ChunkedEncodingError('Connection broken')
        response = self.resource.create(password_plan())
        self.assertIsNone(response.state)
        self.assertTrue(response.diagnostics.has_error())
