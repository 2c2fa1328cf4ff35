import json
import os
import tempfile
from unittest import TestCase, mock

from helper import FakePassbolt, get_connected_params
from passboltprovider import cli
from passboltprovider.commands import base, passwords, utils
from passboltprovider.error import CommandError, ConfigurationError
from passboltprovider.params import ProviderParams


def printed_json(print_mock):
    args, _ = print_mock.call_args
    return json.loads(args[0])


class TestCommands(TestCase):
    def setUp(self):
        self.server = FakePassbolt().start()
        self.params = get_connected_params()

    def tearDown(self):
        mock.patch.stopall()

    def test_folder_create(self):
        with mock.patch('builtins.print') as mock_print:
            cli.do_command(self.params, 'folder create --plan \'{"name": "Infra"}\'')
            response = printed_json(mock_print)
        self.assertEqual(response['diagnostics'], [])
        self.assertIn(response['state']['id'], self.server.folders)

    def test_folder_create_error(self):
        with mock.patch('builtins.print') as mock_print:
            with self.assertRaises(CommandError):
                cli.do_command(self.params, 'folder create --plan \'{"name": "DB", "folder_parent": "Missing"}\'')
            response = printed_json(mock_print)
        self.assertIsNone(response['state'])
        self.assertEqual(response['diagnostics'][0]['summary'], 'Validation Error')

    def test_password_lifecycle_with_files(self):
        self.server.add_folder('Infra')
        plan = {'name': 'db', 'username': 'admin', 'uri': 'https://db.example.com', 'password': 'x',
                'folder_parent': 'Infra'}
        with tempfile.TemporaryDirectory() as temp_dir:
            plan_file = os.path.join(temp_dir, 'plan.json')
            with open(plan_file, 'w') as fd:
                json.dump(plan, fd)

            with mock.patch('builtins.print') as mock_print:
                cli.do_command(self.params, f'password create --plan @{plan_file}')
                state = printed_json(mock_print)['state']

            state_file = os.path.join(temp_dir, 'state.json')
            with open(state_file, 'w') as fd:
                json.dump(state, fd)

            with mock.patch('builtins.print') as mock_print:
                cli.do_command(self.params, f'pw read --state @{state_file}')
                read_state = printed_json(mock_print)['state']
            self.assertEqual(read_state['password'], 'x')
            self.assertEqual(read_state['folder_parent'], 'Infra')

            with mock.patch('builtins.print') as mock_print:
                cli.do_command(self.params, f'password delete --state @{state_file}')
                self.assertIsNone(printed_json(mock_print)['state'])
        self.assertEqual(self.server.resources, {})

    def test_missing_plan(self):
        with mock.patch('builtins.print'), mock.patch('sys.stderr'):
            with self.assertRaises(CommandError):
                cli.do_command(self.params, 'folder create')

    def test_invalid_verb(self):
        with mock.patch('builtins.print'):
            self.assertIsNone(cli.do_command(self.params, 'folder rename'))
        self.assertEqual(self.server.calls, [])

    def test_verb_alias_and_help(self):
        with mock.patch('builtins.print') as mock_print:
            cli.do_command(self.params, 'f c --plan \'{"name": "Infra"}\'')
            state = printed_json(mock_print)['state']
        self.assertEqual(self.server.folders[state['id']]['name'], 'Infra')

        with mock.patch('builtins.print') as mock_print:
            self.assertIsNone(cli.do_command(self.params, 'folder'))
            output = '\n'.join(str(x[0][0]) for x in mock_print.call_args_list if x[0])
        for verb in ('create', 'read', 'update', 'delete'):
            self.assertIn(verb, output)

    def test_passwords_json(self):
        folder_id = self.server.add_folder('Infra')
        self.server.add_resource('web', username='www', uri='https://www.example.com')
        self.server.add_resource('db', username='admin', uri='https://db.example.com', folder_parent_id=folder_id)

        cmd = passwords.PasswordsCommand()
        rows = json.loads(cmd.execute(self.params, format='json'))
        self.assertEqual([x['name'] for x in rows], ['db', 'web'])
        self.assertEqual(rows[0]['folder_parent'], 'Infra')
        self.assertNotIn('folder_parent', rows[1])

        rows = json.loads(cmd.execute(self.params, format='json', folder='Infra'))
        self.assertEqual(len(rows), 1)
        rows = json.loads(cmd.execute(self.params, format='json', pattern='WE'))
        self.assertEqual([x['name'] for x in rows], ['web'])

        with mock.patch('builtins.print'):
            cmd.execute(self.params, format='table')

    def test_schema(self):
        schema = json.loads(cli.do_command(self.params, 'schema'))
        self.assertIn('passbolt_folder', schema['resource_schemas'])
        self.assertIn('passbolt_passwords', schema['data_source_schemas'])

    def test_rpc(self):
        request = {'type': 'passbolt_folder', 'operation': 'create', 'plan': {'name': 'Infra'}}
        response = utils.RpcCommand.serve(self.params, request)
        self.assertFalse(response.diagnostics.has_error())

        request = {'type': 'passbolt_folder', 'operation': 'read', 'state': response.state}
        response = utils.RpcCommand.serve(self.params, request)
        self.assertEqual(response.state['name'], 'Infra')

    def test_rpc_stdin(self):
        request = {'type': 'passbolt_passwords', 'operation': 'read'}
        with mock.patch('sys.stdin') as mock_stdin, mock.patch('builtins.print') as mock_print:
            mock_stdin.read.return_value = json.dumps(request)
            cli.do_command(self.params, 'rpc')
            response = printed_json(mock_print)
        self.assertEqual(response, {'state': {'passwords': []}, 'diagnostics': []})

    def test_rpc_configuration_error(self):
        params = ProviderParams()
        request = {'type': 'passbolt_folder', 'operation': 'read', 'state': {'id': 'f1'}, 'config': {}}
        with mock.patch.dict('os.environ', {}, clear=True):
            response = utils.RpcCommand.serve(params, request)
        self.assertEqual([x.attribute for x in response.diagnostics.errors], ['base_url', 'private_key', 'passphrase'])
        self.assertEqual(response.state, {'id': 'f1'})
        self.assertEqual(self.server.calls, [])

    def test_rpc_config_keeps_session(self):
        mock.patch('passboltprovider.crypto.load_private_key').start()
        logout_mock = mock.patch('passboltprovider.loginv3.logout').start()
        login_mock = mock.patch('passboltprovider.loginv3.login').start()

        def login(session):
            session.user = {'id': 'u2', 'username': 'bob@example.com'}
        login_mock.side_effect = login

        self.params.proxy = 'http://proxy:3128'
        self.params.rest_context.certificate_check = False
        user = self.params.user
        config = {'base_url': 'https://other.example.com', 'private_key': 'other key', 'passphrase': 'other'}
        request = {'type': 'passbolt_passwords', 'operation': 'read', 'config': config}
        response = utils.RpcCommand.serve(self.params, request)
        self.assertFalse(response.diagnostics.has_error())

        session = login_mock.call_args[0][0]
        self.assertIsNot(session, self.params)
        self.assertEqual(session.base_url, 'https://other.example.com')
        self.assertEqual(session.proxy, 'http://proxy:3128')
        self.assertFalse(session.rest_context.certificate_check)
        logout_mock.assert_called_once_with(session)

        self.assertIs(self.params.user, user)
        self.assertEqual(self.params.private_key, 'private key')
        self.assertNotEqual(self.params.base_url, 'https://other.example.com')

    def test_connect_configuration_error(self):
        params = ProviderParams()
        with mock.patch.dict('os.environ', {}, clear=True), mock.patch('logging.error'):
            with self.assertRaises(ConfigurationError) as context:
                base.connect(params)
        self.assertEqual(context.exception.attribute, 'base_url')

    def test_load_document(self):
        self.assertIsNone(base.load_document(None, 'plan'))
        self.assertEqual(base.load_document('{"name": "Infra"}', 'plan'), {'name': 'Infra'})
        with self.assertRaises(CommandError):
            base.load_document('{"name": ', 'plan')
        with self.assertRaises(CommandError):
            base.load_document('["Infra"]', 'plan')
        with self.assertRaises(CommandError):
            base.load_document('@/nonexistent/plan.json', 'plan')

    def test_field_titles(self):
        self.assertEqual(base.fields_to_titles(['id', 'folder_parent', 'uri']), ['ID', 'Folder Parent', 'URI'])
