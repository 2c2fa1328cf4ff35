import json
import uuid
from unittest import mock

import pgpy
import requests
from pgpy.constants import CompressionAlgorithm, HashAlgorithm, KeyFlags, PubKeyAlgorithm, SymmetricKeyAlgorithm

from passboltprovider.error import PassboltApiError
from passboltprovider.params import ProviderParams
from passboltprovider.vault import PassboltFolder, PassboltGroup, PassboltResource

BASE_URL = 'https://passbolt.example.com'
PASSPHRASE = 'correct horse battery staple'

_test_key = None


def get_test_key():    # type: () -> pgpy.PGPKey
    """Passphrase protected RSA key, generated once per test session."""
    global _test_key
    if _test_key is None:
        key = pgpy.PGPKey.new(PubKeyAlgorithm.RSAEncryptOrSign, 2048)
        uid = pgpy.PGPUID.new('Ada Lovelace', email='ada@example.com')
        key.add_uid(uid, usage={KeyFlags.Sign, KeyFlags.EncryptCommunications, KeyFlags.EncryptStorage},
                    hashes=[HashAlgorithm.SHA256], ciphers=[SymmetricKeyAlgorithm.AES256],
                    compression=[CompressionAlgorithm.ZLIB, CompressionAlgorithm.Uncompressed])
        key.protect(PASSPHRASE, SymmetricKeyAlgorithm.AES256, HashAlgorithm.SHA256)
        _test_key = key
    return _test_key


def encrypt_message(text, public_key):    # type: (str, pgpy.PGPKey) -> str
    return str(public_key.encrypt(pgpy.PGPMessage.new(text)))


def make_response(status_code, envelope=None, reason='OK', headers=None):
    rs = requests.Response()
    rs.status_code = status_code
    rs.reason = reason
    if envelope is not None:
        rs.headers['Content-Type'] = 'application/json; charset=UTF-8'
        rs._content = json.dumps(envelope).encode('utf-8')
    else:
        rs._content = b''
    if headers:
        rs.headers.update(headers)
    return rs


def get_connected_params():    # type: () -> ProviderParams
    params = ProviderParams(base_url=BASE_URL)
    params.private_key = 'private key'
    params.passphrase = 'passphrase'
    params.user = {'id': str(uuid.uuid4()), 'username': 'ada@example.com'}
    return params


class FakePassbolt:
    """In-memory Passbolt server behind the passboltprovider.api functions."""

    API_FUNCTIONS = ('get_folders', 'get_folder', 'create_folder', 'delete_folder',
                     'get_resources', 'get_resource', 'create_resource', 'delete_resource',
                     'get_groups', 'share_resource')

    def __init__(self):
        self.folders = {}      # id -> dict
        self.resources = {}    # id -> dict
        self.groups = {}       # id -> dict
        self.shares = []       # (resource_id, [ShareOperation])
        self.calls = []        # api function names in call order
        self.failures = {}     # api function name -> exception

    def start(self):
        for name in self.API_FUNCTIONS:
            mock.patch(f'passboltprovider.api.{name}', side_effect=getattr(self, name)).start()
        return self

    def fail(self, name, exception):
        self.failures[name] = exception

    def _call(self, name):
        self.calls.append(name)
        e = self.failures.get(name)
        if e is not None:
            raise e

    @staticmethod
    def _not_found(kind):
        return PassboltApiError(404, f'The {kind} does not exist.')

    def add_folder(self, name, folder_parent_id=None, personal=False):
        folder_id = str(uuid.uuid4())
        self.folders[folder_id] = {'id': folder_id, 'name': name, 'folder_parent_id': folder_parent_id,
                                   'personal': personal}
        return folder_id

    def add_group(self, name):
        group_id = str(uuid.uuid4())
        self.groups[group_id] = {'id': group_id, 'name': name}
        return group_id

    def add_resource(self, name, username='', uri='', description='', password='', folder_parent_id=None):
        resource_id = str(uuid.uuid4())
        self.resources[resource_id] = {
            'id': resource_id, 'name': name, 'username': username, 'uri': uri, 'description': description,
            'folder_parent_id': folder_parent_id, 'secret': password
        }
        return resource_id

    def get_folders(self, params):
        self._call('get_folders')
        return [PassboltFolder.load(x) for x in self.folders.values()]

    def get_folder(self, params, folder_id):
        self._call('get_folder')
        if folder_id not in self.folders:
            raise self._not_found('folder')
        return PassboltFolder.load(self.folders[folder_id])

    def create_folder(self, params, name, folder_parent_id=None):
        self._call('create_folder')
        folder_id = self.add_folder(name, folder_parent_id)
        return PassboltFolder.load(self.folders[folder_id])

    def delete_folder(self, params, folder_id):
        self._call('delete_folder')
        if folder_id not in self.folders:
            raise self._not_found('folder')
        del self.folders[folder_id]

    def get_resources(self, params):
        self._call('get_resources')
        return [PassboltResource.load(x) for x in self.resources.values()]

    def get_resource(self, params, resource_id):
        self._call('get_resource')
        if resource_id not in self.resources:
            raise self._not_found('resource')
        return PassboltResource.load(self.resources[resource_id])

    def create_resource(self, params, name, username, uri, password, description='', folder_parent_id=None):
        self._call('create_resource')
        return self.add_resource(name, username=username, uri=uri, description=description, password=password,
                                 folder_parent_id=folder_parent_id)

    def delete_resource(self, params, resource_id):
        self._call('delete_resource')
        if resource_id not in self.resources:
            raise self._not_found('resource')
        del self.resources[resource_id]

    def get_groups(self, params):
        self._call('get_groups')
        return [PassboltGroup.load(x) for x in self.groups.values()]

    def share_resource(self, params, resource_id, shares):
        self._call('share_resource')
        if resource_id not in self.resources:
            raise self._not_found('resource')
        self.shares.append((resource_id, list(shares)))
