#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

import logging
from typing import List, NamedTuple, Optional, Iterable

from . import crypto, rest_api
from .error import PassboltApiError
from .params import ProviderParams
from .vault import PassboltFolder, PassboltResource, PassboltGroup, PassboltUser

PERMISSION_READ = 1

ARO_GROUP = 'Group'

PREFERRED_RESOURCE_TYPE = 'password-string'


class ShareOperation(NamedTuple):
    type: int
    aro: str
    aro_id: str


def get_folders(params):    # type: (ProviderParams) -> List[PassboltFolder]
    rs = rest_api.execute_rest(params.rest_context, 'GET', '/folders.json')
    return [PassboltFolder.load(x) for x in rs or []]


def get_folder(params, folder_id):    # type: (ProviderParams, str) -> PassboltFolder
    rs = rest_api.execute_rest(params.rest_context, 'GET', f'/folders/{folder_id}.json')
    return PassboltFolder.load(rs or {})


def create_folder(params, name, folder_parent_id=None):
    # type: (ProviderParams, str, Optional[str]) -> PassboltFolder
    rq = {'name': name}
    if folder_parent_id:
        rq['folder_parent_id'] = folder_parent_id
    rs = rest_api.execute_rest(params.rest_context, 'POST', '/folders.json', payload=rq)
    folder = PassboltFolder.load(rs or {})
    logging.debug('Folder "%s" created: %s', name, folder.folder_id)
    return folder


def delete_folder(params, folder_id):    # type: (ProviderParams, str) -> None
    rest_api.execute_rest(params.rest_context, 'DELETE', f'/folders/{folder_id}.json')
    logging.debug('Folder %s deleted', folder_id)


def get_resources(params):    # type: (ProviderParams) -> List[PassboltResource]
    rs = rest_api.execute_rest(params.rest_context, 'GET', '/resources.json')
    return [PassboltResource.load(x) for x in rs or []]


def get_resource(params, resource_id):    # type: (ProviderParams, str) -> PassboltResource
    rs = rest_api.execute_rest(params.rest_context, 'GET', f'/resources/{resource_id}.json')
    return PassboltResource.load(rs or {})


def get_resource_type_id(params, slug=PREFERRED_RESOURCE_TYPE):    # type: (ProviderParams, str) -> Optional[str]
    rs = rest_api.execute_rest(params.rest_context, 'GET', '/resource-types.json')
    for resource_type in rs or []:
        if resource_type.get('slug') == slug:
            return resource_type.get('id')


def create_resource(params, name, username, uri, password, description='', folder_parent_id=None):
    # type: (ProviderParams, str, str, str, str, str, Optional[str]) -> str
    secret = crypto.sign_and_encrypt_message(password, params.key, params.passphrase, params.key.pubkey)
    rq = {
        'name': name,
        'username': username,
        'uri': uri,
        'description': description or '',
        'secrets': [{'data': secret}]
    }
    resource_type_id = get_resource_type_id(params)
    if resource_type_id:
        rq['resource_type_id'] = resource_type_id
    if folder_parent_id:
        rq['folder_parent_id'] = folder_parent_id
    rs = rest_api.execute_rest(params.rest_context, 'POST', '/resources.json', payload=rq)
    resource_id = rs.get('id') if isinstance(rs, dict) else None
    if not resource_id:
        raise PassboltApiError(None, f'Server did not return an id for resource "{name}"')
    logging.debug('Resource "%s" created: %s', name, resource_id)
    return resource_id


def delete_resource(params, resource_id):    # type: (ProviderParams, str) -> None
    rest_api.execute_rest(params.rest_context, 'DELETE', f'/resources/{resource_id}.json')
    logging.debug('Resource %s deleted', resource_id)


def get_groups(params):    # type: (ProviderParams) -> List[PassboltGroup]
    rs = rest_api.execute_rest(params.rest_context, 'GET', '/groups.json')
    return [PassboltGroup.load(x) for x in rs or []]


def get_users(params):    # type: (ProviderParams) -> List[PassboltUser]
    rs = rest_api.execute_rest(params.rest_context, 'GET', '/users.json', query={'contain[gpgkey]': '1'})
    return [PassboltUser.load(x) for x in rs or []]


def get_secret(params, resource_id):    # type: (ProviderParams, str) -> str
    rs = rest_api.execute_rest(params.rest_context, 'GET', f'/secrets/resource/{resource_id}.json')
    data = rs.get('data') if isinstance(rs, dict) else None
    if not data:
        raise PassboltApiError(None, f'Resource {resource_id} has no secret for the current user')
    return crypto.decrypt_message(data, params.key, params.passphrase)


def share_resource(params, resource_id, shares):
    # type: (ProviderParams, str, Iterable[ShareOperation]) -> None
    """Grants permissions on a resource and re-encrypts its secret for every user who gains access."""
    permissions = [{
        'is_new': True,
        'aro': x.aro,
        'aro_foreign_key': x.aro_id,
        'type': x.type
    } for x in shares]
    if not permissions:
        return

    rq = {'permissions': permissions}
    rs = rest_api.execute_rest(params.rest_context, 'POST', f'/share/simulate/resource/{resource_id}.json',
                               payload=rq)
    added_user_ids = set()
    changes = rs.get('changes') if isinstance(rs, dict) else None
    if isinstance(changes, dict):
        for added in changes.get('added') or []:
            user = added.get('User') if isinstance(added, dict) else None
            if isinstance(user, dict) and user.get('id'):
                added_user_ids.add(user['id'])

    secrets = []
    if added_user_ids:
        password = get_secret(params, resource_id)
        for user in get_users(params):
            if user.user_id not in added_user_ids:
                continue
            if not user.armored_key:
                raise PassboltApiError(None, f'User {user.username or user.user_id} has no public key')
            public_key = crypto.load_public_key(user.armored_key)
            secrets.append({
                'user_id': user.user_id,
                'data': crypto.sign_and_encrypt_message(password, params.key, params.passphrase, public_key)
            })
        missing = added_user_ids.difference((x['user_id'] for x in secrets))
        if missing:
            raise PassboltApiError(None, f'Public keys not found for users: {", ".join(sorted(missing))}')

    rq['secrets'] = secrets
    rest_api.execute_rest(params.rest_context, 'PUT', f'/share/resource/{resource_id}.json', payload=rq)
    logging.debug('Resource %s shared: %d permission(s), %d secret(s)', resource_id, len(permissions), len(secrets))
