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
import re
from urllib.parse import unquote_plus

from . import crypto, rest_api
from .error import AuthenticationError, Error
from .params import ProviderParams

TOKEN_PATTERN = re.compile(r'^gpgauthv1\.3\.0\|36\|[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}\|gpgauthv1\.3\.0$')


def is_valid_token(token):    # type: (str) -> bool
    return bool(TOKEN_PATTERN.match(token or ''))


def login(params):    # type: (ProviderParams) -> None
    """GPGAuth handshake: the server proves it can encrypt to our key, we prove we can decrypt."""
    if params.key is None:
        raise AuthenticationError('Private key is not loaded')

    context = params.rest_context
    fingerprint = params.fingerprint
    logging.debug('GPGAuth stage 1 for key %s', fingerprint)

    rs = rest_api.execute_http(context, 'POST', '/auth/login.json',
                               payload={'gpg_auth': {'keyid': fingerprint}})
    if rs.status_code >= 400:
        rest_api.parse_response(rs)
    encrypted_token = rs.headers.get('X-GPGAuth-User-Auth-Token')
    if not encrypted_token:
        raise AuthenticationError(f'Server did not return an authentication token for key {fingerprint}. '
                                  'Make sure the key is registered for a Passbolt user.')
    encrypted_token = unquote_plus(encrypted_token).replace('\\ ', ' ')

    try:
        token = crypto.decrypt_message(encrypted_token, params.key, params.passphrase)
    except Exception as e:
        raise AuthenticationError(f'Unable to decrypt the authentication token: {e}')
    if not is_valid_token(token):
        raise AuthenticationError('Server returned a malformed authentication token')

    logging.debug('GPGAuth stage 2 for key %s', fingerprint)
    rs = rest_api.execute_http(context, 'POST', '/auth/login.json',
                               payload={'gpg_auth': {'keyid': fingerprint, 'user_token_result': token}})
    if rs.status_code >= 400:
        rest_api.parse_response(rs)
    if rs.headers.get('X-GPGAuth-Authenticated') != 'true':
        raise AuthenticationError('Server rejected the authentication token')

    user = rest_api.execute_rest(context, 'GET', '/users/me.json')
    if not isinstance(user, dict):
        raise AuthenticationError('Unable to load the current user profile')
    params.user = user
    logging.info('Logged in to %s as %s', context.server_base, user.get('username') or user.get('id'))


def logout(params):    # type: (ProviderParams) -> None
    if not params.is_authenticated:
        return
    try:
        rest_api.execute_http(params.rest_context, 'GET', '/auth/logout.json')
    except Error as e:
        logging.debug('Logout failed: %s', e)
    finally:
        params.clear_session()
