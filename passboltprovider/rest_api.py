#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

import json
import logging
import ssl

import requests

from typing import Any, Dict, Optional

from .params import RestApiContext
from .error import PassboltApiError, Error

API_VERSION = 'v2'
REQUEST_TIMEOUT = 60


def execute_http(context, method, endpoint, query=None, payload=None):
    # type: (RestApiContext, str, str, Optional[dict], Any) -> requests.Response
    url = context.url(endpoint)
    params = {'api-version': API_VERSION}
    if query:
        params.update(query)

    headers = {}
    if method.upper() != 'GET':
        csrf_token = context.csrf_token
        if csrf_token:
            headers['X-CSRF-Token'] = csrf_token

    logger = logging.getLogger()
    if logger.level <= logging.DEBUG:
        logger.debug('>>> Request: [%s %s]', method.upper(), url)

    try:
        rs = context.session.request(method.upper(), url, params=params, json=payload, headers=headers,
                                     proxies=context.proxies, verify=context.certificate_check,
                                     timeout=REQUEST_TIMEOUT)
    except requests.exceptions.SSLError as e:
        if len(e.args) > 0:
            inner_e = e.args[0]
            if hasattr(inner_e, 'reason'):
                reason = getattr(inner_e, 'reason')
                if isinstance(reason, Exception) and hasattr(reason, 'args'):
                    args = getattr(reason, 'args')
                    if isinstance(args, tuple) and len(args) > 0:
                        inner_e = args[0]
                        if isinstance(inner_e, ssl.SSLCertVerificationError):
                            raise Error(f'Certificate validation error: {context.server_base}. '
                                        'Set "certificate_check": false in the configuration for self-signed servers.')
        raise Error(f'SSL error: {context.server_base}: {e}')
    except requests.exceptions.ConnectionError as e:
        raise Error(f'Connection failed: Unable to connect to {context.server_base}: {e}')
    except requests.exceptions.Timeout:
        raise Error(f'Request timeout: {context.server_base} did not respond within {REQUEST_TIMEOUT} seconds')
    except requests.exceptions.RequestException as e:
        raise Error(f'Request to {context.server_base} failed: {e}')

    if logger.level <= logging.DEBUG:
        logger.debug('<<< HTTP Status: [%s]  Reason: [%s]', rs.status_code, rs.reason)
    return rs


def parse_response(rs):    # type: (requests.Response) -> Any
    content_type = rs.headers.get('Content-Type') or ''
    envelope = None    # type: Optional[Dict[str, Any]]
    if content_type.startswith('application/json') and rs.content:
        try:
            envelope = rs.json()
        except ValueError:
            envelope = None

    if 200 <= rs.status_code < 300:
        if isinstance(envelope, dict):
            logger = logging.getLogger()
            if logger.level <= logging.DEBUG:
                logger.debug('<<< Response Header: [%s]', json.dumps(envelope.get('header'), sort_keys=True))
            return envelope.get('body')
        return None

    message = rs.reason or ''
    if isinstance(envelope, dict):
        header = envelope.get('header')
        if isinstance(header, dict) and header.get('message'):
            message = header['message']
        logging.debug('<<< Response Error: [%s]', json.dumps(envelope, sort_keys=True))
    elif rs.text:
        logging.debug('<<< Response Content: [%s]', rs.text)
    raise PassboltApiError(rs.status_code, message)


def execute_rest(context, method, endpoint, query=None, payload=None):
    # type: (RestApiContext, str, str, Optional[dict], Any) -> Any
    rs = execute_http(context, method, endpoint, query=query, payload=payload)
    return parse_response(rs)
