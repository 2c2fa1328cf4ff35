#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

import warnings
from typing import Dict, Optional
from urllib.parse import urlparse, urlunparse

import requests
from urllib3.exceptions import InsecureRequestWarning

from . import crypto


class RestApiContext:
    def __init__(self, server='', locale='en-UK'):
        self.__server_base = ''
        self.server_base = server
        self.locale = locale
        self.proxies = None
        self._certificate_check = True
        self.__session = None    # type: Optional[requests.Session]

    def __get_server_base(self):
        return self.__server_base

    def __set_server_base(self, value):    # type: (str) -> None
        if not value:
            self.__server_base = ''
            return
        if not value.startswith('http'):
            value = 'https://' + value
        p = urlparse(value)
        path = (p.path or '').rstrip('/')
        self.__server_base = urlunparse((p.scheme or 'https', p.netloc, path, None, None, None))

    def __get_session(self):   # type: () -> requests.Session
        if self.__session is None:
            self.__session = requests.Session()
            self.__session.headers.update({
                'Accept': 'application/json',
                'Accept-Language': self.locale,
            })
        return self.__session

    def set_proxy(self, proxy_server):
        if proxy_server:
            self.proxies = {
                'http': proxy_server,
                'https': proxy_server
            }
        else:
            self.proxies = None

    @property
    def csrf_token(self):    # type: () -> Optional[str]
        if self.__session is None:
            return None
        return self.__session.cookies.get('csrfToken')

    @property
    def certificate_check(self):
        return self._certificate_check

    @certificate_check.setter
    def certificate_check(self, value):
        if isinstance(value, bool):
            self._certificate_check = value
            if value:
                warnings.simplefilter('default', InsecureRequestWarning)
            else:
                warnings.simplefilter('ignore', InsecureRequestWarning)

    def url(self, endpoint):    # type: (str) -> str
        if endpoint.startswith('https://') or endpoint.startswith('http://'):
            return endpoint
        return self.__server_base + '/' + endpoint.lstrip('/')

    def close(self):
        if self.__session is not None:
            self.__session.close()
            self.__session = None

    server_base = property(__get_server_base, __set_server_base)
    session = property(__get_session)


class ProviderParams:
    """ Authenticated Passbolt session shared by the provider's resources """

    def __init__(self, config_filename='', config=None, base_url=''):
        self.config_filename = config_filename
        self.config = config or {}       # type: Dict[str, object]
        self.__base_url = ''
        self.__rest_context = RestApiContext()
        self.base_url = base_url
        self.private_key = ''
        self.passphrase = ''
        self.key = None                  # type: Optional[object]
        self.user = None                 # type: Optional[dict]
        self.commands = []
        self.debug = False
        self.__proxy = None

    @property
    def user_id(self):    # type: () -> Optional[str]
        if isinstance(self.user, dict):
            return self.user.get('id')

    @property
    def fingerprint(self):    # type: () -> str
        if self.key is None:
            return ''
        return crypto.get_fingerprint(self.key)

    @property
    def is_authenticated(self):    # type: () -> bool
        return self.user is not None

    def clear_session(self):
        self.user = None
        self.__rest_context.close()

    def __get_rest_context(self):   # type: () -> RestApiContext
        return self.__rest_context

    def __get_base_url(self):
        return self.__base_url

    def __set_base_url(self, value):
        self.__base_url = value or ''
        self.__rest_context.server_base = self.__base_url

    def __get_proxy(self):
        return self.__proxy

    def __set_proxy(self, value):
        self.__proxy = value
        self.__rest_context.set_proxy(self.__proxy)

    proxy = property(__get_proxy, __set_proxy)
    base_url = property(__get_base_url, __set_base_url)
    rest_context = property(__get_rest_context)
