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
import os
from typing import Any, Callable, Dict, List, Mapping, Optional

from pgpy.errors import PGPDecryptionError, PGPError

from . import __version__, crypto, loginv3
from .diagnostics import Diagnostics
from .error import Error
from .params import ProviderParams
from .resources import (Attribute, DataSource, FolderResource, PasswordResource, PasswordsDataSource, Resource,
                        ResourceResponse, Schema)
from .resources.base import is_unknown, string_value

PROVIDER_TYPE_NAME = 'passbolt'

# attribute, title, label, environment variable
PROVIDER_FIELDS = (
    ('base_url', 'Base URL', 'base URL', 'PASSBOLT_BASE_URL'),
    ('private_key', 'Private Key', 'private key', 'PASSBOLT_PRIVATE_KEY'),
    ('passphrase', 'Passphrase', 'passphrase', 'PASSBOLT_PASSPHRASE'),
)


class PassboltProvider:
    def __init__(self, version=__version__):
        self.version = version
        self.params = None    # type: Optional[ProviderParams]

    def metadata(self):
        return {'type_name': PROVIDER_TYPE_NAME, 'version': self.version}

    def schema(self):
        return Schema([
            Attribute('base_url', required=True,
                      description='The base URL of the Passbolt instance (e.g., https://passbolt.example.com)'),
            Attribute('private_key', required=True, sensitive=True,
                      description='The private key for Passbolt authentication'),
            Attribute('passphrase', required=True, sensitive=True,
                      description='The passphrase for the private key'),
        ])

    def configure(self, config, environ=None, params=None):
        # type: (Optional[Dict[str, Any]], Optional[Mapping[str, str]], Optional[ProviderParams]) -> Diagnostics
        """
        Builds the authenticated session shared by every resource and data source.

        Explicit configuration wins over the environment. Every missing field is
        reported before returning and no request is sent unless all three are set.
        """
        diagnostics = Diagnostics()
        config = config or {}
        environ = os.environ if environ is None else environ

        for attribute, title, label, _ in PROVIDER_FIELDS:
            if is_unknown(config.get(attribute)):
                diagnostics.add_attribute_error(
                    attribute, f'Unknown Passbolt {title}',
                    f'The provider cannot create the Passbolt API client as there is an unknown configuration '
                    f'value for the Passbolt {label}. Either target apply the source of the value first, '
                    f'or set the value statically in the configuration.')
        if diagnostics.has_error():
            return diagnostics

        values = {}
        for attribute, title, label, variable in PROVIDER_FIELDS:
            value = environ.get(variable) or ''
            if config.get(attribute) is not None:
                value = string_value(config.get(attribute))
            if not value:
                diagnostics.add_attribute_error(
                    attribute, f'Missing Passbolt {title}',
                    f'The provider cannot create the Passbolt API client as there is a missing or empty value '
                    f'for the Passbolt {label}. Set the {attribute} value in the configuration or use the '
                    f'{variable} environment variable. If either is already set, ensure the value is not empty.')
            values[attribute] = value
        if diagnostics.has_error():
            return diagnostics

        params = params or ProviderParams()
        params.base_url = values['base_url']
        params.private_key = values['private_key']
        params.passphrase = values['passphrase']
        try:
            params.key = crypto.load_private_key(params.private_key, params.passphrase)
        except (PGPError, PGPDecryptionError, ValueError, TypeError) as e:
            diagnostics.add_error('Unable to create Passbolt API client',
                                  f'Cannot create the Passbolt API client: {e}')
            return diagnostics

        try:
            loginv3.login(params)
        except Error as e:
            params.clear_session()
            diagnostics.add_error('Unable to login to Passbolt', f'Cannot login to Passbolt: {e}')
            return diagnostics

        logging.debug('Passbolt client configured for %s', params.base_url)
        self.params = params
        return diagnostics

    @staticmethod
    def resources():    # type: () -> List[Callable[[], Resource]]
        return [PasswordResource, FolderResource]

    @staticmethod
    def data_sources():    # type: () -> List[Callable[[], DataSource]]
        return [PasswordsDataSource]

    def _new_component(self, factories, type_name, diagnostics):
        for factory in factories:
            component = factory()
            if component.metadata(PROVIDER_TYPE_NAME) == type_name:
                component.configure(self.params, diagnostics)
                return component
        return None

    def new_resource(self, type_name, diagnostics):    # type: (str, Diagnostics) -> Optional[Resource]
        return self._new_component(self.resources(), type_name, diagnostics)

    def new_data_source(self, type_name, diagnostics):    # type: (str, Diagnostics) -> Optional[DataSource]
        return self._new_component(self.data_sources(), type_name, diagnostics)

    def dispatch(self, type_name, operation, plan=None, state=None):
        # type: (str, str, Optional[dict], Optional[dict]) -> ResourceResponse
        response = ResourceResponse(state)
        operation = (operation or '').lower()
        resource = self.new_resource(type_name, response.diagnostics)
        if response.diagnostics.has_error():
            return response
        if resource is not None:
            if operation == 'create':
                return resource.create(plan or {})
            if operation == 'read':
                return resource.read(state or {})
            if operation == 'update':
                return resource.update(plan or {}, state or {})
            if operation == 'delete':
                return resource.delete(state or {})
            response.diagnostics.add_error('Unsupported operation',
                                           f'Resource "{type_name}" does not support operation "{operation}"')
            return response

        data_source = self.new_data_source(type_name, response.diagnostics)
        if response.diagnostics.has_error():
            return response
        if data_source is not None:
            if operation == 'read':
                return data_source.read(plan or {})
            response.diagnostics.add_error('Unsupported operation',
                                           f'Data source "{type_name}" does not support operation "{operation}"')
            return response

        response.diagnostics.add_error('Unknown type', f'"{type_name}" is not a resource or data source of '
                                                       f'the {PROVIDER_TYPE_NAME} provider')
        return response

    def get_schema(self):
        return {
            'provider': self.schema().to_dict(),
            'resource_schemas': {
                x().metadata(PROVIDER_TYPE_NAME): x().schema().to_dict() for x in self.resources()
            },
            'data_source_schemas': {
                x().metadata(PROVIDER_TYPE_NAME): x().schema().to_dict() for x in self.data_sources()
            },
        }
