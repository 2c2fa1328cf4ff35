#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

import abc
import re
from typing import Any, Dict, List, Optional, Tuple

from .. import subfolder
from ..diagnostics import Diagnostics
from ..error import Error
from ..params import ProviderParams

URI_PATTERN = re.compile(r'^https?://.*')


def is_unknown(value):    # type: (Any) -> bool
    """Host marker for a value that is not known until apply."""
    return isinstance(value, dict) and value.get('unknown') is True


def string_value(value):    # type: (Any) -> str
    if value is None or is_unknown(value):
        return ''
    return value if isinstance(value, str) else str(value)


def is_set(value):    # type: (Any) -> bool
    return value is not None and not is_unknown(value)


class Attribute:
    def __init__(self, name, attr_type='string', required=False, optional=False, computed=False,
                 sensitive=False, description='', default=None, nested=None):
        # type: (str, str, bool, bool, bool, bool, str, Any, Optional[List[Attribute]]) -> None
        self.name = name
        self.attr_type = attr_type
        self.required = required
        self.optional = optional
        self.computed = computed
        self.sensitive = sensitive
        self.description = description
        self.default = default
        self.nested = nested

    def to_dict(self):
        d = {'type': self.attr_type, 'description': self.description}
        for flag in ('required', 'optional', 'computed', 'sensitive'):
            if getattr(self, flag):
                d[flag] = True
        if self.default is not None:
            d['default'] = self.default
        if self.nested:
            d['nested'] = {x.name: x.to_dict() for x in self.nested}
        return d


class Schema:
    def __init__(self, attributes, description=''):    # type: (List[Attribute], str) -> None
        self.attributes = attributes
        self.description = description

    def normalize(self, values):    # type: (Optional[Dict[str, Any]]) -> Dict[str, Any]
        """Every schema attribute present, defaults applied, unknown keys dropped."""
        values = values or {}
        result = {}
        for attribute in self.attributes:
            value = values.get(attribute.name)
            if value is None and attribute.default is not None:
                value = attribute.default
            result[attribute.name] = value
        return result

    def to_dict(self):
        d = {'attributes': {x.name: x.to_dict() for x in self.attributes}}
        if self.description:
            d['description'] = self.description
        return d


class ResourceResponse:
    def __init__(self, state=None):    # type: (Optional[Dict[str, Any]]) -> None
        self.state = state
        self.diagnostics = Diagnostics()

    def remove_resource(self):
        self.state = None

    def to_dict(self):
        return {
            'state': self.state,
            'diagnostics': self.diagnostics.to_list()
        }


class ProviderComponent(abc.ABC):
    type_suffix = ''
    component_kind = 'Resource'

    def __init__(self):
        self.params = None    # type: Optional[ProviderParams]

    def metadata(self, provider_type_name):    # type: (str) -> str
        return f'{provider_type_name}_{self.type_suffix}'

    @abc.abstractmethod
    def schema(self):    # type: () -> Schema
        pass

    def configure(self, provider_data, diagnostics):    # type: (Any, Diagnostics) -> None
        if provider_data is None:
            return
        if not isinstance(provider_data, ProviderParams):
            diagnostics.add_error(
                f'Unexpected {self.component_kind} Configure Type',
                f'Expected ProviderParams, got: {type(provider_data).__name__}. '
                'Please report this issue to the provider developers.')
            return
        self.params = provider_data

    def ensure_configured(self, diagnostics):    # type: (Diagnostics) -> bool
        if self.params is None:
            diagnostics.add_error(
                'Unconfigured Passbolt client',
                'Expected configured Passbolt client. Please make sure the provider configuration is valid.')
            return False
        return True


class Resource(ProviderComponent):
    @abc.abstractmethod
    def create(self, plan):    # type: (Dict[str, Any]) -> ResourceResponse
        pass

    @abc.abstractmethod
    def read(self, state):    # type: (Dict[str, Any]) -> ResourceResponse
        pass

    @abc.abstractmethod
    def update(self, plan, state):    # type: (Dict[str, Any], Dict[str, Any]) -> ResourceResponse
        pass

    @abc.abstractmethod
    def delete(self, state):    # type: (Dict[str, Any]) -> ResourceResponse
        pass

    def resolve_folder_parent(self, folder_name, diagnostics, not_found_message):
        # type: (str, Diagnostics, str) -> Tuple[bool, Optional[str]]
        try:
            folder_id = subfolder.find_folder_id(self.params, folder_name)
        except Error as e:
            diagnostics.add_error('Cannot get folders', str(e))
            return False, None
        if not folder_id:
            diagnostics.add_error('Validation Error', not_found_message.format(folder_name))
            return False, None
        return True, folder_id


class DataSource(ProviderComponent):
    component_kind = 'Data Source'

    @abc.abstractmethod
    def read(self, config):    # type: (Dict[str, Any]) -> ResourceResponse
        pass
