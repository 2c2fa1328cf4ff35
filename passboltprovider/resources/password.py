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
from typing import Any, Dict, Optional

from pgpy.errors import PGPDecryptionError, PGPEncryptionError, PGPError

from .. import api, subfolder
from ..diagnostics import Diagnostics
from ..error import Error, PassboltApiError
from .base import Attribute, Resource, ResourceResponse, Schema, URI_PATTERN, is_set, string_value

REQUIRED_FIELDS = (
    ('name', 'Name'),
    ('username', 'Username'),
    ('uri', 'URI'),
    ('password', 'Password'),
)

CREATE_ERRORS = (Error, PGPError, PGPEncryptionError, PGPDecryptionError, ValueError)


class PasswordResource(Resource):
    type_suffix = 'password'

    def schema(self):
        return Schema([
            Attribute('id', computed=True, description='The unique identifier of the password resource'),
            Attribute('name', required=True, description='The name of the password resource'),
            Attribute('description', optional=True, description='The description of the password resource'),
            Attribute('username', required=True, description='The username for the password resource'),
            Attribute('uri', required=True, description='The URI for the password resource'),
            Attribute('password', required=True, sensitive=True, description='The password for the resource'),
            Attribute('folder_parent', optional=True, description='The name of the parent folder'),
            Attribute('share_group', optional=True,
                      description='The name of the group to share the resource with'),
        ])

    @staticmethod
    def validate(plan, diagnostics):    # type: (Dict[str, Any], Diagnostics) -> bool
        for field, title in REQUIRED_FIELDS:
            if not string_value(plan[field]):
                diagnostics.add_error('Validation Error', f'{title} cannot be empty')
                return False
        if not URI_PATTERN.match(string_value(plan['uri'])):
            diagnostics.add_error('Validation Error', 'URI must be a valid HTTP or HTTPS URL')
            return False
        return True

    def create_and_share(self, plan, folder_id, diagnostics):
        # type: (Dict[str, Any], Optional[str], Diagnostics) -> Optional[str]
        """Returns the new resource id. A share failure is reported, the id is returned regardless."""
        resource_id = api.create_resource(
            self.params,
            string_value(plan['name']),
            string_value(plan['username']),
            string_value(plan['uri']),
            string_value(plan['password']),
            string_value(plan['description']),
            folder_id)

        if is_set(plan['share_group']):
            self.share_with_group(resource_id, plan['share_group'], diagnostics)
        return resource_id

    def share_with_group(self, resource_id, group_name, diagnostics):    # type: (str, str, Diagnostics) -> None
        try:
            group_id = subfolder.find_group_id(self.params, group_name)
        except Error as e:
            diagnostics.add_error('Cannot get groups', str(e))
            return

        if not group_id:
            logging.debug('Group "%s" not found, resource %s is not shared', group_name, resource_id)
            return

        shares = [api.ShareOperation(type=api.PERMISSION_READ, aro=api.ARO_GROUP, aro_id=group_id)]
        try:
            api.share_resource(self.params, resource_id, shares)
        except CREATE_ERRORS as e:
            diagnostics.add_error('Cannot share resource', str(e))

    def create(self, plan):
        response = ResourceResponse()
        if not self.ensure_configured(response.diagnostics):
            return response
        plan = self.schema().normalize(plan)
        if not self.validate(plan, response.diagnostics):
            return response

        folder_id = None
        if is_set(plan['folder_parent']):
            ok, folder_id = self.resolve_folder_parent(
                plan['folder_parent'], response.diagnostics, "Folder '{0}' not found")
            if not ok:
                return response

        try:
            resource_id = self.create_and_share(plan, folder_id, response.diagnostics)
        except CREATE_ERRORS as e:
            response.diagnostics.add_error('Cannot create resource', str(e))
            return response

        plan['id'] = resource_id
        response.state = plan
        return response

    def read(self, state):
        state = self.schema().normalize(state)
        response = ResourceResponse(state)
        if not self.ensure_configured(response.diagnostics):
            return response

        resource_id = state['id']
        try:
            resource = api.get_resource(self.params, resource_id)
        except PassboltApiError as e:
            if e.is_not_found:
                logging.info('Password %s no longer exists, removing it from state', resource_id)
                response.remove_resource()
                return response
            response.diagnostics.add_error('Error reading password',
                                           'Could not read password, unexpected error: ' + str(e))
            return response
        except Error as e:
            response.diagnostics.add_error('Error reading password',
                                           'Could not read password, unexpected error: ' + str(e))
            return response

        new_state = dict(state)
        new_state['name'] = resource.name
        if resource.description or state['description'] is not None:
            new_state['description'] = resource.description
        new_state['username'] = resource.username
        new_state['uri'] = resource.uri
        # the secret is never returned by the server, state keeps the configured password

        if resource.folder_parent_id:
            try:
                folders = api.get_folders(self.params)
            except Error as e:
                logging.debug('Folders cannot be listed for password %s: %s', resource_id, e)
            else:
                folder_name = subfolder.find_folder_name(folders, resource.folder_parent_id)
                if folder_name is not None:
                    new_state['folder_parent'] = folder_name
        else:
            new_state['folder_parent'] = None

        response.state = new_state
        return response

    def update(self, plan, state):
        plan = self.schema().normalize(plan)
        state = self.schema().normalize(state)
        response = ResourceResponse(state)
        if not self.ensure_configured(response.diagnostics):
            return response
        if not self.validate(plan, response.diagnostics):
            return response

        resource_id = state['id']
        try:
            current = api.get_resource(self.params, resource_id)
        except Error as e:
            response.diagnostics.add_error('Error reading current resource',
                                           'Could not read current resource, unexpected error: ' + str(e))
            return response

        needs_recreation = False
        if string_value(plan['name']) != current.name:
            needs_recreation = True
        if string_value(plan['description']) != current.description:
            needs_recreation = True
        if string_value(plan['username']) != current.username:
            needs_recreation = True
        if string_value(plan['uri']) != current.uri:
            needs_recreation = True
        if string_value(plan['password']) != string_value(state['password']):
            needs_recreation = True
        if string_value(plan['folder_parent']) != string_value(state['folder_parent']):
            needs_recreation = True

        new_state = dict(state)
        if needs_recreation:
            folder_id = None
            if is_set(plan['folder_parent']):
                ok, folder_id = self.resolve_folder_parent(
                    plan['folder_parent'], response.diagnostics, "Folder '{0}' not found")
                if not ok:
                    return response

            try:
                api.delete_resource(self.params, resource_id)
            except Error as e:
                response.diagnostics.add_error('Error deleting old resource',
                                               'Could not delete old resource, unexpected error: ' + str(e))
                return response

            try:
                new_resource_id = self.create_and_share(plan, folder_id, response.diagnostics)
            except CREATE_ERRORS as e:
                response.remove_resource()
                response.diagnostics.add_error(
                    'Resource recreation failed',
                    f'Password {resource_id} was deleted but the replacement could not be created: {e}. '
                    'The password is missing on the server and has been removed from state.')
                return response

            logging.info('Password "%s" recreated: %s -> %s', plan['name'], resource_id, new_resource_id)
            new_state['id'] = new_resource_id

        for field in ('name', 'description', 'username', 'uri', 'password', 'folder_parent', 'share_group'):
            new_state[field] = plan[field]
        response.state = new_state
        return response

    def delete(self, state):
        state = self.schema().normalize(state)
        response = ResourceResponse(state)
        if not self.ensure_configured(response.diagnostics):
            return response

        try:
            api.delete_resource(self.params, state['id'])
        except Error as e:
            response.diagnostics.add_error('Error deleting password',
                                           'Could not delete password, unexpected error: ' + str(e))
            return response

        response.remove_resource()
        return response
