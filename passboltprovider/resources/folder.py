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

from .. import api
from ..error import Error, PassboltApiError
from .base import Attribute, Resource, ResourceResponse, Schema, is_set, string_value


class FolderResource(Resource):
    type_suffix = 'folder'

    def schema(self):
        return Schema([
            Attribute('id', computed=True, description='The unique identifier of the folder'),
            Attribute('name', required=True, description='The name of the folder'),
            Attribute('personal', attr_type='bool', computed=True, optional=True, default=False,
                      description='Whether the folder is personal'),
            Attribute('folder_parent', optional=True, description='The name of the parent folder'),
        ])

    def create(self, plan):
        response = ResourceResponse()
        if not self.ensure_configured(response.diagnostics):
            return response
        plan = self.schema().normalize(plan)

        name = string_value(plan['name'])
        if not name:
            response.diagnostics.add_error('Validation Error', 'Name cannot be empty')
            return response

        parent_folder_id = None
        if is_set(plan['folder_parent']):
            ok, parent_folder_id = self.resolve_folder_parent(
                plan['folder_parent'], response.diagnostics, "Parent folder '{0}' not found")
            if not ok:
                return response

        try:
            folder = api.create_folder(self.params, name, parent_folder_id)
        except Error as e:
            response.diagnostics.add_error('Error creating folder',
                                           'Could not create folder, unexpected error: ' + str(e))
            return response

        plan['id'] = folder.folder_id
        plan['personal'] = folder.personal
        response.state = plan
        return response

    def read(self, state):
        state = self.schema().normalize(state)
        response = ResourceResponse(state)
        if not self.ensure_configured(response.diagnostics):
            return response

        folder_id = state['id']
        try:
            folder = api.get_folder(self.params, folder_id)
        except PassboltApiError as e:
            if e.is_not_found:
                logging.info('Folder %s no longer exists, removing it from state', folder_id)
                response.remove_resource()
                return response
            response.diagnostics.add_error('Error reading folder',
                                           'Could not read folder, unexpected error: ' + str(e))
            return response
        except Error as e:
            response.diagnostics.add_error('Error reading folder',
                                           'Could not read folder, unexpected error: ' + str(e))
            return response

        new_state = dict(state)
        new_state['name'] = folder.name
        new_state['personal'] = folder.personal
        if folder.folder_parent_id:
            try:
                parent_folder = api.get_folder(self.params, folder.folder_parent_id)
                new_state['folder_parent'] = parent_folder.name
            except Error as e:
                logging.debug('Parent folder %s of %s cannot be read: %s', folder.folder_parent_id, folder_id, e)
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

        name = string_value(plan['name'])
        if not name:
            response.diagnostics.add_error('Validation Error', 'Name cannot be empty')
            return response

        folder_id = state['id']
        try:
            current_folder = api.get_folder(self.params, folder_id)
        except Error as e:
            response.diagnostics.add_error('Error reading current folder',
                                           'Could not read current folder, unexpected error: ' + str(e))
            return response

        needs_recreation = False
        if name != current_folder.name:
            needs_recreation = True
        if string_value(plan['folder_parent']) != string_value(state['folder_parent']):
            needs_recreation = True

        new_state = dict(state)
        if needs_recreation:
            parent_folder_id = None
            if is_set(plan['folder_parent']):
                ok, parent_folder_id = self.resolve_folder_parent(
                    plan['folder_parent'], response.diagnostics, "Parent folder '{0}' not found")
                if not ok:
                    return response

            try:
                api.delete_folder(self.params, folder_id)
            except Error as e:
                response.diagnostics.add_error('Error deleting old folder',
                                               'Could not delete old folder, unexpected error: ' + str(e))
                return response

            try:
                created_folder = api.create_folder(self.params, name, parent_folder_id)
            except Error as e:
                response.remove_resource()
                response.diagnostics.add_error(
                    'Resource recreation failed',
                    f'Folder {folder_id} was deleted but the replacement could not be created: {e}. '
                    'The folder is missing on the server and has been removed from state.')
                return response

            logging.info('Folder "%s" recreated: %s -> %s', name, folder_id, created_folder.folder_id)
            new_state['id'] = created_folder.folder_id
            new_state['personal'] = created_folder.personal

        new_state['name'] = plan['name']
        new_state['folder_parent'] = plan['folder_parent']
        response.state = new_state
        return response

    def delete(self, state):
        state = self.schema().normalize(state)
        response = ResourceResponse(state)
        if not self.ensure_configured(response.diagnostics):
            return response

        try:
            api.delete_folder(self.params, state['id'])
        except Error as e:
            response.diagnostics.add_error('Error deleting folder',
                                           'Could not delete folder, unexpected error: ' + str(e))
            return response

        response.remove_resource()
        return response
