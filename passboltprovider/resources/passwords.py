#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

from .. import api, subfolder
from ..error import Error
from .base import Attribute, DataSource, ResourceResponse, Schema

PASSWORD_ATTRIBUTES = [
    Attribute('id', computed=True, description='The unique identifier of the password resource'),
    Attribute('name', computed=True, description='The name of the password resource'),
    Attribute('description', computed=True, description='The description of the password resource'),
    Attribute('username', computed=True, description='The username for the password resource'),
    Attribute('uri', computed=True, description='The URI for the password resource'),
    Attribute('folder_parent', computed=True, description='The name of the parent folder'),
]


class PasswordsDataSource(DataSource):
    type_suffix = 'passwords'

    def schema(self):
        return Schema([
            Attribute('passwords', attr_type='list', computed=True, description='List of password resources',
                      nested=PASSWORD_ATTRIBUTES),
        ])

    def read(self, config):
        response = ResourceResponse()
        if not self.ensure_configured(response.diagnostics):
            return response

        try:
            resources = api.get_resources(self.params)
        except Error as e:
            response.diagnostics.add_error('Error reading passwords',
                                           'Could not read passwords, unexpected error: ' + str(e))
            return response

        try:
            folders = api.get_folders(self.params)
        except Error as e:
            response.diagnostics.add_error('Error reading folders',
                                           'Could not read folders, unexpected error: ' + str(e))
            return response

        folder_names = subfolder.get_folder_names(folders)
        passwords = []
        for resource in resources:
            passwords.append({
                'id': resource.resource_id,
                'name': resource.name,
                'description': resource.description,
                'username': resource.username,
                'uri': resource.uri,
                'folder_parent': folder_names.get(resource.folder_parent_id) if resource.folder_parent_id else None,
            })

        response.state = {'passwords': passwords}
        return response
