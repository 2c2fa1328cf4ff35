#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

from typing import Any, Dict, Optional


def sanitize_str_field_value(value):    # type: (Any) -> str
    if not isinstance(value, str):
        value = str(value) if value else ''
    return value


def sanitize_bool_field_value(value):    # type: (Any) -> bool
    if not isinstance(value, bool):
        if isinstance(value, int):
            value = value != 0
        else:
            value = False
    return value


class PassboltFolder:
    def __init__(self):
        self.folder_id = ''
        self.name = ''
        self.folder_parent_id = None    # type: Optional[str]
        self.personal = False

    @staticmethod
    def load(data):    # type: (Dict[str, Any]) -> 'PassboltFolder'
        folder = PassboltFolder()
        folder.folder_id = sanitize_str_field_value(data.get('id'))
        folder.name = sanitize_str_field_value(data.get('name'))
        folder.folder_parent_id = data.get('folder_parent_id') or None
        folder.personal = sanitize_bool_field_value(data.get('personal'))
        return folder

    def __repr__(self):
        return f'PassboltFolder(folder_id={self.folder_id!r}, name={self.name!r})'


class PassboltResource:
    def __init__(self):
        self.resource_id = ''
        self.name = ''
        self.description = ''
        self.username = ''
        self.uri = ''
        self.folder_parent_id = None    # type: Optional[str]
        self.resource_type_id = None    # type: Optional[str]
        self.personal = False

    @staticmethod
    def load(data):    # type: (Dict[str, Any]) -> 'PassboltResource'
        resource = PassboltResource()
        resource.resource_id = sanitize_str_field_value(data.get('id'))
        resource.name = sanitize_str_field_value(data.get('name'))
        resource.description = sanitize_str_field_value(data.get('description'))
        resource.username = sanitize_str_field_value(data.get('username'))
        resource.uri = sanitize_str_field_value(data.get('uri'))
        resource.folder_parent_id = data.get('folder_parent_id') or None
        resource.resource_type_id = data.get('resource_type_id') or None
        resource.personal = sanitize_bool_field_value(data.get('personal'))
        return resource

    def __repr__(self):
        return f'PassboltResource(resource_id={self.resource_id!r}, name={self.name!r})'


class PassboltGroup:
    def __init__(self):
        self.group_id = ''
        self.name = ''

    @staticmethod
    def load(data):    # type: (Dict[str, Any]) -> 'PassboltGroup'
        group = PassboltGroup()
        group.group_id = sanitize_str_field_value(data.get('id'))
        group.name = sanitize_str_field_value(data.get('name'))
        return group


class PassboltUser:
    def __init__(self):
        self.user_id = ''
        self.username = ''
        self.armored_key = ''

    @staticmethod
    def load(data):    # type: (Dict[str, Any]) -> 'PassboltUser'
        user = PassboltUser()
        user.user_id = sanitize_str_field_value(data.get('id'))
        user.username = sanitize_str_field_value(data.get('username'))
        gpg_key = data.get('gpgkey')
        if isinstance(gpg_key, dict):
            user.armored_key = sanitize_str_field_value(gpg_key.get('armored_key'))
        return user
