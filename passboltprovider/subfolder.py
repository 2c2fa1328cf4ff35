#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#
from typing import Callable, Dict, Iterable, Optional, TypeVar

from . import api
from .params import ProviderParams
from .vault import PassboltFolder

T = TypeVar('T')


def resolve_name(entities, name, get_name, get_id):
    # type: (Iterable[T], str, Callable[[T], str], Callable[[T], str]) -> Optional[str]
    """
    Returns the id of the first entity whose name equals `name`.

    Names are not unique on the server. When several entities share a name
    the first one in listing order wins, and listing order is not guaranteed
    to be stable between calls.
    """
    for entity in entities:
        if get_name(entity) == name:
            return get_id(entity)
    return None


def find_folder_id(params, name):    # type: (ProviderParams, str) -> Optional[str]
    folders = api.get_folders(params)
    return resolve_name(folders, name, lambda x: x.name, lambda x: x.folder_id)


def find_group_id(params, name):    # type: (ProviderParams, str) -> Optional[str]
    groups = api.get_groups(params)
    return resolve_name(groups, name, lambda x: x.name, lambda x: x.group_id)


def get_folder_names(folders):    # type: (Iterable[PassboltFolder]) -> Dict[str, str]
    return {x.folder_id: x.name for x in folders}


def find_folder_name(folders, folder_id):    # type: (Iterable[PassboltFolder], str) -> Optional[str]
    for folder in folders:
        if folder.folder_id == folder_id:
            return folder.name
    return None
