#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

import argparse
import json
import logging

from .base import Command, CommandError, GroupCommand, connect, load_document
from ..provider import PROVIDER_TYPE_NAME


def register_commands(commands):
    commands['folder'] = ResourceGroupCommand('folder')
    commands['password'] = ResourceGroupCommand('password')


def register_command_info(aliases, command_info):
    aliases['f'] = 'folder'
    aliases['pw'] = 'password'
    command_info['folder'] = 'Create, read, update or delete a Passbolt folder'
    command_info['password'] = 'Create, read, update or delete a Passbolt password'


def _resource_parser(verb, description, plan=False, state=False):
    parser = argparse.ArgumentParser(prog=verb, description=description)
    if plan:
        parser.add_argument('--plan', dest='plan', action='store', required=True,
                            help='desired attributes: JSON object, @FILE or - for standard input')
    if state:
        parser.add_argument('--state', dest='state', action='store', required=True,
                            help='prior state: JSON object, @FILE or - for standard input')
    return parser


create_parser = _resource_parser('create', 'Create the object and print its new state', plan=True)
read_parser = _resource_parser('read', 'Refresh the state from the server', state=True)
update_parser = _resource_parser('update', 'Converge the object to the plan, recreating it when anything changed',
                                 plan=True, state=True)
delete_parser = _resource_parser('delete', 'Delete the object and drop its state', state=True)


class ResourceGroupCommand(GroupCommand):
    def __init__(self, type_suffix):
        super().__init__()
        type_name = f'{PROVIDER_TYPE_NAME}_{type_suffix}'
        self.register_command('create', ResourceOperationCommand(type_name, 'create', create_parser), alias='c')
        self.register_command('read', ResourceOperationCommand(type_name, 'read', read_parser), alias='r')
        self.register_command('update', ResourceOperationCommand(type_name, 'update', update_parser), alias='u')
        self.register_command('delete', ResourceOperationCommand(type_name, 'delete', delete_parser), alias='d')


class ResourceOperationCommand(Command):
    def __init__(self, type_name, operation, parser):
        super().__init__()
        self.type_name = type_name
        self.operation = operation
        self.parser = parser

    def get_parser(self):
        return self.parser

    def execute(self, params, **kwargs):
        plan = load_document(kwargs.get('plan'), 'plan')
        state = load_document(kwargs.get('state'), 'state')
        if kwargs.get('plan') is not None and plan is None:
            raise CommandError('plan cannot be empty')
        if kwargs.get('state') is not None and state is None:
            raise CommandError('state cannot be empty')

        provider = connect(params)
        response = provider.dispatch(self.type_name, self.operation, plan=plan, state=state)
        for diagnostic in response.diagnostics:
            if diagnostic.is_error:
                logging.error('%s', diagnostic)
            else:
                logging.warning('%s', diagnostic)

        print(json.dumps(response.to_dict(), indent=2))
        if response.diagnostics.has_error():
            raise CommandError(f'{self.type_name} {self.operation} failed')
