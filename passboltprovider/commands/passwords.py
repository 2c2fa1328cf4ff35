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

from .base import Command, CommandError, connect, dump_report_data, fields_to_titles, report_output_parser
from ..provider import PROVIDER_TYPE_NAME
from ..resources.passwords import PASSWORD_ATTRIBUTES


def register_commands(commands):
    commands['passwords'] = PasswordsCommand()


def register_command_info(aliases, command_info):
    aliases['ls'] = 'passwords'
    command_info[passwords_parser.prog] = passwords_parser.description


passwords_parser = argparse.ArgumentParser(prog='passwords', parents=[report_output_parser],
                                           description='List passwords visible to the authenticated user')
passwords_parser.add_argument('--folder', dest='folder', action='store', help='only passwords in this folder')
passwords_parser.add_argument('pattern', nargs='?', type=str, action='store', help='name search pattern')


class PasswordsCommand(Command):
    def get_parser(self):
        return passwords_parser

    def execute(self, params, **kwargs):
        provider = connect(params)
        response = provider.dispatch(f'{PROVIDER_TYPE_NAME}_passwords', 'read', plan={})
        if response.diagnostics.has_error():
            raise CommandError('; '.join(str(x) for x in response.diagnostics.errors))

        folder = kwargs.get('folder')
        pattern = (kwargs.get('pattern') or '').casefold()
        fields = [x.name for x in PASSWORD_ATTRIBUTES]
        table = []
        for password in response.state['passwords']:
            if folder and password.get('folder_parent') != folder:
                continue
            if pattern and pattern not in (password.get('name') or '').casefold():
                continue
            table.append([password.get(x) for x in fields])

        fmt = kwargs.get('format')
        headers = fields if fmt == 'json' else fields_to_titles(fields)
        return dump_report_data(table, headers, fmt=fmt, filename=kwargs.get('output'), row_number=True, sort_by=1)
