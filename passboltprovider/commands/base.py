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
import argparse
import collections
import csv
import io
import json
import logging
import os
import shlex
import sys
from typing import Any, Dict, List, Optional, Sequence

from tabulate import tabulate

from .. import error
from ..params import ProviderParams
from ..provider import PassboltProvider, PROVIDER_FIELDS


aliases = {}                 # type: Dict[str, str]
commands = {}                # type: Dict[str, CliCommand]
command_info = collections.OrderedDict()


report_output_parser = argparse.ArgumentParser(add_help=False)
report_output_parser.add_argument('--format', dest='format', action='store', choices=['table', 'csv', 'json'],
                                  default='table', help='format of output')
report_output_parser.add_argument('--output', dest='output', action='store',
                                  help='path to resulting output file (ignored for "table" format)')


class CommandError(error.CommandError):
    def __init__(self, message):
        super().__init__('', message)


class ParseError(Exception):
    pass


def raise_parse_exception(m):
    raise ParseError(m)


def suppress_exit(*args):
    raise ParseError()


WORDS_TO_CAPITALIZE = {'Id', 'Uri', 'Url'}


def fields_to_titles(fields):    # type: (List[str]) -> List[str]
    return [field_to_title(f) for f in fields]


def field_to_title(field):   # type: (str) -> str
    words = field.split('_')
    words = [x.capitalize() for x in words if x]
    words = [x.upper() if x in WORDS_TO_CAPITALIZE else x for x in words]
    return ' '.join(words)


def dump_report_data(data, headers, fmt='', filename=None, **kwargs):
    # type: (List[List], Sequence[str], Optional[str], Optional[str], ...) -> Optional[str]
    # kwargs:
    #           row_number: boolean        - Add row number. table only
    #           sort_by: int               - Sort by columnNo
    sort_by = kwargs.get('sort_by')
    if isinstance(sort_by, int):
        data.sort(key=lambda r: (r[sort_by] or '').casefold() if isinstance(r[sort_by], str) else '')

    if fmt == 'csv':
        if filename:
            _, ext = os.path.splitext(filename)
            if not ext:
                filename += '.csv'
            logging.info('Report path: %s', os.path.abspath(filename))
        with open(filename, 'w', newline='', encoding='utf-8') if filename else io.StringIO() as fd:
            csv_writer = csv.writer(fd)
            if headers:
                csv_writer.writerow(headers)
            for row in data:
                csv_writer.writerow(row)
            if isinstance(fd, io.StringIO):
                return fd.getvalue()
    elif fmt == 'json':
        data_list = []
        for row in data:
            obj = {}
            for name, column in zip(headers, row):
                if column is not None and column != '':
                    obj[name] = column
            data_list.append(obj)
        if filename:
            _, ext = os.path.splitext(filename)
            if not ext:
                filename += '.json'
            logging.info('Report path: %s', os.path.abspath(filename))
            with open(filename, 'w') as fd:
                json.dump(data_list, fd, indent=2)
        else:
            return json.dumps(data_list, indent=2)
    else:
        if kwargs.get('row_number') and headers:
            headers = ['#'] + list(headers)
            data = [[i + 1] + list(row) for i, row in enumerate(data)]
        print(tabulate(data, headers=headers or ()))
    return None


def load_document(value, name):    # type: (Optional[str], str) -> Optional[Dict[str, Any]]
    """`value` is inline JSON, `@path` to a JSON file, or `-` for standard input."""
    if value is None:
        return None
    try:
        if value == '-':
            text = sys.stdin.read()
        elif value.startswith('@'):
            with open(os.path.expanduser(value[1:]), 'r', encoding='utf-8') as fd:
                text = fd.read()
        else:
            text = value
        document = json.loads(text) if text.strip() else None
    except (OSError, ValueError) as e:
        raise CommandError(f'Cannot load {name}: {e}')
    if document is not None and not isinstance(document, dict):
        raise CommandError(f'{name} must be a JSON object')
    return document


def provider_config(params):    # type: (ProviderParams) -> Dict[str, Optional[str]]
    """Values explicitly set by the config file or command line; unset ones fall back to the environment."""
    config = {}
    for attribute, _, _, _ in PROVIDER_FIELDS:
        value = getattr(params, attribute, None)
        config[attribute] = value or None
    return config


def connect(params):    # type: (ProviderParams) -> PassboltProvider
    provider = PassboltProvider()
    if params.is_authenticated:
        provider.params = params
        return provider

    diagnostics = provider.configure(provider_config(params), params=params)
    if diagnostics.has_error():
        for diagnostic in diagnostics.errors:
            logging.error('%s', diagnostic)
        first = diagnostics.errors[0]
        raise error.ConfigurationError(first.attribute, first.summary, first.detail)
    return provider


class CliCommand(abc.ABC):
    @abc.abstractmethod
    def execute_args(self, params, args, **kwargs):   # type: (ProviderParams, str, ...) -> Any
        pass


class Command(CliCommand):
    """ A single command line verb whose options are described by an argparse parser """

    def execute(self, params, **kwargs):     # type: (ProviderParams, Any) -> Any
        raise NotImplementedError()

    def get_parser(self):   # type: () -> Optional[argparse.ArgumentParser]
        return None

    def execute_args(self, params, args, **kwargs):
        # type: (ProviderParams, str, ...) -> Any
        options = dict(kwargs)
        parser = self.get_parser()
        if parser:
            parser.exit = suppress_exit
            parser.error = raise_parse_exception
            try:
                opts = parser.parse_args(shlex.split(args or ''))
            except ParseError as e:
                if e.args and e.args[0]:
                    raise CommandError(str(e.args[0]))
                return None
            options.update(vars(opts))
        return self.execute(params, **options)


class GroupCommand(CliCommand):
    """ `<command> <verb> [--options]` dispatch over registered verbs """

    def __init__(self):
        self._commands = collections.OrderedDict()     # type: Dict[str, Command]
        self._aliases = {}         # type: Dict[str, str]

    def register_command(self, verb, command, alias=None):    # type: (str, Command, Optional[str]) -> None
        self._commands[verb] = command
        if alias:
            self._aliases[alias] = verb

    def execute_args(self, params, args, **kwargs):  # type: (ProviderParams, str, dict) -> Any
        verb, _, args = (args or '').strip().partition(' ')
        verb = verb.lower()
        verb = self._aliases.get(verb, verb)

        command = self._commands.get(verb)
        if command is None:
            if verb not in ('', '-h', '--help', 'help'):
                logging.warning('Invalid command: %s', verb)
            self.print_help(**kwargs)
            return None

        kwargs['action'] = verb
        return command.execute_args(params, args.strip(), **kwargs)

    def print_help(self, **kwargs):
        print(f'{kwargs.get("command")} <verb> [--options]\n')
        aliases = {verb: alias for alias, verb in self._aliases.items()}
        table = []
        for verb, command in self._commands.items():
            parser = command.get_parser()
            table.append([verb, aliases.get(verb) or '', parser.description if parser else ''])
        dump_report_data(table, headers=['Verb', 'Alias', 'Description'])
        print('')


def register_commands(commands, aliases, command_info):
    from .resource import register_commands as resource_commands, register_command_info as resource_command_info
    resource_commands(commands)
    resource_command_info(aliases, command_info)

    from .passwords import register_commands as passwords_commands, register_command_info as passwords_command_info
    passwords_commands(commands)
    passwords_command_info(aliases, command_info)

    from .utils import register_commands as utils_commands, register_command_info as utils_command_info
    utils_commands(commands)
    utils_command_info(aliases, command_info)
