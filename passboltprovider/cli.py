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
import sys

from .commands import register_commands, aliases, commands, command_info
from .commands.base import dump_report_data
from .error import CommandError, ConfigurationError, Error
from .params import ProviderParams

register_commands(commands, aliases, command_info)


def display_command_help():
    alias_lookup = {x[1]: x[0] for x in aliases.items()}
    table = []
    for cmd, description in command_info.items():
        table.append([cmd, alias_lookup.get(cmd) or '', description])
    print('\nCommands:')
    dump_report_data(table, headers=['Command', 'Alias', 'Description'])
    print('\nType \'command -h\' to display help on command')


def command_and_args_from_cmd(command_line):
    args = ''
    pos = command_line.find(' ')
    if pos > 0:
        cmd = command_line[:pos]
        args = command_line[pos + 1:].strip()
    else:
        cmd = command_line
    return cmd.strip().lower(), args


def do_command(params, command_line):    # type: (ProviderParams, str) -> object
    cmd, args = command_and_args_from_cmd(command_line)
    if not cmd:
        return None
    orig_cmd = cmd
    if cmd in aliases and cmd not in commands:
        cmd = aliases[cmd]

    command = commands.get(cmd)
    if command is None:
        if cmd not in ('?', 'help', 'h'):
            logging.warning('Invalid command: %s', orig_cmd)
        display_command_help()
        return None

    return command.execute_args(params, args, command=orig_cmd)


def runcommands(params):    # type: (ProviderParams) -> int
    """Executes params.commands in order. Returns the process exit code."""
    errno = 0
    for command in params.commands:
        logging.debug('Executing [%s]...', command)
        try:
            result = do_command(params, command)
            if result is not None:
                print(result)
        except CommandError as e:
            msg = f'{e.command}: {e.message}' if e.command else f'{e.message}'
            logging.error(msg)
            errno = 1
        except ConfigurationError as e:
            logging.error('Configuration error: %s', e)
            errno = 1
        except Error as e:
            logging.error('Communication Error: %s', e.message)
            errno = 1
        except Exception as e:
            logging.debug(e, exc_info=True)
            logging.error('An unexpected error occurred: %s', sys.exc_info()[0])
            errno = 1
        if errno:
            break
    return errno
