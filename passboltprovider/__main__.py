# -*- coding: utf-8 -*-
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
import os
import re
import shlex
import sys
from pathlib import Path
from typing import Optional

import certifi

from . import __version__
from . import cli, loginv3
from .params import ProviderParams


def get_params_from_config(config_filename=None):    # type: (Optional[str]) -> ProviderParams
    if os.getenv('PASSBOLT_PROVIDER_DEBUG'):
        logging.getLogger().setLevel(logging.DEBUG)
        logging.info('Debug ON')

    def get_env_config():
        path = os.getenv('PASSBOLT_CONFIG_FILE')
        if path:
            logging.debug('Setting config file from PASSBOLT_CONFIG_FILE env variable %s', path)
        return path

    config_filename = config_filename or get_env_config()
    if not config_filename:
        config_filename = 'config.json'
        if os.path.isfile(config_filename):
            config_filename = os.path.join(os.getcwd(), config_filename)
        else:
            config_filename = os.path.join(Path.home().joinpath('.passbolt'), config_filename)
    else:
        config_filename = os.path.expanduser(config_filename)

    params = ProviderParams()
    params.config_filename = config_filename

    if os.path.exists(config_filename):
        try:
            with open(params.config_filename) as config_file:
                params.config = json.load(config_file)
        except IOError as ioe:
            logging.warning('Error: Unable to open config file %s: %s', params.config_filename, ioe)
        except ValueError as e:
            logging.error('Unable to parse JSON configuration file "%s"', os.path.abspath(params.config_filename))
            raise e
        else:
            load_config_properties(params)

    return params


def load_config_properties(params):    # type: (ProviderParams) -> None
    config = params.config
    if 'base_url' in config:
        params.base_url = config['base_url']
    if 'private_key' in config:
        params.private_key = config['private_key']
    elif 'private_key_file' in config:
        key_file = os.path.expanduser(config['private_key_file'])
        try:
            with open(key_file, 'r') as fd:
                params.private_key = fd.read()
        except IOError as ioe:
            logging.warning('Error: Unable to read private key file %s: %s', key_file, ioe)
    if 'passphrase' in config:
        params.passphrase = config['passphrase']
    if 'certificate_check' in config:
        params.rest_context.certificate_check = config['certificate_check'] is True
    if config.get('proxy'):
        params.proxy = config['proxy']
    if config.get('debug') is True:
        params.debug = True


def usage(m):
    print(m)
    parser.print_help()
    cli.display_command_help()
    sys.exit(1)


parser = argparse.ArgumentParser(prog='passbolt-provider', add_help=False, allow_abbrev=False)
parser.add_argument('--base-url', '-u', dest='base_url', action='store', help='Passbolt base URL.')
parser.add_argument('--version', dest='version', action='store_true', help='Display version')
parser.add_argument('--config', dest='config', action='store', help='Config file to use')
parser.add_argument('--debug', dest='debug', action='store_true', help='Turn on debug mode')
parser.add_argument('--proxy', dest='proxy', action='store', help='Proxy server')
parser.add_argument('--help', '-h', dest='help', action='store_true', help='Display help')
parser.add_argument('command', nargs='?', type=str, action='store', help='Command')
parser.add_argument('options', nargs=argparse.REMAINDER, action='store', help='Options')
parser.error = usage


def main():
    os.environ['SSL_CERT_FILE'] = certifi.where()
    logging.basicConfig(format='%(message)s')

    sys.argv[0] = re.sub(r'(-script\.pyw?|\.exe)?$', '', sys.argv[0])
    opts = parser.parse_args(sys.argv[1:])

    params = get_params_from_config(opts.config)
    if opts.debug:
        params.debug = opts.debug
    debug = params.debug or os.getenv('PASSBOLT_PROVIDER_DEBUG')
    logging.getLogger().setLevel(logging.DEBUG if debug else logging.WARNING)

    if opts.proxy:
        params.proxy = opts.proxy
    if opts.base_url:
        params.base_url = opts.base_url

    if opts.version:
        print(f'Passbolt Provider, version {__version__}')
        return

    if opts.help or not opts.command or opts.command in ('?', 'help'):
        usage('')

    options = ' '.join([shlex.quote(x) for x in opts.options]) if opts.options else ''
    params.commands.append(' '.join([opts.command, options]).strip())

    errno = cli.runcommands(params)
    loginv3.logout(params)
    sys.exit(errno)


if __name__ == '__main__':
    main()
