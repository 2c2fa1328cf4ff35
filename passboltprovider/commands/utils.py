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

from .base import Command, CommandError, load_document, provider_config
from .. import __version__, loginv3
from ..params import ProviderParams
from ..provider import PassboltProvider
from ..resources import ResourceResponse


def register_commands(commands):
    commands['schema'] = SchemaCommand()
    commands['rpc'] = RpcCommand()
    commands['version'] = VersionCommand()


def register_command_info(aliases, command_info):
    aliases['v'] = 'version'
    for p in [schema_parser, rpc_parser, version_parser]:
        command_info[p.prog] = p.description


schema_parser = argparse.ArgumentParser(prog='schema', description='Display provider, resource and data source schemas')

rpc_parser = argparse.ArgumentParser(prog='rpc', description='Serve a single JSON request from the host')
rpc_parser.add_argument('--input', dest='input', action='store', default='-',
                        help='request: JSON object, @FILE or - for standard input (default)')

version_parser = argparse.ArgumentParser(prog='version', description='Display the provider version')


class SchemaCommand(Command):
    def get_parser(self):
        return schema_parser

    def execute(self, params, **kwargs):
        return json.dumps(PassboltProvider().get_schema(), indent=2)


class VersionCommand(Command):
    def get_parser(self):
        return version_parser

    def execute(self, params, **kwargs):
        return __version__


class RpcCommand(Command):
    """
    Request:  {"type": "passbolt_folder", "operation": "create", "plan": {...}, "state": {...}, "config": {...}}
    Response: {"state": {...} | null, "diagnostics": [...]}

    "config" holds the provider block and overrides the command line and config file values.
    """

    def get_parser(self):
        return rpc_parser

    def execute(self, params, **kwargs):
        request = load_document(kwargs.get('input') or '-', 'request')
        if not request:
            raise CommandError('request cannot be empty')

        response = self.serve(params, request)
        print(json.dumps(response.to_dict(), indent=2))
        if response.diagnostics.has_error():
            raise CommandError(f'{request.get("type")} {request.get("operation")} failed')

    @staticmethod
    def serve(params, request):    # type: (...) -> ResourceResponse
        type_name = request.get('type') or ''
        operation = request.get('operation') or ''
        state = request.get('state')
        provider = PassboltProvider()

        request_config = request.get('config')
        session = params
        if isinstance(request_config, dict):
            # request config never touches the command line session
            session = ProviderParams()
            session.proxy = params.proxy
            session.rest_context.certificate_check = params.rest_context.certificate_check

        if session.is_authenticated:
            provider.params = session
        else:
            config = provider_config(params)
            if isinstance(request_config, dict):
                config.update(request_config)
            diagnostics = provider.configure(config, params=session)
            if diagnostics.has_error():
                response = ResourceResponse(state)
                response.diagnostics.extend(diagnostics)
                return response

        logging.debug('rpc %s %s', type_name, operation)
        try:
            return provider.dispatch(type_name, operation, plan=request.get('plan'), state=state)
        finally:
            if session is not params:
                loginv3.logout(session)
