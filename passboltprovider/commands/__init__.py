#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

from .base import register_commands, aliases, commands, command_info

__all__ = ['register_commands', 'aliases', 'commands', 'command_info']
