#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

class Error(Exception):
    """Base class for exceptions in this module."""
    def __init__(self, message):
        self.message = message

    def __str__(self):
        return self.message


class PassboltApiError(Error):
    """Exception raised with failed Passbolt API request
    """

    def __init__(self, status_code, message):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_not_found(self):
        return self.status_code == 404

    def __str__(self):
        return f'{self.status_code or ""}: {self.message or ""}'


class AuthenticationError(Error):
    pass


class ConfigurationError(Error):
    def __init__(self, attribute, summary, detail):
        super().__init__(detail)
        self.attribute = attribute
        self.summary = summary

    def __str__(self):
        if self.attribute:
            return f'{self.attribute}: {self.summary}'
        return self.summary


class CommandError(Error):
    def __init__(self, command, message):
        super().__init__(message)
        self.command = command

    def __str__(self):
        if self.command:
            return f'{self.command}: {self.message}'
        else:
            return super().__str__()
