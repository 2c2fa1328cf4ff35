#  ____                 _           _ _
# |  _ \ __ _ ___ ___  | |__   ___ | | |_
# | |_) / _` / __/ __| | '_ \ / _ \| | __|
# |  __/ (_| \__ \__ \ | |_) | (_) | | |_
# |_|   \__,_|___/___/ |_.__/ \___/|_|\__|
#
# Passbolt Provider
# Copyright 2025 Passbolt Provider contributors
#

from typing import Iterable, List, Optional

SEVERITY_ERROR = 'error'


class Diagnostic:
    def __init__(self, severity, summary, detail='', attribute=None):
        # type: (str, str, str, Optional[str]) -> None
        self.severity = severity
        self.summary = summary
        self.detail = detail
        self.attribute = attribute

    @property
    def is_error(self):    # type: () -> bool
        return self.severity == SEVERITY_ERROR

    def to_dict(self):
        d = {
            'severity': self.severity,
            'summary': self.summary,
            'detail': self.detail,
        }
        if self.attribute:
            d['attribute'] = self.attribute
        return d

    def __str__(self):
        text = f'{self.summary}: {self.detail}' if self.detail else self.summary
        if self.attribute:
            text = f'[{self.attribute}] {text}'
        return text

    def __repr__(self):
        return f'Diagnostic({self.severity!r}, {self.summary!r}, {self.detail!r}, attribute={self.attribute!r})'


class Diagnostics:
    """ Errors collected while serving a single host request """

    def __init__(self, items=None):    # type: (Optional[Iterable[Diagnostic]]) -> None
        self._items = list(items or [])    # type: List[Diagnostic]

    def add_error(self, summary, detail=''):
        self._items.append(Diagnostic(SEVERITY_ERROR, summary, detail))

    def add_attribute_error(self, attribute, summary, detail=''):
        self._items.append(Diagnostic(SEVERITY_ERROR, summary, detail, attribute=attribute))

    def extend(self, other):    # type: (Iterable[Diagnostic]) -> None
        self._items.extend(other)

    def has_error(self):    # type: () -> bool
        return any(x.is_error for x in self._items)

    @property
    def errors(self):    # type: () -> List[Diagnostic]
        return [x for x in self._items if x.is_error]

    def to_list(self):
        return [x.to_dict() for x in self._items]

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return len(self._items) > 0
