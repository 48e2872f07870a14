#!/usr/bin/env python3
"""
Result values returned by every imfs operation.

Operations never raise for expected failures such as a missing path or a
name collision. They return a Result that carries either the produced data
or an ErrorKind together with a human readable message.
"""

from typing import Any, Iterator, Optional
from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Failure taxonomy shared by the resolver and all operations."""
    NOT_FOUND = 'No such file or directory'
    NAME_COLLISION = 'File exists'
    NOT_A_DIRECTORY = 'Not a directory'
    NOT_A_FILE = 'Is a directory'
    NON_EMPTY_DIRECTORY = 'Directory not empty'
    INVALID_ARGUMENT = 'Invalid argument'


@dataclass
class Result:
    """
    Outcome of an operation.

    A successful result has ``error`` set to None. Truthiness follows
    success, so callers can write ``if fs.mkdir('a'): ...``.
    """
    data: Any = None
    error: Optional[ErrorKind] = None
    message: str = ''

    @classmethod
    def success(cls, data: Any = None) -> 'Result':
        return cls(data=data)

    @classmethod
    def failure(cls, error: ErrorKind, message: str = '') -> 'Result':
        return cls(data=None, error=error, message=message or error.value)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def __bool__(self) -> bool:
        return self.ok

    def __str__(self) -> str:
        """Text rendering used by the terminal."""
        if not self.ok:
            return self.message
        if self.data is None:
            return ''
        if isinstance(self.data, bytes):
            return self.data.decode('utf-8', errors='replace')
        if isinstance(self.data, list):
            return '\n'.join(str(item) for item in self.data)
        if isinstance(self.data, dict):
            return '\n'.join(f"{k}: {v}" for k, v in self.data.items())
        return str(self.data)

    def __iter__(self) -> Iterator:
        if isinstance(self.data, (list, tuple)):
            return iter(self.data)
        return iter([] if self.data is None else [self.data])
