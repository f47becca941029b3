"""Classes containing the exceptions for reporting errors.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

from typing import Optional  # pylint: disable=unused-import

__all__ = ['Warning', 'Error', 'InterfaceError', 'DatabaseError',
           'DataError', 'OperationalError', 'IntegrityError', 'InternalError',
           'ProgrammingError', 'NotSupportedError', 'ConnectionFatalError',
           'PrepareError', 'WaitError', 'ValidationError', 'InterruptedError',
           'format_error']


class Warning(Exception):  # pylint: disable=redefined-builtin
    def __init__(self, value):
        super(Warning, self).__init__(value)
        self.__value = value

    def __str__(self):
        return str(self.__value)


class Error(Exception):
    def __init__(self, value):
        super(Error, self).__init__(value)
        self.__value = value

    def __str__(self):
        return str(self.__value)


class InterfaceError(Error):
    def __init__(self, value):
        Error.__init__(self, value)


class DatabaseError(Error):
    def __init__(self, value):
        Error.__init__(self, value)


class DataError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class OperationalError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class IntegrityError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class InternalError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class ProgrammingError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class NotSupportedError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class ConnectionFatalError(OperationalError):
    """The connection can no longer be used.

    Raised for transport failures and fatal result statuses.  The caller
    should discard the connection; nothing is retried.
    """

    code = None  # type: Optional[int]

    def __init__(self, value, code=None):
        OperationalError.__init__(self, value)
        self.code = code


class PrepareError(ConnectionFatalError):
    """The backend rejected the statement text or its description."""

    def __init__(self, value, code=None):
        ConnectionFatalError.__init__(self, value, code)


class WaitError(ConnectionFatalError):
    """Polling the connection socket or consuming its input failed."""

    def __init__(self, value, code=None):
        ConnectionFatalError.__init__(self, value, code)


class ValidationError(ProgrammingError):
    """The caller used the statement incorrectly (e.g. wrong parameters)."""

    def __init__(self, value):
        ProgrammingError.__init__(self, value)


class InterruptedError(OperationalError):  # pylint: disable=redefined-builtin
    """The user cancelled the operation while waiting for data."""

    def __init__(self, value):
        OperationalError.__init__(self, value)


def format_error(context, detail=None):
    # type: (str, Optional[bytes]) -> str
    """Build an error message from a context string and libpq's error text.

    :param context: Short description of what failed.
    :param detail: Raw error message reported by libpq, if any.
    """
    if detail:
        text = detail.decode('utf-8', 'replace').strip()
        if text:
            return '%s: %s' % (context, text)
    return context
