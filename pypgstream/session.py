"""Establish and manage a libpq session with a PostgreSQL database.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

__all__ = ["PGSession", "session_options"]

# This module adapts a psycopg.pq.PGconn into the narrow asynchronous
# interface the result streamer drives: send one execution of the unnamed
# prepared statement, switch it to single-row delivery, then pull results
# one at a time.  Every psycopg error is translated here; nothing above this
# module needs to know about psycopg.

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple  # pylint: disable=unused-import
from zoneinfo import ZoneInfo

import psycopg
from psycopg import pq

from . import protocol
from .datatype import LOCALZONE_NAME
from .exception import OperationalError, ProgrammingError
from .exception import ConnectionFatalError, WaitError, format_error

_log = logging.getLogger(__name__)


def session_options(options):
    # type: (Optional[Mapping[str, str]]) -> Tuple[Dict[str, str], Dict[str, str]]
    """Split into connection parameters and session options.

    Connection parameters are passed to libpq.  Session options are not
    sent to the server, and instead control the local session.

    :return: A tuple of (connection parameters, session options).
    """
    opts = ['check_interrupts', 'timezone']
    session = {}
    parameters = {}
    if options:
        for key, val in options.items():
            if key in opts:
                session[key] = val
            else:
                parameters[key] = val
    return parameters, session


class PGSession(object):
    """A libpq connection used for streaming statement execution."""

    closed = False

    __timezone_name = LOCALZONE_NAME  # type: str
    __current = None  # type: Optional[Any]

    def __init__(self, pgconn, timezone=None):
        # type: (pq.abc.PGconn, Optional[str]) -> None
        """Wrap an established libpq connection.

        :param pgconn: Connection returned by psycopg.pq.PGconn.connect().
        :param timezone: Zone for timestamps with time zone.  Defaults to the
                         server's TimeZone setting, then the local zone.
        """
        self.__pgconn = pgconn
        if timezone is None:
            server_tz = pgconn.parameter_status(b'TimeZone')
            if server_tz:
                timezone = server_tz.decode('utf-8')
        if timezone is not None:
            try:
                self.timezone_name = timezone
            except ProgrammingError:
                _log.warning("Ignoring unusable server TimeZone %s", timezone)

    @classmethod
    def connect(cls, conninfo, timezone=None):
        # type: (str, Optional[str]) -> PGSession
        """Open a blocking libpq connection and wrap it.

        :raises OperationalError: If the connection cannot be established.
        """
        try:
            pgconn = pq.PGconn.connect(conninfo.encode('utf-8'))
        except psycopg.OperationalError as e:
            raise OperationalError("Failed to connect: " + str(e))
        if pgconn.status != pq.ConnStatus.OK:
            msg = format_error("Failed to connect", pgconn.error_message)
            pgconn.finish()
            raise OperationalError(msg)
        return cls(pgconn, timezone=timezone)

    @property
    def pgconn(self):
        # type: () -> pq.abc.PGconn
        return self.__pgconn

    @property
    def timezone_name(self):
        # type: () -> str
        """ read name of timezone for this connection """
        return self.__timezone_name

    @timezone_name.setter
    def timezone_name(self, tzname):
        # type: (str) -> None
        try:
            # fails if tzname is bad
            ZoneInfo(tzname)
        except (KeyError, LookupError, ValueError):
            raise ProgrammingError('Invalid TimeZone ' + tzname)
        self.__timezone_name = tzname

    @property
    def timezone_info(self):
        # type: () -> ZoneInfo
        """ get a tzinfo for this connection """
        return ZoneInfo(self.__timezone_name)

    @property
    def socket(self):
        # type: () -> int
        """Return the connection's socket descriptor.

        :raises WaitError: If the connection has no valid socket.
        """
        try:
            return self.__pgconn.socket
        except psycopg.OperationalError:
            raise WaitError(format_error("Failed to get connection socket",
                                         self.__pgconn.error_message))

    def stop(self, message, error=ConnectionFatalError):
        """Abandon the connection and raise ERROR with MESSAGE.

        The libpq connection is finished and the session marked closed:
        callers must not issue further requests on it.
        """
        msg = format_error(message, self.__pgconn.error_message)
        self.close()
        raise error(msg)

    # Statement preparation

    def prepare(self, sql):
        # type: (str) -> pq.abc.PGresult
        """Prepare SQL as the unnamed statement and return the result."""
        _log.debug("prepare: %s", sql)
        return self.__pgconn.prepare(protocol.ANONYMOUS, sql.encode('utf-8'))

    def describe_prepared(self):
        # type: () -> pq.abc.PGresult
        """Describe the unnamed statement."""
        return self.__pgconn.describe_prepared(protocol.ANONYMOUS)

    # Asynchronous execution

    def send_prepared(self, values, formats):
        # type: (Sequence[Optional[bytes]], Sequence[int]) -> bool
        """Send one execution of the unnamed statement.

        Results are requested in text format.
        :returns: False if libpq could not dispatch the request.
        """
        try:
            self.__pgconn.send_query_prepared(
                protocol.ANONYMOUS, values or None, formats or None,
                result_format=protocol.FORMAT_TEXT)
        except psycopg.OperationalError:
            return False
        return True

    def set_single_row_mode(self):
        # type: () -> bool
        """Ask for the rows of the last request to arrive one at a time."""
        try:
            self.__pgconn.set_single_row_mode()
        except psycopg.OperationalError:
            return False
        return True

    def get_result(self):
        # type: () -> Optional[pq.abc.PGresult]
        """Return the next result object or None when the request is done."""
        return self.__pgconn.get_result()

    def consume_input(self):
        # type: () -> bool
        """Read whatever the server has sent so far."""
        try:
            self.__pgconn.consume_input()
        except psycopg.OperationalError:
            return False
        return True

    def is_busy(self):
        # type: () -> bool
        """Return True if get_result() would block."""
        return bool(self.__pgconn.is_busy())

    def finish_query(self):
        # type: () -> None
        """Discard what is left of the previous request.

        A command still running on the server is cancelled first so the
        drain does not have to wait for every remaining row.
        """
        if self.__pgconn.transaction_status == protocol.TRANS_ACTIVE:
            try:
                self.__pgconn.get_cancel().cancel()
            except psycopg.OperationalError as e:
                _log.warning("Failed to cancel running query: %s", e)

        while True:
            res = self.__pgconn.get_result()
            if res is None:
                break
            res.clear()

    # Ownership of the connection

    @property
    def current_result(self):
        # type: () -> Optional[Any]
        """The streamer that currently owns the connection, if any."""
        return self.__current

    def set_current_result(self, result):
        # type: (Any) -> None
        """Hand the connection to RESULT.

        A previous owner is abandoned and whatever is left of its execution
        is discarded, so at most one execution is ever in flight.
        """
        previous = self.__current
        if previous is not None and previous is not result:
            _log.debug("abandoning previous result: %s", previous.query)
            self.__current = None
            previous.abandon()
            if not self.closed:
                self.finish_query()
        self.__current = result

    def clear_current_result(self, result):
        # type: (Any) -> None
        """Release ownership if RESULT still holds it."""
        if self.__current is result:
            self.__current = None

    def close(self):
        # type: () -> None
        """Close the connection with the server."""
        self.__pgconn.finish()
        self.closed = True
