"""A module for connecting to a PostgreSQL database.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
Connection -- Class for establishing connection with host.

Exported Functions:
connect -- Creates a connection object.
"""

__all__ = ['apilevel', 'threadsafety', 'paramstyle', 'connect',
           'Connection']

import copy
from typing import Any, Dict, Mapping, Optional  # pylint: disable=unused-import

from psycopg.conninfo import make_conninfo

from . import __version__
from .exception import Error, InterfaceError
from .session import PGSession, session_options
from .interrupt import InterruptFlag

from . import cursor
from . import result_set

apilevel = "2.0"
threadsafety = 1
# Statement text is passed through untouched: placeholders are $1, $2, ...
paramstyle = "numeric"


def connect(conninfo=None,          # type: Optional[str]
            check_interrupts=False,  # type: bool
            options=None,            # type: Optional[Mapping[str, str]]
            **kwargs
            ):
    # type: (...) -> Connection
    """Return a new Connection object.

    :param conninfo: libpq connection string or URI.
    :param check_interrupts: Wait for data in cancellable one-second steps.
    :param options: Connection options; see session_options().
    :param kwargs: libpq connection keywords (host, dbname, user, ...).
    :returns: A new Connection object.
    """
    return Connection(conninfo=conninfo, check_interrupts=check_interrupts,
                      options=options, **kwargs)


def _to_bool(value):
    # type: (Any) -> bool
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)


class Connection(object):
    """An established SQL connection with a PostgreSQL database.

    Public Functions:
    close -- Closes the connection with the host.
    cursor -- Return a new Cursor object using the connection.
    send_query -- Prepare a statement and return its ResultStreamer.
    interrupt -- Cancel the operation currently waiting for data.

    Special Function:
    check_interrupts (getter) -- Whether waits are cancellable.
    check_interrupts (setter) -- Enable or disable cancellable waits.
    """

    # PEP 249 recommends that all exceptions be exposed as attributes in the
    # Connection object.
    from .exception import Warning, Error, InterfaceError, DatabaseError
    from .exception import OperationalError, IntegrityError, InternalError
    from .exception import ProgrammingError, NotSupportedError, DataError

    __session = None          # type: PGSession
    __config = None           # type: Dict[str, Any]

    def __init__(self, conninfo=None,          # type: Optional[str]
                 check_interrupts=False,       # type: bool
                 options=None,                 # type: Optional[Mapping[str, str]]
                 session=None,                 # type: Optional[PGSession]
                 **kwargs
                 ):
        # type: (...) -> None
        """Construct a Connection object.

        :param conninfo: libpq connection string or URI.
        :param check_interrupts: Wait for data in cancellable steps.
        :param options: Connection options.
        :param session: An already established PGSession to use.
        :param kwargs: libpq connection keywords.
        """
        params, opts = session_options(options)
        params.update(kwargs)

        if 'check_interrupts' in opts:
            check_interrupts = _to_bool(opts['check_interrupts'])

        self.__config = {'driver_version': __version__,
                         'options': copy.deepcopy(options)}

        if session is None:
            if conninfo is None and not params:
                raise InterfaceError("No connection information provided.")
            dsn = make_conninfo(conninfo or '', **params)
            session = PGSession.connect(dsn, timezone=opts.get('timezone'))
        elif 'timezone' in opts:
            session.timezone_name = opts['timezone']

        self.__session = session
        self.__interrupts = InterruptFlag(enabled=check_interrupts)

        pgconn = session.pgconn
        self.__config['server_version'] = pgconn.server_version
        self.__config['backend_pid'] = pgconn.backend_pid
        for key in ('host', 'port', 'db', 'user'):
            value = getattr(pgconn, key)
            self.__config[key] = value.decode('utf-8') if value else None

    @property
    def check_interrupts(self):
        # type: () -> bool
        """Return True if waits for data can be interrupted."""
        return self.__interrupts.is_enabled()

    @check_interrupts.setter
    def check_interrupts(self, value):
        # type: (bool) -> None
        self.__interrupts.enabled = bool(value)

    @property
    def timezone(self):
        # type: () -> str
        """Return the zone used for timestamps with time zone."""
        return self.__session.timezone_name

    def connection_config(self):
        # type: () -> Dict[str, Any]
        """Returns a copy of the connection configuration.

        Configuration:
          backend_pid      :int:  PID of the server process
          check_interrupts :bool: True if waits for data are cancellable
          connected        :bool: True if the connection is active
          db               :str:  name of the connected database
          driver_version   :str:  Version of this driver
          host             :str:  Address of the server
          options          :dict: Dictionary of connection options
          port             :str:  Port of the server
          server_version   :int:  Server version number
          timezone         :str:  Zone for timestamps with time zone
          user             :str:  name of the connected user

        :returns: Copy of the connection config names and values.
                  Modifying these values has no effect on the connection.
        """
        config = copy.deepcopy(self.__config)
        config['connected'] = not self.__session.closed
        config['check_interrupts'] = self.check_interrupts
        config['timezone'] = self.__session.timezone_name
        return config

    def interrupt(self):
        # type: () -> None
        """Cancel the operation waiting for data, if waits are cancellable.

        Safe to call from another thread or a signal handler.
        """
        self.__interrupts.interrupt()

    def send_query(self, sql):
        # type: (str) -> result_set.ResultStreamer
        """Prepare SQL and return the ResultStreamer executing it."""
        self._check_closed()
        return result_set.ResultStreamer(self.__session, sql,
                                         interrupts=self.__interrupts)

    def close(self):
        # type: () -> None
        """Close this connection to the database."""
        self._check_closed()
        self.__session.close()

    def _check_closed(self):
        # type: () -> None
        """Check if the connection is available.

        :raises Error: If the connection to the host is closed.
        """
        if self.__session.closed:
            raise Error("connection is closed")

    def cursor(self):
        # type: () -> cursor.Cursor
        """Return a new Cursor object using the connection."""
        self._check_closed()
        return cursor.Cursor(self.__session, self.__interrupts)

    def __enter__(self):
        # Return self to allow use within the 'with' block
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Always close the connection, unless it was already abandoned
        if not self.__session.closed:
            self.close()
