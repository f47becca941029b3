"""Prepared statement metadata.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

__all__ = ['StatementSpec', 'ColumnInfo', 'prepare', 'owned_result']

import logging
import contextlib
from collections import namedtuple
from typing import Any, Iterator, List, Optional, Tuple  # pylint: disable=unused-import

from . import protocol
from . import datatype
from .exception import PrepareError

_log = logging.getLogger(__name__)

ColumnInfo = namedtuple('ColumnInfo', ['name', 'type', 'oid', 'known'])


@contextlib.contextmanager
def owned_result(res):
    # type: (Any) -> Iterator[Any]
    """Release a libpq result exactly once when the block exits."""
    try:
        yield res
    finally:
        if res is not None:
            res.clear()


class StatementSpec(namedtuple('StatementSpec',
                               ['names', 'oids', 'types', 'known',
                                'param_count'])):
    """Immutable description of a prepared statement.

    names, oids, types and known are parallel tuples with one entry per
    result column; param_count is the number of placeholders.
    """

    __slots__ = ()

    @classmethod
    def from_description(cls, names, oids, param_count):
        # type: (List[str], List[int], int) -> StatementSpec
        """Resolve the generic types of a described statement."""
        types = []
        known = []
        for name, oid in zip(names, oids):
            dtype, is_known = datatype.resolve(oid)
            if not is_known:
                _log.info("Unknown field type (%d) in column %s", oid, name)
            types.append(dtype)
            known.append(is_known)
        return cls(tuple(names), tuple(oids), tuple(types), tuple(known),
                   param_count)

    @property
    def ncols(self):
        # type: () -> int
        return len(self.names)

    @property
    def without_tz(self):
        # type: () -> Tuple[bool, ...]
        """Per column, True for timestamps stored without a time zone."""
        return tuple(t is datatype.DataType.DATETIME for t in self.types)

    def column_info(self):
        # type: () -> List[ColumnInfo]
        return [ColumnInfo(*col) for col in
                zip(self.names, (t.value for t in self.types),
                    self.oids, self.known)]


def prepare(session, sql):
    # type: (Any, str) -> StatementSpec
    """Prepare SQL on SESSION and describe it.

    Any failure abandons the connection.
    :raises PrepareError: If the server rejects the statement.
    """
    with owned_result(session.prepare(sql)) as prep:
        if prep is None or prep.status != protocol.COMMAND_OK:
            session.stop("Failed to prepare query", PrepareError)

    with owned_result(session.describe_prepared()) as desc:
        if desc is None or desc.status != protocol.COMMAND_OK:
            session.stop("Failed to retrieve query result metadata",
                         PrepareError)

        ncols = desc.nfields
        names = []  # type: List[str]
        oids = []   # type: List[int]
        for i in range(ncols):
            fname = desc.fname(i)
            names.append(fname.decode('utf-8') if fname is not None else '')
            oids.append(desc.ftype(i))

        param_count = desc.nparams
        for i in range(param_count):
            _log.debug("param %d type %d", i + 1, desc.param_type(i))

    return StatementSpec.from_description(names, oids, param_count)
