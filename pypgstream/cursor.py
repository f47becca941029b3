"""A module for housing the Cursor class.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
Cursor -- Class for representing a database cursor.
"""

__all__ = ['Cursor']

from typing import Any, Iterable, List, Optional, Sequence, Tuple  # pylint: disable=unused-import

from .exception import Error, NotSupportedError, ValidationError
from .datatype import TypeObjectFromDataType
from .chunk import Chunk  # pylint: disable=unused-import
from .interrupt import InterruptSource  # pylint: disable=unused-import
from .params import ParameterSet
from .result_set import ResultStreamer
from .statement import ColumnInfo  # pylint: disable=unused-import


class Cursor(object):
    """Class for representing a database cursor.

    Public Functions:
    close -- Closes the cursor into the database.
    callproc -- Currently not supported.
    execute -- Executes an SQL operation.
    executemany -- Executes an SQL operation once per parameter row.
    fetchone -- Gets the next row of the result set.
    fetchmany -- Gets the next N rows of the result set.
    fetchall -- Gets the remaining rows of the result set.
    fetch_chunk -- Gets the next N rows as a column-oriented Chunk.
    nextset -- Currently not supported.
    setinputsize -- Currently not supported.
    setoutputsize -- Currently not supported.

    Private Functions:
    __init__ -- Constructor for the Cursor class.
    _check_closed -- Checks if the cursor or connection is closed.
    _reset -- Resets SQL transaction variables.
    """

    def __init__(self, session, interrupts=None):
        # type: (Any, Optional[InterruptSource]) -> None
        """Constructor for the Cursor class."""
        self.session = session
        self.closed = False
        self.arraysize = 1
        self.__interrupts = interrupts

        self.description = None  # type: Optional[List[List[Any]]]
        self.rowcount = -1
        self.query = None  # type: Optional[str]
        self._result = None  # type: Optional[ResultStreamer]

    def close(self):
        # type: () -> None
        """Closes the cursor into the database."""
        self._check_closed()
        self._reset()
        self.closed = True

    def _check_closed(self):
        # type: () -> None
        """Checks if the cursor or connection is closed."""
        if self.closed:
            raise Error("cursor is closed")
        if self.session.closed:
            raise Error("connection is closed")

    def _reset(self):
        # type: () -> None
        """Resets SQL transaction variables."""
        if self._result is not None and not self.session.closed:
            self._result.close()
        self._result = None
        self.description = None
        self.rowcount = -1
        self.query = None

    def callproc(self, procname, parameters=None):
        # type: (str, Optional[Sequence[Any]]) -> None
        """Currently not supported."""
        raise NotSupportedError("callproc is not supported")

    def _prepare(self, operation):
        # type: (str) -> ResultStreamer
        self._check_closed()
        self._reset()
        self.query = operation
        self._result = ResultStreamer(self.session, operation,
                                      interrupts=self.__interrupts,
                                      immediate=False)
        return self._result

    def execute(self, operation, parameters=None):
        # type: (str, Optional[Sequence[Any]]) -> None
        """Executes an SQL operation.

        The SQL operations can be with or without parameters; placeholders
        are written $1, $2, ...
        """
        result = self._prepare(operation)
        result.bind(ParameterSet.from_rows([parameters or []]))
        self._describe(result)

    def executemany(self, operation, seq_of_parameters):
        # type: (str, Iterable[Sequence[Any]]) -> None
        """Executes an SQL operation once for every parameter row.

        All rows are sent as parameter groups of a single execution; rowcount
        is the total over all of them.  A statement without placeholders is
        rejected before anything is executed.
        """
        rows = list(seq_of_parameters)
        result = self._prepare(operation)
        count = result.spec.param_count
        if count == 0:
            raise ValidationError("executemany() needs a statement with "
                                  "parameters; use execute()")
        if rows:
            params = ParameterSet.from_rows(rows)
        else:
            params = ParameterSet([[] for _ in range(count)])
        result.bind(params)
        self._describe(result)

    def _describe(self, result):
        # type: (ResultStreamer) -> None
        spec = result.spec
        if spec.ncols > 0:
            self.description = [[name, TypeObjectFromDataType(dtype),
                                 None, None, None, None, None]
                                for name, dtype in zip(spec.names, spec.types)]
            self.rowcount = -1
        else:
            self.description = None
            affected = result.rows_affected
            self.rowcount = affected if affected is not None else -1

    def _check_result(self):
        # type: () -> ResultStreamer
        self._check_closed()
        if self._result is None or self._result.spec.ncols == 0:
            raise Error("Previous execute did not produce any results or no call was issued yet")
        return self._result

    def fetch_chunk(self, size=-1):
        # type: (int) -> Chunk
        """Gets up to SIZE rows (all if negative) as a column-oriented Chunk."""
        return self._check_result().fetch(size)

    def fetchone(self):
        # type: () -> Optional[Tuple[Any, ...]]
        """Gets the next row of the result set."""
        rows = list(self._check_result().fetch(1).rows())
        return rows[0] if rows else None

    def fetchmany(self, size=None):
        # type: (Optional[int]) -> List[Tuple[Any, ...]]
        """Gets the next SIZE rows (default arraysize) of the result set."""
        if size is None:
            size = self.arraysize
        if size <= 0:
            return []
        return list(self._check_result().fetch(size).rows())

    def fetchall(self):
        # type: () -> List[Tuple[Any, ...]]
        """Gets the remaining rows of the result set."""
        return list(self._check_result().fetch(-1).rows())

    def column_info(self):
        # type: () -> List[ColumnInfo]
        """Returns name, type, backend type id and known flag per column."""
        self._check_closed()
        if self._result is None:
            raise Error("No call to execute was issued yet")
        return self._result.column_info()

    def nextset(self):
        # type: () -> None
        """Currently not supported."""
        raise NotSupportedError("nextset is not supported")

    def setinputsizes(self, sizes):
        # type: (Any) -> None
        """Currently not supported."""
        pass

    def setoutputsize(self, size, column=None):
        # type: (Any, Optional[int]) -> None
        """Currently not supported."""
        pass
