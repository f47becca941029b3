"""Parameter sets and the per-group parameter encoder.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Parameters are supplied column-oriented: one sequence per placeholder, each
holding one value per execution ("group").  Every value is encoded on its
own, so a single column may mix binary payloads, text and NULLs.

Exported Classes:
ParameterSet -- Column-oriented parameters for a vectorized execution.
ParameterBinder -- Validates a ParameterSet and encodes its groups.
TextParam -- A parameter sent in text format.
BinaryParam -- A parameter sent in binary format.

Exported Functions:
to_param -- Convert a Python value into a parameter variant.
"""

__all__ = ['NULL', 'TextParam', 'BinaryParam', 'to_param', 'ParameterSet',
           'ParameterBinder']

import logging
from collections import namedtuple
from typing import Any, Iterable, List, Optional  # pylint: disable=unused-import
from typing import Sequence, Tuple, Union  # pylint: disable=unused-import

from . import protocol
from . import datatype
from .exception import ValidationError

_log = logging.getLogger(__name__)


class _NullParam(object):
    """SQL NULL: sent as an absent value."""

    format = protocol.FORMAT_TEXT

    def encode(self):
        # type: () -> Optional[bytes]
        return None

    def __repr__(self):
        return 'NULL'


NULL = _NullParam()


class TextParam(namedtuple('TextParam', ['value'])):
    """A value sent as its character representation."""

    __slots__ = ()

    format = protocol.FORMAT_TEXT

    def encode(self):
        # type: () -> Optional[bytes]
        return self.value.encode('utf-8')


class BinaryParam(namedtuple('BinaryParam', ['value'])):
    """A raw payload sent in binary format with an explicit length."""

    __slots__ = ()

    format = protocol.FORMAT_BINARY

    def encode(self):
        # type: () -> Optional[bytes]
        return bytes(self.value)


Param = Union[_NullParam, TextParam, BinaryParam]


def to_param(value):
    # type: (Any) -> Param
    """Return the parameter variant for a Python value."""
    if value is None:
        return NULL

    if isinstance(value, (TextParam, BinaryParam, _NullParam)):
        return value

    if isinstance(value, (bytes, bytearray, memoryview)):
        # Note: Binary is a bytes subclass
        return BinaryParam(bytes(value))

    if isinstance(value, bool):
        return TextParam('true' if value else 'false')

    if isinstance(value, (datatype.Timestamp, datatype.Date, datatype.Time)):
        return TextParam(value.isoformat())

    return TextParam(str(value))


class ParameterSet(object):
    """Column-oriented parameters for one or more executions.

    :param columns: One sequence per placeholder, all of the same length.
    :raises ValidationError: If the columns differ in length.
    """

    def __init__(self, columns=None):
        # type: (Optional[Iterable[Sequence[Any]]]) -> None
        self.columns = [list(col) for col in columns] if columns else []
        if self.columns:
            self.group_count = len(self.columns[0])
        else:
            self.group_count = 1
        for i, col in enumerate(self.columns):
            if len(col) != self.group_count:
                raise ValidationError(
                    "Parameter %d has %d values; expected %d like parameter 1."
                    % (i + 1, len(col), self.group_count))

    @classmethod
    def from_rows(cls, rows):
        # type: (Iterable[Sequence[Any]]) -> ParameterSet
        """Build a ParameterSet from row-oriented values."""
        rows = [list(row) for row in rows]
        if not rows:
            raise ValidationError("No parameter rows supplied.")
        width = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != width:
                raise ValidationError(
                    "Parameter row %d has %d values; expected %d."
                    % (i + 1, len(row), width))
        if width == 0:
            return cls()
        return cls([[row[c] for row in rows] for c in range(width)])

    @property
    def column_count(self):
        # type: () -> int
        return len(self.columns)

    def group(self, index):
        # type: (int) -> List[Param]
        """Return the parameters of one group."""
        return [to_param(col[index]) for col in self.columns]

    def __repr__(self):
        return 'ParameterSet(columns=%d, groups=%d)' % (self.column_count,
                                                        self.group_count)


class ParameterBinder(object):
    """Validates parameter sets for a statement and encodes each group."""

    def __init__(self, param_count):
        # type: (int) -> None
        self.param_count = param_count
        self.params = ParameterSet()

    def bind(self, params, ready):
        # type: (ParameterSet, bool) -> int
        """Accept a new parameter set and return its group count.

        :param params: Parameters for the next execution.
        :param ready: True if the statement was bound before.
        :raises ValidationError: If the parameters do not suit the statement.
        """
        if params.column_count != self.param_count:
            raise ValidationError("Query requires %d params; %d supplied."
                                  % (self.param_count, params.column_count))

        if params.column_count == 0 and ready:
            raise ValidationError("Query does not require parameters.")

        self.params = params
        return params.group_count

    def encode(self, index):
        # type: (int) -> Tuple[List[Optional[bytes]], List[int]]
        """Encode group INDEX into parallel value and format lists."""
        values = []   # type: List[Optional[bytes]]
        formats = []  # type: List[int]
        for param in self.params.group(index):
            values.append(param.encode())
            formats.append(param.format)
        _log.debug("group %d formats: %s", index, formats)
        return values, formats
