"""A module for housing the datatype classes.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
Binary -- Class for a Binary object
DataType -- The generic types every backend type is resolved to.

Exported Functions:
DateFromTicks -- Converts ticks to a Date object.
TimeFromTicks -- Converts ticks to a Time object.
TimestampFromTicks -- Converts ticks to a Timestamp object.
resolve -- Converts a backend type identifier to a (DataType, known) pair.
TypeObjectFromDataType -- Converts a DataType to a TypeObject variable.
decode_value -- Converts a text-format cell into a Python value.

TypeObject Variables:
STRING -- TypeObject(str)
BINARY -- TypeObject(bytes)
NUMBER -- TypeObject(int, float, decimal.Decimal, bool)
DATETIME -- TypeObject(datetime.datetime, datetime.date, datetime.time)
ROWID -- TypeObject()
"""

__all__ = ['Date', 'Time', 'Timestamp', 'DateFromTicks', 'TimeFromTicks',
           'TimestampFromTicks', 'Binary', 'STRING', 'BINARY', 'NUMBER',
           'DATETIME', 'ROWID', 'DataType', 'TypeObjectFromDataType',
           'resolve', 'decode_value']

import re
import enum
import decimal
import time as _time
from datetime import datetime as Timestamp, date as Date, time as Time
from datetime import timedelta as TimeDelta, timezone
from datetime import tzinfo  # pylint: disable=unused-import
from typing import Any, Optional, Tuple, Union  # pylint: disable=unused-import

import tzlocal

from . import protocol
from .exception import DataError

UTC = timezone.utc
LOCALZONE_NAME = tzlocal.get_localzone_name()


class Binary(bytes):
    """A binary string.

    If passed a string we assume it's encoded as LATIN-1, which ensures that
    the characters 0-255 are considered single-character sequences.
    """

    def __new__(cls, data):
        # type: (Union[str, bytes, bytearray, memoryview]) -> Binary
        if isinstance(data, str):
            return bytes.__new__(cls, data.encode('latin-1'))
        return bytes.__new__(cls, data)

    def __str__(self):
        # type: () -> str
        return repr(self)[2:-1]


def DateFromTicks(ticks):
    # type: (float) -> Date
    """Convert ticks to a Date object."""
    return Date(*_time.localtime(ticks)[:3])


def TimeFromTicks(ticks):
    # type: (float) -> Time
    """Convert ticks to a Time object."""
    return Time(*_time.localtime(ticks)[3:6])


def TimestampFromTicks(ticks):
    # type: (float) -> Timestamp
    """Convert ticks to a Timestamp object."""
    return Timestamp(*_time.localtime(ticks)[:6])


class DataType(enum.Enum):
    """The generic types that all backend types are mapped onto."""

    INT64 = 'int64'
    INT32 = 'int32'
    REAL = 'real'
    STRING = 'string'
    DATE = 'date'
    TIME = 'time'
    DATETIME = 'datetime'
    DATETIME_TZ = 'datetime_tz'
    BOOL = 'bool'
    BLOB = 'blob'
    UNKNOWN = 'unknown'


# SELECT oid, typname FROM pg_type WHERE typtype = 'b'
TYPEMAP = {protocol.INT8OID: DataType.INT64,
           protocol.INT2OID: DataType.INT32,
           protocol.INT4OID: DataType.INT32,
           protocol.OIDOID: DataType.INT32,
           protocol.NUMERICOID: DataType.REAL,
           protocol.FLOAT8OID: DataType.REAL,
           protocol.FLOAT4OID: DataType.REAL,
           protocol.MONEYOID: DataType.REAL,
           protocol.CHAROID: DataType.STRING,
           protocol.NAMEOID: DataType.STRING,
           protocol.TEXTOID: DataType.STRING,
           protocol.BPCHAROID: DataType.STRING,
           protocol.VARCHAROID: DataType.STRING,
           protocol.DATEOID: DataType.DATE,
           protocol.TIMEOID: DataType.TIME,
           protocol.TIMETZOID: DataType.TIME,
           protocol.TIMESTAMPOID: DataType.DATETIME,
           protocol.TIMESTAMPTZOID: DataType.DATETIME_TZ,
           protocol.INTERVALOID: DataType.STRING,
           protocol.UUIDOID: DataType.STRING,
           protocol.BOOLOID: DataType.BOOL,
           protocol.BYTEAOID: DataType.BLOB,
           protocol.VOIDOID: DataType.BLOB,
           protocol.UNKNOWNOID: DataType.STRING,
           }


def resolve(oid):
    # type: (int) -> Tuple[DataType, bool]
    """Return the generic type for a backend type identifier.

    Identifiers outside the lookup table resolve to STRING, which can decode
    any text cell, and are reported as not known.
    """
    dtype = TYPEMAP.get(oid)
    if dtype is None:
        return DataType.STRING, False
    return dtype, True


class TypeObject(object):
    """A SQL type object."""

    def __init__(self, *values):
        self.values = values

    def __eq__(self, other):
        if isinstance(other, TypeObject):
            return self is other
        return other in self.values

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return id(self)


STRING = TypeObject(str)
BINARY = TypeObject(bytes, Binary)
NUMBER = TypeObject(int, float, decimal.Decimal, bool)
DATETIME = TypeObject(Timestamp, Date, Time)
ROWID = TypeObject()

DBAPI_TYPEMAP = {DataType.INT64: NUMBER,
                 DataType.INT32: NUMBER,
                 DataType.REAL: NUMBER,
                 DataType.BOOL: NUMBER,
                 DataType.STRING: STRING,
                 DataType.DATE: DATETIME,
                 DataType.TIME: DATETIME,
                 DataType.DATETIME: DATETIME,
                 DataType.DATETIME_TZ: DATETIME,
                 DataType.BLOB: BINARY,
                 DataType.UNKNOWN: STRING,
                 }


def TypeObjectFromDataType(dtype):
    # type: (DataType) -> TypeObject
    """Return the PEP 249 TypeObject for a generic type."""
    return DBAPI_TYPEMAP[dtype]


# Text formats produced by the server with DateStyle=ISO
_DATE = r'(\d{4,})-(\d{2})-(\d{2})'
_TIME = r'(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,6}))?'
_ZONE = r'(?:([+-])(\d{2})(?::?(\d{2}))?(?::?(\d{2}))?)?'
_ERA = r'( BC)?'

_DATE_RE = re.compile('^' + _DATE + _ERA + '$')
_TIME_RE = re.compile('^' + _TIME + _ZONE + '$')
_TIMESTAMP_RE = re.compile('^' + _DATE + '[ T]' + _TIME + _ZONE + _ERA + '$')

_MONEY_JUNK = re.compile(r'[^0-9.eE+-]')


def _micro(frac):
    # type: (Optional[str]) -> int
    if not frac:
        return 0
    return int(frac.ljust(6, '0'))


def _year(text, bc):
    # type: (str, Optional[str]) -> int
    # datetime only holds years 1 to 9999
    if bc:
        raise ValueError('BC dates are out of range')
    return int(text)


def _offset(sign, hours, minutes, seconds):
    # type: (Optional[str], Optional[str], Optional[str], Optional[str]) -> Optional[tzinfo]
    if sign is None:
        return None
    delta = TimeDelta(hours=int(hours or 0), minutes=int(minutes or 0),
                      seconds=int(seconds or 0))
    if sign == '-':
        delta = -delta
    return timezone(delta)


def _parse_date(text):
    # type: (str) -> Date
    if text == 'infinity':
        return Date.max
    if text == '-infinity':
        return Date.min
    m = _DATE_RE.match(text)
    if m is None:
        raise ValueError(text)
    return Date(_year(m.group(1), m.group(4)), int(m.group(2)), int(m.group(3)))


def _parse_time(text):
    # type: (str) -> Time
    m = _TIME_RE.match(text)
    if m is None:
        raise ValueError(text)
    return Time(int(m.group(1)), int(m.group(2)), int(m.group(3)),
                _micro(m.group(4)), tzinfo=_offset(*m.group(5, 6, 7, 8)))


def _parse_timestamp(text, tz_info=None):
    # type: (str, Optional[tzinfo]) -> Timestamp
    if text in ('infinity', '-infinity'):
        value = Timestamp.max if text == 'infinity' else Timestamp.min
        return value.replace(tzinfo=tz_info) if tz_info is not None else value
    m = _TIMESTAMP_RE.match(text)
    if m is None:
        raise ValueError(text)
    dt = Timestamp(_year(m.group(1), m.group(12)), int(m.group(2)),
                   int(m.group(3)), int(m.group(4)), int(m.group(5)),
                   int(m.group(6)), _micro(m.group(7)),
                   tzinfo=_offset(*m.group(8, 9, 10, 11)))
    if tz_info is not None:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        dt = dt.astimezone(tz_info)
    return dt


def _parse_real(text):
    # type: (str) -> float
    try:
        return float(text)
    except ValueError:
        pass
    # money: currency symbols and group separators depend on lc_monetary
    negative = text.startswith('-') or text.startswith('(')
    value = float(_MONEY_JUNK.sub('', text.replace(',', '')).lstrip('-'))
    return -value if negative else value


def _parse_bool(text):
    # type: (str) -> bool
    if text == 't':
        return True
    if text == 'f':
        return False
    raise ValueError(text)


def _parse_bytea(raw):
    # type: (bytes) -> Binary
    if raw.startswith(b'\\x'):
        return Binary(bytes.fromhex(raw[2:].decode('ascii')))
    # Escape format: backslash-escaped octets, doubled backslashes
    out = bytearray()
    pos = 0
    while pos < len(raw):
        ch = raw[pos]
        if ch != 0x5c:
            out.append(ch)
            pos += 1
        elif raw[pos + 1:pos + 2] == b'\\':
            out.append(0x5c)
            pos += 2
        else:
            out.append(int(raw[pos + 1:pos + 4], 8))
            pos += 4
    return Binary(out)


def decode_value(dtype, raw, tz_info=UTC):
    # type: (DataType, Optional[bytes], tzinfo) -> Any
    """Convert one text-format cell into a Python value.

    :param dtype: Generic type of the column.
    :param raw: Cell contents as returned by the backend, None for NULL.
    :param tz_info: Zone used to present DATETIME_TZ values.
    :raises DataError: If the text is not valid for the type.
    """
    if raw is None:
        return None
    try:
        if dtype is DataType.BLOB:
            return _parse_bytea(raw)
        text = raw.decode('utf-8')
        if dtype is DataType.INT64 or dtype is DataType.INT32:
            return int(text)
        if dtype is DataType.REAL:
            return _parse_real(text)
        if dtype is DataType.BOOL:
            return _parse_bool(text)
        if dtype is DataType.DATE:
            return _parse_date(text)
        if dtype is DataType.TIME:
            return _parse_time(text)
        if dtype is DataType.DATETIME:
            return _parse_timestamp(text)
        if dtype is DataType.DATETIME_TZ:
            return _parse_timestamp(text, tz_info)
        return text
    except (ValueError, IndexError, OverflowError) as e:
        raise DataError('Cannot decode %r as %s: %s' % (raw, dtype.value, str(e)))
