"""
(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import datetime
from zoneinfo import ZoneInfo

import pytest

from pypgstream import datatype
from pypgstream.datatype import DataType, decode_value, resolve
from pypgstream.exception import DataError


class TestPgStreamTypes(object):
    """Check type resolution and text decoding."""

    KNOWN = {20: DataType.INT64,
             21: DataType.INT32, 23: DataType.INT32, 26: DataType.INT32,
             700: DataType.REAL, 701: DataType.REAL, 790: DataType.REAL,
             1700: DataType.REAL,
             18: DataType.STRING, 19: DataType.STRING, 25: DataType.STRING,
             1042: DataType.STRING, 1043: DataType.STRING,
             1186: DataType.STRING, 2950: DataType.STRING,
             705: DataType.STRING,
             1082: DataType.DATE,
             1083: DataType.TIME, 1266: DataType.TIME,
             1114: DataType.DATETIME,
             1184: DataType.DATETIME_TZ,
             16: DataType.BOOL,
             17: DataType.BLOB, 2278: DataType.BLOB}

    def test_resolve_known(self):
        for oid, dtype in self.KNOWN.items():
            assert resolve(oid) == (dtype, True), "oid %d" % (oid)

    def test_resolve_unknown(self):
        for oid in (0, 114, 3802, 1009, 600, 99999):
            assert resolve(oid) == (DataType.STRING, False)

    def test_typemap_is_the_lookup_table(self):
        assert set(datatype.TYPEMAP) == set(self.KNOWN)

    def test_dbapi_type_objects(self):
        assert datatype.TypeObjectFromDataType(DataType.INT64) == datatype.NUMBER
        assert datatype.TypeObjectFromDataType(DataType.BLOB) == datatype.BINARY
        assert datatype.TypeObjectFromDataType(DataType.DATETIME_TZ) == datatype.DATETIME
        assert datatype.TypeObjectFromDataType(DataType.STRING) != datatype.NUMBER
        assert datatype.STRING == str
        assert datatype.NUMBER == int

    def test_decode_null(self):
        for dtype in DataType:
            assert decode_value(dtype, None) is None

    def test_decode_numbers(self):
        assert decode_value(DataType.INT64, b'9223372036854775807') == 9223372036854775807
        assert decode_value(DataType.INT32, b'-42') == -42
        assert decode_value(DataType.REAL, b'3.25') == 3.25
        assert decode_value(DataType.REAL, b'Infinity') == float('inf')
        assert decode_value(DataType.REAL, b'$1,234.50') == 1234.5
        assert decode_value(DataType.REAL, b'-$12.00') == -12.0

    def test_decode_text_and_bool(self):
        assert decode_value(DataType.STRING, u'héllo'.encode('utf-8')) == u'héllo'
        assert decode_value(DataType.BOOL, b't') is True
        assert decode_value(DataType.BOOL, b'f') is False

    def test_decode_dates(self):
        assert decode_value(DataType.DATE, b'2024-02-29') == datetime.date(2024, 2, 29)
        assert decode_value(DataType.DATE, b'infinity') == datetime.date.max
        assert decode_value(DataType.TIME, b'13:45:07.5') == \
            datetime.time(13, 45, 7, 500000)
        ttz = decode_value(DataType.TIME, b'08:00:00+05:30')
        assert ttz.utcoffset() == datetime.timedelta(hours=5, minutes=30)

    def test_decode_timestamps(self):
        ts = decode_value(DataType.DATETIME, b'2023-11-05 01:30:00.000123')
        assert ts == datetime.datetime(2023, 11, 5, 1, 30, 0, 123)
        assert ts.tzinfo is None

        tz = ZoneInfo('America/New_York')
        tstz = decode_value(DataType.DATETIME_TZ, b'2023-07-01 16:00:00+00', tz)
        assert tstz.tzinfo is tz
        assert tstz.hour == 12
        assert tstz == datetime.datetime(2023, 7, 1, 16, tzinfo=datetime.timezone.utc)

    def test_decode_bytea(self):
        value = decode_value(DataType.BLOB, b'\\x00ff41')
        assert isinstance(value, datatype.Binary)
        assert value == b'\x00\xffA'
        assert decode_value(DataType.BLOB, b'a\\\\b\\001') == b'a\\b\x01'
        assert decode_value(DataType.BLOB, b'') == b''

    def test_decode_invalid(self):
        with pytest.raises(DataError):
            decode_value(DataType.INT32, b'abc')
        with pytest.raises(DataError):
            decode_value(DataType.BOOL, b'maybe')
        with pytest.raises(DataError):
            decode_value(DataType.DATE, b'2024-13-01')

    def test_decode_bc_out_of_range(self):
        with pytest.raises(DataError) as ex:
            decode_value(DataType.DATE, b'0044-03-15 BC')
        assert 'BC dates are out of range' in str(ex.value)
        with pytest.raises(DataError):
            decode_value(DataType.DATETIME, b'0044-03-15 12:00:00 BC')
        with pytest.raises(DataError):
            decode_value(DataType.DATETIME_TZ, b'0044-03-15 12:00:00+00 BC')
        with pytest.raises(DataError):
            decode_value(DataType.DATE, b'10000-01-01')

    def test_binary(self):
        assert datatype.Binary('\xff') == b'\xff'
        assert datatype.Binary(bytearray(b'ab')) == b'ab'
        assert str(datatype.Binary(b'ab')) == 'ab'
