"""
(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import datetime
import decimal

import pytest

from pypgstream import protocol
from pypgstream.datatype import Binary
from pypgstream.exception import ValidationError
from pypgstream.params import NULL, BinaryParam, TextParam
from pypgstream.params import ParameterBinder, ParameterSet, to_param


class TestPgStreamParams(object):

    def test_to_param(self):
        assert to_param(None) is NULL
        assert to_param('abc') == TextParam('abc')
        assert to_param(42) == TextParam('42')
        assert to_param(decimal.Decimal('1.50')) == TextParam('1.50')
        assert to_param(True) == TextParam('true')
        assert to_param(False) == TextParam('false')
        assert to_param(datetime.date(2024, 1, 2)) == TextParam('2024-01-02')
        assert to_param(b'\x00\x01') == BinaryParam(b'\x00\x01')
        assert to_param(bytearray(b'xy')) == BinaryParam(b'xy')
        assert to_param(Binary(b'z')) == BinaryParam(b'z')

    def test_param_encoding(self):
        assert NULL.encode() is None
        assert NULL.format == protocol.FORMAT_TEXT
        assert TextParam(u'é').encode() == u'é'.encode('utf-8')
        assert TextParam('x').format == protocol.FORMAT_TEXT
        assert BinaryParam(b'\xff').encode() == b'\xff'
        assert BinaryParam(b'\xff').format == protocol.FORMAT_BINARY

    def test_empty_set_has_one_group(self):
        params = ParameterSet()
        assert params.column_count == 0
        assert params.group_count == 1
        assert params.group(0) == []

    def test_group_count_from_first_column(self):
        params = ParameterSet([['a', 'b', 'c'], [1, 2, 3]])
        assert params.column_count == 2
        assert params.group_count == 3
        assert params.group(1) == [TextParam('b'), TextParam('2')]

    def test_ragged_columns_rejected(self):
        with pytest.raises(ValidationError) as ex:
            ParameterSet([['a', 'b'], [1]])
        assert 'Parameter 2 has 1 values; expected 2' in str(ex.value)

    def test_from_rows(self):
        params = ParameterSet.from_rows([('a', 1), ('b', None)])
        assert params.columns == [['a', 'b'], [1, None]]
        assert params.group(1) == [TextParam('b'), NULL]

        with pytest.raises(ValidationError):
            ParameterSet.from_rows([('a', 1), ('b',)])
        with pytest.raises(ValidationError):
            ParameterSet.from_rows([])
        assert ParameterSet.from_rows([[]]).column_count == 0

    def test_bind_count_mismatch(self):
        binder = ParameterBinder(2)
        for columns in ([], [['a']], [['a'], ['b'], ['c']]):
            with pytest.raises(ValidationError) as ex:
                binder.bind(ParameterSet(columns), False)
            assert str(ex.value) == ("Query requires 2 params; %d supplied."
                                     % (len(columns)))

    def test_rebind_without_parameters(self):
        binder = ParameterBinder(0)
        assert binder.bind(ParameterSet(), False) == 1
        with pytest.raises(ValidationError) as ex:
            binder.bind(ParameterSet(), True)
        assert str(ex.value) == "Query does not require parameters."

    def test_encode_mixes_formats_per_value(self):
        binder = ParameterBinder(2)
        assert binder.bind(ParameterSet([[b'\x01', 'text', None],
                                          [None, b'\x02', 7]]), False) == 3

        assert binder.encode(0) == ([b'\x01', None],
                                    [protocol.FORMAT_BINARY, protocol.FORMAT_TEXT])
        assert binder.encode(1) == ([b'text', b'\x02'],
                                    [protocol.FORMAT_TEXT, protocol.FORMAT_BINARY])
        assert binder.encode(2) == ([None, b'7'],
                                    [protocol.FORMAT_TEXT, protocol.FORMAT_TEXT])
