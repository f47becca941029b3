"""
(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import os
import logging

_log = logging.getLogger("pypgstreamtest")

# libpq connection string of a scratch database for the live tests
TEST_DSN = os.environ.get('PGSTREAM_TEST_DSN')


def text(*values):
    """Encode cell values the way the server sends them in text format."""
    return tuple(None if v is None else str(v).encode('utf-8') for v in values)
