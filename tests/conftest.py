"""
(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import pytest

from typing import Any, Callable, Generator  # pylint: disable=unused-import

import pypgstream
from pypgstream.session import PGSession

from . import TEST_DSN, _log
from .fakepq import FakePGconn


@pytest.fixture
def make_session():
    # type: () -> Callable[..., PGSession]
    """Return a factory building a PGSession over a scripted FakePGconn.

    Keyword arguments are passed to FakePGconn; the fake is reachable as
    session.pgconn.
    """
    def factory(**kwargs):
        # type: (Any) -> PGSession
        return PGSession(FakePGconn(**kwargs))
    return factory


@pytest.fixture
def database():
    # type: () -> Generator[pypgstream.Connection, None, None]
    """Connect to the live database named by PGSTREAM_TEST_DSN."""
    if not TEST_DSN:
        pytest.skip("PGSTREAM_TEST_DSN is not set")
    _log.info("Connecting to %s", TEST_DSN)
    con = pypgstream.connect(TEST_DSN)
    try:
        yield con
    finally:
        if con.connection_config()['connected']:
            con.close()
