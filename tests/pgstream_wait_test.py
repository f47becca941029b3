"""
(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import errno
import socket

import pytest

from pypgstream import protocol
from pypgstream.exception import InterruptedError, WaitError  # pylint: disable=redefined-builtin
from pypgstream.interrupt import InterruptFlag, InterruptSource
from pypgstream.interrupt import poll_readable, wait_for_data

from .fakepq import ScriptedPoll


class TestPgStreamWait(object):

    def test_disabled_source_skips_polling(self, make_session):
        session = make_session()
        poll = ScriptedPoll(False)
        wait_for_data(session, InterruptSource(), poll=poll)
        wait_for_data(session, InterruptFlag(enabled=False), poll=poll)
        wait_for_data(session, None, poll=poll)
        assert poll.calls == []
        assert session.pgconn.consumed == 0

    def test_two_timeouts_then_data(self, make_session):
        session = make_session()
        session.pgconn.busy = [True, True, False]
        flag = InterruptFlag()
        poll = ScriptedPoll(False, False, True)

        wait_for_data(session, flag, poll=poll)

        assert poll.timeouts == 2
        assert len(poll.calls) == 3
        assert poll.calls[0] == (7, protocol.POLL_INTERVAL)
        assert not flag.interrupted

    def test_busy_until_message_complete(self, make_session):
        session = make_session()
        session.pgconn.busy = [True, True, False]
        poll = ScriptedPoll(True, True, True)

        wait_for_data(session, InterruptFlag(), poll=poll)

        assert poll.timeouts == 0
        assert session.pgconn.consumed == 3

    def test_interrupt_on_timeout(self, make_session):
        session = make_session()
        session.pgconn.busy = [True] * 10
        flag = InterruptFlag()
        flag.interrupt()
        poll = ScriptedPoll(False, False, False)

        with pytest.raises(InterruptedError) as ex:
            wait_for_data(session, flag, poll=poll)
        assert str(ex.value) == "Query interrupted by user"
        assert len(poll.calls) == 1
        # The request is consumed by the check
        assert not flag.interrupted

    def test_interrupt_ignored_while_data_arrives(self, make_session):
        session = make_session()
        flag = InterruptFlag()
        flag.interrupt()
        wait_for_data(session, flag, poll=ScriptedPoll(True))
        assert flag.interrupted

    def test_poll_failure(self, make_session):
        session = make_session()
        poll = ScriptedPoll(OSError(errno.EBADF, "Bad file descriptor"))
        with pytest.raises(WaitError) as ex:
            wait_for_data(session, InterruptFlag(), poll=poll)
        assert ex.value.code == errno.EBADF
        assert str(ex.value) == "select() failed with error code %d" % (errno.EBADF)

    def test_consume_failure(self, make_session):
        session = make_session()
        session.pgconn.fail_consume = True
        with pytest.raises(WaitError) as ex:
            wait_for_data(session, InterruptFlag(), poll=ScriptedPoll(True))
        assert str(ex.value) == "Failed to consume input from the server"

    def test_lost_socket(self, make_session):
        session = make_session()
        session.pgconn.socket_fd = -1
        with pytest.raises(WaitError) as ex:
            wait_for_data(session, InterruptFlag(), poll=ScriptedPoll(True))
        assert str(ex.value).startswith("Failed to get connection socket")

    def test_poll_readable(self):
        left, right = socket.socketpair()
        try:
            assert not poll_readable(left.fileno(), 0.01)
            right.send(b'x')
            assert poll_readable(left.fileno(), 1.0)
        finally:
            left.close()
            right.close()
