"""Wait for query data while honouring user cancellation.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
InterruptSource -- Cancellation source that never cancels.
InterruptFlag -- Cancellation source driven by interrupt().

Exported Functions:
poll_readable -- Wait a bounded time for a descriptor to become readable.
wait_for_data -- Block until the connection has a full message available.
"""

__all__ = ['InterruptSource', 'InterruptFlag', 'poll_readable',
           'wait_for_data']

import select
import logging
import threading
from typing import Any, Callable, Optional  # pylint: disable=unused-import

from . import protocol
from .exception import InterruptedError, WaitError  # pylint: disable=redefined-builtin

_log = logging.getLogger(__name__)


class InterruptSource(object):
    """A cancellation source.

    This base class is disabled: callers skip polling entirely and block
    directly on the next protocol call.
    """

    def is_enabled(self):
        # type: () -> bool
        return False

    def clear(self):
        # type: () -> None
        """Forget any pending request; called when an execution starts."""
        pass

    def check_interrupt(self):
        # type: () -> None
        pass


class InterruptFlag(InterruptSource):
    """A cancellation source that another thread or a signal handler sets."""

    def __init__(self, enabled=True):
        # type: (bool) -> None
        self.enabled = enabled
        self.__event = threading.Event()

    def is_enabled(self):
        # type: () -> bool
        return self.enabled

    def interrupt(self):
        # type: () -> None
        """Request cancellation of the operation currently waiting.

        A request made while nothing is executing is dropped when the next
        execution starts.
        """
        self.__event.set()

    def clear(self):
        # type: () -> None
        self.__event.clear()

    @property
    def interrupted(self):
        # type: () -> bool
        return self.__event.is_set()

    def check_interrupt(self):
        # type: () -> None
        """Raise InterruptedError if cancellation was requested.

        The request is consumed so the next operation starts clean.
        """
        if self.__event.is_set():
            self.__event.clear()
            raise InterruptedError("Query interrupted by user")


def poll_readable(fd, timeout):
    # type: (int, float) -> bool
    """Return True if FD became readable within TIMEOUT seconds."""
    readable, _, _ = select.select([fd], [], [], timeout)
    return bool(readable)


def wait_for_data(session,     # type: Any
                  interrupts,  # type: Optional[InterruptSource]
                  poll=None    # type: Optional[Callable[[int, float], bool]]
                  ):
    # type: (...) -> None
    """Block until a result can be retrieved without blocking.

    Waits on the connection socket at most POLL_INTERVAL seconds at a time,
    checking for cancellation whenever a wait times out.

    :param session: The PGSession with a request in flight.
    :param interrupts: Cancellation source; None or disabled skips the wait.
    :param poll: Function waiting for a descriptor to become readable;
                 defaults to poll_readable().
    :raises InterruptedError: If cancellation was requested.
    :raises WaitError: If polling or reading the socket failed.
    """
    if interrupts is None or not interrupts.is_enabled():
        return

    if poll is None:
        poll = poll_readable

    fd = session.socket
    if fd < 0:
        raise WaitError("Failed to get connection socket")

    while True:
        try:
            ready = poll(fd, protocol.POLL_INTERVAL)
        except OSError as e:
            raise WaitError("select() failed with error code %d" % (e.errno or 0),
                            e.errno)
        if not ready:
            # timeout reached: check for cancellation
            interrupts.check_interrupt()
            _log.debug("still waiting for data on socket %d", fd)

        # update the connection state using data available on the socket
        if not session.consume_input():
            raise WaitError("Failed to consume input from the server")

        if not session.is_busy():
            return
