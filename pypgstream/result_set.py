"""Streaming execution of a prepared statement.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

A ResultStreamer prepares its SQL once, then executes it once per parameter
group.  Rows are delivered by the server one at a time (single-row mode) and
decoded into column-oriented chunks on demand.  The streamer always keeps
the next row, or the end of the statement, already retrieved: after a fetch
returns, `complete` tells whether anything is left.

Phases of one execution:

    IDLE -> BOUND -> AWAITING -> ROW_READY -> AWAITING ...
                        |
                        +-> GROUP_DONE -> BOUND (next group) | COMPLETE
"""

__all__ = ['Phase', 'StreamState', 'ResultStreamer']

import enum
import logging
from typing import Any, List, Optional, Sequence, Union  # pylint: disable=unused-import

from . import protocol
from . import statement
from .chunk import Chunk, ChunkCollector  # pylint: disable=unused-import
from .datatype import decode_value
from .exception import Error, InterfaceError, InternalError, ValidationError
from .interrupt import InterruptSource, wait_for_data  # pylint: disable=unused-import
from .params import ParameterBinder, ParameterSet

_log = logging.getLogger(__name__)


class Phase(enum.Enum):
    IDLE = 'idle'
    BOUND = 'bound'
    AWAITING = 'awaiting'
    ROW_READY = 'row_ready'
    GROUP_DONE = 'group_done'
    COMPLETE = 'complete'


# AWAITING may repeat when a wait was interrupted and is resumed.
_TRANSITIONS = {
    Phase.IDLE: (Phase.BOUND, Phase.COMPLETE),
    Phase.BOUND: (Phase.AWAITING,),
    Phase.AWAITING: (Phase.AWAITING, Phase.ROW_READY, Phase.GROUP_DONE),
    Phase.ROW_READY: (Phase.AWAITING,),
    Phase.GROUP_DONE: (Phase.BOUND, Phase.COMPLETE),
    Phase.COMPLETE: (),
}


class StreamState(object):
    """Progress of one statement execution across its parameter groups."""

    def __init__(self):
        # type: () -> None
        self.phase = Phase.IDLE
        self.group = 0
        self.groups = 0
        self.rows_affected = 0
        self.bound = False
        self.data_ready = False

    @property
    def complete(self):
        # type: () -> bool
        return self.phase is Phase.COMPLETE

    def reset(self, groups):
        # type: (int) -> None
        """Start a fresh execution of GROUPS parameter groups."""
        self.phase = Phase.IDLE
        self.group = 0
        self.groups = groups
        self.rows_affected = 0
        self.data_ready = False

    def transition(self, phase):
        # type: (Phase) -> None
        """Move to PHASE.

        :raises InternalError: If PHASE cannot follow the current phase.
        """
        if phase not in _TRANSITIONS[self.phase]:
            raise InternalError("Illegal stream transition %s -> %s"
                                % (self.phase.value, phase.value))
        if phase is Phase.COMPLETE and self.group != self.groups:
            raise InternalError("Stream completed at group %d of %d"
                                % (self.group, self.groups))
        self.phase = phase

    def __repr__(self):
        return ('StreamState(phase=%s, group=%d/%d, rows_affected=%d)'
                % (self.phase.value, self.group, self.groups,
                   self.rows_affected))


def _as_parameter_set(params):
    # type: (Union[None, ParameterSet, Sequence[Sequence[Any]]]) -> ParameterSet
    if params is None:
        return ParameterSet()
    if isinstance(params, ParameterSet):
        return params
    return ParameterSet(params)


class ResultStreamer(object):
    """Execute one prepared statement and stream its results.

    Public Functions:
    bind -- Execute the statement with a new set of parameters.
    fetch -- Return the next chunk of rows.
    column_info -- Return the names and types of the result columns.
    close -- Discard any pending results.
    """

    def __init__(self, session, sql, interrupts=None, immediate=True):
        # type: (Any, str, Optional[InterruptSource], bool) -> None
        """Prepare SQL on SESSION.

        The streamer takes over the session: a streamer that owned it before
        is abandoned and its pending results are discarded.  Unless
        IMMEDIATE is false, a statement without placeholders is executed
        right away.

        :param session: PGSession used exclusively by this streamer.
        :param sql: Statement text, passed to the server untouched.
        :param interrupts: Cancellation source checked while waiting.
        :param immediate: Execute a statement without placeholders now.
        :raises PrepareError: If the server rejects the statement.
        """
        self.__session = session
        self.__interrupts = interrupts
        self.__result = None  # type: Any
        self.__rows_fetched = 0
        self.__closed = False
        self.__abandoned = False
        self.__state = StreamState()

        self.query = sql
        session.set_current_result(self)
        self.__spec = statement.prepare(session, sql)
        self.__binder = ParameterBinder(self.__spec.param_count)

        if immediate and self.__spec.param_count == 0:
            self.bind()

    @property
    def spec(self):
        # type: () -> statement.StatementSpec
        return self.__spec

    @property
    def state(self):
        # type: () -> Phase
        return self.__state.phase

    @property
    def complete(self):
        # type: () -> bool
        return self.__state.complete

    @property
    def group(self):
        # type: () -> int
        return self.__state.group

    @property
    def rows_fetched(self):
        # type: () -> int
        return self.__rows_fetched

    @property
    def rows_affected(self):
        # type: () -> Optional[int]
        """Rows changed by a command, summed over all parameter groups.

        None before the first bind; always 0 for a query.
        """
        if not self.__state.bound:
            return None
        if self.__spec.ncols > 0:
            return 0
        return self.__state.rows_affected

    def _check_closed(self):
        # type: () -> None
        if self.__abandoned:
            raise InterfaceError("result was abandoned: another query was "
                                 "started on this connection")
        if self.__closed:
            raise InterfaceError("result is closed")
        if self.__session.closed:
            raise Error("connection is closed")

    def bind(self, params=None):
        # type: (Union[None, ParameterSet, Sequence[Sequence[Any]]]) -> None
        """Execute the statement once per group of PARAMS.

        Anything left of a previous execution is discarded first.

        :param params: A ParameterSet, a sequence of parameter columns, or
                       None for a statement without placeholders.
        :raises ValidationError: If the parameters do not suit the statement.
        """
        self._check_closed()
        state = self.__state
        groups = self.__binder.bind(_as_parameter_set(params), state.bound)

        self._release_result()
        state.reset(groups)
        self.__rows_fetched = 0
        if self.__interrupts is not None:
            # an interrupt requested before this execution does not apply to it
            self.__interrupts.clear()

        has_rows = self._send_group()
        state.bound = True
        if has_rows:
            self._step()
        else:
            state.transition(Phase.COMPLETE)

    def fetch(self, n_max=-1):
        # type: (int) -> Chunk
        """Return up to N_MAX rows as a Chunk.

        A negative N_MAX fetches everything that is left; zero only peeks at
        the pending row so the chunk carries the column metadata.

        :raises ValidationError: If the statement was never bound.
        """
        self._check_closed()
        state = self.__state
        if not state.bound:
            raise ValidationError("Query needs to be bound before fetching")

        if state.phase is Phase.AWAITING:
            # a previous wait was interrupted
            self._step()

        if n_max == 0:
            return self._peek()

        tz_info = self.__session.timezone_info
        data = ChunkCollector(self.__spec, n_max)

        if state.complete and data.ncols == 0:
            _log.warning("Don't need to call fetch() for statements, only for queries")

        while not state.complete:
            data.accept_row(self._decode_row(tz_info))
            self._step()
            self.__rows_fetched += 1
            if data.is_full():
                break

        _log.debug("rows fetched: %d", self.__rows_fetched)
        return data.finalize()

    def column_info(self):
        # type: () -> List[statement.ColumnInfo]
        """Return name, generic type, backend type id and known flag per column."""
        if self.__state.bound:
            self.fetch(0)
        return self.__spec.column_info()

    def close(self):
        # type: () -> None
        """Release the pending result and drain the connection."""
        if self.__closed:
            return
        self.__closed = True
        self._release_result()
        if self.__state.bound and not self.__state.complete \
                and not self.__session.closed:
            self.__session.finish_query()
        self.__session.clear_current_result(self)

    def abandon(self):
        # type: () -> None
        """Give up the connection to another streamer.

        The session drains what is left; any later use of this streamer
        raises InterfaceError.
        """
        self.__abandoned = True
        self.__closed = True
        self._release_result()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # Privates

    def _release_result(self):
        # type: () -> None
        res = self.__result
        self.__result = None
        if res is not None:
            res.clear()

    def _send_group(self):
        # type: () -> bool
        """Send the current group; return False if no group is left."""
        state = self.__state
        session = self.__session

        if state.bound or state.group > 0:
            session.finish_query()

        _log.debug("groups: %d/%d", state.group, state.groups)
        if state.group >= state.groups:
            return False

        values, formats = self.__binder.encode(state.group)
        success = session.send_prepared(values, formats)
        state.data_ready = False

        if not success:
            session.stop("Failed to send query")

        if not session.set_single_row_mode():
            session.stop("Failed to set single row mode")

        state.transition(Phase.BOUND)
        return True

    def _step(self):
        # type: () -> None
        while self._step_run():
            pass

    def _step_run(self):
        # type: () -> bool
        """Retrieve the next result object.

        :returns: True if a new group was sent and stepping must continue.
        """
        state = self.__state
        session = self.__session

        self._release_result()
        state.transition(Phase.AWAITING)

        # check for cancellation while waiting for the first row to be ready
        if not state.data_ready:
            wait_for_data(session, self.__interrupts)
            state.data_ready = True

        res = session.get_result()
        if res is None:
            raise InternalError("No active query")
        self.__result = res

        status = res.status
        if status == protocol.FATAL_ERROR or status == protocol.BAD_RESPONSE:
            self._release_result()
            session.stop("Failed to fetch row")

        if status == protocol.SINGLE_TUPLE:
            state.transition(Phase.ROW_READY)
            return False

        self._drain_trailing()
        return self._step_done(res)

    def _drain_trailing(self):
        # type: () -> None
        """Collect results after the terminal one until libpq returns NULL."""
        session = self.__session
        for _ in range(protocol.MAX_TRAILING_RESULTS):
            res = session.get_result()
            if res is None:
                return
            _log.debug("discarding trailing %s result",
                       protocol.lookup_status(res.status))
            res.clear()
        self._release_result()
        session.stop("Too many results after the end of the query")

    def _step_done(self, res):
        # type: (Any) -> bool
        state = self.__state
        state.transition(Phase.GROUP_DONE)

        state.rows_affected += res.command_tuples or 0
        state.group += 1

        more_params = self._send_group()
        if not more_params:
            state.transition(Phase.COMPLETE)

        _log.debug("group: %d, more_params: %s", state.group, more_params)
        return more_params

    def _decode_row(self, tz_info):
        # type: (Any) -> List[Any]
        res = self.__result
        return [decode_value(dtype, res.get_value(0, i), tz_info)
                for i, dtype in enumerate(self.__spec.types)]

    def _peek(self):
        # type: () -> Chunk
        data = ChunkCollector(self.__spec, 0)
        if not self.__state.complete:
            # decode without accepting: the row stays pending
            self._decode_row(self.__session.timezone_info)
        return data.finalize()
