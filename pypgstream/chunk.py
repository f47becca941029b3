"""Column-oriented batches of decoded rows.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

__all__ = ['Chunk', 'ChunkCollector']

from typing import Any, Iterator, List, Sequence, Tuple, Union  # pylint: disable=unused-import

from . import protocol
from .statement import StatementSpec  # pylint: disable=unused-import


class Chunk(object):
    """Rows of one fetch, stored one list per column.

    Every chunk is annotated with the statement's column metadata, even when
    it holds no rows.
    """

    def __init__(self, spec, columns, nrows):
        # type: (StatementSpec, List[List[Any]], int) -> None
        self.names = spec.names
        self.types = spec.types
        self.oids = spec.oids
        self.known = spec.known
        self.without_tz = spec.without_tz
        self.columns = columns
        self.nrows = nrows

    def __len__(self):
        # type: () -> int
        return self.nrows

    def column(self, key):
        # type: (Union[int, str]) -> List[Any]
        """Return a column by position or by name (first match)."""
        if isinstance(key, int):
            return self.columns[key]
        return self.columns[self.names.index(key)]

    def rows(self):
        # type: () -> Iterator[Tuple[Any, ...]]
        """Iterate over the chunk row by row."""
        return iter(zip(*self.columns)) if self.columns else iter(())

    def __repr__(self):
        return 'Chunk(columns=%r, nrows=%d)' % (list(self.names), self.nrows)


class ChunkCollector(object):
    """Accumulates decoded rows for one fetch.

    With a positive capacity the columns are allocated up front and the
    collector is full once that many rows were accepted.  A negative
    capacity grows without bound.
    """

    def __init__(self, spec, capacity):
        # type: (StatementSpec, int) -> None
        self.__spec = spec
        self.__capacity = capacity
        self.__nrows = 0
        size = capacity if capacity >= 0 else protocol.DEFAULT_CHUNK_SIZE
        self.__columns = [[None] * size for _ in range(spec.ncols)]  # type: List[List[Any]]

    @property
    def nrows(self):
        # type: () -> int
        return self.__nrows

    @property
    def ncols(self):
        # type: () -> int
        return self.__spec.ncols

    def accept_row(self, row):
        # type: (Sequence[Any]) -> None
        """Store one decoded row."""
        pos = self.__nrows
        for col, value in zip(self.__columns, row):
            if pos < len(col):
                col[pos] = value
            else:
                col.extend([None] * max(len(col), 1))
                col[pos] = value
        self.__nrows += 1

    def is_full(self):
        # type: () -> bool
        return self.__capacity >= 0 and self.__nrows >= self.__capacity

    def finalize(self):
        # type: () -> Chunk
        """Return the accepted rows as a Chunk."""
        columns = [col[:self.__nrows] for col in self.__columns]
        return Chunk(self.__spec, columns, self.__nrows)
