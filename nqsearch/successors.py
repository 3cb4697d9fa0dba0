"""Successor enumeration for local search over N-Queens boards.

A successor of a board is obtained by moving exactly one existing queen to a
different row inside its own column. Empty columns are left untouched: this is
a "move a queen" neighbourhood, never a "place a queen" one.

Implementation overview
-----------------------
:class:`SuccessorIterator` is an explicit state machine rather than a
generator. It keeps

- ``_original``: a private snapshot of the board passed in;
- ``_current``: a working copy where only the column under the cursor may
  differ from the snapshot;
- ``_column``: the cursor. A cursor column that is empty in ``_current`` but
  occupied in ``_original`` has not been started yet.

Ordering guarantee
------------------
Successors are grouped by ascending column and, within a column, by ascending
row with the original row skipped. A board with ``k`` occupied columns yields
exactly ``k * (size - 1)`` successors.

The iterator is finite and not restartable; build a new one from the same
board to enumerate again.
"""

from __future__ import annotations

from typing import Iterator, Optional

from .board import Board


def next_row(current: Optional[int], original: Optional[int], size: int) -> Optional[int]:
    """Return the row to try after ``current`` for a column whose original row is ``original``.

    - ``original`` is None: the column is empty and yields nothing.
    - ``current`` is None: the column has not been started; begin at 0, or at
      1 when the original queen sits on row 0.
    - otherwise advance by one, hopping over ``original``; None once past the
      last row.
    """
    if original is None:
        return None
    if current is None:
        return 1 if original == 0 else 0

    candidate = current + 1
    if candidate == original:
        candidate += 1
    if candidate >= size:
        return None
    return candidate


class SuccessorIterator(Iterator[Board]):
    """Lazy iterator over every one-queen move of ``board``.

    Each yielded board is an independent copy; mutating it does not affect
    the iterator or the original board.
    """

    def __init__(self, board: Board):
        self._original = board.copy()
        self._current = board.copy()
        self._column = 0
        self._done = False
        if self._original.size != 0:
            self._current.clear(self._column)

    def __iter__(self) -> "SuccessorIterator":
        return self

    def __next__(self) -> Board:
        size = self._original.size
        # A 0x0 or 1x1 board has no move that keeps the queen in its column.
        if size <= 1 or self._done:
            raise StopIteration

        while self._column < size:
            column = self._column
            original_row = self._original.get_optional(column)
            candidate = next_row(self._current.get_optional(column), original_row, size)

            if candidate is not None:
                self._current.set(column, candidate)
                return self._current.copy()

            # Column finished (or empty from the start): restore it and move on.
            self._current.assign(column, original_row)
            self._column += 1
            if self._column < size:
                self._current.clear(self._column)

        self._done = True
        raise StopIteration

    @property
    def exhausted(self) -> bool:
        return self._done

    @property
    def column(self) -> int:
        """Column currently being varied (equals ``size`` once exhausted)."""
        return self._column
