"""Board model for the N-Queens problem.

A :class:`Board` stores one optional row per column: ``board[col] = row`` or
``None`` when the column is empty. Holding at most one queen per column is
therefore structural; sharing a row or a diagonal is what :meth:`Board.is_valid`
and :meth:`Board.count_conflicts` detect.

Contract (public API)
---------------------
- Construction: :meth:`Board.empty`, :meth:`Board.random`, :meth:`Board.from_rows`.
- Queries: ``size``, ``is_occupied``, ``get``, ``get_optional``, ``rows``,
  ``occupied_count``, ``is_valid``, ``count_conflicts``.
- Mutation: ``set``, ``clear``, ``set_random``.
- Every index argument outside ``[0, size)`` raises
  :class:`~nqsearch.errors.OutOfRange`; reading an empty column through
  ``get`` raises :class:`~nqsearch.errors.Unoccupied`.

Randomness
----------
Random constructors and mutators take an explicit ``random.Random``. Passing a
seeded generator makes every draw reproducible; ``None`` draws from a fresh
unseeded generator.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import OutOfRange, Unoccupied
from .utils import conflicts_on2, resolve_rng

if TYPE_CHECKING:  # pragma: no cover
    from .successors import SuccessorIterator


class Board:
    """An N x N board with at most one queen per column.

    Parameters
    ----------
    size : int
        Board dimension N. The board starts with every column empty.

    Notes
    -----
    Boards compare equal and hash by their current placement so that solver
    results can be collected in a ``set``. Do not mutate a board while it is
    stored in a set or used as a dict key.
    """

    __slots__ = ("_queens",)

    def __init__(self, size: int = 0):
        if size < 0:
            raise OutOfRange("size", size, 0)
        self._queens: List[Optional[int]] = [None] * size

    # Construction --------------------------------------------------------

    @classmethod
    def empty(cls, size: int) -> "Board":
        """Return a board of ``size`` columns with no queens."""
        return cls(size)

    @classmethod
    def random(cls, size: int, rng: Optional[random.Random] = None) -> "Board":
        """Return a full board with each column's row drawn uniformly at random.

        Rows are independent per column, so the result is generally not a
        permutation and may contain row conflicts.
        """
        generator = resolve_rng(rng)
        board = cls(size)
        for column in range(size):
            board._queens[column] = generator.randrange(size)
        return board

    @classmethod
    def from_rows(cls, rows: Sequence[int]) -> "Board":
        """Build a full board where column ``i`` holds ``rows[i]``.

        Raises
        ------
        OutOfRange
            If any row is negative or not smaller than ``len(rows)``.
        """
        board = cls(len(rows))
        for column, row in enumerate(rows):
            board.set(column, row)
        return board

    # Queries -------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of columns (and rows) of the board."""
        return len(self._queens)

    def _check_column(self, column: int) -> None:
        if not 0 <= column < len(self._queens):
            raise OutOfRange("column", column, len(self._queens))

    def is_occupied(self, column: int) -> bool:
        self._check_column(column)
        return self._queens[column] is not None

    def get(self, column: int) -> int:
        """Return the row of the queen in ``column``.

        Raises
        ------
        Unoccupied
            If the column holds no queen. Check :meth:`is_occupied` first or
            use :meth:`get_optional`.
        """
        self._check_column(column)
        row = self._queens[column]
        if row is None:
            raise Unoccupied(column)
        return row

    def get_optional(self, column: int) -> Optional[int]:
        self._check_column(column)
        return self._queens[column]

    def rows(self) -> List[Optional[int]]:
        """Return a fresh list with the row of each column (``None`` when empty)."""
        return list(self._queens)

    def occupied_count(self) -> int:
        return sum(1 for row in self._queens if row is not None)

    # Mutation ------------------------------------------------------------

    def set(self, column: int, row: int) -> None:
        """Place the queen of ``column`` on ``row``, replacing any previous one."""
        self._check_column(column)
        if not 0 <= row < len(self._queens):
            raise OutOfRange("row", row, len(self._queens))
        self._queens[column] = row

    def clear(self, column: int) -> None:
        self._check_column(column)
        self._queens[column] = None

    def set_random(self, column: int, rng: Optional[random.Random] = None) -> None:
        """Move the queen of ``column`` to a uniformly random row (any row, possibly the same)."""
        self.set(column, resolve_rng(rng).randrange(len(self._queens)))

    def assign(self, column: int, row: Optional[int]) -> None:
        """Set ``column`` to ``row``, or clear it when ``row`` is None."""
        if row is None:
            self.clear(column)
        else:
            self.set(column, row)

    # Validity ------------------------------------------------------------

    def is_valid(self) -> bool:
        """Return True if the board is a complete N-Queens solution.

        The check runs in three short-circuiting stages:

        1. every column is occupied;
        2. no two queens share a row;
        3. no two queens share a diagonal (equal ``column + row`` or equal
           ``column - row``).

        Only pairs ``i < j`` are compared. Columns need no check because the
        representation holds one queen per column.
        """
        queens = self._queens
        if any(row is None for row in queens):
            return False

        n = len(queens)
        for i in range(n):
            for j in range(i + 1, n):
                if queens[i] == queens[j]:
                    return False

        for i in range(n):
            for j in range(i + 1, n):
                if i + queens[i] == j + queens[j] or i - queens[i] == j - queens[j]:
                    return False

        return True

    def count_conflicts(self) -> int:
        """Return the number of attacking pairs among occupied columns.

        Unlike :meth:`is_valid` this tolerates empty columns: they contribute
        nothing. A full board has zero conflicts exactly when it is valid.
        """
        return conflicts_on2(self._queens)

    # Neighbourhood -------------------------------------------------------

    def successors(self) -> "SuccessorIterator":
        """Return a lazy iterator over every board obtained by moving one queen within its column."""
        from .successors import SuccessorIterator

        return SuccessorIterator(self)

    # Value semantics -----------------------------------------------------

    def copy(self) -> "Board":
        clone = Board.__new__(Board)
        clone._queens = list(self._queens)
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> "Board":
        return self.copy()

    def __len__(self) -> int:
        return len(self._queens)

    def __getitem__(self, column: int) -> int:
        return self.get(column)

    def __iter__(self) -> Iterator[Optional[int]]:
        return iter(list(self._queens))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._queens == other._queens

    def __hash__(self) -> int:
        return hash(tuple(self._queens))

    def __getstate__(self) -> Tuple[List[Optional[int]]]:
        return (self._queens,)

    def __setstate__(self, state: Tuple[Iterable[Optional[int]]]) -> None:
        self._queens = list(state[0])

    def __repr__(self) -> str:
        return f"Board({self._queens!r})"

    def render(self, queen: str = "Q", empty: str = ".") -> str:
        """Return an ASCII diagram of the board, row 0 on top.

        Example for ``Board.from_rows([1, 3, 0, 2])``::

            . . Q .
            Q . . .
            . . . Q
            . Q . .
        """
        lines: List[str] = []
        for row in range(len(self._queens)):
            cells = [queen if placed == row else empty for placed in self._queens]
            lines.append(" ".join(cells))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
