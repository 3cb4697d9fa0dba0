"""Exception taxonomy for the N-Queens solvers.

Two families live here:

- Board contract violations (``OutOfRange``, ``Unoccupied``). These are raised
  by constructors, accessors and mutators of :class:`nqsearch.board.Board` and
  are never recovered internally.
- Search outcomes (``NoSolutionsExist``, ``SolutionNotFound``) reported by the
  hill-climbing solver. The first is a structural fact about sizes 2 and 3,
  the second an expected, retryable local-minimum outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .board import Board


class NQueensError(Exception):
    """Base class for every error raised by :mod:`nqsearch`."""


class OutOfRange(NQueensError, IndexError):
    """A column or row index lies outside ``[0, size)``."""

    def __init__(self, what: str, value: int, size: int):
        self.what = what
        self.value = value
        self.size = size
        super().__init__(f"{what} {value} out of range for board of size {size}")


class Unoccupied(NQueensError, LookupError):
    """Non-optional read of a column that holds no queen."""

    def __init__(self, column: int):
        self.column = column
        super().__init__(f"column {column} has no queen")


class HillClimbingError(NQueensError):
    """Base class for hill-climbing outcomes that are not a solution."""


class NoSolutionsExist(HillClimbingError):
    """Raised for board sizes 2 and 3, which admit no solution at all."""

    def __init__(self, size: int):
        self.size = size
        super().__init__(f"no N-Queens solution exists for size {size}")


class SolutionNotFound(HillClimbingError):
    """The search stopped on a local minimum or plateau.

    ``board`` is the configuration where the descent stopped and
    ``conflicts`` its conflict count. Callers retry with a fresh random start.
    """

    def __init__(self, board: Optional["Board"] = None, conflicts: int = 0):
        self.board = board
        self.conflicts = conflicts
        super().__init__(f"hill climbing stuck with {conflicts} conflicting pair(s)")
