"""Exhaustive enumeration of N-Queens solutions.

Every permutation of ``range(size)`` places each row exactly once, so row and
column clashes are impossible and only diagonals remain to be filtered by
:meth:`nqsearch.board.Board.is_valid`. The cost is ``size!`` validity checks,
which limits this solver to small boards.

Parallel mode partitions the permutations by the row of column 0 and filters
each partition in a ``ProcessPoolExecutor`` worker. Workers only read their
own partition, so the result is identical to the sequential run.
"""

from __future__ import annotations

import itertools
from concurrent.futures import ProcessPoolExecutor
from time import perf_counter
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from .board import Board
from .errors import OutOfRange


PermutationSource = Callable[[Sequence[int]], Iterable[Sequence[int]]]

BFResult = Tuple[Set[Board], int, float]


def _valid_permutations(
    size: int,
    first_row: Optional[int],
    permutation_source: PermutationSource,
) -> Tuple[List[Tuple[int, ...]], int]:
    """Return ``(valid_rows, checked)`` for one partition of the permutations.

    With ``first_row`` set, only permutations starting with that row are
    enumerated; otherwise all of them are.
    """
    if first_row is None:
        prefix: Tuple[int, ...] = ()
        rest = list(range(size))
    else:
        prefix = (first_row,)
        rest = [row for row in range(size) if row != first_row]

    valid: List[Tuple[int, ...]] = []
    checked = 0
    for tail in permutation_source(rest):
        rows = prefix + tuple(tail)
        checked += 1
        if Board.from_rows(rows).is_valid():
            valid.append(rows)
    return valid, checked


def _partition_worker(args: Tuple[int, int, PermutationSource]) -> Tuple[List[Tuple[int, ...]], int]:
    """Worker wrapper to filter one first-row partition (for parallel mapping)."""
    size, first_row, permutation_source = args
    return _valid_permutations(size, first_row, permutation_source)


def _enumerate(
    size: int,
    workers: Optional[int],
    permutation_source: PermutationSource,
) -> Tuple[Set[Board], int]:
    if size < 0:
        raise OutOfRange("size", size, 0)
    if workers is None or workers <= 1 or size < 2:
        valid, checked = _valid_permutations(size, None, permutation_source)
        return {Board.from_rows(rows) for rows in valid}, checked

    tasks = [(size, first_row, permutation_source) for first_row in range(size)]
    solutions: Set[Board] = set()
    checked = 0
    with ProcessPoolExecutor(max_workers=workers) as executor:
        for valid, partition_checked in executor.map(_partition_worker, tasks):
            checked += partition_checked
            solutions.update(Board.from_rows(rows) for rows in valid)
    return solutions, checked


def brute_force_solutions(
    size: int,
    workers: Optional[int] = None,
    permutation_source: PermutationSource = itertools.permutations,
) -> Set[Board]:
    """Return every solution of the ``size``-queens problem.

    Parameters
    ----------
    size : int
        Board dimension N. Size 0 yields the single empty board.
    workers : int | None
        Number of worker processes; ``None`` or ``1`` runs sequentially.
    permutation_source : callable
        Produces every ordering of the given rows exactly once. Must be
        picklable (a module-level callable) when ``workers > 1``.

    Returns
    -------
    set[Board]
        Valid boards, in no particular order. Size 4 yields 2, size 5 yields 10.

    Raises
    ------
    OutOfRange
        If ``size`` is negative.
    """
    solutions, _ = _enumerate(size, workers, permutation_source)
    return solutions


def bf_nqueens(size: int, workers: Optional[int] = None) -> BFResult:
    """Run the brute-force solver and report its cost.

    Returns
    -------
    BFResult
        Tuple (solutions, permutations_checked, elapsed_seconds).
    """
    start = perf_counter()
    solutions, checked = _enumerate(size, workers, itertools.permutations)
    return solutions, checked, perf_counter() - start
