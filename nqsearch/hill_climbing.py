"""Steepest-ascent hill climbing for the N-Queens problem.

The search starts from a random full board (one queen per column, rows drawn
independently) and repeatedly moves to the best successor, i.e. the board
with the fewest conflicting pairs among all one-queen moves (see
:mod:`nqsearch.successors`).

Contract (public API)
---------------------
- :func:`hill_climbing_solution`: a single climb from a random start. Returns
  the solved :class:`~nqsearch.board.Board` or raises
  :class:`~nqsearch.errors.NoSolutionsExist` (sizes 2 and 3) or
  :class:`~nqsearch.errors.SolutionNotFound` (stuck).
- :func:`climb`: the descent itself from a caller-provided board, reporting
  steps and evaluations in a :class:`ClimbResult`.
- :func:`hc_nqueens`: random-restart wrapper returning an ``HCResult`` tuple
    (success, restarts, steps, elapsed_seconds, best_conflicts, evaluations,
    timeout, board)

Where:
- success: True when a conflict-free board was found.
- restarts: random restarts performed after the first climb.
- steps: accepted moves summed over all climbs.
- elapsed_seconds: wall time measured via ``perf_counter()``.
- best_conflicts: lowest conflict count reached by any climb.
- evaluations: conflict counts computed, start boards included.
- timeout: True when ended due to ``time_limit``.
- board: the solution, or the best local minimum seen.

Termination rule
----------------
A move is taken only when the best successor has **strictly** fewer conflicts
than the current board. Sideways moves are never made, so the climb always
terminates; the price is that solutions reachable only across a plateau are
missed and the caller has to restart.

Tie-breaking
------------
Among equally good successors the first one in enumeration order wins
(lowest column, then lowest row).

Determinism
-----------
Pass a seeded ``random.Random`` as ``rng`` for reproducible runs.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from operator import itemgetter
from time import perf_counter
from typing import Optional, Tuple

from .board import Board
from .errors import NoSolutionsExist, SolutionNotFound
from .utils import resolve_rng


HCResult = Tuple[bool, int, int, float, int, int, bool, Optional[Board]]


@dataclass
class ClimbResult:
    """Outcome of a single descent started by :func:`climb`."""

    board: Board
    conflicts: int
    steps: int
    evaluations: int

    @property
    def success(self) -> bool:
        return self.conflicts == 0


def climb(start: Board) -> ClimbResult:
    """Run steepest descent on conflicts from ``start`` until no strict improvement exists.

    ``start`` is not modified. The returned board is either conflict-free or a
    local minimum/plateau: every successor has at least as many conflicts.
    """
    current = start.copy()
    current_conflicts = current.count_conflicts()
    evaluations = 1
    steps = 0

    while current_conflicts != 0:
        scored = ((successor, successor.count_conflicts()) for successor in current.successors())
        # min() keeps the first minimum, which gives the enumeration-order tie-break.
        best = min(scored, key=itemgetter(1), default=None)
        evaluations += current.occupied_count() * (current.size - 1)
        if best is None or best[1] >= current_conflicts:
            break
        current, current_conflicts = best
        steps += 1

    return ClimbResult(current, current_conflicts, steps, evaluations)


def hill_climbing_solution(size: int, rng: Optional[random.Random] = None) -> Board:
    """Find one N-Queens solution by hill climbing from a random board.

    Parameters
    ----------
    size : int
        Board dimension N.
    rng : random.Random | None
        Source of the random start.

    Returns
    -------
    Board
        A zero-conflict board. For ``size < 2`` this is the trivial random
        board (no pair of queens can conflict).

    Raises
    ------
    NoSolutionsExist
        For sizes 2 and 3, without searching.
    SolutionNotFound
        When the climb stops on a local minimum or plateau. Retry with a
        fresh start (see :func:`hc_nqueens`).
    """
    current = Board.random(size, rng)
    if size < 2:
        return current
    if size in (2, 3):
        raise NoSolutionsExist(size)

    result = climb(current)
    if not result.success:
        raise SolutionNotFound(result.board, result.conflicts)
    return result.board


def hc_nqueens(
    size: int,
    max_restarts: int = 100,
    time_limit: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> HCResult:
    """Run hill climbing with random restarts until a solution or a budget limit.

    Parameters
    ----------
    size : int
        Board dimension N.
    max_restarts : int, default 100
        Fresh random starts allowed after the first climb fails.
    time_limit : float | None
        Optional wall-clock limit in seconds, checked before every restart.
    rng : random.Random | None
        Generator shared by all restarts of this run.

    Returns
    -------
    HCResult
        Tuple (success, restarts, steps, elapsed, best_conflicts, evaluations,
        timeout, board).

    Raises
    ------
    NoSolutionsExist
        For sizes 2 and 3.
    """
    generator = resolve_rng(rng)
    start = perf_counter()

    if size < 2:
        return True, 0, 0, perf_counter() - start, 0, 1, False, Board.random(size, generator)
    if size in (2, 3):
        raise NoSolutionsExist(size)

    total_steps = 0
    evaluations = 0
    best: Optional[ClimbResult] = None

    for attempt in range(max_restarts + 1):
        if attempt > 0 and time_limit is not None and (perf_counter() - start) > time_limit:
            assert best is not None
            return False, attempt - 1, total_steps, perf_counter() - start, best.conflicts, evaluations, True, best.board

        result = climb(Board.random(size, generator))
        total_steps += result.steps
        evaluations += result.evaluations
        if best is None or result.conflicts < best.conflicts:
            best = result

        if result.success:
            return True, attempt, total_steps, perf_counter() - start, 0, evaluations, False, result.board

    assert best is not None
    return False, max_restarts, total_steps, perf_counter() - start, best.conflicts, evaluations, False, best.board
