"""Utility helpers for the N-Queens project.

This module provides reusable, low-level primitives that the board model and
the solvers depend upon. In particular, it includes two implementations to
count the number of conflicting queen pairs in a given configuration.

Representation
--------------
Boards are encoded as a 1D sequence where ``board[col] = row``. ``None`` marks
a column without a queen; such columns never take part in a conflict.
"""

from __future__ import annotations

import random
from collections import Counter
from typing import Optional, Sequence


def attacks(column_a: int, row_a: int, column_b: int, row_b: int) -> bool:
    """Return True if queens at ``(row_a, column_a)`` and ``(row_b, column_b)`` attack each other.

    Queens on the same rising diagonal share ``column - row``; queens on the
    same falling diagonal share ``column + row``. Columns are assumed distinct.
    """
    return (
        row_a == row_b
        or column_a + row_a == column_b + row_b
        or column_a - row_a == column_b - row_b
    )


def conflicts(board: Sequence[Optional[int]]) -> int:
    """Compute the number of conflicting queen pairs in O(N).

    Uses hash maps to count occurrences per row and diagonals and reduce the
    computation from O(N^2) to O(N). Empty columns (``None``) are skipped.
    """
    row_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for column, row in enumerate(board):
        if row is None:
            continue
        row_count[row] += 1
        diag1[row - column] += 1
        diag2[row + column] += 1

    def _pairs(counter: Counter[int]) -> int:
        total = 0
        for count in counter.values():
            if count > 1:
                total += count * (count - 1) // 2
        return total

    return _pairs(row_count) + _pairs(diag1) + _pairs(diag2)


def conflicts_on2(board: Sequence[Optional[int]]) -> int:
    """Compute the number of conflicting queen pairs in O(N^2).

    Every unordered pair ``i < j`` of occupied columns is examined once and
    contributes 1 when the queens attack each other. This is the reference
    definition used by :meth:`nqsearch.board.Board.count_conflicts`.
    """
    occupied = [(column, row) for column, row in enumerate(board) if row is not None]
    conflicts_count = 0
    for index, (i, row_i) in enumerate(occupied):
        for j, row_j in occupied[index + 1:]:
            if attacks(i, row_i, j, row_j):
                conflicts_count += 1
    return conflicts_count


def is_valid_solution(board: Sequence[Optional[int]]) -> bool:
    """Return True if the sequence represents a valid N-Queens solution.

    Contract
    - Input: sequence of length N where board[col] = row (0-based indices)
    - Valid if: every column holds a row in [0, N) and no pairs attack
    - Implementation: range check + conflicts(board) == 0
    """
    n = len(board)
    for row in board:
        if not isinstance(row, int):
            return False
        if row < 0 or row >= n:
            return False
    return conflicts(board) == 0


def resolve_rng(rng: Optional[random.Random] = None) -> random.Random:
    """Return ``rng`` unchanged, or a fresh generator seeded from system entropy."""
    if rng is None:
        return random.Random()
    return rng
