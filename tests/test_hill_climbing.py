"""Tests for steepest-descent hill climbing and the random-restart wrapper."""

from pathlib import Path
import random
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nqsearch.board import Board
from nqsearch.errors import HillClimbingError, NoSolutionsExist, SolutionNotFound
from nqsearch.hill_climbing import climb, hc_nqueens, hill_climbing_solution


class HillClimbingSolutionTests(unittest.TestCase):

    def test_trivial_sizes(self):
        self.assertEqual(hill_climbing_solution(0).size, 0)
        board = hill_climbing_solution(1, random.Random(1))
        self.assertEqual(board.rows(), [0])
        self.assertTrue(board.is_valid())

    def test_sizes_without_solutions(self):
        for size in (2, 3):
            with self.assertRaises(NoSolutionsExist) as ctx:
                hill_climbing_solution(size, random.Random(0))
            self.assertEqual(ctx.exception.size, size)
            self.assertIsInstance(ctx.exception, HillClimbingError)

    def test_solutions_are_valid_and_failures_are_local_minima(self):
        solved = 0
        stuck = 0
        for seed in range(60):
            try:
                board = hill_climbing_solution(8, random.Random(seed))
            except SolutionNotFound as exc:
                stuck += 1
                self.assertIsNotNone(exc.board)
                self.assertGreater(exc.conflicts, 0)
                self.assertEqual(exc.board.count_conflicts(), exc.conflicts)
                best = min(s.count_conflicts() for s in exc.board.successors())
                self.assertGreaterEqual(best, exc.conflicts)
            else:
                solved += 1
                self.assertEqual(board.size, 8)
                self.assertTrue(board.is_valid())
        self.assertGreater(solved, 0)
        self.assertGreater(stuck, 0)

    def test_seeded_runs_are_reproducible(self):
        def outcome(seed):
            try:
                return hill_climbing_solution(8, random.Random(seed)).rows()
            except SolutionNotFound as exc:
                return exc.board.rows()

        for seed in (3, 17, 99):
            self.assertEqual(outcome(seed), outcome(seed))


class ClimbTests(unittest.TestCase):

    def test_start_board_is_not_modified(self):
        start = Board.random(8, random.Random(4))
        before = start.copy()
        climb(start)
        self.assertEqual(start, before)

    def test_solution_start_takes_no_steps(self):
        result = climb(Board.from_rows([1, 3, 0, 2]))
        self.assertTrue(result.success)
        self.assertEqual(result.steps, 0)
        self.assertEqual(result.evaluations, 1)

    def test_plateau_stops(self):
        # Two conflicts, and the best one-queen move also leaves two.
        start = Board.from_rows([6, 3, 5, 2, 1, 6, 4, 7])
        self.assertEqual(min(s.count_conflicts() for s in start.successors()), 2)
        result = climb(start)
        self.assertEqual(result.steps, 0)
        self.assertEqual(result.conflicts, 2)
        self.assertFalse(result.success)
        self.assertEqual(result.board, start)
        self.assertEqual(result.evaluations, 1 + 8 * 7)

    def test_each_step_strictly_improves(self):
        start = Board.random(10, random.Random(12))
        result = climb(start)
        self.assertLessEqual(result.conflicts, start.count_conflicts())
        if result.steps:
            self.assertLess(result.conflicts, start.count_conflicts())
        self.assertLessEqual(result.steps, start.count_conflicts())
        self.assertEqual(result.board.count_conflicts(), result.conflicts)

    def test_evaluation_count(self):
        n = 8
        per_step = n * (n - 1)
        for seed in range(20):
            result = climb(Board.random(n, random.Random(seed)))
            scans = result.steps if result.success else result.steps + 1
            self.assertEqual(result.evaluations, 1 + scans * per_step)


class HcNQueensTests(unittest.TestCase):

    def test_result_tuple(self):
        success, restarts, steps, elapsed, best_conflicts, evals, timeout, board = hc_nqueens(
            8, max_restarts=500, rng=random.Random(42)
        )
        self.assertTrue(success)
        self.assertFalse(timeout)
        self.assertEqual(best_conflicts, 0)
        self.assertTrue(board.is_valid())
        self.assertGreaterEqual(restarts, 0)
        self.assertLessEqual(restarts, 500)
        self.assertGreaterEqual(steps, 0)
        self.assertGreaterEqual(elapsed, 0.0)
        self.assertGreater(evals, 0)

    def test_trivial_and_impossible_sizes(self):
        for size in (0, 1):
            success, restarts, steps, _, best_conflicts, evals, timeout, board = hc_nqueens(size)
            self.assertTrue(success)
            self.assertEqual((restarts, steps, best_conflicts, evals, timeout), (0, 0, 0, 1, False))
            self.assertEqual(board.size, size)
        for size in (2, 3):
            with self.assertRaises(NoSolutionsExist):
                hc_nqueens(size)

    def test_no_restarts_matches_single_climb(self):
        for seed in range(30):
            single = climb(Board.random(8, random.Random(seed)))
            success, restarts, steps, _, best_conflicts, evals, timeout, board = hc_nqueens(
                8, max_restarts=0, rng=random.Random(seed)
            )
            self.assertEqual(success, single.success)
            self.assertEqual(restarts, 0)
            self.assertEqual(steps, single.steps)
            self.assertEqual(best_conflicts, single.conflicts)
            self.assertEqual(evals, single.evaluations)
            self.assertEqual(board, single.board)
            self.assertFalse(timeout)

    def test_reproducible_with_seed(self):
        first = hc_nqueens(10, max_restarts=200, rng=random.Random(2024))
        second = hc_nqueens(10, max_restarts=200, rng=random.Random(2024))
        # Everything but the wall-clock time must match.
        self.assertEqual(first[:3] + first[4:], second[:3] + second[4:])

    def test_time_limit_stops_restarts(self):
        success, restarts, _, _, best_conflicts, _, timeout, board = hc_nqueens(
            16, max_restarts=10**6, time_limit=0.0, rng=random.Random(5)
        )
        if success:
            self.assertFalse(timeout)
        else:
            self.assertTrue(timeout)
            self.assertEqual(restarts, 0)
            self.assertGreater(best_conflicts, 0)
            self.assertEqual(board.count_conflicts(), best_conflicts)


if __name__ == "__main__":
    unittest.main()
