"""Final experiment runners for HC/BF (sequential and parallel).

These routines execute repeatable batches of hill-climbing (HC) runs and
exhaustive brute-force (BF) enumerations for a set of board sizes.

Outputs are structured dictionaries suitable for CSV export and plotting.
Validation hooks optionally check solution correctness and consistency of
reported metrics.
"""
from __future__ import annotations

import random
from concurrent.futures import ProcessPoolExecutor
from time import perf_counter
from typing import Any, Dict, List, Optional, Tuple

from . import settings
from .stats import (
    BFEntry,
    ExperimentResults,
    HCRecord,
    HCResultEntry,
    ProgressPrinter,
    compute_grouped_statistics,
)
from nqsearch.board import Board
from nqsearch.brute_force import bf_nqueens
from nqsearch.errors import NoSolutionsExist
from nqsearch.hill_climbing import hc_nqueens
from nqsearch.utils import conflicts, is_valid_solution


# Number of distinct solutions for N = 1..10 (OEIS A000170).
KNOWN_SOLUTION_COUNTS: Dict[int, int] = {
    1: 1,
    2: 0,
    3: 0,
    4: 2,
    5: 10,
    6: 4,
    7: 40,
    8: 92,
    9: 352,
    10: 724,
}


# Reusable workers -----------------------------------------------------------

def run_seed(base_seed: Optional[int], run_index: int) -> Optional[int]:
    """Return the seed of run ``run_index`` (None keeps runs unseeded)."""
    if base_seed is None:
        return None
    return base_seed + run_index


def run_single_hc_experiment(params: Tuple[int, int, Optional[float], Optional[int]]) -> HCRecord:
    """Worker wrapper to invoke a single HC run (for parallel mapping).

    Each call owns its generator, so parallel workers never share random state.
    """
    N, max_restarts, time_limit, seed = params
    success, restarts, steps, elapsed, best_conflicts, evals, timeout, board = hc_nqueens(
        N, max_restarts=max_restarts, time_limit=time_limit, rng=random.Random(seed)
    )
    return {
        "success": success,
        "restarts": restarts,
        "steps": steps,
        "time": elapsed,
        "best_conflicts": best_conflicts,
        "evals": evals,
        "timeout": timeout,
        "solution": [int(row) for row in board.rows() if row is not None] if success and board is not None else None,
    }


def _summarize_hc(hc_runs: List[HCRecord], max_restarts: int) -> HCResultEntry:
    hc_stats = compute_grouped_statistics([dict(run) for run in hc_runs], "success")
    entry: Dict[str, Any] = {
        "success_rate": hc_stats["success_rate"],
        "timeout_rate": hc_stats["timeout_rate"],
        "failure_rate": hc_stats["failure_rate"],
        "total_runs": hc_stats["total_runs"],
        "successes": hc_stats["successes"],
        "failures": hc_stats["failures"],
        "timeouts": hc_stats["timeouts"],
        "max_restarts": max_restarts,
    }
    for key in (
        "success_time",
        "success_restarts",
        "success_steps",
        "success_evals",
        "timeout_time",
        "timeout_best_conflicts",
        "failure_time",
        "failure_best_conflicts",
        "all_time",
        "all_restarts",
        "all_steps",
        "all_evals",
        "all_best_conflicts",
    ):
        entry[key] = hc_stats.get(key, {})
    entry["raw_runs"] = list(hc_runs)
    return entry  # type: ignore[return-value]


def _empty_hc_entry(max_restarts: int) -> HCResultEntry:
    return _summarize_hc([], max_restarts)


def _validate_hc(N: int, hc_runs: List[HCRecord], parallel: bool = False) -> None:
    """Raise ``AssertionError`` when a run reports inconsistent metrics."""
    where = " (parallel)" if parallel else ""
    for idx, run in enumerate(hc_runs):
        if run["success"]:
            solution = run["solution"]
            if solution is None or not is_valid_solution(solution):
                raise AssertionError(f"Invalid HC solution produced{where} for N={N}, run {idx}: {solution}")
            if run["best_conflicts"] != 0 or run["timeout"]:
                raise AssertionError(
                    f"HC validation failed{where} for N={N}, run {idx}: success but "
                    f"best_conflicts={run['best_conflicts']}, timeout={run['timeout']}"
                )
            board = Board.from_rows(solution)
            if board.count_conflicts() != conflicts(solution):
                raise AssertionError(f"Conflict counters disagree{where} for N={N}, run {idx}: {solution}")
        elif run["best_conflicts"] <= 0:
            raise AssertionError(
                f"HC validation failed{where} for N={N}, run {idx}: failure with best_conflicts={run['best_conflicts']}"
            )


def _run_bf(N: int, workers: Optional[int], validate: bool) -> BFEntry:
    if N > settings.BF_MAX_N:
        raise ValueError(f"Brute force limited to N <= {settings.BF_MAX_N} (got N={N}).")
    solutions, checked, elapsed = bf_nqueens(N, workers=workers)
    if validate:
        for board in solutions:
            if not board.is_valid() or board.count_conflicts() != 0:
                raise AssertionError(f"Invalid BF solution for N={N}: {board!r}")
        expected = KNOWN_SOLUTION_COUNTS.get(N)
        if expected is not None and len(solutions) != expected:
            raise AssertionError(f"BF found {len(solutions)} solutions for N={N}, expected {expected}")
    boards = sorted([int(row) for row in board.rows() if row is not None] for board in solutions)
    return {"solutions": len(solutions), "permutations": checked, "time": elapsed, "boards": boards}


def _experiment_timed_out(start: float) -> bool:
    limit = settings.EXPERIMENT_TIMEOUT
    return limit is not None and (perf_counter() - start) > limit


# Sequential runner ----------------------------------------------------------

def run_experiments(
    N_values: List[int],
    bf_N_values: List[int],
    runs_hc: int,
    max_restarts: int,
    hc_time_limit: Optional[float] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    include_hc: bool = True,
    include_bf: bool = True,
    seed: Optional[int] = None,
) -> ExperimentResults:
    """Run sequential final experiments.

    For each N in ``N_values``, ``runs_hc`` hill-climbing runs with up to
    ``max_restarts`` random restarts each. For each N in ``bf_N_values``, one
    exhaustive enumeration (deterministic, so one run is sufficient).
    """
    results: Any = {"HC": {}, "BF": {}}
    start = perf_counter()

    if include_hc:
        progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None
        try:
            for index, N in enumerate(N_values, start=1):
                if _experiment_timed_out(start):
                    print(f"Experiment timeout reached; skipping HC for N >= {N}.")
                    break
                if progress:
                    progress.update(index, f"HC N={N}")
                print(f"=== (Final) N = {N}, HC x{runs_hc} ===")

                hc_runs: List[HCRecord] = []
                try:
                    for run_index in range(runs_hc):
                        hc_runs.append(
                            run_single_hc_experiment((N, max_restarts, hc_time_limit, run_seed(seed, run_index)))
                        )
                except NoSolutionsExist:
                    print(f"  N={N}: no solutions exist, skipping hill climbing.")
                    results["HC"][N] = _empty_hc_entry(max_restarts)
                    continue

                if validate:
                    _validate_hc(N, hc_runs)
                results["HC"][N] = _summarize_hc(hc_runs, max_restarts)
        except KeyboardInterrupt:
            print("\nInterrupted by user (sequential). Returning partial results...")
            return results

    if include_bf:
        progress = ProgressPrinter(len(bf_N_values), progress_label) if progress_label else None
        for index, N in enumerate(bf_N_values, start=1):
            if _experiment_timed_out(start):
                print(f"Experiment timeout reached; skipping BF for N >= {N}.")
                break
            if progress:
                progress.update(index, f"BF N={N}")
            print(f"=== (Final) N = {N}, BF ===")
            results["BF"][N] = _run_bf(N, None, validate)

    return results


# Parallel runner ------------------------------------------------------------

def run_experiments_parallel(
    N_values: List[int],
    bf_N_values: List[int],
    runs_hc: int,
    max_restarts: int,
    hc_time_limit: Optional[float] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    include_hc: bool = True,
    include_bf: bool = True,
    seed: Optional[int] = None,
    workers: Optional[int] = None,
) -> ExperimentResults:
    """Parallel version of final experiments using process pools.

    HC runs are distributed across ``workers`` processes (default
    ``settings.NUM_PROCESSES``); BF partitions its permutations the same way.
    With a fixed ``seed`` the results match the sequential runner's, up to
    wall-clock times.
    """
    results: Any = {"HC": {}, "BF": {}}
    workers = workers or settings.NUM_PROCESSES
    start = perf_counter()

    if include_hc:
        progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None
        try:
            for index, N in enumerate(N_values, start=1):
                if _experiment_timed_out(start):
                    print(f"Experiment timeout reached; skipping HC for N >= {N}.")
                    break
                if progress:
                    progress.update(index, f"HC N={N}")
                print(f"=== (Final Parallel) N = {N}, HC x{runs_hc} ===")
                print(f"  Running {runs_hc} HC runs on {workers} workers...")

                hc_params = [(N, max_restarts, hc_time_limit, run_seed(seed, i)) for i in range(runs_hc)]
                try:
                    with ProcessPoolExecutor(max_workers=workers) as executor:
                        hc_runs: List[HCRecord] = list(executor.map(run_single_hc_experiment, hc_params))
                except NoSolutionsExist:
                    print(f"  N={N}: no solutions exist, skipping hill climbing.")
                    results["HC"][N] = _empty_hc_entry(max_restarts)
                    continue

                if validate:
                    _validate_hc(N, hc_runs, parallel=True)
                results["HC"][N] = _summarize_hc(hc_runs, max_restarts)
        except KeyboardInterrupt:
            print("\nInterrupted by user (parallel). Returning partial results...")
            return results

    if include_bf:
        progress = ProgressPrinter(len(bf_N_values), progress_label) if progress_label else None
        for index, N in enumerate(bf_N_values, start=1):
            if _experiment_timed_out(start):
                print(f"Experiment timeout reached; skipping BF for N >= {N}.")
                break
            if progress:
                progress.update(index, f"BF N={N}")
            print(f"=== (Final Parallel) N = {N}, BF ===")
            results["BF"][N] = _run_bf(N, workers, validate)

    return results
