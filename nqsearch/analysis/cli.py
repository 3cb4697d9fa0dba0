"""Command-line interface and high-level pipelines for N-Queens search.

This module wires together configuration loading, one-off solving, and
execution of the experiment suites (sequential or parallel). It isolates I/O,
argument parsing, and progress reporting from the core algorithmic modules so
that the rest of the codebase remains easy to test programmatically.
"""
from __future__ import annotations

import argparse
import os
import random
import tempfile
from pathlib import Path
from time import perf_counter
from typing import List, Optional

from . import settings
from .experiments import KNOWN_SOLUTION_COUNTS, run_experiments, run_experiments_parallel
from .plots import plot_and_save
from .reporting import save_raw_data_to_csv, save_results_to_csv, save_solutions_to_csv
from .stats import ExperimentResults
from config_manager import ConfigManager
from nqsearch.brute_force import bf_nqueens
from nqsearch.errors import NoSolutionsExist, NQueensError
from nqsearch.hill_climbing import hc_nqueens


# ------------- Utils --------------------------------------------------------

def parse_algorithm_filters(alg_args: Optional[List[str]]):
    """Normalize algorithm filter CLI inputs into a list of labels.

    Accepts repeated flags and comma-separated lists. Valid values: HC, BF.
    Returns None when no filter is provided (meaning all are enabled).
    """
    if not alg_args:
        return None
    selected: List[str] = []
    valid = {"HC", "BF"}
    for entry in alg_args:
        for token in entry.split(","):
            token = token.strip().upper()
            if token:
                if token not in valid:
                    raise ValueError(f"Unknown algorithm '{token}'. Allowed: HC, BF")
                selected.append(token)
    unique = list(dict.fromkeys(selected))  # preserve order, remove dups
    return unique or None


def apply_configuration(config_path: str) -> ConfigManager:
    """Load configuration and copy its values into ``settings``.

    Missing sections or keys keep the defaults already in ``settings``.
    """
    config_mgr = ConfigManager(config_path)

    experiment_settings = config_mgr.get_experiment_settings()
    if experiment_settings:
        settings.N_VALUES = [int(n) for n in experiment_settings.get("N_values", settings.N_VALUES)]
        settings.BF_N_VALUES = [int(n) for n in experiment_settings.get("bf_N_values", settings.BF_N_VALUES)]
        settings.RUNS_HC_FINAL = int(experiment_settings.get("runs_hc_final", settings.RUNS_HC_FINAL))
        settings.HC_MAX_RESTARTS = int(experiment_settings.get("hc_max_restarts", settings.HC_MAX_RESTARTS))
        seed = experiment_settings.get("seed", settings.SEED)
        settings.SEED = int(seed) if seed is not None else None
        settings.OUT_DIR = experiment_settings.get("output_dir", settings.OUT_DIR)
        settings.RUN_TAG = experiment_settings.get("run_tag", settings.RUN_TAG)

    timeout_settings = config_mgr.get_timeout_settings()
    if timeout_settings:
        settings.set_timeouts(
            hc_timeout=timeout_settings.get("hc_time_limit", settings.HC_TIME_LIMIT),
            experiment_timeout=timeout_settings.get("experiment_timeout", settings.EXPERIMENT_TIMEOUT),
        )

    parallel_settings = config_mgr.get_parallel_settings()
    workers = parallel_settings.get("workers") if parallel_settings else None
    if workers:
        settings.NUM_PROCESSES = max(1, int(workers))

    return config_mgr


# ------------- Solve mode ---------------------------------------------------

def solve(
    size: int,
    solver: str = "hc",
    seed: Optional[int] = None,
    max_restarts: int = 100,
    workers: Optional[int] = None,
    show: bool = False,
    time_limit: Optional[float] = None,
) -> int:
    """Solve one board size and print the outcome. Returns a process exit code.

    Exit codes: 0 on success, 2 when hill climbing exhausts its restarts, and
    2 when no solution exists for ``size``.
    """
    rng = random.Random(seed)

    if solver == "bf":
        if size > settings.BF_MAX_N:
            raise ValueError(f"Brute force limited to N <= {settings.BF_MAX_N} (got N={size}).")
        solutions, checked, elapsed = bf_nqueens(size, workers=workers)
        print(f"Brute force N={size}: {len(solutions)} solution(s), {checked} permutations checked in {elapsed:.4f}s")
        for board in sorted(solutions, key=lambda b: b.rows()):
            print(f"  {board.rows()}")
            if show:
                print(board.render())
                print()
        return 0 if solutions else 2

    try:
        success, restarts, steps, elapsed, best_conflicts, evals, timeout, board = hc_nqueens(
            size, max_restarts=max_restarts, time_limit=time_limit, rng=rng
        )
    except NoSolutionsExist as exc:
        print(f"Hill climbing N={size}: {exc}")
        return 2

    if success:
        print(
            f"Hill climbing N={size}: solved after {restarts} restart(s), {steps} step(s), "
            f"{evals} evaluations in {elapsed:.4f}s"
        )
    else:
        reason = "time limit reached" if timeout else f"{max_restarts} restarts exhausted"
        print(f"Hill climbing N={size}: no solution ({reason}); best board has {best_conflicts} conflict(s)")
    if board is not None:
        print(f"  {board.rows()}")
        if show:
            print(board.render())
    return 0 if success else 2


# ------------- Pipelines ----------------------------------------------------

def _export(results: ExperimentResults, plots: bool) -> None:
    save_results_to_csv(results, settings.OUT_DIR)
    save_raw_data_to_csv(results, settings.OUT_DIR)
    save_solutions_to_csv(results, settings.OUT_DIR)
    if plots:
        plot_and_save(results, settings.OUT_DIR)


def main_sequential(
    algorithms: Optional[List[str]] = None,
    validate: bool = False,
    plots: bool = True,
) -> ExperimentResults:
    """Run the final experiments one run at a time and export CSVs and charts.

    Suitable when parallel resources are limited or when deterministic ordering
    is preferred for debugging and reproducibility of I/O.
    """
    settings.CURRENT_PIPELINE_MODE = "sequential"
    os.makedirs(settings.OUT_DIR, exist_ok=True)
    include_hc = (algorithms is None) or ("HC" in algorithms)
    include_bf = (algorithms is None) or ("BF" in algorithms)

    print("\n============================================")
    print("SEQUENTIAL PIPELINE")
    print("============================================")
    start = perf_counter()
    results = run_experiments(
        settings.N_VALUES,
        settings.BF_N_VALUES,
        runs_hc=settings.RUNS_HC_FINAL,
        max_restarts=settings.HC_MAX_RESTARTS,
        hc_time_limit=settings.HC_TIME_LIMIT,
        progress_label="Experiments",
        validate=validate,
        include_hc=include_hc,
        include_bf=include_bf,
        seed=settings.SEED,
    )
    _export(results, plots)
    print(f"\nSequential pipeline completed in {perf_counter() - start:.1f}s.")
    return results


def main_parallel(
    algorithms: Optional[List[str]] = None,
    validate: bool = False,
    plots: bool = True,
) -> ExperimentResults:
    """Run the final experiments across ``settings.NUM_PROCESSES`` workers."""
    settings.CURRENT_PIPELINE_MODE = "parallel"
    os.makedirs(settings.OUT_DIR, exist_ok=True)
    include_hc = (algorithms is None) or ("HC" in algorithms)
    include_bf = (algorithms is None) or ("BF" in algorithms)

    print("\n============================================")
    print(f"PARALLEL PIPELINE ({settings.NUM_PROCESSES} workers)")
    print("============================================")
    start = perf_counter()
    results = run_experiments_parallel(
        settings.N_VALUES,
        settings.BF_N_VALUES,
        runs_hc=settings.RUNS_HC_FINAL,
        max_restarts=settings.HC_MAX_RESTARTS,
        hc_time_limit=settings.HC_TIME_LIMIT,
        progress_label="Experiments (parallel)",
        validate=validate,
        include_hc=include_hc,
        include_bf=include_bf,
        seed=settings.SEED,
        workers=settings.NUM_PROCESSES,
    )
    _export(results, plots)
    print(f"\nParallel pipeline completed in {perf_counter() - start:.1f}s.")
    return results


# ------------- Quick regression -------------------------------------------

def run_quick_regression_tests() -> None:
    """Execute a fast, deterministic smoke test for HC and BF.

    Verifies that:
    - Seeded hill climbing with restarts solves N=8 and returns a valid board.
    - Brute force reproduces the known solution counts for N=4..6.
    - The experiment pipeline produces a non-empty CSV in a temporary folder.
    """
    print("Running quick regression tests (HC N=8, BF N=4..6)...")

    success, restarts, steps, elapsed, _, _, timeout, board = hc_nqueens(
        8, max_restarts=200, time_limit=10.0, rng=random.Random(42)
    )
    if not success or timeout or board is None:
        raise AssertionError("Hill climbing did not succeed for N=8 with deterministic seed.")
    if not board.is_valid() or board.count_conflicts() != 0:
        raise AssertionError(f"Hill climbing returned an invalid board for N=8: {board!r}")
    print(f"  [HC] N=8: solved after {restarts} restart(s), {steps} step(s) in {elapsed:.4f}s")

    for N in (4, 5, 6):
        solutions, checked, elapsed = bf_nqueens(N)
        if len(solutions) != KNOWN_SOLUTION_COUNTS[N]:
            raise AssertionError(f"Brute force found {len(solutions)} solutions for N={N}, expected {KNOWN_SOLUTION_COUNTS[N]}.")
        print(f"  [BF] N={N}: {len(solutions)} solutions from {checked} permutations in {elapsed:.4f}s")

    results = run_experiments(
        [8],
        [5],
        runs_hc=3,
        max_restarts=200,
        hc_time_limit=10.0,
        progress_label="Quick regression experiments",
        validate=True,
        seed=7,
    )

    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(save_results_to_csv(results, tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Results CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser():
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Solve N-Queens and run hill-climbing/brute-force experiment pipelines.")
    parser.add_argument("--solve", type=int, metavar="N", help="Solve a single board of size N and exit.")
    parser.add_argument(
        "--solver",
        choices=["hc", "bf"],
        default="hc",
        help="Solver for --solve: hill climbing with restarts (default) or brute force.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible hill climbing.")
    parser.add_argument("--max-restarts", type=int, default=None, help="Random restarts allowed after the first climb (default from settings).")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes for brute force and parallel experiments.")
    parser.add_argument("--show", action="store_true", help="Print an ASCII diagram of each board found.")
    parser.add_argument(
        "--mode",
        choices=["sequential", "parallel"],
        default="parallel",
        help="Experiment execution mode (default: parallel).",
    )
    parser.add_argument(
        "--alg",
        "-a",
        action="append",
        help="Filter algorithms to execute: HC, BF (comma-separated or multiple flags). Default: all.",
    )
    parser.add_argument("--config", default="config.json", help="Path to configuration file (default: config.json).")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests and exit.")
    parser.add_argument("--validate", action="store_true", help="Validate solutions and run consistency checks on results (extra assertions).")
    parser.add_argument("--no-plots", action="store_true", help="Skip chart generation.")
    parser.add_argument("--tag", default=None, help="Label appended to output filenames (overrides run_tag from the config).")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to solve mode or a pipeline."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.quick_test:
        run_quick_regression_tests()
        return

    if args.solve is not None:
        max_restarts = args.max_restarts if args.max_restarts is not None else settings.HC_MAX_RESTARTS
        try:
            code = solve(
                args.solve,
                solver=args.solver,
                seed=args.seed,
                max_restarts=max_restarts,
                workers=args.workers,
                show=args.show,
                time_limit=settings.HC_TIME_LIMIT,
            )
        except KeyboardInterrupt:
            print("\nSolve interrupted by user.")
            raise SystemExit(130) from None
        except (NQueensError, ValueError) as exc:
            print(f"Solve error: {exc}")
            raise SystemExit(1) from exc
        raise SystemExit(code)

    try:
        alg_filter = parse_algorithm_filters(args.alg)
        apply_configuration(args.config)
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    if args.seed is not None:
        settings.SEED = args.seed
    if args.max_restarts is not None:
        settings.HC_MAX_RESTARTS = args.max_restarts
    if args.workers is not None:
        settings.NUM_PROCESSES = max(1, args.workers)
    if args.tag:
        settings.RUN_TAG = args.tag

    try:
        if args.mode == "sequential":
            main_sequential(alg_filter, validate=args.validate, plots=not args.no_plots)
        else:
            main_parallel(alg_filter, validate=args.validate, plots=not args.no_plots)
    except KeyboardInterrupt:
        print("\nExecution interrupted by user. Cleaning up workers...")
        raise SystemExit(130) from None
    except (NQueensError, ValueError) as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
