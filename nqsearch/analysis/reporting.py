"""CSV export utilities for experiment outputs (aggregates, raw runs, solutions).

These helpers materialize concise CSV summaries as well as full per-run raw
data for downstream analysis or spreadsheet inspection. Filenames carry the
optional run tag and datestamp configured in ``settings``.
"""
from __future__ import annotations

import csv
import os
from typing import List, Optional

from . import settings
from .stats import ExperimentResults, StatsSummary


def _detect_presence(results: ExperimentResults) -> tuple[bool, bool]:
    """Infer which solvers have actual data. Returns (has_hc, has_bf)."""
    has_hc = any(entry.get("total_runs", 0) > 0 for entry in results.get("HC", {}).values())
    has_bf = bool(results.get("BF"))
    return has_hc, has_bf


def build_suffix() -> str:
    """Build an optional filename suffix from ``RUN_TAG`` and the run datestamp.

    Returns an empty string if no suffixing is configured.
    """
    parts: List[str] = []
    run_tag = getattr(settings, "RUN_TAG", None)
    if run_tag:
        parts.append(str(run_tag))
    if getattr(settings, "DATE_IN_FILENAMES", False):
        run_id = getattr(settings, "RUN_ID", None)
        if run_id:
            parts.append(str(run_id))
    return ("_" + "_".join(parts)) if parts else ""


def _stat(summary: Optional[StatsSummary], key: str):
    value = (summary or {}).get(key)
    return "" if value is None else value


def save_results_to_csv(results: ExperimentResults, out_dir: str) -> str:
    """Write compact per-N aggregate metrics for HC and BF to CSV.

    Column names follow lowercase snake_case with solver prefixes:
    ``hc_*`` for hill climbing, ``bf_*`` for brute force. A size only run by
    one solver leaves the other solver's columns empty.

    Returns the path of the written file.
    """
    os.makedirs(out_dir, exist_ok=True)
    has_hc, has_bf = _detect_presence(results)
    label = "_".join(name for name, flag in (("HC", has_hc), ("BF", has_bf)) if flag) or "EMPTY"
    filename = os.path.join(out_dir, f"results_{label}{build_suffix()}.csv")

    hc_results = results.get("HC", {})
    bf_results = results.get("BF", {})
    sizes = sorted(set(hc_results) | set(bf_results))

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "hc_success_rate",
            "hc_timeout_rate",
            "hc_failure_rate",
            "hc_total_runs",
            "hc_successes",
            "hc_failures",
            "hc_timeouts",
            "hc_max_restarts",
            "hc_success_restarts_mean",
            "hc_success_restarts_median",
            "hc_success_steps_mean",
            "hc_success_steps_median",
            "hc_success_evals_mean",
            "hc_success_evals_median",
            "hc_success_time_mean",
            "hc_success_time_median",
            "hc_failure_best_conflicts_mean",
            "bf_solutions",
            "bf_permutations_checked",
            "bf_time_seconds",
        ])

        for N in sizes:
            hc = hc_results.get(N)
            bf = bf_results.get(N)
            row: list = [N]
            if hc is not None and hc.get("total_runs", 0) > 0:
                row += [
                    hc.get("success_rate", 0.0),
                    hc.get("timeout_rate", 0.0),
                    hc.get("failure_rate", 0.0),
                    hc.get("total_runs", 0),
                    hc.get("successes", 0),
                    hc.get("failures", 0),
                    hc.get("timeouts", 0),
                    hc.get("max_restarts", 0),
                    _stat(hc.get("success_restarts"), "mean"),
                    _stat(hc.get("success_restarts"), "median"),
                    _stat(hc.get("success_steps"), "mean"),
                    _stat(hc.get("success_steps"), "median"),
                    _stat(hc.get("success_evals"), "mean"),
                    _stat(hc.get("success_evals"), "median"),
                    _stat(hc.get("success_time"), "mean"),
                    _stat(hc.get("success_time"), "median"),
                    _stat(hc.get("failure_best_conflicts"), "mean"),
                ]
            else:
                row += [""] * 17
            if bf is not None:
                row += [bf["solutions"], bf["permutations"], bf["time"]]
            else:
                row += ["", "", ""]
            writer.writerow(row)

    print(f"CSV saved: {filename}")
    return filename


def save_raw_data_to_csv(results: ExperimentResults, out_dir: str) -> Optional[str]:
    """Write full per-run raw hill-climbing data to CSV.

    Returns the path of the written file, or None when no HC run exists.
    """
    has_hc, _ = _detect_presence(results)
    if not has_hc:
        return None
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_data_HC{build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "run_id",
            "algorithm",
            "success",
            "timeout",
            "restarts",
            "steps",
            "time_seconds",
            "evals",
            "best_conflicts",
            "solution",
        ])
        for N, hc_data in sorted(results["HC"].items()):
            for i, run in enumerate(hc_data.get("raw_runs", [])):
                solution = run.get("solution")
                writer.writerow([
                    N,
                    i + 1,
                    "HC",
                    run["success"],
                    run["timeout"],
                    run["restarts"],
                    run["steps"],
                    run["time"],
                    run["evals"],
                    run["best_conflicts"],
                    " ".join(str(r) for r in solution) if solution else "",
                ])

    print(f"Raw HC data saved: {filename}")
    return filename


def save_solutions_to_csv(results: ExperimentResults, out_dir: str) -> Optional[str]:
    """Write every brute-force solution as one row: ``n, solution_id, rows``.

    ``rows`` lists the row of each column, space separated.

    Returns the path of the written file, or None when brute force did not run.
    """
    _, has_bf = _detect_presence(results)
    if not has_bf:
        return None
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"solutions_BF{build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["n", "solution_id", "rows"])
        for N, bf_data in sorted(results["BF"].items()):
            for i, rows in enumerate(bf_data["boards"]):
                writer.writerow([N, i + 1, " ".join(str(r) for r in rows)])

    print(f"BF solutions saved: {filename}")
    return filename
