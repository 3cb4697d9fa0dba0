"""Typed result shapes and statistics helpers for the analysis pipeline.

Defines ``TypedDict`` structures for experiment outputs and provides utilities
to compute robust aggregate statistics across heterogeneous result records.
"""
from __future__ import annotations

import statistics
from typing import Any, Dict, List, Optional, TypedDict


METRICS: List[str] = ["time", "restarts", "steps", "evals", "best_conflicts"]


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class HCRecord(TypedDict):
    success: bool
    restarts: int
    steps: int
    time: float
    best_conflicts: int
    evals: int
    timeout: bool
    solution: Optional[List[int]]


class BFEntry(TypedDict):
    solutions: int
    permutations: int
    time: float
    boards: List[List[int]]


class HCResultEntry(TypedDict, total=False):
    success_rate: float
    timeout_rate: float
    failure_rate: float
    total_runs: int
    successes: int
    failures: int
    timeouts: int
    max_restarts: int
    success_time: StatsSummary
    success_restarts: StatsSummary
    success_steps: StatsSummary
    success_evals: StatsSummary
    timeout_time: StatsSummary
    timeout_best_conflicts: StatsSummary
    failure_time: StatsSummary
    failure_best_conflicts: StatsSummary
    all_time: StatsSummary
    all_restarts: StatsSummary
    all_steps: StatsSummary
    all_evals: StatsSummary
    all_best_conflicts: StatsSummary
    raw_runs: List[HCRecord]


class ExperimentResults(TypedDict):
    HC: Dict[int, HCResultEntry]
    BF: Dict[int, BFEntry]


class ProgressPrinter:
    """Print ``[label] i/total (pct%)`` lines while a batch of sizes is processed.

    ``total`` is clamped to at least 1 so an empty batch never divides by zero.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        """Report that item ``index`` of ``total`` is being processed.

        ``detail`` (e.g. ``"HC N=16"``) is appended after a dash when given.
        """
        line = f"[{self.label}] {index}/{self.total} ({100 * index / self.total:.0f}%)"
        if detail:
            line += f" - {detail}"
        print(line)


_EMPTY_SUMMARY_KEYS = ("mean", "median", "std", "min", "max", "q25", "q75", "range")


def _nearest_rank(sorted_vals: List[float], fraction: float) -> float:
    """Nearest-rank percentile of an already sorted, non-empty list."""
    return sorted_vals[min(len(sorted_vals) - 1, int(fraction * len(sorted_vals)))]


def compute_detailed_statistics(values: List[float], label: str = "") -> StatsSummary:
    """Summarize a list of per-run measurements.

    Parameters
    ----------
    values : List[float]
        Finite measurements (times, steps, restarts, ...).
    label : str, optional
        Name of the metric, kept for debugging only.

    Returns
    -------
    StatsSummary
        ``count`` plus mean, median, population std, min, max, range and
        nearest-rank quartiles (``q25``, ``q75``). Quartiles fall back to the
        extremes below four samples. An empty input gives ``count == 0`` and
        ``None`` everywhere else, so CSV rows keep their shape.
    """
    if not values:
        summary: Dict[str, Any] = {"count": 0}
        summary.update(dict.fromkeys(_EMPTY_SUMMARY_KEYS))
        return summary  # type: ignore[return-value]

    ordered = sorted(values)
    n = len(ordered)
    lo, hi = ordered[0], ordered[-1]
    return {
        "count": n,
        "mean": statistics.mean(ordered),
        "median": statistics.median(ordered),
        "std": statistics.pstdev(ordered) if n > 1 else 0,
        "min": lo,
        "max": hi,
        "q25": _nearest_rank(ordered, 0.25) if n >= 4 else lo,
        "q75": _nearest_rank(ordered, 0.75) if n >= 4 else hi,
        "range": hi - lo,
    }


def _split_runs(
    results_list: List[Dict[str, Any]], success_key: str
) -> Dict[str, List[Dict[str, Any]]]:
    """Partition runs into success, timeout and plain failure (no budget hit)."""
    groups: Dict[str, List[Dict[str, Any]]] = {"success": [], "timeout": [], "failure": []}
    for run in results_list:
        if run.get(success_key, False):
            groups["success"].append(run)
        elif run.get("timeout", False):
            groups["timeout"].append(run)
        else:
            groups["failure"].append(run)
    return groups


def compute_grouped_statistics(
    results_list: List[Dict[str, Any]], success_key: str = "success"
) -> Dict[str, Any]:
    """Aggregate hill-climbing runs by outcome.

    Returns counters (``total_runs``, ``successes``, ``failures``,
    ``timeouts``), the matching rates, and one ``<group>_<metric>`` summary
    per group in ``all``/``success``/``timeout``/``failure`` and metric in
    :data:`METRICS`. A metric that no run of a group reports is left out.
    """
    groups = _split_runs(results_list, success_key)
    total = len(results_list)

    stats: Dict[str, Any] = {
        "total_runs": total,
        "successes": len(groups["success"]),
        "failures": len(groups["failure"]),
        "timeouts": len(groups["timeout"]),
    }
    for group, key in (("success", "success_rate"), ("timeout", "timeout_rate"), ("failure", "failure_rate")):
        stats[key] = len(groups[group]) / total if total else 0

    groups["all"] = results_list
    for group in ("all", "success", "timeout", "failure"):
        runs = groups[group]
        for metric in METRICS:
            values = [run[metric] for run in runs if metric in run]
            if values:
                stats[f"{group}_{metric}"] = compute_detailed_statistics(values, f"{group}_{metric}")

    return stats
