"""Visualization utilities for analysis outputs.

Overview
--------
This module contains plotting helpers that generate PNG charts from the
aggregated experiment results produced by the analysis pipeline.

Inputs and data contract
------------------------
- The primary input is an ``ExperimentResults`` mapping with two top-level
    keys, ``"HC"`` and ``"BF"``, each containing per-N aggregates.
- The x-axis of every chart is the sorted set of N values present for the
    solver being plotted.

Outputs and naming
------------------
- Charts are written as PNG files into ``out_dir``. Filenames are prefixed by a
    two-digit index where applicable for stable ordering and include the
    optional run tag and datestamp configured in ``nqsearch.analysis.settings``.

Chart map
---------
- 01_success_rate_vs_N.png: HC success rate (successes / total_runs) vs N.
- 02_time_vs_N_log_scale.png: mean HC time of successful runs and BF
    enumeration time vs N (log scale, hardware dependent).
- 03_logical_cost_vs_N.png: hardware-independent effort; HC mean steps and
    restarts (success only), BF permutations checked (log scale).
- 04_evaluations_vs_N.png: mean conflict evaluations per successful HC run.
- 05_failure_quality_vs_N.png: mean best conflict count among failed HC runs.
- 06_bf_solutions_vs_N.png: number of solutions found by brute force (bar).
- boxplot_steps_vs_N.png: distribution of HC steps per N (successes only).
- HC_steps_vs_time.png: per-run steps against time with a linear trend (only
    in sequential mode, to avoid wall-clock noise from parallel execution).
- histogram_HC_times_N{N}.png: distribution of HC time at the largest N.
"""
from __future__ import annotations

import os
from typing import Any, Dict, List

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from . import settings
from .reporting import build_suffix
from .stats import ExperimentResults


def _mean(summary: Any) -> float:
    value = (summary or {}).get("mean")
    return float(value) if value is not None else 0.0


def _hc_sizes(results: ExperimentResults) -> List[int]:
    return sorted(N for N, entry in results.get("HC", {}).items() if entry.get("total_runs", 0) > 0)


def _save(fname: str, message: str) -> str:
    plt.savefig(fname, bbox_inches="tight", dpi=settings.PLOT_DPI)
    plt.close()
    print(f"{message}: {fname}")
    return fname


def raw_runs_frame(results: ExperimentResults) -> pd.DataFrame:
    """Flatten HC raw runs into a DataFrame with one row per run.

    Columns: ``n``, ``success``, ``timeout``, ``restarts``, ``steps``,
    ``time``, ``evals``, ``best_conflicts``.
    """
    rows: List[Dict[str, Any]] = []
    for N, entry in sorted(results.get("HC", {}).items()):
        for run in entry.get("raw_runs", []):
            rows.append({
                "n": N,
                "success": run["success"],
                "timeout": run["timeout"],
                "restarts": run["restarts"],
                "steps": run["steps"],
                "time": run["time"],
                "evals": run["evals"],
                "best_conflicts": run["best_conflicts"],
            })
    columns = ["n", "success", "timeout", "restarts", "steps", "time", "evals", "best_conflicts"]
    return pd.DataFrame(rows, columns=columns)


def plot_comprehensive_analysis(results: ExperimentResults, out_dir: str) -> List[str]:
    """Generate the per-N summary charts for HC and BF.

    Parameters
    ----------
    results : ExperimentResults
        Aggregated per-N summaries produced by the analysis pipeline.
    out_dir : str
        Destination directory; will be created if missing.

    Returns
    -------
    List[str]
        Paths of the files written.
    """
    os.makedirs(out_dir, exist_ok=True)
    suffix = build_suffix()
    written: List[str] = []

    hc_sizes = _hc_sizes(results)
    hc = results.get("HC", {})
    bf = results.get("BF", {})
    bf_sizes = sorted(bf)

    if hc_sizes:
        success_rates = [hc[N].get("success_rate", 0.0) for N in hc_sizes]
        plt.figure(figsize=(12, 8))
        plt.plot(hc_sizes, success_rates, marker="o", linewidth=2, markersize=8, label="Hill climbing (with restarts)")
        for n, rate in zip(hc_sizes, success_rates):
            plt.annotate(f"{rate:.2f}", (n, rate), textcoords="offset points", xytext=(0, 5), ha="center", fontsize=9)
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel("Success rate", fontsize=12)
        plt.title("Success Rate vs Problem Size\n(Reliability within the restart budget)", fontsize=14)
        plt.ylim(-0.05, 1.05)
        plt.legend(fontsize=11)
        plt.grid(True, alpha=0.7)
        plt.xticks(hc_sizes)
        written.append(_save(os.path.join(out_dir, f"01_success_rate_vs_N{suffix}.png"), "Saved success-rate chart"))

    if hc_sizes or bf_sizes:
        plt.figure(figsize=(12, 8))
        if hc_sizes:
            hc_time = [max(_mean(hc[N].get("success_time")), 1e-6) for N in hc_sizes]
            plt.semilogy(hc_sizes, hc_time, marker="o", linewidth=2, markersize=8, label="HC: mean time (successes)")
        if bf_sizes:
            bf_time = [max(bf[N]["time"], 1e-6) for N in bf_sizes]
            plt.semilogy(bf_sizes, bf_time, marker="s", linewidth=2, markersize=8, label="BF: enumeration time")
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel("Time [s] (log scale)", fontsize=12)
        plt.title("Execution Time vs Problem Size\n(Factorial growth of brute force)", fontsize=14)
        plt.legend(fontsize=11)
        plt.grid(True, alpha=0.7)
        written.append(_save(os.path.join(out_dir, f"02_time_vs_N_log_scale{suffix}.png"), "Saved execution-time chart (log scale)"))

        plt.figure(figsize=(12, 8))
        if hc_sizes:
            steps = [max(_mean(hc[N].get("success_steps")), 1) for N in hc_sizes]
            restarts = [max(_mean(hc[N].get("success_restarts")), 1) for N in hc_sizes]
            plt.semilogy(hc_sizes, steps, marker="o", linewidth=2, markersize=8, label="HC: mean steps")
            plt.semilogy(hc_sizes, restarts, marker="^", linewidth=2, markersize=8, label="HC: mean restarts (floored at 1)")
        if bf_sizes:
            perms = [max(bf[N]["permutations"], 1) for N in bf_sizes]
            plt.semilogy(bf_sizes, perms, marker="s", linewidth=2, markersize=8, label="BF: permutations checked")
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel("Logical cost (log scale)", fontsize=12)
        plt.title("Theoretical Computational Cost vs Problem Size\n(Hardware-independent scalability)", fontsize=14)
        plt.legend(fontsize=11)
        plt.grid(True, alpha=0.7)
        written.append(_save(os.path.join(out_dir, f"03_logical_cost_vs_N{suffix}.png"), "Saved logical-cost chart"))

    if hc_sizes:
        evals = [max(_mean(hc[N].get("success_evals")), 1) for N in hc_sizes]
        plt.figure(figsize=(12, 8))
        plt.semilogy(hc_sizes, evals, marker="o", linewidth=2, markersize=8, label="HC: conflict evaluations")
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel("Conflict evaluations (log scale)", fontsize=12)
        plt.title("Pure Objective Evaluation Cost\n(Every successor is scored at each step)", fontsize=14)
        plt.legend(fontsize=11)
        plt.grid(True, alpha=0.7)
        plt.xticks(hc_sizes)
        written.append(_save(os.path.join(out_dir, f"04_evaluations_vs_N{suffix}.png"), "Saved evaluation-cost chart"))

        failed_sizes = [N for N in hc_sizes if hc[N].get("failures", 0) + hc[N].get("timeouts", 0) > 0]
        if failed_sizes:
            quality = [
                _mean(hc[N].get("failure_best_conflicts")) or _mean(hc[N].get("timeout_best_conflicts"))
                for N in failed_sizes
            ]
            plt.figure(figsize=(12, 8))
            plt.plot(failed_sizes, quality, marker="o", linewidth=2, markersize=8, label="HC: best conflicts when failing")
            plt.xlabel("N (board size)", fontsize=12)
            plt.ylabel("Average best conflicts", fontsize=12)
            plt.title("Failure Quality vs Problem Size\n(0 conflicts is optimal)", fontsize=14)
            plt.legend(fontsize=11)
            plt.grid(True, alpha=0.7)
            written.append(_save(os.path.join(out_dir, f"05_failure_quality_vs_N{suffix}.png"), "Saved failure-quality chart"))

    if bf_sizes:
        counts = [bf[N]["solutions"] for N in bf_sizes]
        plt.figure(figsize=(12, 8))
        bars = plt.bar([str(N) for N in bf_sizes], counts, color="#2ca02c", alpha=0.8)
        for bar, count in zip(bars, counts):
            plt.annotate(str(count), (bar.get_x() + bar.get_width() / 2, bar.get_height()),
                         textcoords="offset points", xytext=(0, 3), ha="center", fontsize=9)
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel("Number of solutions", fontsize=12)
        plt.title("Distinct Solutions Found by Exhaustive Enumeration", fontsize=14)
        plt.grid(True, axis="y", alpha=0.3)
        written.append(_save(os.path.join(out_dir, f"06_bf_solutions_vs_N{suffix}.png"), "Saved solution-count chart"))

    return written


def plot_statistical_analysis(results: ExperimentResults, out_dir: str) -> List[str]:
    """Plot distributions from raw HC runs (boxplot, trend scatter, histogram).

    Returns the paths of the files written; empty when no raw run exists.
    """
    frame = raw_runs_frame(results)
    if frame.empty:
        return []
    os.makedirs(out_dir, exist_ok=True)
    suffix = build_suffix()
    written: List[str] = []

    successes = frame[frame["success"]]
    if not successes.empty:
        plt.figure(figsize=(12, 8))
        sns.boxplot(data=successes, x="n", y="steps", color="#1f77b4")
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel("Steps (accepted moves)", fontsize=12)
        plt.title("Logical Cost Distribution (successes only)\n(Variability of the descent length)", fontsize=14)
        plt.grid(True, alpha=0.3)
        written.append(_save(os.path.join(out_dir, f"boxplot_steps_vs_N{suffix}.png"), "Steps boxplot"))

    if settings.CURRENT_PIPELINE_MODE == "sequential" and frame["steps"].nunique() > 1:
        steps = frame["steps"].to_numpy(dtype=float)
        times = frame["time"].to_numpy(dtype=float)
        plt.figure(figsize=(12, 8))
        sns.scatterplot(data=frame, x="steps", y="time", hue="n", palette="viridis")
        z = np.polyfit(steps, times, 1)
        p = np.poly1d(z)
        x_trend = np.linspace(steps.min(), steps.max(), 100)
        plt.plot(x_trend, p(x_trend), "r--", alpha=0.8, label=f"Trend: {z[0]:.2e} s/step")
        plt.xlabel("HC steps", fontsize=12)
        plt.ylabel("Time [s]", fontsize=12)
        plt.title("HC: Steps vs Time\n(Linearity indicates evaluation-cost dominance)", fontsize=14)
        plt.legend()
        plt.grid(True, alpha=0.3)
        written.append(_save(os.path.join(out_dir, f"HC_steps_vs_time{suffix}.png"), "Steps-vs-time chart"))

    largest = int(frame["n"].max())
    hc_times = successes[successes["n"] == largest]["time"].to_numpy(dtype=float)
    if len(hc_times) > 5:
        plt.figure(figsize=(12, 6))
        plt.hist(hc_times, bins=min(20, len(hc_times) // 2), alpha=0.7, color="orange", edgecolor="black")
        mean_time = float(np.mean(hc_times))
        std_time = float(np.std(hc_times))
        plt.axvline(mean_time, color="red", linestyle="--", label=f"Mean: {mean_time:.3f}s")
        plt.axvline(mean_time + std_time, color="red", linestyle=":", alpha=0.7, label=f"+/-1 sigma: {std_time:.3f}s")
        plt.axvline(mean_time - std_time, color="red", linestyle=":", alpha=0.7)
        plt.xlabel("Time [s]", fontsize=12)
        plt.ylabel("Frequency", fontsize=12)
        plt.title(f"HC Time Distribution (N={largest})\n(Restarts dominate the tail)", fontsize=14)
        plt.legend()
        plt.grid(True, alpha=0.3)
        written.append(_save(os.path.join(out_dir, f"histogram_HC_times_N{largest}{suffix}.png"), f"HC time histogram N={largest}"))

    print("Statistical analysis completed")
    return written


def plot_and_save(results: ExperimentResults, out_dir: str) -> List[str]:
    """Generate every chart for ``results`` into ``out_dir``."""
    written = plot_comprehensive_analysis(results, out_dir)
    written += plot_statistical_analysis(results, out_dir)
    return written
