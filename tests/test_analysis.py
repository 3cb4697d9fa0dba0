"""Tests for the analysis layer: statistics, experiment runners, CSV export, charts and config."""

from pathlib import Path
import csv
import json
import os
import sys
import tempfile
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import matplotlib

matplotlib.use("Agg")

from config_manager import ConfigManager
from nqsearch.analysis import settings
from nqsearch.analysis.cli import apply_configuration, parse_algorithm_filters, solve
from nqsearch.analysis.experiments import run_experiments, run_experiments_parallel, run_seed
from nqsearch.analysis.plots import plot_and_save, raw_runs_frame
from nqsearch.analysis.reporting import build_suffix, save_raw_data_to_csv, save_results_to_csv, save_solutions_to_csv
from nqsearch.analysis.stats import compute_detailed_statistics, compute_grouped_statistics
from nqsearch.utils import is_valid_solution


def _without_time(runs):
    return [{k: v for k, v in run.items() if k != "time"} for run in runs]


def _read_csv(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


class StatisticsTests(unittest.TestCase):

    def test_empty_values(self):
        summary = compute_detailed_statistics([])
        self.assertEqual(summary["count"], 0)
        self.assertIsNone(summary["mean"])

    def test_summary(self):
        summary = compute_detailed_statistics([4, 1, 3, 2])
        self.assertEqual(summary["count"], 4)
        self.assertEqual(summary["mean"], 2.5)
        self.assertEqual(summary["median"], 2.5)
        self.assertEqual(summary["min"], 1)
        self.assertEqual(summary["max"], 4)
        self.assertEqual(summary["range"], 3)
        self.assertEqual(summary["q25"], 2)
        self.assertEqual(summary["q75"], 4)

    def test_grouped(self):
        runs = [
            {"success": True, "timeout": False, "steps": 3, "time": 0.1},
            {"success": False, "timeout": False, "steps": 5, "time": 0.2, "best_conflicts": 1},
            {"success": False, "timeout": True, "steps": 7, "time": 0.3, "best_conflicts": 2},
        ]
        stats = compute_grouped_statistics(runs)
        self.assertEqual((stats["successes"], stats["failures"], stats["timeouts"]), (1, 1, 1))
        self.assertAlmostEqual(stats["success_rate"], 1 / 3)
        self.assertEqual(stats["all_steps"]["mean"], 5)
        self.assertEqual(stats["failure_best_conflicts"]["mean"], 1)
        self.assertNotIn("success_best_conflicts", stats)


class ExperimentRunnerTests(unittest.TestCase):

    def setUp(self):
        self._experiment_timeout = settings.EXPERIMENT_TIMEOUT
        settings.EXPERIMENT_TIMEOUT = None

    def tearDown(self):
        settings.EXPERIMENT_TIMEOUT = self._experiment_timeout

    def test_run_seed(self):
        self.assertIsNone(run_seed(None, 3))
        self.assertEqual(run_seed(10, 3), 13)

    def test_sequential_results(self):
        results = run_experiments([2, 6], [4, 5], runs_hc=3, max_restarts=300, validate=True, seed=1)

        self.assertEqual(results["HC"][2]["total_runs"], 0)
        hc6 = results["HC"][6]
        self.assertEqual(hc6["total_runs"], 3)
        self.assertEqual(len(hc6["raw_runs"]), 3)
        for run in hc6["raw_runs"]:
            if run["success"]:
                self.assertTrue(is_valid_solution(run["solution"]))
            else:
                self.assertIsNone(run["solution"])

        self.assertEqual(results["BF"][4]["solutions"], 2)
        self.assertEqual(results["BF"][4]["permutations"], 24)
        self.assertEqual(results["BF"][4]["boards"], [[1, 3, 0, 2], [2, 0, 3, 1]])
        self.assertEqual(results["BF"][5]["solutions"], 10)

    def test_algorithm_selection(self):
        results = run_experiments([6], [4], runs_hc=1, max_restarts=50, include_hc=False, seed=0)
        self.assertEqual(results["HC"], {})
        self.assertIn(4, results["BF"])

    def test_seeded_runs_are_reproducible(self):
        first = run_experiments([8], [], runs_hc=4, max_restarts=50, seed=123)
        second = run_experiments([8], [], runs_hc=4, max_restarts=50, seed=123)
        self.assertEqual(_without_time(first["HC"][8]["raw_runs"]), _without_time(second["HC"][8]["raw_runs"]))

    def test_parallel_matches_sequential(self):
        sequential = run_experiments([8], [6], runs_hc=4, max_restarts=50, seed=7)
        parallel = run_experiments_parallel([8], [6], runs_hc=4, max_restarts=50, seed=7, workers=2)
        self.assertEqual(
            _without_time(sequential["HC"][8]["raw_runs"]),
            _without_time(parallel["HC"][8]["raw_runs"]),
        )
        self.assertEqual(sequential["BF"][6]["boards"], parallel["BF"][6]["boards"])

    def test_brute_force_size_cap(self):
        with self.assertRaises(ValueError):
            run_experiments([], [settings.BF_MAX_N + 1], runs_hc=1, max_restarts=1)


class ReportingAndPlotTests(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls._timeout = settings.EXPERIMENT_TIMEOUT
        settings.EXPERIMENT_TIMEOUT = None
        cls.results = run_experiments([2, 6, 8], [4, 5], runs_hc=6, max_restarts=100, seed=3)

    @classmethod
    def tearDownClass(cls):
        settings.EXPERIMENT_TIMEOUT = cls._timeout

    def test_results_csv(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = save_results_to_csv(self.results, tmpdir)
            self.assertTrue(os.path.basename(path).startswith("results_HC_BF"))
            rows = _read_csv(path)
        header, body = rows[0], rows[1:]
        self.assertEqual(len(header), 21)
        self.assertEqual([row[0] for row in body], ["2", "4", "5", "6", "8"])
        by_n = {row[0]: dict(zip(header, row)) for row in body}
        self.assertEqual(by_n["2"]["hc_total_runs"], "")
        self.assertEqual(by_n["6"]["hc_total_runs"], "6")
        self.assertEqual(by_n["5"]["bf_solutions"], "10")
        self.assertEqual(by_n["8"]["bf_solutions"], "")

    def test_raw_and_solution_csv(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            raw_rows = _read_csv(save_raw_data_to_csv(self.results, tmpdir))
            solution_rows = _read_csv(save_solutions_to_csv(self.results, tmpdir))
        self.assertEqual(len(raw_rows), 1 + 12)
        self.assertEqual(solution_rows[0], ["n", "solution_id", "rows"])
        self.assertEqual(len(solution_rows), 1 + 2 + 10)
        self.assertEqual(solution_rows[1], ["4", "1", "1 3 0 2"])

    def test_optional_exports_skip_missing_solvers(self):
        empty = {"HC": {}, "BF": {}}
        with tempfile.TemporaryDirectory() as tmpdir:
            self.assertIsNone(save_raw_data_to_csv(empty, tmpdir))
            self.assertIsNone(save_solutions_to_csv(empty, tmpdir))

    def test_raw_runs_frame(self):
        frame = raw_runs_frame(self.results)
        self.assertEqual(len(frame), 12)
        self.assertEqual(sorted(frame["n"].unique().tolist()), [6, 8])

    def test_plots_written(self):
        previous = settings.CURRENT_PIPELINE_MODE
        settings.CURRENT_PIPELINE_MODE = "sequential"
        try:
            with tempfile.TemporaryDirectory() as tmpdir:
                written = plot_and_save(self.results, tmpdir)
                self.assertTrue(written)
                for path in written:
                    self.assertTrue(os.path.exists(path))
                names = [os.path.basename(p) for p in written]
                self.assertTrue(any(n.startswith("01_success_rate_vs_N") for n in names))
                self.assertTrue(any(n.startswith("06_bf_solutions_vs_N") for n in names))
        finally:
            settings.CURRENT_PIPELINE_MODE = previous


class ConfigAndCliTests(unittest.TestCase):

    def setUp(self):
        self._saved = {
            name: getattr(settings, name)
            for name in (
                "N_VALUES",
                "BF_N_VALUES",
                "RUNS_HC_FINAL",
                "HC_MAX_RESTARTS",
                "SEED",
                "OUT_DIR",
                "HC_TIME_LIMIT",
                "EXPERIMENT_TIMEOUT",
                "NUM_PROCESSES",
                "RUN_TAG",
            )
        }
        self.tmpdir = tempfile.TemporaryDirectory()
        self.config_path = os.path.join(self.tmpdir.name, "config.json")
        with open(self.config_path, "w") as f:
            json.dump({
                "experiment_settings": {
                    "N_values": [8, 10],
                    "bf_N_values": [4],
                    "runs_hc_final": 5,
                    "hc_max_restarts": 20,
                    "seed": 9,
                    "output_dir": "out_test",
                    "run_tag": "nightly",
                },
                "timeout_settings": {"hc_time_limit": 5.0, "experiment_timeout": 50.0},
                "parallel_settings": {"workers": 2},
            }, f)

    def tearDown(self):
        for name, value in self._saved.items():
            setattr(settings, name, value)
        self.tmpdir.cleanup()

    def test_config_manager_roundtrip(self):
        config = ConfigManager(self.config_path)
        self.assertEqual(config.get_experiment_settings()["N_values"], [8, 10])
        config.update_setting("parallel_settings", "workers", 4)
        self.assertEqual(ConfigManager(self.config_path).get_parallel_settings()["workers"], 4)
        config.update_setting("new_section", "flag", True)
        self.assertTrue(ConfigManager(self.config_path).config["new_section"]["flag"])

    def test_missing_config(self):
        with self.assertRaises(FileNotFoundError):
            ConfigManager(os.path.join(self.tmpdir.name, "missing.json"))

    def test_apply_configuration(self):
        apply_configuration(self.config_path)
        self.assertEqual(settings.N_VALUES, [8, 10])
        self.assertEqual(settings.BF_N_VALUES, [4])
        self.assertEqual(settings.RUNS_HC_FINAL, 5)
        self.assertEqual(settings.HC_MAX_RESTARTS, 20)
        self.assertEqual(settings.SEED, 9)
        self.assertEqual(settings.OUT_DIR, "out_test")
        self.assertEqual(settings.HC_TIME_LIMIT, 5.0)
        self.assertEqual(settings.EXPERIMENT_TIMEOUT, 50.0)
        self.assertEqual(settings.NUM_PROCESSES, 2)
        self.assertEqual(settings.RUN_TAG, "nightly")
        self.assertTrue(build_suffix().startswith("_nightly"))

    def test_parse_algorithm_filters(self):
        self.assertIsNone(parse_algorithm_filters(None))
        self.assertEqual(parse_algorithm_filters(["hc,bf", "HC"]), ["HC", "BF"])
        with self.assertRaises(ValueError):
            parse_algorithm_filters(["GA"])

    def test_solve_exit_codes(self):
        self.assertEqual(solve(8, solver="hc", seed=42, max_restarts=500), 0)
        self.assertEqual(solve(6, solver="bf"), 0)
        self.assertEqual(solve(3, solver="hc"), 2)
        self.assertEqual(solve(3, solver="bf"), 2)
        with self.assertRaises(ValueError):
            solve(settings.BF_MAX_N + 1, solver="bf")


if __name__ == "__main__":
    unittest.main()
