"""Quick regression tests for the N-Queens experiment orchestrator."""

from pathlib import Path
import sys
import unittest
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import matplotlib

matplotlib.use("Agg")

from nqsearch.analysis import cli


class QuickRegressionTests(unittest.TestCase):
    """Verify that the lightweight regression checks pass."""

    def test_solvers_and_csv_generation(self):
        """Ensure HC for N=8, BF counts for N=4..6, and CSV export succeed."""
        cli.run_quick_regression_tests()

    def test_cli_quick_test_flag(self):
        """The --quick-test flag runs the same checks and returns normally."""
        cli.main(["--quick-test"])

    def test_cli_solve_exit_code(self):
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--solve", "8", "--seed", "1", "--max-restarts", "300", "--show"])
        self.assertEqual(ctx.exception.code, 0)
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--solve", "2"])
        self.assertEqual(ctx.exception.code, 2)

    def test_cli_solve_negative_size(self):
        for solver in ("hc", "bf"):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--solve", "-3", "--solver", solver])
            self.assertEqual(ctx.exception.code, 1)

    def test_cli_solve_interrupted(self):
        with mock.patch.object(cli, "solve", side_effect=KeyboardInterrupt):
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["--solve", "30"])
        self.assertEqual(ctx.exception.code, 130)

    def test_cli_tag_flag(self):
        previous = cli.settings.RUN_TAG
        try:
            with mock.patch.object(cli, "main_parallel") as pipeline:
                cli.main(["--config", str(ROOT / "config.json"), "--tag", "smoke", "--no-plots"])
            pipeline.assert_called_once()
            self.assertEqual(cli.settings.RUN_TAG, "smoke")
        finally:
            cli.settings.RUN_TAG = previous

    def test_cli_missing_config(self):
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--config", str(ROOT / "does_not_exist.json"), "--no-plots"])
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
