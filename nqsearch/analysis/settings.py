"""Global settings and timeouts for the N-Queens analysis pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`nqsearch.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

import multiprocessing
from typing import List, Optional
from datetime import datetime

# Board sizes for hill-climbing experiments (in ascending order)
N_VALUES: List[int] = [8, 12, 16, 24, 32]

# Board sizes for exhaustive enumeration (factorial cost: keep these small)
BF_N_VALUES: List[int] = [4, 5, 6, 7, 8]

# Largest size the brute-force solver is allowed to run on
BF_MAX_N: int = 10

# Number of independent hill-climbing runs per N in final experiments
RUNS_HC_FINAL: int = 40

# Random restarts allowed per hill-climbing run after the first climb fails
HC_MAX_RESTARTS: int = 100

# Hill-climbing time limit per run in seconds (None = no limit)
HC_TIME_LIMIT: Optional[float] = 60.0

# Global timeout per experiment bundle (None = no limit)
EXPERIMENT_TIMEOUT: Optional[float] = 600.0

# Base seed for reproducible experiments (None = fresh entropy every run)
SEED: Optional[int] = None

# Output directory for CSV and charts
OUT_DIR: str = "results_nqueens_search"

# Resolution of saved charts
PLOT_DPI: int = 150

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# Output naming policy --------------------------------------------------------

# When True, results and plots will include a datestamp suffix (e.g., _20251113-142530)
# applied consistently across all artifacts produced within the same run.
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")

# Optional run labeling to avoid overwriting outputs
RUN_TAG: Optional[str] = None

# Current pipeline mode for plotting decisions: 'sequential' | 'parallel'
CURRENT_PIPELINE_MODE: str = 'parallel'


def set_timeouts(
        hc_timeout: Optional[float] = 60.0,
        experiment_timeout: Optional[float] = 600.0,
) -> None:
        """Configure timeouts for hill climbing and the experiment wrapper.

        Parameters
        - hc_timeout: per-run hill-climbing limit in seconds (None disables
            the limit). Checked before each random restart.
        - experiment_timeout: hard cap for a whole experiment bundle in seconds
            (None disables). When reached, outer loops stop scheduling new
            sizes.

        Side effects
        - Updates module-level globals and prints a concise summary to stdout to
            make the active limits explicit at run start.
        """
        global HC_TIME_LIMIT, EXPERIMENT_TIMEOUT
        HC_TIME_LIMIT = hc_timeout
        EXPERIMENT_TIMEOUT = experiment_timeout

        print("Timeout settings configured:")
        print(f"   - HC: {HC_TIME_LIMIT}s" if HC_TIME_LIMIT else "   - HC: unlimited")
        print(
                f"   - Experiment: {EXPERIMENT_TIMEOUT}s"
                if EXPERIMENT_TIMEOUT
                else "   - Experiment: unlimited"
        )
