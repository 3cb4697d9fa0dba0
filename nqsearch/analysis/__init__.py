"""
Analysis and orchestration package for N-Queens search experiments.

This package contains:
- settings: global knobs and timeouts
- stats: typed summaries and aggregation helpers
- experiments: runners for HC/BF with result shaping
- reporting: CSV exports and raw-data writers
- plots: all visualization utilities
- cli: top-level pipeline entry points and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    StatsSummary,
    HCRecord,
    BFEntry,
    HCResultEntry,
    ExperimentResults,
    compute_detailed_statistics,
    compute_grouped_statistics,
    ProgressPrinter,
)

__all__ = [
    # types
    "StatsSummary",
    "HCRecord",
    "BFEntry",
    "HCResultEntry",
    "ExperimentResults",
    # utils
    "compute_detailed_statistics",
    "compute_grouped_statistics",
    "ProgressPrinter",
    # settings module
    "settings",
]
