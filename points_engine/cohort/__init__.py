"""Cohort aggregation, bounded-concurrency runner, and exports."""

from points_engine.cohort.aggregate import CohortSample, aggregate, distribution, leaderboard, summarize
from points_engine.cohort.runner import CohortRun, run_cohort

__all__ = [
    "CohortSample",
    "aggregate",
    "distribution",
    "leaderboard",
    "summarize",
    "CohortRun",
    "run_cohort",
]
