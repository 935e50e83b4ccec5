"""Bounded-concurrency cohort pass: one fetch+score unit per participant, joined before aggregation."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable

from points_engine.cohort.aggregate import CohortSample, aggregate
from points_engine.scoring.policy import DEFAULT_COMPLETION_BASELINE
from points_engine.utils import iso_now

log = logging.getLogger(__name__)

MAX_WORKERS = int(os.environ.get("COHORT_MAX_WORKERS") or 5)


@dataclass
class CohortRun:
    total_participants: int
    samples: list[CohortSample] = field(default_factory=list)
    failures: list[dict] = field(default_factory=list)
    generated_at: str = field(default_factory=iso_now)

    def report(self, baseline: int = DEFAULT_COMPLETION_BASELINE) -> dict:
        return {
            "generatedAt": self.generated_at,
            **aggregate(self.samples, self.total_participants, baseline),
            "failures": list(self.failures),
        }


def run_cohort(
    participants: list[dict],
    sample_fn: Callable[[dict], CohortSample],
    max_workers: int | None = None,
) -> CohortRun:
    """
    Run sample_fn for every participant row with at most max_workers in flight.

    A unit that raises is logged and recorded in `failures`; the pass continues.
    Samples keep the order of `participants`, independent of completion order.
    The denominator stays len(participants).
    """
    workers = max(1, max_workers or MAX_WORKERS)
    results: dict[int, CohortSample] = {}
    failures: list[tuple[int, dict]] = []

    log.info("Cohort pass started: participants=%d workers=%d", len(participants), workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(sample_fn, row): i for i, row in enumerate(participants)}
        for future in as_completed(futures):
            i = futures[future]
            row = participants[i]
            try:
                results[i] = future.result()
            except Exception as e:
                log.warning("Skipping participant %s (%s): %s", row.get("name"), row.get("profileId"), e)
                failures.append((i, {
                    "name": row.get("name"),
                    "profileId": row.get("profileId"),
                    "error": getattr(e, "message", None) or str(e),
                }))

    run = CohortRun(
        total_participants=len(participants),
        samples=[results[i] for i in sorted(results)],
        failures=[f for _, f in sorted(failures, key=lambda pair: pair[0])],
    )
    log.info("Cohort pass complete: scored=%d failed=%d", len(run.samples), len(run.failures))
    return run
