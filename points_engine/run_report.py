"""Write cohort_report.json for offline review."""

import json
from pathlib import Path

from points_engine.cohort.runner import CohortRun
from points_engine.scoring.policy import ScoringPolicy


def write_cohort_report(
    output_path: Path,
    run: CohortRun,
    policy: ScoringPolicy,
    test_mode: bool = False,
) -> Path:
    """
    Write summary, distribution, leaderboard and failures of one cohort pass.
    Emails are never included; rows carry name and profile id only.
    """
    report = {
        "testMode": test_mode,
        "policy": policy.to_dict(),
        **run.report(policy.completion_baseline),
    }
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    return output_path
