"""Skills Tracker - enrollment-checked points calculator for Skills Boost cohorts."""

from skills_tracker.service import ScoringService
from skills_tracker.cohort_pdf import generate_cohort_pdf

__all__ = ["ScoringService", "generate_cohort_pdf"]
