"""Deterministic scoring engine."""

from points_engine.scoring.engine import calculate_points, item_points
from points_engine.scoring.policy import ScoringPolicy, load_scoring_policy

__all__ = ["calculate_points", "item_points", "ScoringPolicy", "load_scoring_policy"]
