"""Scoring policy: point weights and completion targets. Loaded once, immutable afterwards."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from points_engine.validation import validate_scoring_policy

DEFAULT_POLICY_FILE = Path(__file__).resolve().parent.parent.parent / "config" / "scoring_policy.json"
DEFAULT_COMPLETION_BASELINE = 20


@dataclass(frozen=True)
class ScoringPolicy:
    points_per_badge: MappingProxyType
    points_per_game: MappingProxyType
    total_badge_target: int
    total_game_target: int
    categories: tuple[str, ...] = field(default_factory=tuple)
    completion_baseline: int = DEFAULT_COMPLETION_BASELINE

    @classmethod
    def from_dict(cls, data: dict) -> "ScoringPolicy":
        """Validate against the policy schema, then freeze."""
        validate_scoring_policy(data)
        return cls(
            points_per_badge=MappingProxyType(dict(data["pointsPerBadge"])),
            points_per_game=MappingProxyType(dict(data["pointsPerGame"])),
            total_badge_target=data["totalBadgeTarget"],
            total_game_target=data["totalGameTarget"],
            categories=tuple(data.get("categories") or ()),
            completion_baseline=data.get("completionBaseline", DEFAULT_COMPLETION_BASELINE),
        )

    def weight_table(self, kind: str) -> MappingProxyType | None:
        if kind == "badge":
            return self.points_per_badge
        if kind == "game":
            return self.points_per_game
        return None

    def to_dict(self) -> dict:
        """Read-only wire form (GET /api/scoring-config)."""
        return {
            "pointsPerBadge": dict(self.points_per_badge),
            "pointsPerGame": dict(self.points_per_game),
            "totalBadgeTarget": self.total_badge_target,
            "totalGameTarget": self.total_game_target,
            "categories": list(self.categories),
            "completionBaseline": self.completion_baseline,
        }


def policy_file_from_env() -> Path:
    return Path(os.environ.get("SCORING_POLICY_FILE") or DEFAULT_POLICY_FILE)


def load_scoring_policy(path: Path | str | None = None) -> ScoringPolicy:
    """
    Load the policy config. Raises FileNotFoundError / jsonschema.ValidationError:
    a broken policy is a deployment error, not something to degrade around.
    """
    path = Path(path) if path else policy_file_from_env()
    data = json.loads(path.read_text(encoding="utf-8"))
    return ScoringPolicy.from_dict(data)
