"""Cohort aggregation: summary statistics, completion distribution, leaderboard."""

import locale
from dataclasses import dataclass

from points_engine.scoring.policy import DEFAULT_COMPLETION_BASELINE
from points_engine.utils import round_half_up, round_pct

LEADERBOARD_SIZE = 10

# (bucket id, label, lower bound as a fraction of the baseline)
BUCKETS = [
    ("complete100", "100% Complete", 1.0),
    ("complete75", "75-99% Complete", 0.75),
    ("complete50", "50-74% Complete", 0.5),
    ("complete25", "25-49% Complete", 0.25),
    ("complete0", "0-24% Complete", 0.0),
]


@dataclass(frozen=True)
class CohortSample:
    name: str
    profile_id: str
    badges: int
    games: int
    total_items: int
    points: int
    progress: float

    @classmethod
    def from_score(cls, name: str, profile_id: str, score_result: dict) -> "CohortSample":
        breakdown = score_result.get("breakdown", {})
        badges = breakdown.get("badges", {}).get("count", 0) or 0
        games = breakdown.get("games", {}).get("count", 0) or 0
        return cls(
            name=name or "Unknown",
            profile_id=profile_id,
            badges=badges,
            games=games,
            total_items=badges + games,
            points=score_result.get("totalPoints", 0) or 0,
            progress=score_result.get("progress", {}).get("overall", {}).get("percentage", 0) or 0,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "profileId": self.profile_id,
            "badges": self.badges,
            "games": self.games,
            "totalItems": self.total_items,
            "points": self.points,
            "progress": self.progress,
        }


def _bucket_bounds(baseline: int) -> list[tuple[str, str, int]]:
    return [(bucket_id, label, int(baseline * fraction)) for bucket_id, label, fraction in BUCKETS]


def bucket_for(total_items: int, baseline: int = DEFAULT_COMPLETION_BASELINE) -> str:
    """Bucket id for a sample. Anything at or above the baseline is complete100."""
    for bucket_id, _, lower in _bucket_bounds(baseline):
        if total_items >= lower:
            return bucket_id
    return "complete0"


def _by_name(samples: list[CohortSample]) -> list[CohortSample]:
    return sorted(samples, key=lambda s: locale.strxfrm(s.name))


def distribution(
    samples: list[CohortSample],
    total_participants: int,
    baseline: int = DEFAULT_COMPLETION_BASELINE,
) -> dict:
    """
    Partition samples into the five completion buckets.

    Percentages use total_participants (the requested cohort size), so
    participants that failed to score lower every bucket's share.
    """
    members: dict[str, list[CohortSample]] = {bucket_id: [] for bucket_id, _, _ in BUCKETS}
    for sample in samples:
        members[bucket_for(sample.total_items, baseline)].append(sample)

    result = {}
    bounds = _bucket_bounds(baseline)
    for i, (bucket_id, label, lower) in enumerate(bounds):
        upper = bounds[i - 1][2] - 1 if i > 0 else baseline
        count = len(members[bucket_id])
        result[bucket_id] = {
            "label": f"{label} ({lower}-{upper} items)" if i > 0 else f"{label} ({baseline}/{baseline} items)",
            "count": count,
            "percentage": round_pct(count, total_participants),
            "participants": [s.to_dict() for s in _by_name(members[bucket_id])],
        }
    return result


def leaderboard(samples: list[CohortSample], limit: int = LEADERBOARD_SIZE) -> list[dict]:
    """
    Top performers by totalItems desc, then points desc.
    sorted() is stable, so identical (totalItems, points) pairs keep input order.
    """
    ranked = sorted(samples, key=lambda s: (-s.total_items, -s.points))
    return [dict(s.to_dict(), rank=i) for i, s in enumerate(ranked[:limit], start=1)]


def summarize(
    samples: list[CohortSample],
    total_participants: int,
    baseline: int = DEFAULT_COMPLETION_BASELINE,
) -> dict:
    """Headline statistics. Averages are over scored samples; 0 when there are none."""
    n = len(samples)
    return {
        "totalParticipants": total_participants,
        "scoredParticipants": n,
        "failedParticipants": max(total_participants - n, 0),
        "fullyCompleted": sum(1 for s in samples if s.total_items >= baseline),
        "avgBadges": round_half_up(sum(s.badges for s in samples) / n, 1) if n else 0,
        "avgGames": round_half_up(sum(s.games for s in samples) / n, 2) if n else 0,
        "overallProgress": round_half_up(sum(s.progress for s in samples) / n, 1) if n else 0,
        "totalPoints": sum(s.points for s in samples),
    }


def aggregate(
    samples: list[CohortSample],
    total_participants: int,
    baseline: int = DEFAULT_COMPLETION_BASELINE,
) -> dict:
    return {
        "summary": summarize(samples, total_participants, baseline),
        "distribution": distribution(samples, total_participants, baseline),
        "leaderboard": leaderboard(samples),
    }
