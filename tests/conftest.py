"""Shared fixtures: an in-memory registry, the bundled policy, and a canned profile source."""

import pytest

from points_engine.enrollment.registry import EnrollmentRegistry
from points_engine.errors import UpstreamFetchError
from points_engine.scoring.policy import load_scoring_policy
from skills_tracker.service import ScoringService

BASE = "https://www.cloudskillsboost.google/public_profiles/"

RECORDS = [
    {
        "profileId": "asha",
        "profileUrl": BASE + "asha",
        "name": "Asha Verma",
        "email": "Asha.Verma@example.com",
        "batch": "Batch 1",
        "enrollmentDate": "2026-08-28T00:00:00.000Z",
    },
    {
        "profileUrl": "cloudskillsboost.google/public_profiles/rohan",
        "name": "Rohan Mehta",
        "email": "rohan@example.com",
        "batch": "Batch 2",
    },
    {"name": "No Url", "email": "nourl@example.com", "batch": "Batch 1"},
    BASE + "legacy",
    {"profileId": "down", "profileUrl": BASE + "down", "name": "Down Stream", "batch": "Batch 2"},
]


def _badges(n, difficulty="intermediate"):
    return [
        {"title": f"Badge {i}", "category": "data", "difficulty": difficulty, "kind": "badge"}
        for i in range(n)
    ]


def _games(n):
    return [{"title": f"Game {i}", "category": "general", "difficulty": "standard", "kind": "game"} for i in range(n)]


PROFILES = {
    "asha": {"name": "Asha Verma", "items": _badges(15) + _games(5)},
    "rohan": {"name": "Rohan Mehta", "items": _badges(10) + _games(5)},
    "legacy": {"name": "Lee Gacy", "items": _badges(2, "advanced")},
}


def fake_fetcher(profile_url):
    profile_id = profile_url.rstrip("/").rsplit("/", 1)[-1]
    if profile_id not in PROFILES:
        raise UpstreamFetchError("Timed out fetching profile. Please try again later.", details="read timed out")
    return profile_id


def fake_parser(content):
    return PROFILES[content]


@pytest.fixture
def policy():
    return load_scoring_policy()


@pytest.fixture
def registry(tmp_path):
    return EnrollmentRegistry.from_records(RECORDS, path=tmp_path / "enrolled.json")


@pytest.fixture
def service(registry, policy):
    return ScoringService(registry, policy, fetcher=fake_fetcher, parser=fake_parser, test_size=2)
