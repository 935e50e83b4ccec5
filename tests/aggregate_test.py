"""Cohort aggregation: buckets, leaderboard ordering, summary statistics, denominators."""

import pytest

from points_engine.cohort.aggregate import (
    CohortSample,
    aggregate,
    bucket_for,
    distribution,
    leaderboard,
    summarize,
)


def _sample(name, total_items, points=0, badges=None, progress=0.0):
    badges = total_items if badges is None else badges
    return CohortSample(
        name=name,
        profile_id=f"id-{name}",
        badges=badges,
        games=total_items - badges,
        total_items=total_items,
        points=points,
        progress=progress,
    )


def test_leaderboard_orders_by_items_then_points():
    samples = [_sample("A", 18, 900), _sample("B", 18, 950), _sample("C", 20, 800)]
    board = leaderboard(samples)
    assert [row["name"] for row in board] == ["C", "B", "A"]
    assert [row["rank"] for row in board] == [1, 2, 3]


def test_leaderboard_ties_keep_input_order():
    samples = [_sample("Zed", 10, 500), _sample("Amy", 10, 500), _sample("Max", 10, 500)]
    assert [row["name"] for row in leaderboard(samples)] == ["Zed", "Amy", "Max"]


def test_leaderboard_takes_top_10():
    samples = [_sample(f"P{i:02d}", i, i * 10) for i in range(15)]
    board = leaderboard(samples)
    assert len(board) == 10
    assert board[0]["name"] == "P14"
    assert board[-1]["name"] == "P05"


@pytest.mark.parametrize("total_items,bucket", [
    (20, "complete100"),
    (17, "complete75"),
    (12, "complete50"),
    (3, "complete0"),
    (0, "complete0"),
    (15, "complete75"),
    (19, "complete75"),
    (10, "complete50"),
    (5, "complete25"),
    (9, "complete25"),
    (4, "complete0"),
    (23, "complete100"),
])
def test_bucket_boundaries(total_items, bucket):
    assert bucket_for(total_items) == bucket


def test_distribution_uses_requested_cohort_size():
    """Two participants failed to score: they stay in the denominator."""
    samples = [_sample("Chen", 20), _sample("Asha", 17), _sample("Bina", 12)]
    dist = distribution(samples, total_participants=5)

    assert list(dist) == ["complete100", "complete75", "complete50", "complete25", "complete0"]
    assert dist["complete100"]["count"] == 1
    assert dist["complete100"]["percentage"] == 20.0
    assert dist["complete75"]["percentage"] == 20.0
    assert dist["complete0"] == {
        "label": "0-24% Complete (0-4 items)",
        "count": 0,
        "percentage": 0.0,
        "participants": [],
    }
    assert dist["complete100"]["label"] == "100% Complete (20/20 items)"
    assert dist["complete75"]["label"] == "75-99% Complete (15-19 items)"


def test_distribution_members_sorted_by_name():
    samples = [_sample("Chen", 3), _sample("Asha", 1), _sample("Bina", 0)]
    dist = distribution(samples, total_participants=3)
    assert [p["name"] for p in dist["complete0"]["participants"]] == ["Asha", "Bina", "Chen"]
    assert dist["complete0"]["participants"][0]["profileId"] == "id-Asha"


def test_distribution_empty_cohort():
    dist = distribution([], total_participants=0)
    assert all(bucket["count"] == 0 and bucket["percentage"] == 0 for bucket in dist.values())


def test_summarize():
    samples = [
        _sample("A", 20, points=1500, badges=15, progress=100.0),
        _sample("B", 10, points=500, badges=9, progress=50.0),
        _sample("C", 3, points=75, badges=3, progress=15.0),
    ]
    summary = summarize(samples, total_participants=4)
    assert summary == {
        "totalParticipants": 4,
        "scoredParticipants": 3,
        "failedParticipants": 1,
        "fullyCompleted": 1,
        "avgBadges": 9.0,
        "avgGames": 2.0,
        "overallProgress": 55.0,
        "totalPoints": 2075,
    }


def test_summarize_without_samples():
    summary = summarize([], total_participants=3)
    assert summary["avgBadges"] == 0
    assert summary["overallProgress"] == 0
    assert summary["failedParticipants"] == 3


def test_aggregate_bundles_views():
    result = aggregate([_sample("A", 20, 100)], total_participants=1)
    assert set(result) == {"summary", "distribution", "leaderboard"}
    assert result["leaderboard"][0]["totalItems"] == 20


def test_sample_from_score_result():
    score_result = {
        "totalPoints": 350,
        "breakdown": {"badges": {"count": 4, "items": []}, "games": {"count": 1, "items": []}},
        "progress": {"overall": {"percentage": 25.0}},
    }
    sample = CohortSample.from_score("Asha", "abc", score_result)
    assert sample.to_dict() == {
        "name": "Asha",
        "profileId": "abc",
        "badges": 4,
        "games": 1,
        "totalItems": 5,
        "points": 350,
        "progress": 25.0,
    }
