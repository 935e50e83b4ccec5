"""Scoring engine: weights, progress ratios, ordering, and the zero-weight / missing-kind rules."""

import itertools
import json

import jsonschema
import pytest

from points_engine.pipeline.extract import CompletionItem
from points_engine.scoring import ScoringPolicy, calculate_points, item_points, load_scoring_policy

POLICY = ScoringPolicy.from_dict({
    "pointsPerBadge": {"introductory": 25, "intermediate": 50, "advanced": 75},
    "pointsPerGame": {"standard": 100},
    "totalBadgeTarget": 15,
    "totalGameTarget": 5,
})


def _badge(title, difficulty="intermediate", category="data"):
    return CompletionItem(title=title, category=category, difficulty=difficulty, kind="badge")


def _game(title):
    return CompletionItem(title=title, category="general", difficulty="standard", kind="game")


def test_reference_example():
    """10 intermediate badges + 5 games → 1000 points, 66.7% / 100.0% / 75.0%."""
    items = [_badge(f"Badge {i}") for i in range(10)] + [_game(f"Game {i}") for i in range(5)]
    result = calculate_points(items, POLICY)

    assert result["totalPoints"] == 10 * 50 + 5 * 100
    assert result["progress"]["badges"] == {"completed": 10, "total": 15, "percentage": 66.7}
    assert result["progress"]["games"] == {"completed": 5, "total": 5, "percentage": 100.0}
    assert result["progress"]["overall"] == {"percentage": 75.0}
    assert result["breakdown"]["badges"]["count"] == 10
    assert result["breakdown"]["games"]["count"] == 5
    assert result["completedBadges"] == result["breakdown"]["badges"]["items"]


def test_determinism():
    """Same inputs → identical results across 10 runs."""
    items = [_badge("A", "advanced"), _game("G"), _badge("B", "introductory")]
    results = [calculate_points(items, POLICY) for _ in range(10)]
    assert all(r == results[0] for r in results[1:])


def test_permutation_changes_order_but_not_totals():
    items = [_badge("A", "advanced"), _game("G1"), _badge("B", "introductory"), _game("G2"), _badge("C")]
    baseline = calculate_points(items, POLICY)
    for perm in itertools.permutations(items):
        result = calculate_points(list(perm), POLICY)
        assert result["totalPoints"] == baseline["totalPoints"]
        assert result["breakdown"]["badges"]["count"] == baseline["breakdown"]["badges"]["count"]
        assert result["breakdown"]["games"]["count"] == baseline["breakdown"]["games"]["count"]
        expected_badges = [i.title for i in perm if i.kind == "badge"]
        assert [i["title"] for i in result["breakdown"]["badges"]["items"]] == expected_badges


def test_no_items_no_division_fault():
    result = calculate_points([], POLICY)
    assert result["totalPoints"] == 0
    assert result["progress"]["overall"]["percentage"] == 0
    assert result["progress"]["badges"]["percentage"] == 0


def test_zero_targets_yield_zero_percentage():
    policy = ScoringPolicy.from_dict({
        "pointsPerBadge": {"intermediate": 50}, "pointsPerGame": {},
        "totalBadgeTarget": 0, "totalGameTarget": 0,
    })
    result = calculate_points([_badge("A")], policy)
    assert result["progress"]["badges"]["percentage"] == 0
    assert result["progress"]["overall"]["percentage"] == 0


def test_exact_targets_reach_100():
    items = [_badge(f"B{i}") for i in range(15)] + [_game(f"G{i}") for i in range(5)]
    assert calculate_points(items, POLICY)["progress"]["overall"]["percentage"] == 100.0


def test_percentages_clamp_at_100():
    items = [_badge(f"B{i}") for i in range(18)] + [_game(f"G{i}") for i in range(7)]
    progress = calculate_points(items, POLICY)["progress"]
    assert progress["badges"] == {"completed": 18, "total": 15, "percentage": 100.0}
    assert progress["games"]["percentage"] == 100.0
    assert progress["overall"]["percentage"] == 100.0


def test_unknown_difficulty_scores_zero_but_counts_toward_completion():
    items = [_badge("Known"), _badge("Mystery", difficulty="unknown")]
    result = calculate_points(items, POLICY)
    assert result["totalPoints"] == 50
    assert result["progress"]["badges"]["completed"] == 2
    assert result["unscoredItems"] == 1


def test_missing_kind_is_neither_badge_nor_game():
    items = [
        _badge("Real"),
        CompletionItem(title="Orphan", category="data", difficulty="advanced", kind=None),
        {"title": "No kind", "category": "data", "difficulty": "advanced"},
        {"title": "Bad kind", "difficulty": "advanced", "kind": "trophy"},
        "not an item",
    ]
    result = calculate_points(items, POLICY)
    assert result["breakdown"]["badges"]["count"] == 1
    assert result["breakdown"]["games"]["count"] == 0
    assert result["totalPoints"] == 50
    assert result["unclassifiedItems"] == 4


def test_dict_items_are_accepted():
    result = calculate_points([{"title": "X", "category": "Data", "difficulty": "Advanced", "kind": "badge"}], POLICY)
    assert result["totalPoints"] == 75
    assert result["completedBadges"][0] == {"title": "X", "category": "data", "difficulty": "advanced", "kind": "badge"}


def test_unknown_category_scores_zero_when_policy_lists_categories():
    policy = ScoringPolicy.from_dict({
        "pointsPerBadge": {"intermediate": 50}, "pointsPerGame": {"standard": 100},
        "totalBadgeTarget": 15, "totalGameTarget": 5, "categories": ["data", "general"],
    })
    assert item_points(_badge("In vocab"), policy) == 50
    assert item_points(_badge("Off vocab", category="astrology"), policy) == 0
    assert item_points(_badge("Off vocab", category="astrology"), POLICY) == 50


def test_policy_rejects_invalid_config():
    with pytest.raises(jsonschema.ValidationError):
        ScoringPolicy.from_dict({"pointsPerBadge": {}, "pointsPerGame": {}, "totalBadgeTarget": -1, "totalGameTarget": 5})
    with pytest.raises(jsonschema.ValidationError):
        ScoringPolicy.from_dict({"pointsPerBadge": {"x": "ten"}, "pointsPerGame": {}, "totalBadgeTarget": 1, "totalGameTarget": 1})


def test_policy_is_read_only():
    with pytest.raises(TypeError):
        POLICY.points_per_badge["intermediate"] = 1000


def test_shipped_policy_loads(tmp_path):
    policy = load_scoring_policy()
    assert policy.total_badge_target + policy.total_game_target == policy.completion_baseline
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(policy.to_dict()), encoding="utf-8")
    assert load_scoring_policy(path).to_dict() == policy.to_dict()


def test_progress_rounds_half_up():
    policy = ScoringPolicy.from_dict({
        "pointsPerBadge": {"intermediate": 50},
        "pointsPerGame": {"standard": 100},
        "totalBadgeTarget": 16,
        "totalGameTarget": 8,
    })
    progress = calculate_points([_badge("Only badge")], policy)["progress"]
    assert progress["badges"]["percentage"] == 6.3
    assert progress["games"]["percentage"] == 0
    assert progress["overall"]["percentage"] == 4.2
