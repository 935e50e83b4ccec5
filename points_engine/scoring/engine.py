"""Deterministic points scoring. Pure function of (items, policy); no I/O."""

from points_engine.pipeline.extract import BADGE, GAME, CompletionItem
from points_engine.scoring.policy import ScoringPolicy
from points_engine.utils import round_pct


def _coerce_item(item) -> CompletionItem | None:
    if isinstance(item, CompletionItem):
        return item
    if isinstance(item, dict):
        return CompletionItem.from_dict(item)
    return None


def item_points(item: CompletionItem, policy: ScoringPolicy) -> int:
    """
    Weight of one item: policy table for (kind, difficulty).
    Unknown difficulty, unknown category (when the policy lists categories)
    or missing kind all weigh 0. Never raises.
    """
    table = policy.weight_table(item.kind)
    if table is None:
        return 0
    if policy.categories and item.category not in policy.categories:
        return 0
    return int(table.get(item.difficulty, 0))


def calculate_points(items, policy: ScoringPolicy) -> dict:
    """
    Score one participant's completed items.

    - Items are partitioned into badges and games in input order.
    - Zero-weight items still count toward completion totals.
    - Items without a valid kind are counted as neither badge nor game
      and reported in `unclassifiedItems`.
    """
    badges: list[dict] = []
    games: list[dict] = []
    total_points = 0
    unscored = 0
    unclassified = 0

    for raw in items or []:
        item = _coerce_item(raw)
        if item is None or item.kind not in (BADGE, GAME):
            unclassified += 1
            continue
        points = item_points(item, policy)
        if points == 0:
            unscored += 1
        total_points += points
        (badges if item.kind == BADGE else games).append(item.to_dict())

    badge_target = policy.total_badge_target
    game_target = policy.total_game_target
    progress = {
        "badges": {
            "completed": len(badges),
            "total": badge_target,
            "percentage": round_pct(len(badges), badge_target),
        },
        "games": {
            "completed": len(games),
            "total": game_target,
            "percentage": round_pct(len(games), game_target),
        },
        "overall": {
            "percentage": round_pct(len(badges) + len(games), badge_target + game_target),
        },
    }

    return {
        "totalPoints": total_points,
        "completedBadges": badges,
        "completedGames": games,
        "breakdown": {
            "badges": {"count": len(badges), "items": badges},
            "games": {"count": len(games), "items": games},
        },
        "progress": progress,
        "unscoredItems": unscored,
        "unclassifiedItems": unclassified,
    }
