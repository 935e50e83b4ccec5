#!/usr/bin/env python3
"""
Repeatability harness: parse + score the same saved profile page N times; assert identical results.
Exits 0 if stable, 1 if unstable. Prints the differing fields on failure.

Usage: python scripts/repeatability_check.py PROFILE_HTML [--runs 10] [--policy config/scoring_policy.json]

Save a public profile page first (e.g. curl -o profile.html <url>) so every run sees
the same content snapshot.
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from points_engine.pipeline.extract import snapshot_from_parsed
from points_engine.pipeline.parse import parse_profile
from points_engine.scoring import calculate_points, load_scoring_policy

DEFAULT_RUNS = 10


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("profile_html", type=Path)
    parser.add_argument("--runs", type=int, default=DEFAULT_RUNS)
    parser.add_argument("--policy", type=Path, default=None)
    args = parser.parse_args()

    if not args.profile_html.exists():
        print(f"Error: profile snapshot not found: {args.profile_html}", file=sys.stderr)
        sys.exit(1)

    html = args.profile_html.read_text(encoding="utf-8")
    policy = load_scoring_policy(args.policy)

    results = []
    for _ in range(args.runs):
        snapshot = snapshot_from_parsed(parse_profile(html))
        results.append(calculate_points(snapshot.items, policy))

    first = results[0]
    print(f"Snapshot: {args.profile_html} | items: {first['breakdown']['badges']['count']} badges, "
          f"{first['breakdown']['games']['count']} games | points: {first['totalPoints']}")

    unstable = False
    for i, r in enumerate(results[1:], start=2):
        if r != first:
            unstable = True
            diff = [k for k in first if first[k] != r.get(k)]
            print(f"Run {i}: differs in {diff}")

    if unstable:
        print("UNSTABLE")
        sys.exit(1)
    print(f"STABLE across {args.runs} runs")
    print(json.dumps(first["progress"], indent=2))


if __name__ == "__main__":
    main()
