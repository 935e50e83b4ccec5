#!/usr/bin/env python3
"""CLI for enrollment-checked points scoring and cohort reports."""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from points_engine.cohort.export import export_csv
from points_engine.enrollment.registry import EnrollmentRegistry
from points_engine.errors import PointsEngineError
from points_engine.run_report import write_cohort_report
from points_engine.scoring.policy import load_scoring_policy
from skills_tracker.audit import setup_app_logging
from skills_tracker.cohort_pdf import generate_cohort_pdf
from skills_tracker.service import ScoringService


def _build_service(args: argparse.Namespace) -> ScoringService:
    registry = EnrollmentRegistry(args.registry).load()
    policy = load_scoring_policy(args.policy)
    return ScoringService(registry, policy)


def cmd_score(args: argparse.Namespace) -> None:
    """Resolve one participant, fetch their profile, print the score."""
    service = _build_service(args)
    payload = {"email": args.email} if args.email else {"profileUrl": args.profile_url}
    try:
        result = service.calculate(payload)
    except PointsEngineError as e:
        print(f"Error ({e.status_code}): {e.message}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result, indent=2))
        return

    progress = result["progress"]
    print("=== Score ===")
    print(f"Participant: {result['participant']['name']} ({result['participant']['batch']})")
    print(f"Total points: {result['totalPoints']}")
    print(f"Badges: {progress['badges']['completed']}/{progress['badges']['total']} ({progress['badges']['percentage']}%)")
    print(f"Games: {progress['games']['completed']}/{progress['games']['total']} ({progress['games']['percentage']}%)")
    print(f"Overall: {progress['overall']['percentage']}%")


def cmd_cohort(args: argparse.Namespace) -> None:
    """Score every enrolled participant with bounded concurrency and report."""
    service = _build_service(args)
    run = service.run_cohort(test_mode=args.test, max_workers=args.workers)
    baseline = service.policy.completion_baseline
    report = {"testMode": args.test, **run.report(baseline)}

    if args.report:
        path = write_cohort_report(args.report, run, service.policy, test_mode=args.test)
        print(f"Cohort report: {path}")
    if args.csv:
        args.csv.parent.mkdir(parents=True, exist_ok=True)
        args.csv.write_text(export_csv(run.samples), encoding="utf-8")
        print(f"CSV export: {args.csv}")
    if args.pdf:
        args.pdf.parent.mkdir(parents=True, exist_ok=True)
        args.pdf.write_bytes(generate_cohort_pdf(report))
        print(f"PDF export: {args.pdf}")

    if args.json:
        print(json.dumps(report, indent=2))
        return

    summary = report["summary"]
    print("=== Cohort ===")
    print(f"Participants: {summary['totalParticipants']} (scored {summary['scoredParticipants']}, failed {summary['failedParticipants']})")
    print(f"Fully completed: {summary['fullyCompleted']}")
    print(f"Average badges: {summary['avgBadges']}  Average games: {summary['avgGames']}")
    print(f"Overall progress: {summary['overallProgress']}%")
    print("\nDistribution:")
    for bucket in report["distribution"].values():
        print(f"  {bucket['label']}: {bucket['count']} ({bucket['percentage']}%)")
    print("\nLeaderboard:")
    for row in report["leaderboard"]:
        print(f"  #{row['rank']} {row['name']}: {row['totalItems']} items, {row['points']} points")


def cmd_add_participant(args: argparse.Namespace) -> None:
    registry = EnrollmentRegistry(args.registry).load()
    record = {"profileUrl": args.profile_url, "name": args.name, "batch": args.batch}
    if args.email:
        record["email"] = args.email
    if registry.add(record):
        print(f"Participant added to {registry.path}")
    else:
        print("Error: participant not added (invalid URL, duplicate, or write failure)", file=sys.stderr)
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(description="Enrollment-checked Skills Boost points calculator")
    parser.add_argument("--registry", type=Path, help="Enrolled participants JSON (or ENROLLMENT_FILE env)")
    parser.add_argument("--policy", type=Path, help="Scoring policy JSON (or SCORING_POLICY_FILE env)")
    sub = parser.add_subparsers(dest="command", required=True)

    # score
    p_score = sub.add_parser("score", help="Score one enrolled participant")
    who = p_score.add_mutually_exclusive_group(required=True)
    who.add_argument("--email", help="Participant email")
    who.add_argument("--profile-url", help="Public profile URL")
    p_score.add_argument("--json", action="store_true", help="Output JSON")
    p_score.set_defaults(func=cmd_score)

    # cohort
    p_cohort = sub.add_parser("cohort", help="Score the whole cohort: summary, distribution, leaderboard")
    p_cohort.add_argument("--test", action="store_true", help="Only the test-mode subset")
    p_cohort.add_argument("--workers", type=int, help="Concurrent fetches (or COHORT_MAX_WORKERS env)")
    p_cohort.add_argument("--report", type=Path, help="Write cohort report JSON here")
    p_cohort.add_argument("--csv", type=Path, help="Write CSV export here")
    p_cohort.add_argument("--pdf", type=Path, help="Write PDF report here")
    p_cohort.add_argument("--json", action="store_true", help="Output JSON")
    p_cohort.set_defaults(func=cmd_cohort)

    # add-participant
    p_add = sub.add_parser("add-participant", help="Add a participant to the registry")
    p_add.add_argument("profile_url", help="Public profile URL")
    p_add.add_argument("--name")
    p_add.add_argument("--email")
    p_add.add_argument("--batch")
    p_add.set_defaults(func=cmd_add_participant)

    args = parser.parse_args()
    setup_app_logging()
    args.func(args)


if __name__ == "__main__":
    main()
