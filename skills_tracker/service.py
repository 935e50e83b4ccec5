"""Orchestrates resolve → fetch → extract → score for single profiles and cohort passes."""

import logging
import os
from typing import Callable

from points_engine.cohort.aggregate import CohortSample
from points_engine.cohort.runner import CohortRun, run_cohort
from points_engine.enrollment.normalize import extract_profile_id, is_valid_email, normalize_profile_url
from points_engine.enrollment.registry import DEFAULT_TEST_SIZE, EnrollmentRegistry, Participant
from points_engine.errors import NotEnrolledError, ValidationError
from points_engine.pipeline.extract import ProfileSnapshot, snapshot_from_parsed
from points_engine.pipeline.fetch import fetch_profile
from points_engine.pipeline.parse import parse_profile
from points_engine.scoring.engine import calculate_points
from points_engine.scoring.policy import ScoringPolicy
from points_engine.utils import iso_now

log = logging.getLogger("skills_tracker.service")

TEST_SIZE = int(os.environ.get("COHORT_TEST_SIZE") or DEFAULT_TEST_SIZE)


def _text_field(payload: dict, key: str, invalid_message: str) -> str:
    """Stripped string value of an optional request field; a non-string value is a 400."""
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(invalid_message)
    return value.strip()


class ScoringService:
    """
    Request-path entry point. The registry and policy are injected so tests
    (and the CLI) can run against fixtures; fetcher and parser default to the
    network fetch and the HTML parser.
    """

    def __init__(
        self,
        registry: EnrollmentRegistry,
        policy: ScoringPolicy,
        fetcher: Callable[[str], str] = fetch_profile,
        parser: Callable[[str], dict] = parse_profile,
        test_size: int = TEST_SIZE,
    ):
        self.registry = registry
        self.policy = policy
        self.fetcher = fetcher
        self.parser = parser
        self.test_size = test_size

    def resolve(self, payload: dict) -> Participant:
        """Map a {email?, profileUrl?} request to an enrolled participant. Email wins if both are given."""
        if not isinstance(payload, dict):
            raise ValidationError("Email or Profile URL is required")
        email = _text_field(payload, "email", "Invalid email format")
        profile_url = _text_field(payload, "profileUrl", "Invalid profile URL format")

        if email:
            if not is_valid_email(email):
                raise ValidationError("Invalid email format")
            participant = self.registry.find_by_email(email)
            if participant is None:
                raise NotEnrolledError(
                    "Email not found in enrolled participants list. "
                    "Please check your email address or contact the program administrator."
                )
            if not participant.profile_url:
                raise NotEnrolledError(
                    "Profile URL not found for this email. Please contact the program administrator.",
                    status_code=404,
                )
            return participant

        if profile_url:
            if not extract_profile_id(profile_url):
                raise ValidationError("Invalid profile URL format")
            participant = self.registry.find_by_profile(profile_url)
            if participant is None:
                raise NotEnrolledError(
                    "Profile not found in enrolled participants list. Please contact the program administrator."
                )
            return participant

        raise ValidationError("Email or Profile URL is required")

    def snapshot(self, profile_url: str) -> ProfileSnapshot:
        content = self.fetcher(profile_url)
        return snapshot_from_parsed(self.parser(content))

    def calculate(self, payload: dict) -> dict:
        participant = self.resolve(payload)
        log.info("Scoring profile %s", participant.profile_id)
        snapshot = self.snapshot(participant.profile_url)
        result = calculate_points(snapshot.items, self.policy)

        participant_block = participant.public_dict()
        if not participant.name and snapshot.name != "Unknown":
            participant_block["name"] = snapshot.name

        return {
            "success": True,
            "enrolled": True,
            "participant": participant_block,
            "profileId": participant.profile_id,
            "profileUrl": normalize_profile_url(participant.profile_url),
            "userName": snapshot.name,
            **result,
            "metadata": {
                "calculatedAt": iso_now(),
                "batch": participant.batch or "Unknown",
            },
        }

    def list_participants(self, test_mode: bool = False) -> dict:
        rows = self.registry.list_participants(test_mode=test_mode, test_size=self.test_size)
        return {
            "success": True,
            "testMode": test_mode,
            "totalParticipants": len(rows),
            "participants": rows,
        }

    def cohort_sample(self, row: dict) -> CohortSample:
        """One cohort unit: fetch, extract and score a listed participant."""
        snapshot = self.snapshot(row["profileUrl"])
        result = calculate_points(snapshot.items, self.policy)
        name = snapshot.name if snapshot.name != "Unknown" else row.get("name")
        return CohortSample.from_score(name, row["profileId"], result)

    def run_cohort(self, test_mode: bool = False, max_workers: int | None = None) -> CohortRun:
        rows = self.list_participants(test_mode)["participants"]
        return run_cohort(rows, self.cohort_sample, max_workers=max_workers)
