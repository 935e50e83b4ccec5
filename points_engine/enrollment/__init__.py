"""Enrollment: identity normalization and the participant registry."""

from points_engine.enrollment.normalize import (
    extract_profile_id,
    normalize_profile_url,
    is_valid_email,
)
from points_engine.enrollment.registry import (
    EnrollmentRegistry,
    LegacyUrl,
    Participant,
    StructuredEntry,
)

__all__ = [
    "extract_profile_id",
    "normalize_profile_url",
    "is_valid_email",
    "EnrollmentRegistry",
    "LegacyUrl",
    "Participant",
    "StructuredEntry",
]
