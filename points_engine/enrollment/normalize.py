"""Identity normalization: profile references to stable keys, email syntax checks."""

import re

PROFILE_HOST = "www.cloudskillsboost.google"
PROFILE_PATH = "public_profiles"

# https://www.cloudskillsboost.google/public_profiles/{id}, scheme and www. optional, anchored at the start
PROFILE_URL_PATTERN = re.compile(
    r"^\s*(?:https?://)?(?:www\.)?cloudskillsboost\.google/public_profiles/([A-Za-z0-9_-]+)",
    re.IGNORECASE,
)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def extract_profile_id(reference: str | None) -> str | None:
    """Return the profile id segment of a reference, or None if the shape does not match."""
    if not reference or not isinstance(reference, str):
        return None
    match = PROFILE_URL_PATTERN.match(reference.strip())
    return match.group(1) if match else None


def normalize_profile_url(reference: str | None) -> str | None:
    """
    Canonical profile URL (fixed scheme, host and path) rebuilt from the extracted id.
    Idempotent; the id keeps its original case.
    """
    profile_id = extract_profile_id(reference)
    if not profile_id:
        return None
    return profile_url_for_id(profile_id)


def is_valid_email(value: str | None) -> bool:
    """Permissive local@domain.tld syntax check. Not a deliverability check."""
    if not value or not isinstance(value, str):
        return False
    return bool(EMAIL_PATTERN.match(value))


def normalize_email(value: str | None) -> str | None:
    if not value or not isinstance(value, str):
        return None
    return value.strip().lower() or None


def profile_url_for_id(profile_id: str) -> str:
    return f"https://{PROFILE_HOST}/{PROFILE_PATH}/{profile_id}"
