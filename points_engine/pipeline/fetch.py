"""External profile fetch. Every request carries a timeout so a hung upstream becomes an error."""

import logging
import os

import requests

from points_engine.enrollment.normalize import normalize_profile_url
from points_engine.errors import UpstreamFetchError, ValidationError

log = logging.getLogger(__name__)

FETCH_TIMEOUT = float(os.environ.get("PROFILE_FETCH_TIMEOUT") or 15)
HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml",
}


def fetch_profile(profile_url: str, timeout: float | None = None, session: requests.Session | None = None) -> str:
    """Fetch raw profile page content. Raises UpstreamFetchError on timeout, HTTP or transport errors."""
    url = normalize_profile_url(profile_url)
    if not url:
        raise ValidationError("Invalid profile URL format")

    http = session or requests
    log.info("Fetching profile: %s", url)
    try:
        response = http.get(url, headers=HEADERS, timeout=timeout or FETCH_TIMEOUT, allow_redirects=True)
        response.raise_for_status()
    except requests.Timeout as e:
        raise UpstreamFetchError("Timed out fetching profile. Please try again later.", details=str(e)) from e
    except requests.RequestException as e:
        raise UpstreamFetchError("Failed to fetch profile. Please try again later.", details=str(e)) from e
    return response.text
