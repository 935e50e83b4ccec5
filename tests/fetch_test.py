"""Profile fetch: timeouts and transport errors become UpstreamFetchError."""

import pytest
import requests

from points_engine.errors import UpstreamFetchError, ValidationError
from points_engine.pipeline.fetch import fetch_profile

URL = "cloudskillsboost.google/public_profiles/abc-123"


class FakeResponse:
    def __init__(self, text="<html></html>", status=200):
        self.text = text
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc:
            raise self.exc
        return self.response


def test_fetch_normalizes_url_and_sets_timeout():
    session = FakeSession(FakeResponse("<h1>ok</h1>"))
    assert fetch_profile(URL, timeout=3, session=session) == "<h1>ok</h1>"
    url, kwargs = session.calls[0]
    assert url == "https://www.cloudskillsboost.google/public_profiles/abc-123"
    assert kwargs["timeout"] == 3


def test_timeout_becomes_upstream_error():
    session = FakeSession(exc=requests.Timeout("read timed out"))
    with pytest.raises(UpstreamFetchError) as excinfo:
        fetch_profile(URL, session=session)
    assert excinfo.value.status_code == 502
    assert "read timed out" in excinfo.value.details


def test_http_error_becomes_upstream_error():
    session = FakeSession(FakeResponse(status=503))
    with pytest.raises(UpstreamFetchError):
        fetch_profile(URL, session=session)


def test_connection_error_becomes_upstream_error():
    session = FakeSession(exc=requests.ConnectionError("refused"))
    with pytest.raises(UpstreamFetchError):
        fetch_profile(URL, session=session)


def test_invalid_url_is_rejected_before_fetch():
    session = FakeSession(FakeResponse())
    with pytest.raises(ValidationError):
        fetch_profile("https://example.com/someone", session=session)
    assert session.calls == []
