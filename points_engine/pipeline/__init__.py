"""Profile pipeline: fetch → parse → extract completion items."""

from points_engine.pipeline.extract import CompletionItem, ProfileSnapshot, snapshot_from_parsed
from points_engine.pipeline.fetch import fetch_profile
from points_engine.pipeline.parse import parse_profile

__all__ = [
    "CompletionItem",
    "ProfileSnapshot",
    "snapshot_from_parsed",
    "fetch_profile",
    "parse_profile",
]
