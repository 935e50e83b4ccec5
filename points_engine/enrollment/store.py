"""Persisted enrollment document: {lastUpdated, participants: [...]}."""

import json
import logging
import os
import tempfile
from pathlib import Path

import jsonschema

from points_engine.utils import iso_now
from points_engine.validation import validate_registry_document

log = logging.getLogger(__name__)

DEFAULT_ENROLLMENT_FILE = Path(__file__).resolve().parent.parent.parent / "config" / "enrolledParticipants.json"


def enrollment_file_from_env() -> Path:
    return Path(os.environ.get("ENROLLMENT_FILE") or DEFAULT_ENROLLMENT_FILE)


def read_registry_document(path: Path) -> dict:
    """
    Read and validate the enrollment document.
    Raises FileNotFoundError, json.JSONDecodeError or jsonschema.ValidationError.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    validate_registry_document(data)
    return data


def load_registry_document(path: Path) -> dict:
    """
    Same as read_registry_document, but a missing or unreadable file
    degrades to an empty document instead of raising.
    """
    path = Path(path)
    if not path.exists():
        log.warning("Enrollment list file not found at %s, using empty list", path)
        return {"participants": []}
    try:
        return read_registry_document(path)
    except (OSError, ValueError, jsonschema.ValidationError) as e:
        log.error("Error loading enrollment list from %s: %s", path, e)
        return {"participants": []}


def write_registry_document(path: Path, participants: list, extra: dict | None = None) -> Path:
    """Write the full list back. Temp file + os.replace so readers never see a partial file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {k: v for k, v in (extra or {}).items() if k not in ("lastUpdated", "participants")}
    data["lastUpdated"] = iso_now()
    data["participants"] = participants
    validate_registry_document(data)

    fd, tmp_name = tempfile.mkstemp(prefix=".enrolled_", suffix=".json", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
