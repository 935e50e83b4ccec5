"""Schema validation for the enrollment registry document and the scoring policy."""

import json
from pathlib import Path

import jsonschema

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"


def _load_schema(name: str) -> dict:
    path = SCHEMAS_DIR / f"{name}.schema.json"
    return json.loads(path.read_text(encoding="utf-8"))


def validate_registry_document(data: dict) -> None:
    """Validate enrolled participants document. Raises jsonschema.ValidationError if invalid."""
    schema = _load_schema("enrolled_participants")
    jsonschema.validate(data, schema)


def validate_scoring_policy(data: dict) -> None:
    """Validate scoring policy config. Raises jsonschema.ValidationError if invalid."""
    schema = _load_schema("scoring_policy")
    jsonschema.validate(data, schema)
