"""Enrollment registry: in-memory index of enrolled participants, loaded once per process."""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import jsonschema

from points_engine.enrollment.normalize import (
    extract_profile_id,
    normalize_email,
    normalize_profile_url,
    profile_url_for_id,
)
from points_engine.enrollment.store import (
    enrollment_file_from_env,
    load_registry_document,
    write_registry_document,
)

log = logging.getLogger(__name__)

DEFAULT_TEST_SIZE = 30


@dataclass(frozen=True)
class Participant:
    profile_id: str | None
    profile_url: str | None
    name: str | None = None
    email: str | None = None
    batch: str | None = None
    enrollment_date: str | None = None

    @classmethod
    def from_record(cls, record: dict) -> "Participant":
        """Structured record; profileId is derived from profileUrl when absent."""
        profile_url = record.get("profileUrl") or None
        profile_id = record.get("profileId") or extract_profile_id(profile_url)
        return cls(
            profile_id=profile_id,
            profile_url=profile_url,
            name=record.get("name"),
            email=record.get("email"),
            batch=record.get("batch"),
            enrollment_date=record.get("enrollmentDate"),
        )

    def to_record(self) -> dict:
        record = {
            "profileId": self.profile_id,
            "profileUrl": self.profile_url,
            "name": self.name,
            "batch": self.batch,
        }
        if self.email:
            record["email"] = self.email
        if self.enrollment_date:
            record["enrollmentDate"] = self.enrollment_date
        return record

    def public_dict(self) -> dict:
        """Participant block of the calculate-points response."""
        return {
            "name": self.name or "Unknown",
            "email": self.email or None,
            "batch": self.batch or "Unknown",
            "enrollmentDate": self.enrollment_date or None,
        }


@dataclass(frozen=True)
class LegacyUrl:
    """Bare profile-URL string from older registry files."""

    url: str

    @property
    def profile_id(self) -> str | None:
        return extract_profile_id(self.url)

    @property
    def email(self) -> str | None:
        return None

    @property
    def participant(self) -> Participant:
        return Participant(
            profile_id=self.profile_id,
            profile_url=normalize_profile_url(self.url) or self.url,
        )

    def to_record(self) -> str:
        return self.url


@dataclass(frozen=True)
class StructuredEntry:
    participant: Participant
    raw: dict = field(default_factory=dict, compare=False)

    @property
    def profile_id(self) -> str | None:
        return self.participant.profile_id

    @property
    def email(self) -> str | None:
        return self.participant.email

    def to_record(self) -> dict:
        return self.raw or self.participant.to_record()


RegistryEntry = LegacyUrl | StructuredEntry


def parse_entry(raw) -> RegistryEntry | None:
    """One normalization path for both historical record shapes."""
    if isinstance(raw, str):
        return LegacyUrl(raw)
    if isinstance(raw, dict):
        return StructuredEntry(Participant.from_record(raw), raw=dict(raw))
    return None


class EnrollmentRegistry:
    """
    Ordered, read-mostly participant index.

    Call load() once at start-up and reload() after the backing file changes.
    Lookups never touch storage. add() is serialized and persists the whole list.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path else enrollment_file_from_env()
        self._entries: list[RegistryEntry] = []
        self._document: dict = {}
        self._lock = threading.Lock()

    @classmethod
    def from_records(cls, records: list, path: Path | str | None = None) -> "EnrollmentRegistry":
        """Build a registry from in-memory records (fixtures, imports) without reading storage."""
        registry = cls(path)
        registry._entries = [e for e in (parse_entry(r) for r in records) if e is not None]
        return registry

    def load(self) -> "EnrollmentRegistry":
        document = load_registry_document(self.path)
        entries = [e for e in (parse_entry(r) for r in document.get("participants", [])) if e is not None]
        with self._lock:
            self._document = {k: v for k, v in document.items() if k != "participants"}
            self._entries = entries
        log.info("Enrollment registry loaded: %d participants from %s", len(entries), self.path)
        return self

    def reload(self) -> "EnrollmentRegistry":
        return self.load()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[RegistryEntry, ...]:
        return tuple(self._entries)

    def load_all(self) -> list[Participant]:
        """Participants in registry order, legacy entries included."""
        return [e.participant for e in self._entries]

    def find_by_profile(self, reference: str) -> Participant | None:
        profile_id = extract_profile_id(reference)
        if not profile_id:
            return None
        for entry in self._entries:
            if entry.profile_id == profile_id:
                return entry.participant
        return None

    def find_by_email(self, email: str) -> Participant | None:
        wanted = normalize_email(email)
        if not wanted:
            return None
        for entry in self._entries:
            if entry.email and entry.email.strip().lower() == wanted:
                return entry.participant
        return None

    def is_enrolled_by_profile(self, reference: str) -> bool:
        enrolled = self.find_by_profile(reference) is not None
        log.debug("Enrollment check for %s: %s", extract_profile_id(reference), "ENROLLED" if enrolled else "NOT ENROLLED")
        return enrolled

    def is_enrolled_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def _is_duplicate(self, candidate: RegistryEntry) -> bool:
        for existing in self._entries:
            if existing.to_record() == candidate.to_record():
                return True
            if candidate.profile_id and existing.profile_id == candidate.profile_id:
                return True
            if candidate.email and existing.email and existing.email.lower() == candidate.email.lower():
                return True
        return False

    def add(self, participant: "str | dict | Participant") -> bool:
        """
        Normalize and append a participant, then persist the full list.
        Returns False for unusable input, a profileId that contradicts its
        profileUrl, a duplicate, or a failed write.
        """
        if not participant:
            return False
        if isinstance(participant, str):
            url = normalize_profile_url(participant)
            if not url:
                return False
            candidate: RegistryEntry = LegacyUrl(url)
        else:
            if isinstance(participant, dict):
                participant = Participant.from_record(participant)
            if not isinstance(participant.profile_id, str) or not participant.profile_id:
                return False
            if participant.email is not None and not isinstance(participant.email, str):
                return False
            url_id = extract_profile_id(participant.profile_url)
            if url_id and url_id != participant.profile_id:
                log.warning("Rejected participant: profileId %s does not match profileUrl %s",
                            participant.profile_id, participant.profile_url)
                return False
            participant = Participant(
                profile_id=participant.profile_id,
                profile_url=normalize_profile_url(participant.profile_url) or profile_url_for_id(participant.profile_id),
                name=participant.name,
                email=participant.email,
                batch=participant.batch,
                enrollment_date=participant.enrollment_date,
            )
            candidate = StructuredEntry(participant, raw=participant.to_record())

        with self._lock:
            if self._is_duplicate(candidate):
                return False
            entries = self._entries + [candidate]
            try:
                write_registry_document(self.path, [e.to_record() for e in entries], self._document)
            except (OSError, ValueError, jsonschema.ValidationError) as e:
                log.error("Error saving enrollment list to %s: %s", self.path, e)
                return False
            self._entries = entries
        log.info("Participant added: %s", candidate.profile_id)
        return True

    def list_participants(self, test_mode: bool = False, test_size: int = DEFAULT_TEST_SIZE) -> list[dict]:
        """Cohort listing rows {name, profileId, profileUrl}; test mode keeps the first test_size."""
        rows = []
        for participant in self.load_all():
            if not participant.profile_id:
                continue
            rows.append({
                "name": participant.name or "Unknown",
                "profileId": participant.profile_id,
                "profileUrl": participant.profile_url or profile_url_for_id(participant.profile_id),
            })
        return rows[:test_size] if test_mode else rows

    def stats(self) -> dict:
        return {
            "totalParticipants": len(self._entries),
            "lastUpdated": self._document.get("lastUpdated"),
            "batch": self._document.get("batch", ""),
            "program": self._document.get("program", ""),
        }
