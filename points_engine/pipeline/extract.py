"""Completion extraction contract: parsed profile content to typed completion items."""

import re
from dataclasses import dataclass, field

BADGE = "badge"
GAME = "game"
KINDS = (BADGE, GAME)


def _slug(value) -> str:
    """Lowercase, trim, non-alnum runs to '-'. 'AI / ML' -> 'ai-ml'."""
    s = (value or "").strip().lower() if isinstance(value, str) else ""
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-") or "unknown"


@dataclass(frozen=True)
class CompletionItem:
    """
    One badge or game credited to a participant.

    `kind` is None only for malformed input; the scoring engine counts such
    items as neither badge nor game.
    """

    title: str
    category: str
    difficulty: str
    kind: str | None

    @classmethod
    def from_dict(cls, data: dict, kind: str | None = None) -> "CompletionItem":
        raw_kind = kind or data.get("kind")
        raw_kind = raw_kind.strip().lower() if isinstance(raw_kind, str) else None
        return cls(
            title=(data.get("title") or "").strip(),
            category=_slug(data.get("category")),
            difficulty=_slug(data.get("difficulty")),
            kind=raw_kind if raw_kind in KINDS else None,
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "category": self.category,
            "difficulty": self.difficulty,
            "kind": self.kind,
        }


@dataclass(frozen=True)
class ProfileSnapshot:
    """Extractor output for one fetched profile page."""

    name: str
    items: tuple[CompletionItem, ...] = field(default_factory=tuple)

    @property
    def badges(self) -> list[CompletionItem]:
        return [i for i in self.items if i.kind == BADGE]

    @property
    def games(self) -> list[CompletionItem]:
        return [i for i in self.items if i.kind == GAME]


def snapshot_from_parsed(parsed: dict) -> ProfileSnapshot:
    """
    Build a ProfileSnapshot from parser output.

    Accepts either {"name", "items": [{title, category, difficulty, kind}]} in
    document order, or {"name", "badges": [...], "games": [...]} where the list
    decides the kind. Entries without a title are unrecognized markup and dropped.
    """
    items: list[CompletionItem] = []
    if "items" in parsed:
        for raw in parsed.get("items") or []:
            if isinstance(raw, dict) and (raw.get("title") or "").strip():
                items.append(CompletionItem.from_dict(raw))
    else:
        for kind, key in ((BADGE, "badges"), (GAME, "games")):
            for raw in parsed.get(key) or []:
                if isinstance(raw, dict) and (raw.get("title") or "").strip():
                    items.append(CompletionItem.from_dict(raw, kind=kind))

    name = (parsed.get("name") or parsed.get("userName") or "").strip() or "Unknown"
    return ProfileSnapshot(name=name, items=tuple(items))
