"""Default HTML profile parser. Page heuristics only; the scoring engine never depends on them."""

import re

from bs4 import BeautifulSoup

from points_engine.pipeline.extract import BADGE, GAME

# Category precedence: first keyword hit in the title wins
CATEGORY_PRECEDENCE = [
    "ai-ml", "data", "security", "networking", "devops", "infrastructure", "application-development",
]
CATEGORY_KEYWORDS = {
    "ai-ml": ["gemini", "vertex", "ai", "machine learning", "ml", "prompt", "generative"],
    "data": ["bigquery", "data", "dataflow", "dataproc", "looker", "analytics", "pub/sub"],
    "security": ["security", "iam", "secure", "identity"],
    "networking": ["network", "vpc", "load balanc", "dns"],
    "devops": ["devops", "monitoring", "logging", "observability", "ci/cd", "terraform"],
    "infrastructure": ["kubernetes", "gke", "compute engine", "infrastructure", "cloud run", "storage"],
    "application-development": ["app", "api", "firebase", "functions", "develop"],
}
DIFFICULTIES = ("introductory", "intermediate", "advanced")
GAME_PATTERN = re.compile(r"\b(game|arcade|trivia|skills? challenge)\b", re.IGNORECASE)


def _text(node) -> str:
    return node.get_text(" ", strip=True) if node is not None else ""


def classify_category(title: str) -> str:
    lowered = (title or "").lower()
    for category in CATEGORY_PRECEDENCE:
        for kw in CATEGORY_KEYWORDS[category]:
            if re.search(rf"\b{re.escape(kw)}", lowered):
                return category
    return "general"


def classify_difficulty(card_text: str, kind: str) -> str:
    lowered = (card_text or "").lower()
    for difficulty in DIFFICULTIES:
        if difficulty in lowered:
            return difficulty
    return "standard" if kind == GAME else "unknown"


def parse_profile(html: str) -> dict:
    """
    Parse a public profile page into {"name", "items": [...]} in page order.
    Cards without a title are skipped.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    name = _text(soup.select_one("h1.ql-display-small")) or _text(soup.find("h1"))

    items = []
    for card in soup.select(".profile-badge"):
        title = _text(card.select_one(".ql-title-medium")) or (card.get("title") or "").strip()
        if not title:
            continue
        kind = GAME if GAME_PATTERN.search(title) else BADGE
        items.append({
            "title": title,
            "category": classify_category(title),
            "difficulty": classify_difficulty(_text(card), kind),
            "kind": kind,
        })
    return {"name": name, "items": items}
