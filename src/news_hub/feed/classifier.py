"""Keyword-based topic classification.

Both methods lowercase their input and test plain substring membership, so
short keywords such as ``ai`` or ``app`` also match inside longer words
("said", "happen"). That is the established behavior and is kept as is.
"""

from __future__ import annotations

from news_hub.feed.models import CLASSIFICATION_ORDER, Category

SECTION_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.POLITICS: ("politic", "us-news", "government", "election"),
    Category.BUSINESS: ("business", "economy", "finance", "market"),
    Category.TECHNOLOGY: ("technolog", "tech"),
    Category.SPORTS: ("sport",),
    Category.HEALTH: ("health", "medical", "wellness"),
    Category.SCIENCE: ("science", "environment"),
    Category.ENTERTAINMENT: (
        "entertainment",
        "arts",
        "culture",
        "movies",
        "music",
        "film",
        "television",
        "books",
    ),
    Category.LIFESTYLE: ("lifestyle", "travel", "food", "fashion", "style"),
}

CONTENT_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.POLITICS: (
        "election",
        "congress",
        "president",
        "senate",
        "vote",
        "political",
        "government",
        "trump",
        "biden",
    ),
    Category.BUSINESS: (
        "stock",
        "market",
        "economy",
        "business",
        "company",
        "earnings",
        "trade",
        "finance",
        "investor",
    ),
    Category.TECHNOLOGY: (
        "tech",
        "ai",
        "app",
        "software",
        "google",
        "apple",
        "digital",
        "computer",
        "microsoft",
    ),
    Category.SPORTS: (
        "game",
        "sport",
        "nba",
        "nfl",
        "team",
        "player",
        "football",
        "basketball",
        "soccer",
    ),
    Category.HEALTH: (
        "health",
        "medical",
        "vaccine",
        "doctor",
        "hospital",
        "disease",
        "treatment",
        "drug",
        "patient",
    ),
    Category.SCIENCE: (
        "science",
        "research",
        "climate",
        "scientist",
        "study",
        "discovery",
        "space",
        "environment",
        "nasa",
    ),
    Category.ENTERTAINMENT: (
        "movie",
        "music",
        "celebrity",
        "film",
        "actor",
        "entertainment",
        "concert",
        "album",
        "hollywood",
        "television",
        "tv show",
        "series",
    ),
    Category.LIFESTYLE: (
        "travel",
        "food",
        "fashion",
        "restaurant",
        "recipe",
        "style",
        "cooking",
        "wellness",
        "fitness",
    ),
}


def categorize_section(section: str | None) -> Category:
    """Map a provider section/topic label to one category."""

    label = (section or "").lower()
    if not label:
        return Category.WORLD
    for category in CLASSIFICATION_ORDER:
        if _contains_any(label, SECTION_KEYWORDS[category]):
            return category
    return Category.WORLD


def match_categories(text: str | None) -> tuple[Category, ...]:
    """Return every category whose keywords occur in ``text``, in priority order.

    Empty when nothing matches; callers decide the fallback.
    """

    content = (text or "").lower()
    if not content:
        return ()
    return tuple(
        category
        for category in CLASSIFICATION_ORDER
        if _contains_any(content, CONTENT_KEYWORDS[category])
    )


def classify(text: str | None) -> tuple[Category, ...]:
    """Full category set for ``text``; exactly ``(WORLD,)`` when nothing matches."""

    return match_categories(text) or (Category.WORLD,)


def primary_category(text: str | None) -> Category:
    """First matched category in priority order, or ``WORLD``."""

    return classify(text)[0]


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)
