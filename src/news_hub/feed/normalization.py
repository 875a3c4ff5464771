"""Shared story construction used by every provider normalizer."""

from __future__ import annotations

import math
from datetime import UTC, datetime

from news_hub.feed.classifier import categorize_section, classify, primary_category
from news_hub.feed.models import Story

WORDS_PER_MINUTE = 200
UNKNOWN_PUBLISHED_AT_MS = 0


def estimate_read_time(text: str | None) -> str:
    """Estimate reading time at 200 words per minute, never below one minute."""

    words = len((text or "").split())
    minutes = max(1, math.ceil(words / WORDS_PER_MINUTE))
    return f"{minutes} min read"


def parse_timestamp_ms(value: object) -> int:
    """Parse an ISO-8601 publish time into epoch milliseconds.

    Unparseable or missing values map to the epoch so the story sorts last.
    """

    if not isinstance(value, str) or not value.strip():
        return UNKNOWN_PUBLISHED_AT_MS
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return UNKNOWN_PUBLISHED_AT_MS
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp() * 1000)


def build_story(
    *,
    source: str,
    title: str,
    description: str | None,
    published: object,
    url: str,
    image: object = None,
    section: str | None = None,
    use_section: bool = False,
) -> Story:
    """Assemble a canonical story and classify it.

    With ``use_section`` the primary category comes from section mapping;
    otherwise from keyword classification. The full category list always comes
    from keyword classification over title and description, so it is exactly
    ``(WORLD,)`` when no keyword matches, even for a section-mapped story.
    """

    text = description or ""
    content = f"{title} {text}"
    categories = classify(content)
    category = categorize_section(section) if use_section else primary_category(content)

    return Story(
        source=source,
        title=title,
        description=text,
        timestamp=parse_timestamp_ms(published),
        category=category,
        categories=categories,
        url=url,
        image=image if isinstance(image, str) and image.strip() else None,
        read_time=estimate_read_time(text or title),
    )
