"""Merge provider results into one deduplicated, time-ordered collection."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from news_hub.feed.models import Category, Outlet, Story

logger = logging.getLogger(__name__)

PLACEHOLDER_READ_TIME = "3 min read"
PLACEHOLDER_STEP_MS = 60_000
PLACEHOLDER_HEADLINES: tuple[tuple[str, str], ...] = (
    (
        "Major Policy Announcement Expected This Week",
        "Officials are preparing to unveil changes that could significantly impact the industry.",
    ),
    (
        "Technology Sector Sees Unprecedented Growth",
        "Analysts point to sustained innovation as the key driver behind recent developments.",
    ),
    (
        "Global Markets Respond to Economic Shifts",
        "Investors are closely monitoring the situation as it continues to evolve.",
    ),
    (
        "Championship Game Breaks Viewership Records",
        "The historic event captured the attention of audiences worldwide.",
    ),
    (
        "International Leaders Convene for Summit",
        "Delegates from numerous countries gathered to address pressing global issues.",
    ),
)


class AggregationFailure(Exception):
    """Unexpected error while merging provider results."""


def placeholder_stories(outlet: Outlet, *, now_ms: int, count: int = 5) -> list[Story]:
    """Generic stand-in stories for an outlet that produced nothing.

    Every placeholder shares the outlet homepage as its URL, so only the
    first one survives deduplication.
    """

    stories: list[Story] = []
    for index in range(count):
        title, description = PLACEHOLDER_HEADLINES[index % len(PLACEHOLDER_HEADLINES)]
        stories.append(
            Story(
                source=outlet.name,
                title=title,
                description=description,
                timestamp=now_ms - index * PLACEHOLDER_STEP_MS,
                category=Category.WORLD,
                categories=(Category.WORLD,),
                url=outlet.url,
                image=None,
                read_time=PLACEHOLDER_READ_TIME,
            ),
        )
    return stories


def deduplicate(stories: Iterable[Story]) -> list[Story]:
    """Keep the first story per URL, preserving order."""

    seen: set[str] = set()
    unique: list[Story] = []
    for story in stories:
        if story.url in seen:
            continue
        seen.add(story.url)
        unique.append(story)
    return unique


def sort_newest_first(stories: Iterable[Story]) -> list[Story]:
    """Stable sort by timestamp, newest first."""

    return sorted(stories, key=lambda story: story.timestamp, reverse=True)


def merge(
    per_provider: Sequence[Sequence[Story]],
    outlets: Sequence[Outlet],
    *,
    now_ms: int,
    placeholders_per_outlet: int = 5,
) -> list[Story]:
    """Concatenate, fill silent outlets, dedupe by URL, and sort."""

    try:
        working: list[Story] = [story for stories in per_provider for story in stories]
        covered = {story.source for story in working}
        for outlet in outlets:
            if outlet.name in covered:
                continue
            working.extend(
                placeholder_stories(outlet, now_ms=now_ms, count=placeholders_per_outlet),
            )
            logger.info("%s: added %d placeholder stories", outlet.name, placeholders_per_outlet)
        return sort_newest_first(deduplicate(working))
    except Exception as exc:
        raise AggregationFailure(f"merge failed: {exc}") from exc


def fallback_collection(
    outlets: Sequence[Outlet],
    *,
    now_ms: int,
    placeholders_per_outlet: int = 5,
) -> list[Story]:
    """Placeholder-only collection used when merging itself fails."""

    working = [
        story
        for outlet in outlets
        for story in placeholder_stories(outlet, now_ms=now_ms, count=placeholders_per_outlet)
    ]
    return sort_newest_first(deduplicate(working))


def aggregate(
    per_provider: Sequence[Sequence[Story]],
    outlets: Sequence[Outlet],
    *,
    now_ms: int,
    placeholders_per_outlet: int = 5,
) -> list[Story]:
    """Build the global collection; never empty while outlets are configured."""

    try:
        stories = merge(
            per_provider,
            outlets,
            now_ms=now_ms,
            placeholders_per_outlet=placeholders_per_outlet,
        )
    except AggregationFailure:
        logger.exception("Aggregation failed; using placeholder stories only")
        return fallback_collection(
            outlets,
            now_ms=now_ms,
            placeholders_per_outlet=placeholders_per_outlet,
        )
    logger.info("Final story count: %d", len(stories))
    return stories
